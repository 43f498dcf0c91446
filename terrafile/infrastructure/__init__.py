"""
Cross-cutting infrastructure: logging and error handling.
"""

from .logger import logger, setup_logger
from .error_handler import (
    TerrafileError,
    ConfigurationError,
    CloneError,
    ReferenceNotFoundError,
    DirectoryNotFoundError,
    MaterializeError,
    LinkError,
    handle_git_error,
)

__all__ = [
    "logger",
    "setup_logger",
    "TerrafileError",
    "ConfigurationError",
    "CloneError",
    "ReferenceNotFoundError",
    "DirectoryNotFoundError",
    "MaterializeError",
    "LinkError",
    "handle_git_error",
]
