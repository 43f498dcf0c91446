"""
Core data models API surface for Terrafile.

This file re-exports model classes from domain-specific modules so callers
can write `from terrafile.models import X`.
"""

from .module import (
    join_module_path,
    ModuleDeclaration,
    DestinationSet,
    TerrafileConfig,
)
from .git import (
    ReferenceKind,
    ResolvedReference,
    AuthMethod,
    Credentials,
    MaterializeResult,
)
from .config import (
    DEFAULT_MODULE_PATH,
    DEFAULT_TERRAFILE_PATH,
    RunOptions,
)

__all__ = [
    # Module models
    "join_module_path",
    "ModuleDeclaration",
    "DestinationSet",
    "TerrafileConfig",
    # Git models
    "ReferenceKind",
    "ResolvedReference",
    "AuthMethod",
    "Credentials",
    "MaterializeResult",
    # Config models
    "DEFAULT_MODULE_PATH",
    "DEFAULT_TERRAFILE_PATH",
    "RunOptions",
]
