"""
Terrafile: fetch versioned modules from git repositories into local folders.
"""

__version__ = "0.1.0"

from .models import ModuleDeclaration, RunOptions, TerrafileConfig
from .interfaces.api import Terrafile

__all__ = [
    "__version__",
    "ModuleDeclaration",
    "RunOptions",
    "TerrafileConfig",
    "Terrafile",
]
