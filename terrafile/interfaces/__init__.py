"""
User-facing entry points: Python API and CLI.
"""

from .api import Terrafile

__all__ = [
    "Terrafile",
]
