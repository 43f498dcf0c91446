"""
Filesystem helpers shared by the fetcher, linker and orchestrator.
"""

import os
import shutil
from pathlib import Path
from typing import Union


PathLike = Union[str, Path]


def remove_all(path: PathLike) -> None:
    """
    Remove ``path`` and anything below it.

    Symlinks are removed without following them. A missing path is not an
    error.
    """
    path = Path(path)
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)
    elif os.path.lexists(path):
        # Sockets, fifos and the like
        path.unlink()


def ensure_directory(path: PathLike) -> Path:
    """Create ``path`` and its parents if missing."""

    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


__all__ = [
    "remove_all",
    "ensure_directory",
]
