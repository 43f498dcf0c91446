"""
Run configuration models for Terrafile.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


DEFAULT_MODULE_PATH = "./vendor/modules"
DEFAULT_TERRAFILE_PATH = "./Terrafile"


@dataclass
class RunOptions:
    """
    Options for a single install run.

    Built once by the CLI (or API caller) and passed explicitly to the
    orchestrator.
    """

    module_path: str = DEFAULT_MODULE_PATH
    terrafile_path: str = DEFAULT_TERRAFILE_PATH
    clean: bool = False
    netrc_path: Optional[str] = None
    verbose: bool = False
    working_directory: Path = field(default_factory=Path.cwd)

    def __post_init__(self) -> None:
        if not self.module_path:
            raise ValueError("module_path is required")
        self.working_directory = Path(self.working_directory)

    @property
    def resolved_netrc_path(self) -> Path:
        """Explicit netrc path, or ``$HOME/.netrc``."""

        if self.netrc_path:
            return Path(self.netrc_path)
        return Path(os.environ.get("HOME", str(Path.home()))) / ".netrc"


__all__ = [
    "DEFAULT_MODULE_PATH",
    "DEFAULT_TERRAFILE_PATH",
    "RunOptions",
]
