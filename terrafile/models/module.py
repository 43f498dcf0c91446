"""
Module declaration models for Terrafile.

This module contains the typed records decoded from a Terrafile and the
destination layout derived from them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List


def join_module_path(root: str, module_path: str) -> Path:
    """
    Compose ``<root>/<module_path>``.

    The module path is always nested under the root, even when it is
    absolute, and redundant separators and ``.`` segments are collapsed.
    """
    return Path(os.path.normpath(f"{root}/{module_path}"))


@dataclass
class ModuleDeclaration:
    """One entry of the Terrafile, keyed by the module name."""

    name: str
    source: str
    version: str
    directory: str = ""
    destinations: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.name or self.name in (".", "..") or "/" in self.name or os.sep in self.name:
            raise ValueError(f"Invalid module name: {self.name!r}")
        if not self.source:
            raise ValueError(f"Module {self.name} requires a source")
        if not self.version:
            raise ValueError(f"Module {self.name} requires a version")

    def destination_set(self, module_path: str) -> DestinationSet:
        """Split destinations into the primary fetch target and link targets."""

        if not self.destinations:
            return DestinationSet(primary=Path(os.path.normpath(module_path)))

        return DestinationSet(
            primary=join_module_path(self.destinations[0], module_path),
            links=[join_module_path(d, module_path) for d in self.destinations[1:]],
        )


@dataclass
class DestinationSet:
    """Primary materialization root plus the roots that receive symlinks."""

    primary: Path
    links: List[Path] = field(default_factory=list)

    def module_folder(self, name: str) -> Path:
        return self.primary / name

    @property
    def roots(self) -> List[Path]:
        return [self.primary, *self.links]


@dataclass
class TerrafileConfig:
    """All module declarations of a Terrafile, in file order."""

    modules: Dict[str, ModuleDeclaration] = field(default_factory=dict)

    def __iter__(self) -> Iterator[ModuleDeclaration]:
        return iter(self.modules.values())

    def __len__(self) -> int:
        return len(self.modules)

    def __contains__(self, name: object) -> bool:
        return name in self.modules

    def __getitem__(self, name: str) -> ModuleDeclaration:
        return self.modules[name]

    def clean_scope(self, module_path: str) -> List[Path]:
        """
        Collect every destination root eligible for the clean pass.

        Roots are deduplicated; modules without destinations contribute the
        bare module path.
        """
        unique: Dict[Path, None] = {}
        for module in self:
            for root in module.destination_set(module_path).roots:
                unique.setdefault(root, None)
        return list(unique)


__all__ = [
    "join_module_path",
    "ModuleDeclaration",
    "DestinationSet",
    "TerrafileConfig",
]
