"""
Symlinking of secondary destinations to a module's primary copy.
"""

import os
from pathlib import Path
from typing import Iterable, List, Union

from ..infrastructure.error_handler import LinkError
from ..infrastructure.logger import logger
from ..services.filesystem import ensure_directory, remove_all


class DestinationLinker:
    """
    Points every secondary destination of a module at its primary copy.

    Destinations are independent: a failure is logged and leaves only that
    destination degraded.
    """

    def link(
        self,
        module_source_path: Union[str, Path],
        module_name: str,
        link_roots: Iterable[Union[str, Path]],
    ) -> List[Path]:
        """
        Create ``<root>/<module_name>`` symlinks to ``module_source_path``.

        Args:
            module_source_path: Primary materialization of the module
            module_name: Leaf name of the link
            link_roots: Destination roots, each already joined with the
                module path

        Returns:
            Links that were created
        """
        source = Path(os.path.abspath(module_source_path))
        created: List[Path] = []

        for root in link_roots:
            try:
                created.append(self.link_one(source, module_name, Path(root)))
            except LinkError as e:
                logger.error(str(e))

        return created

    def link_one(self, source: Path, module_name: str, root: Path) -> Path:
        """
        Replace ``root/module_name`` with a symlink to ``source``.

        Raises:
            LinkError: If the folder, the stale entry or the link fails
        """
        logger.info(f"[*] Creating folder {root}")
        try:
            ensure_directory(root)
        except OSError as e:
            raise LinkError(f"failed to create folder {root}", e) from e

        target = root / module_name

        logger.info(f"[*] Remove existing artifacts at {target}")
        try:
            remove_all(target)
        except OSError as e:
            raise LinkError(f"failed to remove location {target}", e) from e

        logger.info(f"[*] Link {source} to {target}")
        try:
            os.symlink(source, target, target_is_directory=True)
        except OSError as e:
            raise LinkError(f"failed to link module from {source} to {target}", e) from e

        return target


__all__ = [
    "DestinationLinker",
]
