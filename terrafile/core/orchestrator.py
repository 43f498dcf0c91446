"""
Orchestrator for installing every module of a Terrafile concurrently.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Union

from ..infrastructure.error_handler import TerrafileError
from ..infrastructure.logger import logger
from ..models import ModuleDeclaration, RunOptions, TerrafileConfig
from ..services.filesystem import ensure_directory, remove_all
from .fetcher import ModuleFetcher
from .linker import DestinationLinker


class ModuleOrchestrator:
    """
    Runs one independent unit of work per module.

    Units share nothing but the filesystem and are not coordinated: two
    modules writing the same destination race and the last writer wins.
    Failures are logged by the unit that hit them; ``run`` never raises for
    a module failure.
    """

    def __init__(
        self,
        options: RunOptions,
        fetcher: ModuleFetcher,
        linker: Optional[DestinationLinker] = None,
    ):
        self.options = options
        self.fetcher = fetcher
        self.linker = linker or DestinationLinker()

    def resolve_path(self, path: Union[str, Path]) -> Path:
        """Anchor a relative path at the run's working directory."""

        return self.options.working_directory / path

    async def run(self, config: TerrafileConfig) -> None:
        """
        Install every module of ``config``.

        Cleans the destinations first when requested, recreates the module
        path, then blocks until every module unit has finished.
        """
        if self.options.clean:
            self.clean_destinations(config)

        self.prepare_module_path()

        if not len(config):
            logger.info("[*] No modules declared, nothing to fetch")
            return

        modules = list(config)
        loop = asyncio.get_running_loop()

        # One worker per module so no unit waits for another to finish
        with ThreadPoolExecutor(max_workers=len(modules), thread_name_prefix="terrafile") as executor:
            tasks = [
                loop.run_in_executor(executor, self.install_module, module)
                for module in modules
            ]
            results = await asyncio.gather(*tasks, return_exceptions=True)

        for module, result in zip(modules, results):
            if isinstance(result, BaseException):
                logger.error(f"Unexpected failure installing module {module.name}: {result!r}")

        logger.debug(f"Finished processing {len(modules)} module(s)")

    def install_module(self, module: ModuleDeclaration) -> None:
        """Fetch one module into its primary destination, then link the rest."""

        destinations = module.destination_set(self.options.module_path)
        primary = self.resolve_path(destinations.primary)

        try:
            ensure_directory(primary)
        except OSError as e:
            logger.error(f"failed to create folder {primary} due to error: {e}")
            return

        try:
            self.fetcher.fetch(module.source, module.directory, module.version, module.name, primary)
        except TerrafileError as e:
            logger.error(f"failed to install module {module.name}: {e}")
            return

        if destinations.links:
            self.linker.link(
                primary / module.name,
                module.name,
                [self.resolve_path(root) for root in destinations.links],
            )

    def clean_destinations(self, config: TerrafileConfig) -> List[Path]:
        """
        Remove every destination root the config can write to.

        Returns:
            Roots that were removed without error
        """
        removed: List[Path] = []
        for root in config.clean_scope(self.options.module_path):
            path = self.resolve_path(root)
            logger.info(f"[*] Removing artifacts from {path}")
            try:
                remove_all(path)
            except OSError as e:
                logger.error(f"Failed to remove artifacts from {path} due to error: {e}")
                continue
            removed.append(path)
        return removed

    def prepare_module_path(self) -> Path:
        """Start from an empty module path."""

        module_path = self.resolve_path(self.options.module_path)
        try:
            remove_all(module_path)
        except OSError as e:
            logger.warning(f"failed to remove {module_path} due to error: {e}")
        try:
            ensure_directory(module_path)
        except OSError as e:
            logger.error(f"failed to create folder {module_path} due to error: {e}")
        return module_path


__all__ = [
    "ModuleOrchestrator",
]
