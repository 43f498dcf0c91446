"""
Python API for installing Terrafile modules.
"""

import asyncio
import logging
from typing import Optional

from ..core import DestinationLinker, ModuleFetcher, ModuleOrchestrator
from ..infrastructure.logger import logger
from ..models import RunOptions, TerrafileConfig
from ..services import CredentialResolver, NetrcCredentialResolver, load_terrafile


class Terrafile:
    """
    High-level entry point wiring credentials, fetcher, linker and
    orchestrator for one set of run options.

    Args:
        options: Run options; defaults apply when omitted
        credentials: Credential resolver; defaults to the netrc file named
            by the options (or ``$HOME/.netrc``)
    """

    def __init__(
        self,
        options: Optional[RunOptions] = None,
        credentials: Optional[CredentialResolver] = None,
    ):
        self.options = options or RunOptions()
        self.verbose = self.options.verbose
        self.set_verbose(self.verbose)

        self.credentials = credentials or NetrcCredentialResolver(self.options.resolved_netrc_path)
        self.fetcher = ModuleFetcher(self.credentials)
        self.linker = DestinationLinker()
        self.orchestrator = ModuleOrchestrator(self.options, self.fetcher, self.linker)

    def set_verbose(self, verbose: bool) -> None:
        """Switch the package logger between DEBUG and INFO."""

        self.verbose = verbose
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    def load_config(self) -> TerrafileConfig:
        """
        Read the Terrafile named by the options.

        Raises:
            ConfigurationError: If it cannot be read or parsed
        """
        return load_terrafile(self.options.working_directory / self.options.terrafile_path)

    async def install_async(self, config: Optional[TerrafileConfig] = None) -> None:
        """Install every module, loading the Terrafile when no config is given."""

        if config is None:
            config = self.load_config()
        await self.orchestrator.run(config)

    def install(self, config: Optional[TerrafileConfig] = None) -> None:
        """Blocking variant of :meth:`install_async`."""

        asyncio.run(self.install_async(config))


__all__ = [
    "Terrafile",
]
