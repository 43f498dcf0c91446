"""
Module resolution and materialization pipeline.
"""

from .resolver import REMOTE_NAME, ReferenceResolver
from .materializer import TreeMaterializer
from .fetcher import ModuleFetcher
from .linker import DestinationLinker
from .orchestrator import ModuleOrchestrator

__all__ = [
    "REMOTE_NAME",
    "ReferenceResolver",
    "TreeMaterializer",
    "ModuleFetcher",
    "DestinationLinker",
    "ModuleOrchestrator",
]
