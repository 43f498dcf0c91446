"""
Terrafile loading.

Decodes the YAML mapping of module name to module record into a
TerrafileConfig. Any failure here is pre-flight and aborts the run.
"""

from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from ..infrastructure.error_handler import ConfigurationError
from ..infrastructure.logger import logger
from ..models import ModuleDeclaration, TerrafileConfig


_NULL_SCALARS = ("", "~", "null", "Null", "NULL")


def _as_string(name: str, key: str, value: Any) -> str:
    # BaseLoader keeps every scalar as its source text, so 1.10 stays "1.10"
    if value is None or value in _NULL_SCALARS:
        return ""
    if isinstance(value, (dict, list)):
        raise ConfigurationError(f"module {name}: '{key}' must be a string")
    return str(value)


def _as_string_list(name: str, key: str, value: Any) -> List[str]:
    if value is None or value in _NULL_SCALARS:
        return []
    if not isinstance(value, list):
        raise ConfigurationError(f"module {name}: '{key}' must be a list")
    return [_as_string(name, key, item) for item in value]


def _decode_module(name: str, record: Any) -> ModuleDeclaration:
    if not isinstance(record, dict):
        raise ConfigurationError(f"module {name}: expected a mapping, got {type(record).__name__}")

    try:
        return ModuleDeclaration(
            name=name,
            source=_as_string(name, "source", record.get("source")),
            version=_as_string(name, "version", record.get("version")),
            directory=_as_string(name, "directory", record.get("directory")),
            destinations=_as_string_list(name, "destinations", record.get("destinations")),
        )
    except ValueError as e:
        raise ConfigurationError(str(e), e) from e


def parse_terrafile(text: str) -> TerrafileConfig:
    """
    Parse Terrafile YAML text.

    Args:
        text: YAML document

    Returns:
        TerrafileConfig with modules in document order

    Raises:
        ConfigurationError: If the YAML is malformed or a record is invalid
    """
    try:
        data = yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise ConfigurationError("failed to parse yaml file", e) from e

    if data is None:
        return TerrafileConfig()
    if not isinstance(data, dict):
        raise ConfigurationError(f"expected a mapping of modules, got {type(data).__name__}")

    modules: Dict[str, ModuleDeclaration] = {}
    for name, record in data.items():
        modules[str(name)] = _decode_module(str(name), record)
    return TerrafileConfig(modules=modules)


def load_terrafile(path: Union[str, Path]) -> TerrafileConfig:
    """Read and parse the Terrafile at ``path``."""

    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"failed to read configuration in file {path}", e) from e

    config = parse_terrafile(text)
    logger.debug(f"Loaded {len(config)} module(s) from {path}")
    return config


__all__ = [
    "parse_terrafile",
    "load_terrafile",
]
