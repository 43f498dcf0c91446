"""
Services wrapping external collaborators: credentials and configuration.
"""

from .credentials import (
    NetrcParseError,
    repository_host,
    parse_netrc,
    CredentialResolver,
    StaticCredentialResolver,
    NetrcCredentialResolver,
)
from .config_loader import parse_terrafile, load_terrafile

__all__ = [
    "NetrcParseError",
    "repository_host",
    "parse_netrc",
    "CredentialResolver",
    "StaticCredentialResolver",
    "NetrcCredentialResolver",
    "parse_terrafile",
    "load_terrafile",
]
