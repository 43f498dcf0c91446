"""
Credential lookup for repository hosts.

The primary resolver reads a netrc file and answers per host: an
``oauth-token`` entry yields token auth, ``login``/``password`` yield basic
auth, anything else is anonymous. A static resolver that hands the same
username and password to every host is kept for setups without netrc.
"""

import re
import shlex
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union
from urllib.parse import urlparse

from ..infrastructure.logger import logger
from ..models import Credentials


_SCP_LIKE = re.compile(r"^(?:[^@/:]+@)?(?P<host>[^:/]+):")
_ENTRY_KEYS = ("login", "password", "account", "oauth-token")


class NetrcParseError(ValueError):
    """Raised when a netrc file is malformed."""


def repository_host(url: str) -> str:
    """
    Extract the host portion of a repository URL.

    Handles ``scheme://[user@]host[:port]/path`` and scp-like
    ``[user@]host:path`` forms. Local paths have no host.
    """
    if "://" in url:
        return urlparse(url).hostname or ""

    match = _SCP_LIKE.match(url)
    if match:
        return match.group("host")
    return ""


def _netrc_tokens(text: str) -> Iterator[str]:
    """Split netrc text into tokens, dropping comments and macro bodies."""

    lines = iter(text.splitlines())
    for line in lines:
        if line.lstrip().startswith("#"):
            continue
        try:
            tokens = shlex.split(line)
        except ValueError as e:
            raise NetrcParseError(f"bad quoting in line {line!r}") from e

        for token in tokens:
            if token == "macdef":
                # Macro body runs until the next blank line
                for body in lines:
                    if not body.strip():
                        break
                break
            yield token


def parse_netrc(text: str) -> Tuple[Dict[str, Dict[str, str]], Optional[Dict[str, str]]]:
    """
    Parse netrc text.

    Returns:
        Tuple of (machines, default) where machines maps host to its fields
        and default holds the ``default`` entry fields, or None
    """
    machines: Dict[str, Dict[str, str]] = {}
    default: Optional[Dict[str, str]] = None
    current: Optional[Dict[str, str]] = None

    tokens = _netrc_tokens(text)
    for token in tokens:
        if token == "machine":
            host = next(tokens, None)
            if host is None:
                raise NetrcParseError("missing host after 'machine'")
            current = {}
            # First entry for a host wins
            machines.setdefault(host, current)
        elif token == "default":
            current = {}
            default = current
        elif token in _ENTRY_KEYS:
            if current is None:
                raise NetrcParseError(f"'{token}' outside of a machine entry")
            value = next(tokens, None)
            if value is None:
                raise NetrcParseError(f"missing value after '{token}'")
            current[token] = value
        else:
            raise NetrcParseError(f"unexpected token {token!r}")

    return machines, default


####
##      RESOLVERS
#####
class CredentialResolver:
    """Yields credentials for a repository URL. The base class is anonymous."""

    def credentials_for(self, url: str) -> Credentials:
        return Credentials.anonymous()


class StaticCredentialResolver(CredentialResolver):
    """Hands the same username and password to every host."""

    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password

    def credentials_for(self, url: str) -> Credentials:
        return Credentials.from_login(self.username, self.password)


class NetrcCredentialResolver(CredentialResolver):
    """
    Per-host credentials from a netrc file.

    A missing file means anonymous access everywhere. A malformed file is
    logged and also treated as anonymous.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._machines: Dict[str, Dict[str, str]] = {}
        self._default: Optional[Dict[str, str]] = None
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            logger.debug(f"No netrc file at {self.path}, using anonymous access")
            return

        try:
            self._machines, self._default = parse_netrc(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, NetrcParseError) as e:
            logger.error(f"failed to parse netrc file {self.path} due to error: {e}")
            return

        logger.debug(f"Loaded netrc entries for {len(self._machines)} host(s) from {self.path}")

    @property
    def hosts(self) -> List[str]:
        return list(self._machines)

    def credentials_for(self, url: str) -> Credentials:
        host = repository_host(url)
        entry = self._machines.get(host, self._default) if host else None
        if entry is None:
            return Credentials.anonymous()

        token = entry.get("oauth-token")
        if token:
            return Credentials.from_token(token)
        return Credentials.from_login(entry.get("login"), entry.get("password"))


__all__ = [
    "NetrcParseError",
    "repository_host",
    "parse_netrc",
    "CredentialResolver",
    "StaticCredentialResolver",
    "NetrcCredentialResolver",
]
