"""
Git domain models for Terrafile.

Value types produced while resolving versions, selecting credentials and
writing module trees.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class ReferenceKind(Enum):
    """Namespace a version string was resolved in."""

    BRANCH = "branch"
    REMOTE_BRANCH = "remote_branch"
    TAG = "tag"
    COMMIT = "commit"


@dataclass(frozen=True)
class ResolvedReference:
    """Immutable result of resolving a version string to a commit."""

    version: str
    kind: ReferenceKind
    commit_id: bytes
    ref_name: Optional[bytes] = None

    def __post_init__(self) -> None:
        if len(self.commit_id) != 40:
            raise ValueError(f"Invalid commit id: {self.commit_id!r}")

    @property
    def short_id(self) -> str:
        return self.commit_id[:7].decode("ascii")


class AuthMethod(Enum):
    """How a repository host is authenticated."""

    TOKEN = "token"
    BASIC = "basic"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class Credentials:
    """Authentication material for one repository host."""

    method: AuthMethod = AuthMethod.ANONYMOUS
    token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @classmethod
    def anonymous(cls) -> Credentials:
        return cls()

    @classmethod
    def from_token(cls, token: str) -> Credentials:
        return cls(method=AuthMethod.TOKEN, token=token)

    @classmethod
    def from_login(cls, username: Optional[str], password: Optional[str]) -> Credentials:
        return cls(method=AuthMethod.BASIC, username=username or "", password=password or "")

    def __repr__(self) -> str:
        # Never leak secrets into logs
        return f"Credentials(method={self.method.value}, username={self.username!r})"


@dataclass
class MaterializeResult:
    """Files written for one module."""

    destination: Path
    files_written: List[str] = field(default_factory=list)
    bytes_written: int = 0

    @property
    def file_count(self) -> int:
        return len(self.files_written)


__all__ = [
    "ReferenceKind",
    "ResolvedReference",
    "AuthMethod",
    "Credentials",
    "MaterializeResult",
]
