"""
Resolution of module version strings to commits.
"""

import re
from typing import List, Tuple

from dulwich.objects import Commit, Tag
from dulwich.repo import BaseRepo

from ..infrastructure.error_handler import ReferenceNotFoundError
from ..infrastructure.logger import logger
from ..models import ReferenceKind, ResolvedReference


REMOTE_NAME = "origin"

_FULL_SHA = re.compile(r"^[0-9a-f]{40}$")


class ReferenceResolver:
    """
    Resolves a version string against an in-memory clone.

    Namespaces are tried in a fixed order: local branch, remote-tracking
    branch under ``origin``, tag, then a full commit id. The first match
    wins, so a branch always shadows a tag of the same name.
    """

    def __init__(self, remote_name: str = REMOTE_NAME):
        self.remote_name = remote_name

    def candidates(self, version: str) -> List[Tuple[ReferenceKind, bytes]]:
        """Ref names to try for ``version``, in priority order."""

        name = version.encode("utf-8")
        return [
            (ReferenceKind.BRANCH, b"refs/heads/" + name),
            (ReferenceKind.REMOTE_BRANCH, b"refs/remotes/" + self.remote_name.encode("utf-8") + b"/" + name),
            (ReferenceKind.TAG, b"refs/tags/" + name),
        ]

    def resolve(self, repo: BaseRepo, version: str, source: str = "") -> ResolvedReference:
        """
        Find the commit ``version`` denotes.

        Args:
            repo: Repository whose refs and objects are searched
            version: Branch, remote branch, tag or commit id
            source: Repository URL, used in error messages

        Returns:
            ResolvedReference for the first namespace that matches

        Raises:
            ReferenceNotFoundError: If nothing matches
        """
        for kind, ref_name in self.candidates(version):
            try:
                sha = repo.refs[ref_name]
            except KeyError:
                continue

            commit_id = self._peel_to_commit(repo, sha)
            if commit_id is None:
                logger.debug(f"{ref_name.decode()} does not point at a commit, skipping")
                continue

            logger.debug(f"Resolved {version} as {kind.value} {ref_name.decode()} -> {commit_id.decode()}")
            return ResolvedReference(version=version, kind=kind, commit_id=commit_id, ref_name=ref_name)

        if _FULL_SHA.match(version):
            commit_id = self._peel_to_commit(repo, version.encode("ascii"))
            if commit_id is not None:
                logger.debug(f"Resolved {version} as a commit id")
                return ResolvedReference(version=version, kind=ReferenceKind.COMMIT, commit_id=commit_id)

        raise ReferenceNotFoundError(version, source)

    @staticmethod
    def _peel_to_commit(repo: BaseRepo, sha: bytes):
        """Follow annotated tags down to a commit id, or None."""

        try:
            obj = repo[sha]
            while isinstance(obj, Tag):
                obj = repo[obj.object[1]]
        except KeyError:
            return None

        if not isinstance(obj, Commit):
            return None
        return obj.id


__all__ = [
    "REMOTE_NAME",
    "ReferenceResolver",
]
