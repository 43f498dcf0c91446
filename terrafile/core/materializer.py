"""
Writing of git trees to the local filesystem.

Files are read from the in-memory object store of the clone, never from a
working directory.
"""

import stat
from pathlib import Path

from dulwich.errors import NotTreeError
from dulwich.object_store import iter_tree_contents, tree_lookup_path
from dulwich.objects import S_ISGITLINK, Blob, Commit, Tree
from dulwich.repo import BaseRepo

from ..infrastructure.error_handler import DirectoryNotFoundError, MaterializeError
from ..infrastructure.logger import logger
from ..models import MaterializeResult


class TreeMaterializer:
    """Selects a (sub)tree of a commit and writes its files to disk."""

    def select_tree(self, repo: BaseRepo, commit_id: bytes, directory: str = "", version: str = "") -> bytes:
        """
        Get the tree to extract for a commit.

        Args:
            repo: Repository holding the commit
            commit_id: Resolved commit
            directory: Subpath inside the tree; empty selects the root
            version: Version string, used in error messages

        Returns:
            Tree id of the root tree or of ``directory``

        Raises:
            DirectoryNotFoundError: If ``directory`` is missing or not a tree
        """
        commit = repo[commit_id]
        if not isinstance(commit, Commit):
            raise MaterializeError(f"{commit_id.decode()} is not a commit")

        tree_id = commit.tree
        subpath = directory.strip("/")
        if not subpath:
            return tree_id

        try:
            mode, sub_id = tree_lookup_path(repo.__getitem__, tree_id, subpath.encode("utf-8"))
        except (KeyError, NotTreeError) as e:
            raise DirectoryNotFoundError(directory, version, e) from e

        if not stat.S_ISDIR(mode):
            raise DirectoryNotFoundError(directory, version)
        return sub_id

    def materialize(self, repo: BaseRepo, tree_id: bytes, destination: Path) -> MaterializeResult:
        """
        Write every file under ``tree_id`` to ``destination``.

        Relative paths, including nested folders, are kept as-is. Existing
        files are overwritten. Submodule entries are skipped because their
        objects live in another repository.

        Raises:
            MaterializeError: On any filesystem error
        """
        destination = Path(destination)
        result = MaterializeResult(destination=destination)

        tree = repo[tree_id]
        if not isinstance(tree, Tree):
            raise MaterializeError(f"{tree_id.decode()} is not a tree")

        for entry in iter_tree_contents(repo.object_store, tree_id):
            if S_ISGITLINK(entry.mode):
                logger.debug(f"Skipping submodule {entry.path.decode()}")
                continue

            relative = entry.path.decode("utf-8")
            result.bytes_written += self._write_file(repo, entry.sha, destination / relative, relative)
            result.files_written.append(relative)

        logger.debug(f"Wrote {result.file_count} files ({result.bytes_written} bytes) to {destination}")
        return result

    @staticmethod
    def _write_file(repo: BaseRepo, blob_id: bytes, target: Path, relative: str) -> int:
        blob = repo[blob_id]
        if not isinstance(blob, Blob):
            raise MaterializeError(f"unable to read file {relative}: {blob_id.decode()} is not a blob")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise MaterializeError(f"failed to create directory for {target}", e) from e

        written = 0
        try:
            with open(target, "wb") as out:
                for chunk in blob.chunked:
                    out.write(chunk)
                    written += len(chunk)
        except OSError as e:
            raise MaterializeError(f"unable to write file {relative}", e) from e

        return written


__all__ = [
    "TreeMaterializer",
]
