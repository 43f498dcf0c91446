"""
Shared fixtures: git repositories built from dulwich objects.

Repositories are assembled object by object so tests never need a git
binary or the network. The ``remote_repo`` fixture is a bare repository on
disk that dulwich's local transport can clone from.
"""

from pathlib import Path
from types import SimpleNamespace
from typing import Dict, Iterable

import pytest
from dulwich.objects import Blob, Commit, Tag, Tree
from dulwich.repo import MemoryRepo, Repo


IDENTITY = b"Test User <test@example.com>"
TIMESTAMP = 1700000000


class GitBuilder:
    """Writes trees, commits and tags straight into a repository's object store."""

    def __init__(self, repo):
        self.repo = repo
        self._counter = 0

    def tree(self, files: Dict[str, bytes]) -> bytes:
        tree = Tree()
        subdirs: Dict[str, Dict[str, bytes]] = {}
        for path, content in files.items():
            head, _, rest = path.partition("/")
            if rest:
                subdirs.setdefault(head, {})[rest] = content
                continue
            blob = Blob.from_string(content)
            self.repo.object_store.add_object(blob)
            tree.add(head.encode(), 0o100644, blob.id)

        for name, sub_files in subdirs.items():
            tree.add(name.encode(), 0o040000, self.tree(sub_files))

        self.repo.object_store.add_object(tree)
        return tree.id

    def commit(self, files: Dict[str, bytes], message: str = "commit", parents: Iterable[bytes] = ()) -> bytes:
        self._counter += 1
        commit = Commit()
        commit.tree = self.tree(files)
        commit.author = commit.committer = IDENTITY
        commit.author_time = commit.commit_time = TIMESTAMP + self._counter
        commit.author_timezone = commit.commit_timezone = 0
        commit.message = message.encode()
        commit.parents = list(parents)
        self.repo.object_store.add_object(commit)
        return commit.id

    def branch(self, name: str, commit_id: bytes) -> None:
        self.repo.refs[b"refs/heads/" + name.encode()] = commit_id

    def remote_branch(self, name: str, commit_id: bytes, remote: str = "origin") -> None:
        self.repo.refs[b"refs/remotes/" + remote.encode() + b"/" + name.encode()] = commit_id

    def tag(self, name: str, commit_id: bytes) -> None:
        self.repo.refs[b"refs/tags/" + name.encode()] = commit_id

    def annotated_tag(self, name: str, commit_id: bytes) -> bytes:
        tag = Tag()
        tag.name = name.encode()
        tag.object = (Commit, commit_id)
        tag.tagger = IDENTITY
        tag.tag_time = TIMESTAMP
        tag.tag_timezone = 0
        tag.message = f"release {name}\n".encode()
        self.repo.object_store.add_object(tag)
        self.repo.refs[b"refs/tags/" + name.encode()] = tag.id
        return tag.id


MAIN_FILES = {
    "README.md": b"main readme\n",
    "modules/vpc/main.tf": b"# vpc on main\n",
    "modules/vpc/nested/variables.tf": b"variable \"cidr\" {}\n",
    "modules/sg/main.tf": b"# sg on main\n",
}

DEVELOP_FILES = {
    "README.md": b"develop readme\n",
    "modules/vpc/main.tf": b"# vpc on develop\n",
}

RELEASE_FILES = {
    "README.md": b"release readme\n",
    "modules/vpc/main.tf": b"# vpc v1.2.0\n",
}


@pytest.fixture
def memory_repo():
    """Empty in-memory repository."""
    return MemoryRepo()


@pytest.fixture
def git_builder(memory_repo):
    """GitBuilder writing into ``memory_repo``."""
    return GitBuilder(memory_repo)


@pytest.fixture
def remote_repo(tmp_path):
    """
    Bare repository with:

    - ``main`` (default branch) holding MAIN_FILES
    - ``develop`` holding DEVELOP_FILES
    - annotated tag ``v1.2.0`` on a commit holding RELEASE_FILES
    - lightweight tags ``main`` and ``develop`` on the release commit, so
      branch/tag name clashes can be checked
    """
    path = tmp_path / "remote.git"
    path.mkdir()
    repo = Repo.init_bare(str(path))
    builder = GitBuilder(repo)

    release = builder.commit(RELEASE_FILES, "release")
    main = builder.commit(MAIN_FILES, "main", parents=[release])
    develop = builder.commit(DEVELOP_FILES, "develop", parents=[main])

    builder.branch("main", main)
    builder.branch("develop", develop)
    builder.annotated_tag("v1.2.0", release)
    builder.tag("main", release)
    builder.tag("develop", release)
    repo.refs.set_symbolic_ref(b"HEAD", b"refs/heads/main")
    repo.close()

    return SimpleNamespace(
        url=str(path),
        path=path,
        main=main,
        develop=develop,
        release=release,
        main_files=MAIN_FILES,
    )


def read_tree(root: Path) -> Dict[str, bytes]:
    """Map every regular file below ``root`` to its content."""
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(Path(root).rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def read_files():
    return read_tree
