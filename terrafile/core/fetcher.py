"""
Fetching of a single module: clone into memory, resolve the version and
write the selected tree to disk.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from dulwich.client import default_urllib3_manager, get_transport_and_path
from dulwich.repo import MemoryRepo

from ..infrastructure.error_handler import TerrafileError, handle_git_error
from ..infrastructure.logger import logger
from ..models import AuthMethod, Credentials, MaterializeResult
from ..services.credentials import CredentialResolver
from ..services.filesystem import remove_all
from .materializer import TreeMaterializer
from .resolver import REMOTE_NAME, ReferenceResolver


PEELED_SUFFIX = b"^{}"
HEADS_PREFIX = b"refs/heads/"
TAGS_PREFIX = b"refs/tags/"


def is_http_url(url: str) -> bool:
    return url.startswith(("http://", "https://"))


class ModuleFetcher:
    """
    Installs one module from its repository into a destination root.

    Each call clones the whole repository into a fresh MemoryRepo which is
    dropped when the call returns; nothing is cached between modules.
    """

    def __init__(
        self,
        credentials: Optional[CredentialResolver] = None,
        resolver: Optional[ReferenceResolver] = None,
        materializer: Optional[TreeMaterializer] = None,
    ):
        self.credentials = credentials or CredentialResolver()
        self.resolver = resolver or ReferenceResolver()
        self.materializer = materializer or TreeMaterializer()

    def fetch(
        self,
        source: str,
        directory: str,
        version: str,
        module_name: str,
        destination_root: Union[str, Path],
    ) -> MaterializeResult:
        """
        Fetch a module into ``destination_root/module_name``.

        Args:
            source: Repository URL
            directory: Subdirectory to extract, empty for the repository root
            version: Branch, remote branch, tag or commit id
            module_name: Leaf folder name for the module
            destination_root: Folder the module folder is created in

        Returns:
            MaterializeResult describing the files written

        Raises:
            TerrafileError: On any clone, resolution or write failure, with
                source, version, directory and destination attached
        """
        module_path = Path(destination_root) / module_name

        logger.debug(f"[*] Removing previously cloned artifacts at {module_path}")
        try:
            remove_all(module_path)
        except OSError as e:
            logger.warning(f"failed to remove {module_path} due to error: {e}")

        logger.info(f"[*] Checking out {version} of {source}")

        try:
            repo = self.clone(source)
            reference = self.resolver.resolve(repo, version, source)
            tree_id = self.materializer.select_tree(repo, reference.commit_id, directory, version)
            result = self.materializer.materialize(repo, tree_id, module_path)
        except TerrafileError as e:
            e.add_context(
                source=source,
                version=version,
                directory=directory or None,
                destination=module_path,
            )
            raise

        logger.info(
            f"[*] Installed {module_name} from {reference.kind.value} {version} "
            f"({reference.short_id}), {result.file_count} files at {module_path}"
        )
        return result

    def transport_options(self, source: str) -> Dict[str, Any]:
        """
        Keyword arguments for the dulwich client of ``source``.

        Thin packs are always disabled. Credentials only apply to HTTP(S)
        remotes; ssh and local remotes authenticate on their own.
        """
        options: Dict[str, Any] = {"thin_packs": False}
        if not is_http_url(source):
            return options

        credentials: Credentials = self.credentials.credentials_for(source)
        logger.debug(f"Using {credentials.method.value} auth for {source}")

        if credentials.method is AuthMethod.TOKEN:
            pool_manager = default_urllib3_manager(None)
            pool_manager.headers["Authorization"] = f"Bearer {credentials.token}"
            options["pool_manager"] = pool_manager
        elif credentials.method is AuthMethod.BASIC and (credentials.username or credentials.password):
            options["username"] = credentials.username
            options["password"] = credentials.password
        return options

    @handle_git_error
    def clone(self, source: str) -> MemoryRepo:
        """
        Clone every branch and tag of ``source`` into memory.

        Refs are laid out the way a clone does: remote branches under
        ``refs/remotes/origin``, tags under ``refs/tags`` and a local branch
        only for the remote's default branch.
        """
        client, path = get_transport_and_path(source, **self.transport_options(source))

        repo = MemoryRepo()
        result = client.fetch(path, repo)

        refs = {name: sha for name, sha in result.refs.items() if not name.endswith(PEELED_SUFFIX)}
        symrefs = getattr(result, "symrefs", None) or {}

        remote_prefix = b"refs/remotes/" + REMOTE_NAME.encode("utf-8") + b"/"
        for name, sha in refs.items():
            if name.startswith(HEADS_PREFIX):
                repo.refs[remote_prefix + name[len(HEADS_PREFIX):]] = sha
            elif name.startswith(TAGS_PREFIX):
                repo.refs[name] = sha

        head_branch = self._default_branch(refs, symrefs)
        if head_branch is not None:
            repo.refs[head_branch] = refs[head_branch]
            repo.refs.set_symbolic_ref(b"HEAD", head_branch)

        logger.debug(f"Fetched {len(refs)} refs from {source}")
        return repo

    @staticmethod
    def _default_branch(refs: Dict[bytes, bytes], symrefs: Dict[bytes, bytes]) -> Optional[bytes]:
        """Branch the remote HEAD points at, if it can be told."""

        target = symrefs.get(b"HEAD")
        if target in refs:
            return target

        head = refs.get(b"HEAD")
        if head is None:
            return None
        for name in sorted(refs):
            if name.startswith(HEADS_PREFIX) and refs[name] == head:
                return name
        return None


__all__ = [
    "is_http_url",
    "ModuleFetcher",
]
