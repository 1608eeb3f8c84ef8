"""
Lazy, caching, read-only filesystem over a repository tree at one revision.

Paths are forward-slash separated and relative; "." is the repository root.
Trees and blobs are fetched on first use and memoized per path for the
lifetime of the filesystem instance. Entries carry no parent references:
every path is resolved top-down from the root, and the cache maps keyed by
canonical path act as the lookup table.

Example:
    >>> fs = GitTreeFS("octocat", "Hello-World", "master")
    >>> with fs.open("README") as f:
    ...     data = f.read()
    >>> fs.listdir(".")
    ['README']
"""

import itertools
import posixpath
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from gittreefs.core.constants import ROOT_PATH, CacheNamespace, EntryKind, GitMode
from gittreefs.core.exceptions import (
    EntryIsADirectoryError,
    EntryNotADirectoryError,
    EntryNotFoundError,
    GitTreeFSError,
)
from gittreefs.core.validators import (
    validate_api_config,
    validate_log_level,
    validate_path,
    validate_repository_name,
    validate_revision,
)
from gittreefs.fs.handles import DirectoryHandle, FileHandle
from gittreefs.fs.info import EntryInfo
from gittreefs.infrastructure.cache_manager import CacheManager
from gittreefs.infrastructure.config_manager import CONFIG_SCHEMA, ConfigManager
from gittreefs.infrastructure.logger import Logger
from gittreefs.remote.fetcher import FetchFunc, RemoteFetcher, tree_url
from gittreefs.remote.models import Blob, Tree, TreeEntry

# Suffixes that give each filesystem its own stdlib logger
_instance_ids = itertools.count(1)


@dataclass(frozen=True)
class RepositoryIdentity:
    """Which remote tree is browsed: owner, repository and revision."""

    owner: str
    repo: str
    revision: str

    def __post_init__(self):
        validate_repository_name(self.owner, "owner")
        validate_repository_name(self.repo, "name")
        validate_revision(self.revision)

    def root_url(self, api_url: str) -> str:
        return tree_url(self.owner, self.repo, self.revision, api_url=api_url)

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}@{self.revision}"


class GitTreeFS:
    """
    Read-only filesystem over a remote git tree.

    Construction performs no I/O. Trees are cached by canonical path in the
    "trees" namespace ("." for the root) and file contents by path in the
    "blobs" namespace; both only ever grow. Concurrent resolutions of the
    same path share one fetch, different paths fetch in parallel, and a
    failed fetch is not cached so the next call retries it.

    Thread Safety:
    - Cache namespaces are thread-safe
    - Handles are per-open and not meant to be shared between threads
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        revision: str,
        fetcher: Optional[FetchFunc] = None,
        config: Optional[ConfigManager] = None,
        cache: Optional[CacheManager] = None,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize the filesystem.

        Args:
            owner: Repository owner
            repo: Repository name
            revision: Commit, branch, tag or tree SHA to browse
            fetcher: Callable ``url -> dict`` (RemoteFetcher if None)
            config: Configuration manager (defaults if None)
            cache: Cache manager (created if None)
            logger: Logger (created if None)

        Raises:
            ValidationError: If owner, repo, revision, the api settings or the
                log level are malformed
            ConfigError: If a configuration value has the wrong type
        """
        self.identity = RepositoryIdentity(owner, repo, revision)
        self.config = config if config is not None else ConfigManager()
        self.config.validate_schema(CONFIG_SCHEMA)
        validate_api_config(self.config.get_all()["gittreefs"]["api"])
        level = self.config.get("gittreefs.logging.level", "WARNING")
        validate_log_level(level)

        self._owns_logger = logger is None
        if logger is None:
            logger = Logger(f"gittreefs.fs.{next(_instance_ids)}", level=level)
            log_file = self.config.get("gittreefs.logging.file")
            if log_file:
                logger.add_handler(logger.create_file_handler(log_file))
        self.logger = logger

        self.api_url = self.config.get("gittreefs.api.url")
        self._owns_fetcher = fetcher is None
        if fetcher is None:
            fetcher = RemoteFetcher(
                api_url=self.api_url,
                timeout=self.config.get("gittreefs.api.timeout_seconds"),
                accept=self.config.get("gittreefs.api.accept"),
                logger=self.logger,
            )
        self._fetch = fetcher
        self.cache = cache if cache is not None else CacheManager()
        self.listing_uses_cache = bool(self.config.get("gittreefs.listing.use_cache", False))

    @property
    def owner(self) -> str:
        return self.identity.owner

    @property
    def repo(self) -> str:
        return self.identity.repo

    @property
    def revision(self) -> str:
        return self.identity.revision

    @property
    def root_url(self) -> str:
        return self.identity.root_url(self.api_url)

    # =========================================================================
    # Remote fetches
    # =========================================================================

    def _fetch_tree(self, url: str, path: str) -> Tree:
        self.logger.debug("Fetching tree", path=path, url=url)
        try:
            return Tree.from_json(self._fetch(url))
        except GitTreeFSError as e:
            self.logger.warning("Tree fetch failed", path=path, url=url, error=e)
            raise

    def _fetch_blob(self, url: str, path: str) -> Blob:
        self.logger.debug("Fetching blob", path=path, url=url)
        try:
            return Blob.from_json(self._fetch(url))
        except GitTreeFSError as e:
            self.logger.warning("Blob fetch failed", path=path, url=url, error=e)
            raise

    # =========================================================================
    # Path resolution
    # =========================================================================

    def resolve_tree(self, path: str) -> Tree:
        """
        Resolve a directory path to its tree listing.

        Args:
            path: Directory path ("." for the root)

        Returns:
            Tree at path

        Raises:
            EntryNotFoundError: If path or an ancestor does not exist
            EntryNotADirectoryError: If path resolves to a file
            TransportError, DecodeError: If a fetch fails
        """
        validate_path(path)
        if path == ROOT_PATH:
            return self.cache.get_or_load(
                CacheNamespace.TREES, ROOT_PATH, lambda: self._fetch_tree(self.root_url, path)
            )

        cached = self.cache.get(CacheNamespace.TREES, path)
        if cached is not None:
            return cached

        entry = self.resolve_entry(path)
        if entry.kind is not EntryKind.TREE:
            raise EntryNotADirectoryError(path)
        return self.cache.get_or_load(
            CacheNamespace.TREES, path, lambda: self._fetch_tree(entry.url, path)
        )

    def resolve_entry(self, path: str) -> TreeEntry:
        """
        Resolve a path to the entry describing it in its parent tree.

        The root has no parent; it resolves to a synthesized directory entry
        named after the repository.

        Args:
            path: Path to resolve

        Returns:
            Tree entry at path

        Raises:
            EntryNotFoundError: If the parent tree has no entry with that name
            EntryNotADirectoryError: If an ancestor is a file
        """
        validate_path(path)
        if path == ROOT_PATH:
            root = self.resolve_tree(ROOT_PATH)
            return TreeEntry(
                path=self.repo,
                mode=GitMode.DIRECTORY,
                type=EntryKind.TREE.value,
                url=root.url,
                size=0,
                sha=root.sha,
            )

        parent_path, name = posixpath.split(path)
        parent = self.resolve_tree(parent_path or ROOT_PATH)

        # Names are unique within a tree; first match wins otherwise
        entry = parent.find(name)
        if entry is None:
            raise EntryNotFoundError(path)
        return entry

    def read_blob_content(self, path: str) -> bytes:
        """
        Return the content of the file at path, fetching it once.

        Raises:
            EntryNotFoundError: If path does not exist
            EntryIsADirectoryError: If path is a directory
        """
        cached = self.cache.get(CacheNamespace.BLOBS, path)
        if cached is not None:
            return cached

        entry = self.resolve_entry(path)
        if entry.kind is not EntryKind.BLOB:
            raise EntryIsADirectoryError(path)
        return self.cache.get_or_load(
            CacheNamespace.BLOBS, path, lambda: self._fetch_blob(entry.url, path).content
        )

    # =========================================================================
    # Handles
    # =========================================================================

    def open(self, path: str) -> Union[FileHandle, DirectoryHandle]:
        """
        Open a file or directory.

        Args:
            path: Path to open ("." for the root)

        Returns:
            FileHandle for files, DirectoryHandle for directories

        Raises:
            EntryNotFoundError: If path does not exist
            InvalidEntryTypeError: If the entry is neither tree nor blob
        """
        entry = self.resolve_entry(path)
        kind = entry.kind

        if kind is EntryKind.BLOB:
            self.logger.debug("Opening file", path=path)
            return FileHandle(path, entry, self.read_blob_content(path))

        self.logger.debug("Opening directory", path=path)
        return DirectoryHandle(path, entry, lambda: self._listing(path, entry))

    def _listing(self, path: str, entry: TreeEntry) -> Tree:
        if self.listing_uses_cache:
            return self.resolve_tree(path)
        # Fresh fetch; the trees namespace is neither consulted nor populated
        return self._fetch_tree(entry.url, path)

    # =========================================================================
    # Convenience operations
    # =========================================================================

    def stat(self, path: str) -> EntryInfo:
        """Metadata for path without fetching file content."""
        return EntryInfo.from_entry(self.resolve_entry(path))

    def exists(self, path: str) -> bool:
        try:
            self.resolve_entry(path)
        except EntryNotFoundError:
            return False
        except EntryNotADirectoryError:
            return False
        return True

    def read_file(self, path: str) -> bytes:
        """Return the whole content of the file at path."""
        with self.open(path) as handle:
            return handle.read()

    def scandir(self, path: str = ROOT_PATH) -> List[EntryInfo]:
        """Metadata of the entries of a directory, sorted by name."""
        tree = self.resolve_tree(path)
        return sorted((EntryInfo.from_entry(e) for e in tree.entries), key=lambda i: i.name)

    def listdir(self, path: str = ROOT_PATH) -> List[str]:
        """Names of the entries of a directory, sorted."""
        return [info.name for info in self.scandir(path)]

    def walk(self, top: str = ROOT_PATH) -> Iterator[Tuple[str, List[str], List[str]]]:
        """
        Walk the tree top-down like os.walk.

        Yields:
            (dirpath, dirnames, filenames); pruning dirnames in place skips
            those subdirectories
        """
        tree = self.resolve_tree(top)
        dirnames = sorted(e.path for e in tree.entries if e.type == EntryKind.TREE.value)
        filenames = sorted(e.path for e in tree.entries if e.type != EntryKind.TREE.value)

        yield top, dirnames, filenames

        for name in dirnames:
            child = name if top == ROOT_PATH else f"{top}/{name}"
            yield from self.walk(child)

    def cache_stats(self) -> Dict[str, Any]:
        return self.cache.get_stats()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """
        Release the HTTP session and log handlers this filesystem created.

        A fetcher or logger passed to the constructor is left untouched.
        Calling close() more than once is harmless.
        """
        if self._owns_fetcher:
            self._fetch.close()
        if self._owns_logger:
            for handler in list(self.logger.logger.handlers):
                self.logger.remove_handler(handler)
                handler.close()

    def __enter__(self) -> "GitTreeFS":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"GitTreeFS({self.identity})"
