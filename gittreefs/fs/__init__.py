"""GitTreeFS filesystem layer.

- GitTreeFS: lazy, caching, read-only filesystem over a remote git tree
- FileHandle, DirectoryHandle: per-open handles
- EntryInfo: stat metadata

Usage:
    from gittreefs.fs import GitTreeFS

    fs = GitTreeFS("octocat", "Hello-World", "master")
    data = fs.read_file("README")
"""

from gittreefs.fs.filesystem import GitTreeFS, RepositoryIdentity
from gittreefs.fs.handles import DirectoryHandle, FileHandle, NodeHandle
from gittreefs.fs.info import EntryInfo, mode_bits

__all__ = [
    "GitTreeFS",
    "RepositoryIdentity",
    "NodeHandle",
    "FileHandle",
    "DirectoryHandle",
    "EntryInfo",
    "mode_bits",
]
