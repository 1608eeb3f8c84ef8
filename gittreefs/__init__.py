"""GitTreeFS - read-only filesystem view of a remote git repository tree."""

from gittreefs.core.constants import GITTREEFS_VERSION, ROOT_PATH, EntryKind
from gittreefs.core.exceptions import (
    DecodeError,
    EndOfDirectory,
    EntryIsADirectoryError,
    EntryNotADirectoryError,
    EntryNotFoundError,
    GitTreeFSError,
    InvalidEntryTypeError,
    InvalidPathError,
    TransportError,
    ValidationError,
)
from gittreefs.fs import DirectoryHandle, EntryInfo, FileHandle, GitTreeFS

__version__ = GITTREEFS_VERSION

__all__ = [
    "GitTreeFS",
    "FileHandle",
    "DirectoryHandle",
    "EntryInfo",
    "EntryKind",
    "ROOT_PATH",
    "GitTreeFSError",
    "TransportError",
    "DecodeError",
    "EntryNotFoundError",
    "EntryNotADirectoryError",
    "EntryIsADirectoryError",
    "InvalidEntryTypeError",
    "InvalidPathError",
    "EndOfDirectory",
    "ValidationError",
]
