"""
Handles returned by GitTreeFS.open().

A handle wraps one resolved tree entry:
- FileHandle: blob entries, backed by a seekable in-memory cursor over the
  cached content
- DirectoryHandle: tree entries, backed by a listing fetched on the first
  read_dir() call

Stream operations on a directory raise EntryIsADirectoryError and
read_dir() on a file raises EntryNotADirectoryError. Any operation on a
closed handle raises ValueError, as io objects do.
"""

import io
from typing import Callable, Iterator, List, Optional

from gittreefs.core.exceptions import (
    EndOfDirectory,
    EntryIsADirectoryError,
    EntryNotADirectoryError,
)
from gittreefs.fs.info import EntryInfo
from gittreefs.remote.models import Tree, TreeEntry


class NodeHandle:
    """Common state of file and directory handles."""

    def __init__(self, path: str, entry: TreeEntry):
        self.path = path
        self.entry = entry
        self._closed = False

    @property
    def name(self) -> str:
        return self.entry.path

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_dir(self) -> bool:
        return self.entry.is_dir

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed handle")

    def stat(self) -> EntryInfo:
        """Metadata derived from the entry."""
        self._check_open()
        return EntryInfo.from_entry(self.entry)

    def close(self) -> None:
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<{type(self).__name__} path={self.path!r} {state}>"


class FileHandle(NodeHandle):
    """Read-only, seekable handle over a blob's content."""

    def __init__(self, path: str, entry: TreeEntry, content: bytes):
        super().__init__(path, entry)
        self._content = content
        self._cursor = io.BytesIO(content)

    def _check_file(self) -> None:
        self._check_open()
        if self.is_dir:
            raise EntryIsADirectoryError(self.path)

    def read(self, size: int = -1) -> bytes:
        """Read up to size bytes from the cursor (all remaining if negative)."""
        self._check_file()
        return self._cursor.read(size)

    def read_at(self, offset: int, size: int = -1) -> bytes:
        """Read up to size bytes starting at offset without moving the cursor.

        Raises:
            ValueError: If offset is negative
        """
        self._check_file()
        if offset < 0:
            raise ValueError(f"negative offset: {offset}")
        if size < 0:
            return self._content[offset:]
        return self._content[offset:offset + size]

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the cursor; returns the new absolute position."""
        self._check_file()
        return self._cursor.seek(offset, whence)

    def tell(self) -> int:
        self._check_file()
        return self._cursor.tell()

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def stat(self) -> EntryInfo:
        self._check_open()
        return EntryInfo.from_entry(self.entry, sys=self._content)

    def read_dir(self, n: int = 0) -> List[EntryInfo]:
        self._check_open()
        raise EntryNotADirectoryError(self.path)

    def close(self) -> None:
        if not self._closed:
            self._cursor.close()
        super().close()


class DirectoryHandle(NodeHandle):
    """Handle over a tree entry, listing its children page by page."""

    def __init__(self, path: str, entry: TreeEntry, load_listing: Callable[[], Tree]):
        """
        Args:
            path: Path the handle was opened with
            entry: Resolved tree entry
            load_listing: Returns the tree listing; called once, on the
                first read_dir()
        """
        super().__init__(path, entry)
        self._load_listing = load_listing
        self._listing: Optional[List[TreeEntry]] = None
        self._offset = 0

    def _fail_stream(self):
        self._check_open()
        raise EntryIsADirectoryError(self.path)

    def read(self, size: int = -1) -> bytes:
        self._fail_stream()

    def read_at(self, offset: int, size: int = -1) -> bytes:
        self._fail_stream()

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._fail_stream()

    def tell(self) -> int:
        self._fail_stream()

    def readable(self) -> bool:
        return False

    def seekable(self) -> bool:
        return False

    @property
    def eof(self) -> bool:
        """True once every entry of the listing has been returned."""
        return self._listing is not None and self._offset >= len(self._listing)

    def read_dir(self, n: int = 0) -> List[EntryInfo]:
        """List child entries in listing order.

        Args:
            n: If <= 0, return every remaining entry (an empty list once
               exhausted). If > 0, return at most n entries.

        Returns:
            Entry metadata, same shape as stat()

        Raises:
            EndOfDirectory: n > 0 and no entries remain
        """
        self._check_open()
        if self._listing is None:
            self._listing = list(self._load_listing().entries)

        remaining = self._listing[self._offset:]
        if n > 0:
            if not remaining:
                raise EndOfDirectory(f"{self.path}: no more entries")
            remaining = remaining[:n]

        self._offset += len(remaining)
        return [EntryInfo.from_entry(entry) for entry in remaining]

    def __iter__(self) -> Iterator[EntryInfo]:
        return iter(self.read_dir())
