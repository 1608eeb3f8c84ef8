"""
Git object models decoded from the GitHub Git Trees and Blobs API.

Payload shapes:
    tree: {"sha", "url", "tree": [{"path", "mode", "type", "size", "url"}, ...]}
    blob: {"sha", "url", "content", "encoding"}

All models are immutable; an object at a fixed revision never changes.
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from gittreefs.core.constants import EntryKind, GitMode
from gittreefs.core.exceptions import DecodeError, InvalidEntryTypeError


def _require(payload: Dict[str, Any], key: str, kind: type, shape: str) -> Any:
    if key not in payload:
        raise DecodeError(f"{shape} payload missing '{key}'")
    value = payload[key]
    if not isinstance(value, kind):
        raise DecodeError(
            f"{shape} payload field '{key}' must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _expect_object(payload: Any, shape: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise DecodeError(f"{shape} payload must be a JSON object, got {type(payload).__name__}")
    return payload


@dataclass(frozen=True)
class TreeEntry:
    """One child reference inside a tree listing.

    ``path`` is the leaf name relative to the parent tree, never a full path.
    """

    path: str
    mode: str
    type: str
    url: str
    size: int = 0
    sha: str = ""

    @classmethod
    def from_json(cls, payload: Any) -> "TreeEntry":
        payload = _expect_object(payload, "tree entry")
        size = payload.get("size") or 0
        if isinstance(size, bool) or not isinstance(size, int):
            raise DecodeError(f"tree entry size must be int, got {type(size).__name__}")
        return cls(
            path=_require(payload, "path", str, "tree entry"),
            mode=_require(payload, "mode", str, "tree entry"),
            type=_require(payload, "type", str, "tree entry"),
            url=payload.get("url") or "",
            size=size,
            sha=payload.get("sha") or "",
        )

    @property
    def name(self) -> str:
        return self.path

    @property
    def kind(self) -> EntryKind:
        """Entry kind as a two-valued variant.

        Raises:
            InvalidEntryTypeError: For anything but "tree" or "blob"
        """
        try:
            return EntryKind(self.type)
        except ValueError:
            raise InvalidEntryTypeError(self.type, self.path) from None

    @property
    def is_dir(self) -> bool:
        return self.mode == GitMode.DIRECTORY


@dataclass(frozen=True)
class Tree:
    """Directory listing of one tree object."""

    sha: str
    url: str
    entries: Tuple[TreeEntry, ...] = ()
    truncated: bool = False

    @classmethod
    def from_json(cls, payload: Any) -> "Tree":
        """Decode a Git Trees API payload.

        Args:
            payload: Decoded JSON object

        Returns:
            Tree

        Raises:
            DecodeError: If the payload does not have the tree shape
        """
        payload = _expect_object(payload, "tree")
        entries = _require(payload, "tree", list, "tree")
        return cls(
            sha=payload.get("sha") or "",
            url=_require(payload, "url", str, "tree"),
            entries=tuple(TreeEntry.from_json(entry) for entry in entries),
            truncated=bool(payload.get("truncated", False)),
        )

    def find(self, name: str) -> Optional[TreeEntry]:
        """Return the first entry called name, or None."""
        for entry in self.entries:
            if entry.path == name:
                return entry
        return None

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class Blob:
    """Raw content of one file object."""

    sha: str
    url: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_json(cls, payload: Any) -> "Blob":
        """Decode a Git Blobs API payload.

        String content is decoded according to ``encoding`` (base64 when
        absent); content that is already bytes is used as-is.

        Raises:
            DecodeError: If the payload does not have the blob shape
        """
        payload = _expect_object(payload, "blob")
        if "content" not in payload:
            raise DecodeError("blob payload missing 'content'")
        return cls(
            sha=payload.get("sha") or "",
            url=payload.get("url") or "",
            content=decode_content(payload["content"], payload.get("encoding") or "base64"),
        )


def decode_content(content: Any, encoding: str = "base64") -> bytes:
    """Decode blob content as transmitted by the API.

    Args:
        content: Wire content (str, or bytes already decoded)
        encoding: "base64" or "utf-8"

    Returns:
        Raw content bytes

    Raises:
        DecodeError: On unknown encoding or malformed base64
    """
    if isinstance(content, (bytes, bytearray)):
        return bytes(content)
    if not isinstance(content, str):
        raise DecodeError(f"blob content must be a string, got {type(content).__name__}")

    encoding = encoding.lower()
    if encoding == "base64":
        try:
            # GitHub wraps base64 content at 60 columns
            return base64.b64decode("".join(content.split()), validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"malformed base64 blob content: {e}") from e
    if encoding in ("utf-8", "utf8"):
        return content.encode("utf-8")
    raise DecodeError(f"unsupported blob encoding: {encoding}")
