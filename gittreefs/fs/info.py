"""Stat metadata for tree entries."""

import stat
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from gittreefs.core.constants import DEFAULT_MODE_BITS, MODE_BITS, GitMode
from gittreefs.remote.models import TreeEntry

# Commit times are not tracked; every entry reports the epoch
ZERO_MTIME = 0.0


def mode_bits(git_mode: str) -> int:
    """Map a git mode string to stat mode bits.

    Unrecognized mode strings report an ordinary regular file.
    """
    return MODE_BITS.get(git_mode, DEFAULT_MODE_BITS)


@dataclass(frozen=True)
class EntryInfo:
    """File metadata derived from a tree entry, in the spirit of os.stat_result."""

    name: str
    size: int
    mode: int
    mtime: float = ZERO_MTIME
    sys: Optional[Any] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_entry(cls, entry: TreeEntry, sys: Optional[Any] = None) -> "EntryInfo":
        is_dir = entry.mode == GitMode.DIRECTORY
        return cls(
            name=entry.path,
            size=0 if is_dir else entry.size,
            mode=mode_bits(entry.mode),
            sys=sys,
        )

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.mode)

    @property
    def is_file(self) -> bool:
        return stat.S_ISREG(self.mode)

    @property
    def file_type(self) -> int:
        """Type bits of the mode (stat.S_IFDIR or stat.S_IFREG)."""
        return stat.S_IFMT(self.mode)

    @property
    def permissions(self) -> int:
        return stat.S_IMODE(self.mode)

    def to_stat_dict(self) -> Dict[str, Any]:
        """Attributes keyed like os.stat_result fields."""
        return {
            "st_mode": self.mode,
            "st_nlink": 2 if self.is_dir else 1,
            "st_size": self.size,
            "st_atime": self.mtime,
            "st_mtime": self.mtime,
            "st_ctime": self.mtime,
        }
