"""
GitTreeFS Foundation: Constants and Type Definitions

This module provides system-wide constants, error codes, git mode strings
and the entry kind variant shared by the remote and filesystem layers.
"""
import stat
from enum import Enum, IntEnum

# Version information
GITTREEFS_VERSION = "1.0.0"

# Path of the repository root inside the filesystem
ROOT_PATH = "."

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_ACCEPT_HEADER = "application/vnd.github+json"
DEFAULT_TIMEOUT_SECONDS = 30.0

# Level names accepted for gittreefs.logging.level
LOG_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ErrorCode(IntEnum):
    """Standardized error codes for GitTreeFS operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad path, malformed payload, wrong entry kind
    NOT_FOUND = 2  # Path has no matching entry
    DEPENDENCY_ERROR = 5  # Remote API unreachable or returned an error
    INTERNAL_ERROR = 6  # Unknown entry kind or bug in GitTreeFS


class GitMode:
    """File mode strings used in git tree listings."""

    DIRECTORY = "040000"
    REGULAR = "100644"
    EXECUTABLE = "100755"


# Mode bits reported by stat() for each recognized git mode string
MODE_BITS = {
    GitMode.DIRECTORY: stat.S_IFDIR | 0o755,
    GitMode.REGULAR: stat.S_IFREG | 0o644,
    GitMode.EXECUTABLE: stat.S_IFREG | 0o755,
}
DEFAULT_MODE_BITS = stat.S_IFREG | 0o644


class EntryKind(Enum):
    """Kind of object a tree entry points at."""

    TREE = "tree"
    BLOB = "blob"


class CacheNamespace(Enum):
    """Namespaces held by the per-filesystem cache."""

    TREES = "trees"  # canonical path -> Tree
    BLOBS = "blobs"  # file path -> content bytes
