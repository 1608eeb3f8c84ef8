"""
GitTreeFS Foundation: Exception hierarchy.

Every error raised by GitTreeFS derives from GitTreeFSError and carries an
ErrorCode. Path-related errors also derive from the matching builtin
(FileNotFoundError, NotADirectoryError, ...) so callers can handle them the
same way they handle local filesystem errors.
"""
from typing import Optional

from gittreefs.core.constants import ErrorCode


class GitTreeFSError(Exception):
    """Base exception for GitTreeFS errors."""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, error_code: Optional[ErrorCode] = None):
        """Initialize GitTreeFSError.

        Args:
            message: Error message
            error_code: Associated error code (class default if None)
        """
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code


class TransportError(GitTreeFSError):
    """Remote request failed or returned a non-2xx status."""

    error_code = ErrorCode.DEPENDENCY_ERROR

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause


class DecodeError(GitTreeFSError, ValueError):
    """Remote payload could not be decoded into the expected shape."""

    error_code = ErrorCode.INVALID_INPUT


class PathError(GitTreeFSError):
    """Error tied to a filesystem path."""

    reason = "invalid path"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path}: {self.reason}")


class EntryNotFoundError(PathError, FileNotFoundError):
    """Path has no matching entry in its parent tree."""

    reason = "does not exist"
    error_code = ErrorCode.NOT_FOUND


class EntryNotADirectoryError(PathError, NotADirectoryError):
    """Directory operation used on something that is not a tree."""

    reason = "not a directory"
    error_code = ErrorCode.INVALID_INPUT


class EntryIsADirectoryError(PathError, IsADirectoryError):
    """Stream operation attempted on a directory handle."""

    reason = "is a directory"
    error_code = ErrorCode.INVALID_INPUT


class InvalidPathError(PathError, ValueError):
    """Path does not follow the forward-slash relative path convention."""

    reason = "invalid path"
    error_code = ErrorCode.INVALID_INPUT


class InvalidEntryTypeError(GitTreeFSError):
    """Entry kind is neither tree nor blob."""

    error_code = ErrorCode.INTERNAL_ERROR

    def __init__(self, entry_type: str, path: Optional[str] = None):
        self.entry_type = entry_type
        self.path = path
        prefix = f"{path}: " if path else ""
        super().__init__(f"{prefix}{entry_type}: invalid file type")


class EndOfDirectory(GitTreeFSError, EOFError):
    """No entries remain in a directory listing."""

    error_code = ErrorCode.SUCCESS


class ValidationError(GitTreeFSError):
    """Invalid user input."""

    error_code = ErrorCode.INVALID_INPUT
