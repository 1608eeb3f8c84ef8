"""
GitTreeFS Foundation: Input Validators.

This module provides validation functions for filesystem paths, repository
identities and configuration values.
"""
import re
from typing import Any, Dict, Union

from gittreefs.core.constants import LOG_LEVEL_NAMES, ROOT_PATH
from gittreefs.core.exceptions import InvalidPathError, ValidationError

# Owner and repository names as accepted by GitHub
_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def validate_path(path: str) -> str:
    """Validate a filesystem path.

    "." denotes the repository root. Any other path is a forward-slash
    separated relative path whose elements are neither empty, "." nor "..".

    Args:
        path: Path to validate

    Returns:
        The path unchanged

    Raises:
        InvalidPathError: If the path is malformed
    """
    if not isinstance(path, str):
        raise InvalidPathError(repr(path))

    if path == ROOT_PATH:
        return path

    if not path or "\0" in path:
        raise InvalidPathError(path)

    for element in path.split("/"):
        if element in ("", ".", ".."):
            raise InvalidPathError(path)

    return path


def validate_repository_name(name: str, field: str = "name") -> bool:
    """Validate an owner or repository name.

    Args:
        name: Name to validate
        field: Field label used in error messages

    Returns:
        True if valid

    Raises:
        ValidationError: If name is invalid
    """
    if not isinstance(name, str):
        raise ValidationError(f"Repository {field} must be string, got {type(name)}")

    if not name:
        raise ValidationError(f"Repository {field} cannot be empty")

    if not _NAME_PATTERN.match(name):
        raise ValidationError(f"Invalid repository {field}: {name}")

    return True


def validate_revision(revision: str) -> bool:
    """Validate a revision (commit SHA, branch, tag or tree SHA).

    Args:
        revision: Revision to validate

    Returns:
        True if valid

    Raises:
        ValidationError: If revision is invalid
    """
    if not isinstance(revision, str) or not revision:
        raise ValidationError("Revision cannot be empty")

    if any(c.isspace() for c in revision) or "\0" in revision:
        raise ValidationError(f"Invalid revision: {revision!r}")

    return True


def validate_timeout(timeout: Union[int, float]) -> bool:
    """Validate a request timeout.

    Args:
        timeout: Timeout in seconds

    Returns:
        True if valid

    Raises:
        ValidationError: If timeout is invalid
    """
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise ValidationError(f"Timeout must be numeric, got {type(timeout)}")

    if timeout <= 0:
        raise ValidationError(f"Timeout must be positive: {timeout}")

    return True


def validate_api_config(api: Dict[str, Any]) -> bool:
    """Validate the api section of the configuration.

    Args:
        api: API configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If configuration is invalid
    """
    if not isinstance(api, dict):
        raise ValidationError("API configuration must be a dictionary")

    if "url" in api:
        url = api["url"]
        if not isinstance(url, str) or not url.startswith(("http://", "https://")):
            raise ValidationError(f"Invalid API url: {url}")

    if "timeout_seconds" in api:
        validate_timeout(api["timeout_seconds"])

    return True


def validate_log_level(level: str) -> bool:
    """Validate a logging level name (case-insensitive).

    Args:
        level: Level name such as "DEBUG" or "warning"

    Returns:
        True if valid

    Raises:
        ValidationError: If level is not a known level name
    """
    if not isinstance(level, str) or level.upper() not in LOG_LEVEL_NAMES:
        raise ValidationError(
            f"Invalid log level: {level!r} (expected one of {', '.join(LOG_LEVEL_NAMES)})"
        )

    return True
