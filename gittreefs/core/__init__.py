"""GitTreeFS Core - Shared constants, exceptions and validators.

Import specific names from submodules:
    from gittreefs.core.constants import EntryKind, GitMode
    from gittreefs.core.exceptions import EntryNotFoundError
    from gittreefs.core.validators import validate_path
"""

from gittreefs.core import constants, exceptions, validators

__all__ = [
    "constants",
    "exceptions",
    "validators",
]
