"""
Error types raised by the repository mutators.

Every failure carries an ``error_type`` so callers can tell a missing
repository from a declined prompt without parsing messages.
"""

from enum import Enum
from typing import Any, Dict


class ErrorKind(str, Enum):
    """Repository operation failure kinds."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    IO_FAILURE = "io_failure"
    NETWORK_FAILURE = "network_failure"
    UNSUPPORTED = "unsupported"
    INVALID_ARGUMENT = "invalid_argument"


class RepositoryError(Exception):
    """Base class for repository operation failures."""

    error_type = ErrorKind.IO_FAILURE

    def to_result(self) -> Dict[str, Any]:
        """Convert the failure to the result dictionary returned to callers."""
        return {
            "success": False,
            "error": str(self),
            "error_type": self.error_type.value,
        }


class RepositoryNotFoundError(RepositoryError):
    """Target file, directory or repository id does not exist."""

    error_type = ErrorKind.NOT_FOUND


class RepositoryConflictError(RepositoryError):
    """Existing file differs and the operator declined to overwrite it."""

    error_type = ErrorKind.CONFLICT


class RepositoryIOError(RepositoryError):
    """Reading, writing or listing failed."""

    error_type = ErrorKind.IO_FAILURE


class RepositoryNetworkError(RepositoryError):
    """A download failed or returned a non-success status."""

    error_type = ErrorKind.NETWORK_FAILURE


class RepositoryUnsupportedError(RepositoryError):
    """The package manager family has no implementation for the operation."""

    error_type = ErrorKind.UNSUPPORTED


class RepositoryArgumentError(RepositoryError):
    """A required name or URL was not supplied."""

    error_type = ErrorKind.INVALID_ARGUMENT
