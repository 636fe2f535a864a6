"""Error taxonomy for reconciliation requests.

Every error carries a stable machine-readable ``code``. Client-class errors
are raised before any storage access; :class:`StorageWriteError` is raised
only after the surrounding transaction has been rolled back.
"""

from __future__ import annotations

from typing import ClassVar


class ReconciliationError(Exception):
    """Base class for errors surfaced to callers of the reconciliation core."""

    code: ClassVar[str] = "SERVER_ERROR"
    client_error: ClassVar[bool] = False
    default_message: ClassVar[str] = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(ReconciliationError):
    """Malformed identifiers or an empty match list."""

    code = "INVALID_INPUT"
    client_error = True
    default_message = "Invalid input."


class UnauthorizedError(ReconciliationError):
    """No caller identity could be resolved."""

    code = "UNAUTHORIZED"
    client_error = True
    default_message = "Authentication required."


class StorageWriteError(ReconciliationError):
    """A storage operation failed mid-transaction; nothing was persisted."""

    code = "SERVER_ERROR"
    default_message = "An unexpected error occurred."
