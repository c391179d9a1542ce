"""Domain error taxonomy.

Each error carries a stable machine-readable ``code`` and the HTTP status it
maps to at the API boundary (see ``smartcharge.middleware.error_handler``).
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for errors that propagate to the HTTP boundary as-is."""

    status_code: int = 500
    code: str = "internal"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(DomainError):
    """Missing or malformed request fields."""

    status_code = 400
    code = "invalid_input"
    default_message = "Invalid input"


class NotFoundError(DomainError):
    """Unknown reservation, user, station, or campaign id."""

    status_code = 404
    code = "not_found"
    default_message = "Not found"


class AlreadyCompletedError(DomainError):
    """Settlement replay on a COMPLETED reservation. Not retriable."""

    status_code = 400
    code = "already_completed"
    default_message = "Reservation is already completed"


class ConflictError(DomainError):
    """Unique-constraint violation or conflicting concurrent write."""

    status_code = 409
    code = "conflict"
    default_message = "Conflict"


class SettlementConflictError(ConflictError):
    """The store rejected a settlement because another one holds the row."""

    code = "settlement_conflict"
    default_message = "Reservation is being completed by another request"
