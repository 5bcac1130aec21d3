"""
Typed failure conditions for core operations.

Every core operation either returns its success value or raises exactly one
subclass of StayLedgerError. The class carries the client-facing tag and the
HTTP status the API layer maps it to, so the error taxonomy lives in one place:

    ValidationError     400  malformed or missing input
    NotFound            404  listing, booking, room type or visit request absent
    OutOfInventory      409  reservation against zero (or unknown) availability
    DuplicateBookingRef 409  supplied booking reference already used
    InvalidTransition   409  visit request already in the other terminal state
    PersistenceFailure  500  storage error or timeout; transaction rolled back

None of these are retried by the core.
"""

from __future__ import annotations

from typing import Any


class StayLedgerError(Exception):
    """Base class for all core failures."""

    tag = "InternalError"
    status_code = 500

    def __init__(self, detail: str = "", **context: Any):
        super().__init__(detail or self.tag)
        self.detail = detail or self.tag
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.tag, "detail": self.detail}


class ValidationError(StayLedgerError):
    tag = "ValidationError"
    status_code = 400


class NotFound(StayLedgerError):
    tag = "NotFound"
    status_code = 404


class ListingNotFound(NotFound):
    tag = "ListingNotFound"


class BookingNotFound(NotFound):
    pass


class RoomTypeNotFound(NotFound):
    pass


class VisitRequestNotFound(NotFound):
    pass


class OutOfInventory(StayLedgerError):
    tag = "OutOfInventory"
    status_code = 409


class DuplicateBookingRef(StayLedgerError):
    tag = "DuplicateBookingRef"
    status_code = 409


class InvalidTransition(StayLedgerError):
    tag = "InvalidTransition"
    status_code = 409


class PersistenceFailure(StayLedgerError):
    tag = "PersistenceFailure"
    status_code = 500


class ConcurrentUpdate(PersistenceFailure):
    """Raised when a versioned write loses its compare-and-swap."""
