"""
Error taxonomy for the booking core.

Every error carries a user-facing ``message``. Callers map these onto
their own surfaces (form errors, HTTP status codes) without parsing text.
"""

from typing import Optional


class BookingError(Exception):
    """Base class for all errors raised by the booking core."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Required input missing or malformed. Raised before any store access."""

    def __init__(self, message: str, fields: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class PolicyViolation(BookingError):
    """Input is well-formed but the business policy forbids it."""

    OUTSIDE_HORIZON = "outside_horizon"
    CLOSED_DAY = "closed_day"
    MIN_NOTICE = "min_notice"
    OUTSIDE_HOURS = "outside_hours"
    OFF_GRID = "off_grid"

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message)
        self.reason = reason


class ConflictError(BookingError):
    """The requested interval overlaps a non-canceled booking once buffered.

    ``slots`` is filled in by the workflow with a freshly computed slot list
    so the caller can re-offer times without another round trip.
    """

    def __init__(
        self,
        message: str = "That time was just taken. Please pick another slot.",
        conflicting_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.conflicting_id = conflicting_id
        self.slots: list = []


class DependencyError(BookingError):
    """A backing store failed or timed out."""


class NotFoundError(BookingError):
    """Referenced booking, service or customer does not exist."""


class InvalidTransitionError(BookingError):
    """Raised when a status change is not allowed from the current status."""
