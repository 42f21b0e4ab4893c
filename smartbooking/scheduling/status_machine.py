"""
Booking status state machine.

New bookings start as ``pending`` or ``confirmed`` depending on policy.
Staff may accept, revert to pending or cancel. A canceled booking no longer
occupies the calendar; it can only come back by being accepted again, and
the ledger re-runs the conflict guard when that happens.

Usage:
    BookingStatusMachine.check(BookingStatus.PENDING, BookingStatus.CONFIRMED)
"""

import logging
from dataclasses import dataclass

from smartbooking.errors import InvalidTransitionError
from smartbooking.schemas.booking_schema import BookingStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    """A single valid status transition."""
    from_status: BookingStatus
    to_status: BookingStatus


class BookingStatusMachine:
    """Explicit transition table for Booking.status."""

    TRANSITIONS: list[Transition] = [
        Transition(BookingStatus.PENDING, BookingStatus.CONFIRMED),
        Transition(BookingStatus.PENDING, BookingStatus.CANCELED),
        Transition(BookingStatus.CONFIRMED, BookingStatus.PENDING),
        Transition(BookingStatus.CONFIRMED, BookingStatus.CANCELED),
        Transition(BookingStatus.CANCELED, BookingStatus.CONFIRMED),
    ]

    INITIAL: frozenset[BookingStatus] = frozenset(
        {BookingStatus.PENDING, BookingStatus.CONFIRMED}
    )

    @classmethod
    def can_transition(cls, current: BookingStatus, target: BookingStatus) -> bool:
        if current == target:
            return True
        return any(
            t.from_status == current and t.to_status == target for t in cls.TRANSITIONS
        )

    @classmethod
    def check(cls, current: BookingStatus, target: BookingStatus) -> None:
        """
        Validate a status change.

        Raises:
            InvalidTransitionError: If ``target`` is not reachable from ``current``.
        """
        if cls.can_transition(current, target):
            logger.debug("Status transition: %s -> %s", current.value, target.value)
            return
        valid = [s.value for s in cls.valid_targets(current)]
        raise InvalidTransitionError(
            f"Cannot change booking status from '{current.value}' to '{target.value}'. "
            f"Allowed: {valid}"
        )

    @classmethod
    def valid_targets(cls, current: BookingStatus) -> list[BookingStatus]:
        return [t.to_status for t in cls.TRANSITIONS if t.from_status == current]

    @classmethod
    def reactivates(cls, current: BookingStatus, target: BookingStatus) -> bool:
        """True when the change puts a canceled booking back on the calendar."""
        return current == BookingStatus.CANCELED and target != BookingStatus.CANCELED
