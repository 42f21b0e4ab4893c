"""
Booking ledger: the authoritative set of committed bookings.

The conflict check and the insert run under one lock, so two submissions
racing for the same interval are serialized and only the first one
commits. Lock acquisition is bounded by a timeout; expiry surfaces as
DependencyError rather than blocking the request indefinitely.

In production this maps onto a datastore with a serializable transaction
or an exclusion constraint on the buffered interval.
"""

import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from smartbooking.errors import ConflictError, DependencyError, NotFoundError, ValidationError
from smartbooking.scheduling.availability import buffered
from smartbooking.scheduling.status_machine import BookingStatusMachine
from smartbooking.scheduling.time_grid import TimeGrid
from smartbooking.schemas.booking_schema import Booking, BookingStatus

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT_SEC = 5.0
RECENT_LIMIT = 50


class BookingLedger:
    """In-memory booking store with conflict-checked insertion."""

    def __init__(self, lock_timeout_sec: float = DEFAULT_LOCK_TIMEOUT_SEC) -> None:
        self._bookings: dict[str, Booking] = {}
        self._lock = threading.Lock()
        self._lock_timeout_sec = lock_timeout_sec

    @contextmanager
    def _locked(self) -> Iterator[None]:
        if not self._lock.acquire(timeout=self._lock_timeout_sec):
            raise DependencyError(
                f"Booking store busy: lock not acquired within {self._lock_timeout_sec}s"
            )
        try:
            yield
        finally:
            self._lock.release()

    # ------------------------------------------------------------------ #
    # Read path
    # ------------------------------------------------------------------ #

    def get(self, booking_id: str) -> Booking:
        with self._locked():
            booking = self._bookings.get(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found.")
        return booking.model_copy()

    def bookings_between(
        self, start: datetime, end: datetime, include_canceled: bool = False
    ) -> list[Booking]:
        """Bookings whose start falls in ``[start, end)``, ascending by start."""
        with self._locked():
            rows = [
                b.model_copy()
                for b in self._bookings.values()
                if start <= b.start_at < end
                and (include_canceled or b.occupies_calendar)
            ]
        return sorted(rows, key=lambda b: b.start_at)

    def bookings_on(self, grid: TimeGrid, date_key: str) -> list[Booking]:
        """Non-canceled bookings starting on the local day ``date_key``."""
        return self.bookings_between(
            grid.start_of_local_day(date_key), grid.start_of_next_local_day(date_key)
        )

    def recent(self, limit: int = RECENT_LIMIT) -> list[Booking]:
        """Latest bookings by start time, newest first, canceled included."""
        with self._locked():
            rows = [b.model_copy() for b in self._bookings.values()]
        rows.sort(key=lambda b: b.start_at, reverse=True)
        return rows[:limit]

    def find_conflict(
        self, start: datetime, end: datetime, buffer_min: float
    ) -> Optional[Booking]:
        with self._locked():
            found = self._find_conflict_unlocked(start, end, buffer_min)
        return found.model_copy() if found else None

    def has_conflict(self, start: datetime, end: datetime, buffer_min: float) -> bool:
        """True iff any non-canceled booking, on any day, overlaps the buffered candidate."""
        return self.find_conflict(start, end, buffer_min) is not None

    def _find_conflict_unlocked(
        self, start: datetime, end: datetime, buffer_min: float
    ) -> Optional[Booking]:
        window = buffered(start, end, buffer_min)
        for booking in self._bookings.values():
            if not booking.occupies_calendar:
                continue
            if window.overlaps(booking.start_at, booking.end_at):
                return booking
        return None

    # ------------------------------------------------------------------ #
    # Write path
    # ------------------------------------------------------------------ #

    def insert(
        self,
        service_id: str,
        customer_id: str,
        start_at: datetime,
        end_at: datetime,
        status: BookingStatus,
        buffer_min: float,
        notes: Optional[str] = None,
    ) -> Booking:
        """
        Commit a booking if it does not conflict.

        The conflict check is repeated here, inside the same critical
        section as the write, regardless of any earlier check by the caller.

        Raises:
            ValidationError: If ``status`` is not a valid initial status or
                the interval is empty.
            ConflictError: If a non-canceled booking overlaps once buffered.
            DependencyError: If the store lock cannot be acquired in time.
        """
        if status not in BookingStatusMachine.INITIAL:
            raise ValidationError(f"Bookings cannot be created as '{status.value}'.", ["status"])
        if end_at <= start_at:
            raise ValidationError("Booking must end after it starts.", ["end_at"])

        with self._locked():
            clash = self._find_conflict_unlocked(start_at, end_at, buffer_min)
            if clash is not None:
                logger.warning(
                    "Rejected booking %s-%s: overlaps %s (buffer %s min)",
                    start_at.isoformat(), end_at.isoformat(), clash.id, buffer_min,
                )
                raise ConflictError(conflicting_id=clash.id)

            booking = Booking(
                id=f"BK-{uuid.uuid4().hex[:8].upper()}",
                service_id=service_id,
                customer_id=customer_id,
                start_at=start_at,
                end_at=end_at,
                status=status,
                notes=notes,
                created_at=datetime.now(timezone.utc),
            )
            self._bookings[booking.id] = booking

        logger.info(
            "Booking committed: %s %s %s-%s",
            booking.id, booking.status.value, start_at.isoformat(), end_at.isoformat(),
        )
        return booking.model_copy()

    def set_status(
        self, booking_id: str, status: BookingStatus, buffer_min: float = 0
    ) -> Booking:
        """
        Apply a status transition and return the updated booking.

        Re-accepting a canceled booking runs the same buffered conflict
        check as ``insert``, inside the same critical section.

        Raises:
            NotFoundError: If the booking does not exist.
            InvalidTransitionError: If the transition is not allowed.
            ConflictError: If a re-accepted booking now overlaps another one.
        """
        with self._locked():
            current = self._bookings.get(booking_id)
            if current is None:
                raise NotFoundError(f"Booking {booking_id} not found.")
            BookingStatusMachine.check(current.status, status)
            if BookingStatusMachine.reactivates(current.status, status):
                clash = self._find_conflict_unlocked(current.start_at, current.end_at, buffer_min)
                if clash is not None:
                    logger.warning(
                        "Cannot re-accept %s: overlaps %s (buffer %s min)",
                        booking_id, clash.id, buffer_min,
                    )
                    raise ConflictError(conflicting_id=clash.id)
            updated = current.model_copy(update={"status": status})
            self._bookings[booking_id] = updated

        if current.status != status:
            logger.info(
                "Booking %s status: %s -> %s", booking_id, current.status.value, status.value
            )
        return updated.model_copy()

    def confirm(self, booking_id: str, buffer_min: float = 0) -> Booking:
        return self.set_status(booking_id, BookingStatus.CONFIRMED, buffer_min)

    def cancel(self, booking_id: str) -> Booking:
        return self.set_status(booking_id, BookingStatus.CANCELED)

    def delete(self, booking_id: str) -> Booking:
        """Remove a booking entirely and return what was removed."""
        with self._locked():
            removed = self._bookings.pop(booking_id, None)
        if removed is None:
            raise NotFoundError(f"Booking {booking_id} not found.")
        logger.info("Booking deleted: %s", booking_id)
        return removed

    def reset(self) -> None:
        """Clear all bookings. Used by test fixtures for isolation."""
        with self._locked():
            self._bookings.clear()
