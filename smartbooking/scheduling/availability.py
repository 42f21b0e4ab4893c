"""
Availability engine: computes the bookable slots for one service on one day.

Slot generation walks the day's opening hours in ``slot_interval_min``
steps. A candidate is offered only if it fits before closing, starts after
the minimum-notice floor, and does not touch any existing non-canceled
booking once that booking is widened by ``buffer_min`` on both sides.

The computation is read-only and deterministic for a given ``now``, so it
can be re-run freely.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator, Protocol

from smartbooking.scheduling.business_calendar import BusinessCalendar
from smartbooking.scheduling.time_grid import add_minutes
from smartbooking.schemas.booking_schema import BookingStatus, Slot

logger = logging.getLogger(__name__)


class TimedBooking(Protocol):
    start_at: datetime
    end_at: datetime
    status: BookingStatus


@dataclass(frozen=True)
class BusyInterval:
    """Half-open ``[start, end)`` footprint of a buffered booking."""

    start: datetime
    end: datetime

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return start < self.end and end > self.start


def buffered(start: datetime, end: datetime, buffer_min: float) -> BusyInterval:
    return BusyInterval(add_minutes(start, -buffer_min), add_minutes(end, buffer_min))


def busy_intervals(
    calendar: BusinessCalendar, date_key: str, bookings: Iterable[TimedBooking]
) -> list[BusyInterval]:
    """Buffered footprints of the day's non-canceled bookings.

    A booking belongs to the day when its start falls in
    ``[start_of_local_day, start_of_next_local_day)``.
    """
    day_start = calendar.grid.start_of_local_day(date_key)
    day_end = calendar.grid.start_of_next_local_day(date_key)
    return [
        buffered(b.start_at, b.end_at, calendar.buffer_min)
        for b in bookings
        if b.status != BookingStatus.CANCELED and day_start <= b.start_at < day_end
    ]


def grid_starts(
    calendar: BusinessCalendar, date_key: str, duration_min: int
) -> Iterator[datetime]:
    """Yield every grid-aligned start whose service end fits before closing.

    Yields nothing for closed days and for degenerate configuration
    (non-positive interval or duration, open at or after close). On a day
    when clocks fall back, a wall-clock time that occurs twice is yielded
    once, at its first occurrence.
    """
    hours = calendar.hours_for(date_key)
    if hours is None:
        return

    interval = calendar.slot_interval_min
    if interval <= 0 or duration_min <= 0:
        logger.warning(
            "Refusing to generate slots: interval=%s duration=%s", interval, duration_min
        )
        return

    open_at = calendar.grid.combine(date_key, hours.open)
    close_at = calendar.grid.combine(date_key, hours.close)
    if open_at >= close_at:
        logger.warning("Refusing to generate slots: open %s >= close %s", hours.open, hours.close)
        return

    seen: set[str] = set()
    cur = open_at
    while add_minutes(cur, duration_min) <= close_at:
        label = calendar.grid.format_hhmm(cur)
        if label not in seen:
            seen.add(label)
            yield cur
        cur = add_minutes(cur, interval)


def compute_slots(
    calendar: BusinessCalendar,
    date_key: str,
    duration_min: int,
    existing_bookings: Iterable[TimedBooking],
    now: datetime,
) -> list[Slot]:
    """
    Return the ordered list of bookable slots for ``date_key``.

    Args:
        calendar: Policy snapshot (hours, interval, buffer, notice).
        date_key: Local day as "YYYY-MM-DD".
        duration_min: Service duration, or a per-request override.
        existing_bookings: Bookings to avoid; canceled ones and those
            starting on other days are ignored.
        now: Current instant; slots must start at or after
            ``now + min_notice_hours``.

    Returns:
        Slots in strictly ascending start order.
    """
    busy = busy_intervals(calendar, date_key, existing_bookings)
    min_start = add_minutes(calendar.grid.localize(now), calendar.min_notice_minutes)

    slots: list[Slot] = []
    for start in grid_starts(calendar, date_key, duration_min):
        end = add_minutes(start, duration_min)
        if start < min_start:
            continue
        if any(interval.overlaps(start, end) for interval in busy):
            continue
        slots.append(Slot(time=calendar.grid.format_hhmm(start), start=start, end=end))

    logger.debug(
        "Computed %d slots for %s (duration=%s, busy=%d)",
        len(slots), date_key, duration_min, len(busy),
    )
    return slots
