"""
Booking workflow: the two operations the surrounding application calls.

1. ``list_slots``: open slots for (service, date).
2. ``submit_public`` / ``submit_dashboard``: validate, resolve the
   customer by phone, and commit through the ledger's conflict guard.

Each operation returns the created or updated entities together with a
fresh slot list, so callers can update their view without re-querying.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Optional, Union

import pydantic

from smartbooking.errors import ConflictError, PolicyViolation, ValidationError
from smartbooking.logging_context import get_request_logger, new_request_id
from smartbooking.scheduling.availability import compute_slots, grid_starts
from smartbooking.scheduling.business_calendar import BusinessCalendar
from smartbooking.scheduling.time_grid import add_minutes, parse_date_key, parse_hhmm
from smartbooking.schemas.booking_schema import (
    Booking,
    BookingResult,
    BookingStatus,
    DashboardBookingRequest,
    PublicBookingRequest,
    Slot,
)
from smartbooking.schemas.service_schema import Service
from smartbooking.store.customers import CustomerStore
from smartbooking.store.ledger import BookingLedger
from smartbooking.store.services import ServiceCatalog

logger = get_request_logger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_request(model: type, payload: Any):
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        fields = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
        raise ValidationError(f"Invalid booking request: {', '.join(fields)}.", fields) from exc


def _normalize_date(date_key: str) -> str:
    try:
        return parse_date_key(date_key).isoformat()
    except ValueError:
        raise ValidationError(f"Invalid date: {date_key!r}.", ["date"]) from None


def _reject(message: str, reason: str) -> PolicyViolation:
    logger.warning("Policy rejection (%s): %s", reason, message)
    return PolicyViolation(message, reason)


def _require(fields: list[tuple[str, Any]]) -> None:
    missing = [name for name, value in fields if value is None or not str(value).strip()]
    if missing:
        raise ValidationError(
            f"Cannot create booking - missing required fields: {', '.join(missing)}.",
            missing,
        )


class BookingWorkflow:
    """Orchestrates slot listing and booking submission over the stores."""

    def __init__(
        self,
        ledger: BookingLedger,
        customers: CustomerStore,
        catalog: ServiceCatalog,
        clock: Clock = _utcnow,
    ) -> None:
        self.ledger = ledger
        self.customers = customers
        self.catalog = catalog
        self._clock = clock

    # ------------------------------------------------------------------ #
    # Slot listing
    # ------------------------------------------------------------------ #

    def list_slots(
        self,
        calendar: BusinessCalendar,
        service_id: str,
        date_key: str,
        duration_min: Optional[int] = None,
    ) -> list[Slot]:
        """Open slots for a service on a day; empty outside the booking horizon."""
        service = self.catalog.require_active(service_id)
        _require([("date", date_key)])
        date_key = _normalize_date(date_key)

        now = self._clock()
        if not calendar.horizon(now).contains(date_key):
            return []
        return self._slots_for(calendar, date_key, self.catalog.duration_for(service, duration_min), now)

    def _slots_for(
        self, calendar: BusinessCalendar, date_key: str, duration: int, now: datetime
    ) -> list[Slot]:
        existing = self.ledger.bookings_on(calendar.grid, date_key)
        return compute_slots(calendar, date_key, duration, existing, now)

    # ------------------------------------------------------------------ #
    # Submissions
    # ------------------------------------------------------------------ #

    def submit_public(
        self, calendar: BusinessCalendar, payload: Union[PublicBookingRequest, dict]
    ) -> BookingResult:
        """
        Book a slot from the public page.

        Raises:
            ValidationError: Missing service, name, date or slot; phone
                missing while required.
            PolicyViolation: Date outside the horizon, closed day, time off
                the slot grid or outside hours, or inside the notice window.
            ConflictError: The slot was taken since it was listed. Carries
                the refreshed slot list in ``slots``.
            DependencyError: The booking store failed.
        """
        new_request_id()
        request: PublicBookingRequest = _parse_request(PublicBookingRequest, payload)

        required = [("service_id", request.service_id), ("name", request.name)]
        if calendar.require_phone:
            required.append(("phone", request.phone))
        required += [("date", request.date), ("time", request.time)]
        _require(required)

        service = self.catalog.require_active(request.service_id)
        date_key = _normalize_date(request.date)
        try:
            hhmm = parse_hhmm(request.time).strftime("%H:%M")
        except ValueError:
            raise ValidationError(f"Invalid time: {request.time!r}.", ["time"]) from None

        duration = self.catalog.duration_for(service, request.duration_min)
        now = self._clock()
        start = self._check_policy(calendar, date_key, hhmm, duration, now)

        logger.debug("Public submission passed policy checks")
        booking, customer = self._commit(
            calendar,
            service,
            name=request.name.strip(),
            phone=request.phone,
            start=start,
            duration=duration,
            status=BookingStatus.PENDING if calendar.allow_pending else BookingStatus.CONFIRMED,
            notes=request.notes,
            now=now,
        )
        return BookingResult(
            booking=booking,
            customer=customer,
            slots=self._slots_for(calendar, date_key, duration, now),
        )

    def submit_dashboard(
        self, calendar: BusinessCalendar, payload: Union[DashboardBookingRequest, dict]
    ) -> BookingResult:
        """
        Book an arbitrary start time on behalf of a customer.

        Name and phone are always required and the booking is created
        confirmed. Hours, grid, horizon and notice are not enforced; the
        buffered conflict guard is.
        """
        new_request_id()
        request: DashboardBookingRequest = _parse_request(DashboardBookingRequest, payload)
        _require([
            ("service_id", request.service_id),
            ("name", request.name),
            ("phone", request.phone),
            ("start_at", request.start_at),
        ])
        service = self.catalog.require_active(request.service_id)
        duration = self.catalog.duration_for(service, request.duration_min)
        start = calendar.grid.localize(request.start_at)
        now = self._clock()

        logger.debug("Dashboard submission for %s", start.isoformat())
        booking, customer = self._commit(
            calendar,
            service,
            name=request.name.strip(),
            phone=request.phone,
            start=start,
            duration=duration,
            status=BookingStatus.CONFIRMED,
            notes=request.notes,
            now=now,
        )
        date_key = calendar.grid.local_day_key(start)
        return BookingResult(
            booking=booking,
            customer=customer,
            slots=self._slots_for(calendar, date_key, duration, now),
        )

    def _check_policy(
        self,
        calendar: BusinessCalendar,
        date_key: str,
        hhmm: str,
        duration: int,
        now: datetime,
    ) -> datetime:
        """Return the slot start if the requested time is bookable under policy."""
        horizon = calendar.horizon(now)
        if not horizon.contains(date_key):
            raise _reject(
                f"Bookings are accepted from {horizon.min} to {horizon.max}.",
                PolicyViolation.OUTSIDE_HORIZON,
            )

        hours = calendar.hours_for(date_key)
        if hours is None:
            raise _reject(f"We are closed on {date_key}.", PolicyViolation.CLOSED_DAY)

        start = calendar.grid.combine(date_key, hhmm)
        end = add_minutes(start, duration)
        open_at = calendar.grid.combine(date_key, hours.open)
        close_at = calendar.grid.combine(date_key, hours.close)
        if start < open_at or end > close_at:
            raise _reject(
                f"{hhmm} is outside working hours ({hours.open}-{hours.close}).",
                PolicyViolation.OUTSIDE_HOURS,
            )
        if start not in set(grid_starts(calendar, date_key, duration)):
            raise _reject(
                f"{hhmm} is not one of the offered times.", PolicyViolation.OFF_GRID
            )

        if start < add_minutes(calendar.grid.localize(now), calendar.min_notice_minutes):
            raise _reject(
                f"Bookings need at least {calendar.min_notice_hours:g} hours notice.",
                PolicyViolation.MIN_NOTICE,
            )
        return start

    def _commit(
        self,
        calendar: BusinessCalendar,
        service: Service,
        name: str,
        phone: str,
        start: datetime,
        duration: int,
        status: BookingStatus,
        notes: Optional[str],
        now: datetime,
    ):
        end = add_minutes(start, duration)
        date_key = calendar.grid.local_day_key(start)

        # Early check so an obviously taken slot does not create a customer.
        clash = self.ledger.find_conflict(start, end, calendar.buffer_min)
        if clash is not None:
            raise self._conflict(calendar, date_key, duration, now, clash.id)

        customer, created = self.customers.upsert_by_phone(name, phone)
        logger.info(
            "Customer %s %s for booking at %s",
            customer.id, "created" if created else "reused", start.isoformat(),
        )

        try:
            booking = self.ledger.insert(
                service_id=service.id,
                customer_id=customer.id,
                start_at=start,
                end_at=end,
                status=status,
                buffer_min=calendar.buffer_min,
                notes=notes or None,
            )
        except ConflictError as exc:
            raise self._conflict(calendar, date_key, duration, now, exc.conflicting_id) from exc
        return booking, customer

    def _conflict(
        self,
        calendar: BusinessCalendar,
        date_key: str,
        duration: int,
        now: datetime,
        conflicting_id: Optional[str],
    ) -> ConflictError:
        logger.warning("Slot on %s taken (conflicts with %s)", date_key, conflicting_id)
        error = ConflictError(conflicting_id=conflicting_id)
        error.slots = self._slots_for(calendar, date_key, duration, now)
        return error

    # ------------------------------------------------------------------ #
    # Status changes
    # ------------------------------------------------------------------ #

    def confirm(self, booking_id: str, calendar: Optional[BusinessCalendar] = None) -> Booking:
        """Accept a booking. A canceled one is re-checked against the calendar buffer."""
        return self.set_status(booking_id, BookingStatus.CONFIRMED, calendar)

    def cancel(self, booking_id: str) -> Booking:
        return self.ledger.cancel(booking_id)

    def set_status(
        self,
        booking_id: str,
        status: Union[BookingStatus, str],
        calendar: Optional[BusinessCalendar] = None,
    ) -> Booking:
        try:
            target = BookingStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown booking status: {status!r}.", ["status"]) from None
        buffer_min = calendar.buffer_min if calendar is not None else 0
        return self.ledger.set_status(booking_id, target, buffer_min)

    def delete(self, booking_id: str) -> Booking:
        return self.ledger.delete(booking_id)
