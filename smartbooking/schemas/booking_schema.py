"""Booking, slot and submission data models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from smartbooking.schemas.customer_schema import Customer


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"


def _require_aware(value: datetime) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("timestamp must be timezone-aware")
    return value


class Booking(BaseModel):
    """A committed booking. ``end_at`` is always ``start_at`` + duration."""

    id: str
    service_id: str
    customer_id: str
    start_at: datetime
    end_at: datetime
    status: BookingStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("start_at", "end_at")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        return _require_aware(value)

    @model_validator(mode="after")
    def _end_after_start(self) -> "Booking":
        if self.end_at <= self.start_at:
            raise ValueError("end_at must be after start_at")
        return self

    @property
    def occupies_calendar(self) -> bool:
        return self.status != BookingStatus.CANCELED


class Slot(BaseModel):
    """A bookable interval offered to the customer."""

    model_config = ConfigDict(frozen=True)

    time: str
    start: datetime
    end: datetime


class PublicBookingRequest(BaseModel):
    """Submission from the public booking page."""

    service_id: str = ""
    name: str = ""
    phone: str = ""
    date: str = ""
    time: str = ""
    duration_min: Optional[int] = Field(default=None, gt=0)
    notes: Optional[str] = None


class DashboardBookingRequest(BaseModel):
    """Booking entered by staff at an arbitrary start instant."""

    service_id: str = ""
    name: str = ""
    phone: str = ""
    start_at: Optional[datetime] = None
    duration_min: Optional[int] = Field(default=None, gt=0)
    notes: Optional[str] = None

    @field_validator("start_at")
    @classmethod
    def _aware(cls, value: Optional[datetime]) -> Optional[datetime]:
        return None if value is None else _require_aware(value)


class BookingResult(BaseModel):
    """Outcome of a successful submission, returned so callers need no refetch."""

    booking: Booking
    customer: Customer
    slots: list[Slot] = Field(default_factory=list)
