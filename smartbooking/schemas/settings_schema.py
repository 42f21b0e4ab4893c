"""Business settings record as returned by the settings provider."""

import logging
import math
import re
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")


def _coerce_number(value: Any, cast: type) -> Any:
    """Turn unparseable provider values into None so defaults apply later."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = cast(value)
    except (TypeError, ValueError, OverflowError):
        number = None
    if number is None or not math.isfinite(number):
        logger.warning("Ignoring invalid numeric setting: %r", value)
        return None
    return number


class DayHours(BaseModel):
    """Opening hours for a single weekday, as zero-padded "HH:MM" strings."""

    open: str
    close: str

    @field_validator("open", "close")
    @classmethod
    def _normalize_hhmm(cls, value: str) -> str:
        match = _HHMM.match(value.strip())
        if not match:
            raise ValueError(f"expected HH:MM, got {value!r}")
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 23 or minute > 59:
            raise ValueError(f"time out of range: {value!r}")
        return f"{hour:02d}:{minute:02d}"


class BusinessSettings(BaseModel):
    """
    The singleton policy record (id=1).

    Numeric policy fields are kept as the provider sent them, minus values
    that cannot be parsed at all. Range checks and defaults are applied by
    BusinessCalendar.
    """

    id: int = 1
    business_name: str = "SmartBooking"
    business_phone: Optional[str] = None
    whatsapp_phone: Optional[str] = None
    address: Optional[str] = None
    timezone: str = "Europe/Bucharest"

    slot_interval_min: Optional[int] = None
    buffer_min: Optional[int] = None
    max_days_ahead: Optional[int] = None
    min_notice_hours: Optional[float] = None

    allow_pending: bool = True
    require_phone: bool = True

    # "0"=Sunday .. "6"=Saturday; a missing key means closed that day
    working_hours: dict[str, DayHours] = Field(default_factory=dict)

    @field_validator("slot_interval_min", "buffer_min", "max_days_ahead", mode="before")
    @classmethod
    def _coerce_int(cls, value: Any) -> Any:
        coerced = _coerce_number(value, float)
        return None if coerced is None else int(coerced)

    @field_validator("min_notice_hours", mode="before")
    @classmethod
    def _coerce_float(cls, value: Any) -> Any:
        return _coerce_number(value, float)

    @field_validator("working_hours", mode="before")
    @classmethod
    def _coerce_hours(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return {}
        cleaned = {}
        for key, hours in value.items():
            if hours is None:
                continue
            if str(key) not in {"0", "1", "2", "3", "4", "5", "6"}:
                logger.warning("Ignoring working hours for unknown weekday key %r", key)
                continue
            cleaned[str(key)] = hours
        return cleaned
