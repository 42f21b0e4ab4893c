"""
Centralized configuration with environment variable overrides.

Business policy defaults, ledger timeouts and logging are configurable
here. Core scheduling functions never read this module; entry points
build a BusinessCalendar from it and pass that explicitly.
"""

import logging
import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from smartbooking.logging_context import install_request_id_filter
from smartbooking.schemas.settings_schema import BusinessSettings, DayHours

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s [%(request_id)s]: %(message)s"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    raw = os.getenv(env_var, default).strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


def _weekday_hours(open_env: str, close_env: str) -> dict[str, DayHours]:
    """Monday to Friday share one open/close pair; weekends are closed."""
    open_at = os.getenv(open_env, "09:00")
    close_at = os.getenv(close_env, "18:00")
    return {key: DayHours(open=open_at, close=close_at) for key in ("1", "2", "3", "4", "5")}


@dataclass(frozen=True)
class BusinessDefaults:
    """Policy used when no settings provider supplies a record."""

    name: str = os.getenv("BUSINESS_NAME", "SmartBooking")
    phone: str = os.getenv("BUSINESS_PHONE", "")
    whatsapp_phone: str = os.getenv("WHATSAPP_PHONE", "")
    address: str = os.getenv("BUSINESS_ADDRESS", "")
    timezone: str = os.getenv("BUSINESS_TIMEZONE", "Europe/Bucharest")
    slot_interval_min: int = _safe_int("SLOT_INTERVAL_MIN", "30")
    buffer_min: int = _safe_int("BUFFER_MIN", "0")
    max_days_ahead: int = _safe_int("MAX_DAYS_AHEAD", "30")
    min_notice_hours: float = _safe_float("MIN_NOTICE_HOURS", "2")
    allow_pending: bool = _safe_bool("ALLOW_PENDING", "true")
    require_phone: bool = _safe_bool("REQUIRE_PHONE", "true")
    working_hours: dict[str, DayHours] = field(
        default_factory=lambda: _weekday_hours("WEEKDAY_OPEN", "WEEKDAY_CLOSE")
    )


@dataclass(frozen=True)
class LedgerConfig:
    """Booking store behaviour."""

    lock_timeout_sec: float = _safe_float("LEDGER_LOCK_TIMEOUT_SEC", "5.0")
    default_duration_min: int = _safe_int("DEFAULT_DURATION_MIN", "30")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessDefaults = field(default_factory=BusinessDefaults)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "smartbooking")

    def default_settings(self) -> BusinessSettings:
        """Build the singleton settings record from the configured defaults."""
        b = self.business
        return BusinessSettings(
            business_name=b.name,
            business_phone=b.phone or None,
            whatsapp_phone=b.whatsapp_phone or None,
            address=b.address or None,
            timezone=b.timezone,
            slot_interval_min=b.slot_interval_min,
            buffer_min=b.buffer_min,
            max_days_ahead=b.max_days_ahead,
            min_notice_hours=b.min_notice_hours,
            allow_pending=b.allow_pending,
            require_phone=b.require_phone,
            working_hours=dict(b.working_hours),
        )


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    b = config.business
    if b.slot_interval_min < 1:
        raise ValueError(f"SLOT_INTERVAL_MIN must be >= 1, got {b.slot_interval_min}")
    if b.buffer_min < 0:
        raise ValueError(f"BUFFER_MIN must be >= 0, got {b.buffer_min}")
    if b.max_days_ahead < 0:
        raise ValueError(f"MAX_DAYS_AHEAD must be >= 0, got {b.max_days_ahead}")
    if b.min_notice_hours < 0:
        raise ValueError(f"MIN_NOTICE_HOURS must be >= 0, got {b.min_notice_hours}")
    try:
        ZoneInfo(b.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"BUSINESS_TIMEZONE is not a known zone: {b.timezone!r}") from None

    for key, hours in b.working_hours.items():
        if hours.open >= hours.close:
            raise ValueError(
                f"WEEKDAY_OPEN must be before WEEKDAY_CLOSE, got {hours.open}-{hours.close} "
                f"for day {key}"
            )

    if config.ledger.lock_timeout_sec <= 0:
        raise ValueError(
            f"LEDGER_LOCK_TIMEOUT_SEC must be > 0, got {config.ledger.lock_timeout_sec}"
        )
    if config.ledger.default_duration_min < 1:
        raise ValueError(
            f"DEFAULT_DURATION_MIN must be >= 1, got {config.ledger.default_duration_min}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        install_request_id_filter(handler)
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance for entry points
settings = load_config()
