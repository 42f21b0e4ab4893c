"""Correlation ID logging context for tracing booking submissions.

Provides a request_id-aware logger that attaches a correlation ID to every
log message, so one submission can be followed through customer
resolution, the conflict guard and the final insert.

Usage:
    from smartbooking.logging_context import get_request_logger, set_request_id

    set_request_id("REQ-1a2b3c4d")
    logger = get_request_logger(__name__)
    logger.info("Processing submission")
"""

import logging
import uuid
from contextvars import ContextVar

_request_id: ContextVar[str] = ContextVar("request_id", default="NO_REQUEST_ID")


def new_request_id() -> str:
    """Generate a fresh correlation ID and make it current."""
    request_id = f"REQ-{uuid.uuid4().hex[:8]}"
    _request_id.set(request_id)
    return request_id


def set_request_id(request_id: str) -> None:
    """Set the correlation ID for the current context."""
    _request_id.set(request_id)


def get_request_id() -> str:
    """Retrieve the current correlation ID."""
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Injects request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def install_request_id_filter(handler: logging.Handler) -> None:
    """Attach the RequestIdFilter to a handler so every record it emits has
    ``request_id``, including records from loggers without the filter."""
    if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
        handler.addFilter(RequestIdFilter())


def get_request_logger(name: str) -> logging.Logger:
    """Return a logger with the RequestIdFilter attached.

    The filter adds ``request_id`` to each record so formatters can
    include ``%(request_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
