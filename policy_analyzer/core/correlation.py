"""
Per-request correlation id.

The id lives in a context variable so that every log record emitted while a
request is being served can be stamped with it, including records from the
threadpool that runs the route handler.
"""

import logging
import uuid
from contextvars import ContextVar, Token
from typing import Optional

CORRELATION_HEADER = "X-Correlation-ID"

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def new_correlation_id() -> str:
    return str(uuid.uuid4())


def resolve_correlation_id(incoming: Optional[str]) -> str:
    """Reuse the inbound header value when it is non-empty, otherwise mint a new id."""
    return incoming if incoming else new_correlation_id()


def get_correlation_id() -> str:
    """Return the current id, generating and storing one on first access."""
    current = _correlation_id.get()
    if current is None:
        current = new_correlation_id()
        _correlation_id.set(current)
    return current


def set_correlation_id(value: str) -> Token:
    return _correlation_id.set(value)


def reset_correlation_id(token: Token) -> None:
    _correlation_id.reset(token)


class CorrelationIdFilter(logging.Filter):
    """Adds ``correlation_id`` to every record passing through a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _correlation_id.get() or "-"
        return True


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging and attach the correlation filter to its handlers."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, CorrelationIdFilter) for f in handler.filters):
            handler.addFilter(CorrelationIdFilter())
