"""
Logging utilities with request correlation.

A correlation id is kept in a ContextVar for the duration of a request and
injected into every log record by CorrelationIdFilter, so log lines from
the API, the domain service and the stores can be tied to one request.
"""

import logging
import sys
from contextvars import ContextVar, Token
from typing import Optional

CORRELATION_ID_HEADER = "X-Correlation-Id"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"

_NO_CORRELATION_ID = "-"

# Context variable for request-scoped correlation id
_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    """Return the correlation id of the current request, if any."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> Token:
    """
    Bind a correlation id to the current context.

    Args:
        correlation_id: Identifier received from the caller or generated

    Returns:
        Token to pass to reset_correlation_id() when the request ends
    """
    return _correlation_id.set(correlation_id)


def reset_correlation_id(token: Token) -> None:
    """Restore the correlation id that was active before set_correlation_id()."""
    _correlation_id.reset(token)


class CorrelationIdFilter(logging.Filter):
    """
    Adds a `correlation_id` attribute to every record passing through.

    Records emitted outside a request get "-".
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or _NO_CORRELATION_ID
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Install a stream handler on the root logger with correlation ids in the format.

    Safe to call more than once: an existing handler installed by this
    function is replaced rather than duplicated.

    Args:
        level: Log level name (e.g. "DEBUG", "INFO")
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for handler in list(root.handlers):
        if getattr(handler, "_lending_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(CorrelationIdFilter())
    handler._lending_handler = True
    root.addHandler(handler)
