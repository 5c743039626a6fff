"""Request-scoped trace ids using contextvars.

RequestContextMiddleware sets them per HTTP request; RequestContextFilter
copies them onto log records so every line can be tied to a request.
Outside a request (scripts, the notification worker) both read as "-".
"""

import logging
from contextvars import ContextVar

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def set_trace_ids(request_id: str | None, correlation_id: str | None) -> None:
    _request_id.set(request_id)
    _correlation_id.set(correlation_id)


def get_request_id() -> str | None:
    return _request_id.get()


def get_correlation_id() -> str | None:
    return _correlation_id.get()


class RequestContextFilter(logging.Filter):
    """Adds request_id and correlation_id attributes to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get() or "-"
        record.correlation_id = _correlation_id.get() or "-"
        return True
