"""Request and correlation id middleware (raw ASGI).

A safe client-supplied X-Request-ID is forwarded, anything else is replaced
by a new UUID. X-Correlation-ID falls back to the request id so a single
call still has one id across services. Both ids are stored on
scope["state"], published to the logging context and echoed on the response.
"""

import re
import uuid
from typing import Callable

from officeflow.shared.context import set_trace_ids

TRACE_ID_MAX_LENGTH = 64
_TRACE_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1," + str(TRACE_ID_MAX_LENGTH) + r"}$")


def sanitize_request_id(raw: str | None) -> str:
    """Return raw if it is a safe token; otherwise a new UUID (no log injection)."""
    value = (raw or "").strip()
    if not _TRACE_ID_PATTERN.match(value):
        return str(uuid.uuid4())
    return value


def _header(scope: dict, name: bytes) -> str | None:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("utf-8", errors="replace")
    return None


def RequestContextMiddleware(
    app: Callable,
    request_id_header: str = "X-Request-ID",
    correlation_id_header: str = "X-Correlation-ID",
) -> Callable:
    """Attach request and correlation ids to each HTTP request and response."""
    request_key = request_id_header.lower().encode()
    correlation_key = correlation_id_header.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_request_id(_header(scope, request_key))
        raw_correlation = _header(scope, correlation_key)
        correlation_id = (
            sanitize_request_id(raw_correlation) if raw_correlation else request_id
        )
        state = scope.setdefault("state", {})
        state["request_id"] = request_id
        state["correlation_id"] = correlation_id
        set_trace_ids(request_id, correlation_id)

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (request_id_header.encode(), request_id.encode()),
                    (correlation_id_header.encode(), correlation_id.encode()),
                ]
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
