"""Connection ID middleware — unique ID per request or WebSocket.

Learn: Every HTTP request and every WebSocket connection gets a UUID,
either from the incoming X-Request-ID header (for distributed tracing)
or auto-generated. The ID is bound to structlog's contextvars so it
appears in all log entries for that connection, and returned in the
response header for HTTP.

Starlette's BaseHTTPMiddleware never sees WebSocket scopes, so this is
written as a plain ASGI middleware.
"""

import uuid

import structlog
from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

HEADER = "X-Request-ID"


class ConnectionIdMiddleware:
    """Generate and propagate a unique connection ID."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        # Use existing request ID or generate a new one
        connection_id = Headers(scope=scope).get(HEADER) or str(uuid.uuid4())
        scope.setdefault("state", {})["connection_id"] = connection_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(connection_id=connection_id)

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[HEADER] = connection_id
            await send(message)

        await self.app(scope, receive, send_with_header)
