"""Per-request log context: request ID, caller and timing."""

import time
import uuid

import structlog
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from speednet.core.logging import bind_log_context, get_logger, set_request_id


class RequestIDMiddleware:
    """
    Start a fresh log context for every HTTP request.

    The X-Request-ID header is reused when present, otherwise a UUID is
    generated; either way it is echoed back on the response. The actor from
    X-Actor-Id and the route are bound so every line logged while serving
    the request carries them.
    """

    def __init__(self, app: ASGIApp):
        self.app = app
        self.logger = get_logger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        structlog.contextvars.clear_contextvars()
        headers = dict(scope.get("headers", []))
        request_id = headers.get(b"x-request-id", b"").decode("latin1").strip() or str(uuid.uuid4())
        set_request_id(request_id)
        bind_log_context(
            method=scope["method"],
            path=scope["path"],
            actor_id=headers.get(b"x-actor-id", b"").decode("latin1").strip() or None,
        )

        started = time.perf_counter()
        self.logger.info("request.start")

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                response_headers = list(message.get("headers", []))
                response_headers.append((b"x-request-id", request_id.encode("latin1")))
                message["headers"] = response_headers

                self.logger.info(
                    "request.complete",
                    status_code=message.get("status"),
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )

            await send(message)

        await self.app(scope, receive, send_with_request_id)
