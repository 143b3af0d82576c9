"""Sentry context middleware to capture request context in error reports."""

import sentry_sdk
from starlette.types import ASGIApp, Receive, Scope, Send

from speednet.core.logging import get_request_id


class SentryContextMiddleware:
    """
    Tag Sentry events with the request and caller context.

    Captures:
    - request_id: set by RequestIDMiddleware, which runs first
    - actor_id: X-Actor-Id header from the upstream auth middleware
    - workspace_scope: raw X-Workspace-Ids header
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = {name.lower(): value for name, value in scope.get("headers", [])}
        actor_id = headers.get(b"x-actor-id", b"").decode("latin1").strip()
        workspace_scope = headers.get(b"x-workspace-ids", b"").decode("latin1").strip()

        request_id = get_request_id()
        sentry_sdk.set_tag("request_id", request_id)
        sentry_sdk.set_tag("workspace_scope", workspace_scope or "global")
        if actor_id:
            sentry_sdk.set_user({"id": actor_id})
            sentry_sdk.set_tag("actor_id", actor_id)

        sentry_sdk.set_context(
            "request",
            {
                "method": scope.get("method"),
                "path": scope.get("path"),
                "request_id": request_id,
            },
        )

        await self.app(scope, receive, send)
