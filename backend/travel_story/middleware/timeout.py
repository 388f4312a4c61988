"""Middleware bounding how long a request may run."""
from __future__ import annotations

import logging

import anyio
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from travel_story.core.errors import error_response

logger = logging.getLogger(__name__)


class RequestTimeoutMiddleware:
    """Answer 504 when a request has not started responding within ``timeout`` seconds."""

    def __init__(self, app: ASGIApp, timeout: float = 30.0) -> None:
        self.app = app
        self.timeout = timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or self.timeout <= 0:
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        with anyio.move_on_after(self.timeout) as cancel_scope:
            await self.app(scope, receive, send_wrapper)

        if cancel_scope.cancelled_caught:
            logger.warning("Request %s %s timed out after %ss", scope.get("method"), scope.get("path"), self.timeout)
            if not response_started:
                response = error_response(504, "Request timed out")
                await response(scope, receive, send)
