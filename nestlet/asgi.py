"""
ASGI adapter - bridges the ASGI protocol to the dispatcher.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, List, Optional

from .faults import INTERNAL_ERROR_BODY
from .request import Request
from .response import Response


Hook = Callable[[], Awaitable[None]]


class ASGIAdapter:
    """
    ASGI application adapter.

    Each HTTP request gets a fresh Request/Response pair; the response is
    flushed after the dispatcher returns.
    """

    __slots__ = ("dispatcher", "logger", "max_body_size", "on_startup", "on_shutdown")

    def __init__(
        self,
        dispatcher: Any,
        *,
        max_body_size: int = 10_485_760,
        on_startup: Optional[List[Hook]] = None,
        on_shutdown: Optional[List[Hook]] = None,
    ):
        self.dispatcher = dispatcher
        self.max_body_size = max_body_size
        self.on_startup = list(on_startup or [])
        self.on_shutdown = list(on_shutdown or [])
        self.logger = logging.getLogger("nestlet.asgi")

    async def __call__(self, scope: dict, receive: Callable, send: Callable):
        scope_type = scope["type"]
        if scope_type == "http":
            await self.handle_http(scope, receive, send)
        elif scope_type == "lifespan":
            await self.handle_lifespan(scope, receive, send)
        elif scope_type == "websocket":
            self.logger.warning("WebSocket connections are not supported; closing")
            await send({"type": "websocket.close", "code": 1000})

    async def handle_http(self, scope: dict, receive: Callable, send: Callable):
        request = Request(scope, receive, max_body_size=self.max_body_size)
        response = Response()

        try:
            await self.dispatcher.dispatch(request.method, request.path, request, response)
        except Exception:
            self.logger.exception(f"Unhandled error dispatching {request.method} {request.path}")
            response = Response()
            response.json(dict(INTERNAL_ERROR_BODY), status=500)

        if not response.ended:
            response.end()
        await response.send_asgi(send)

    async def handle_lifespan(self, scope: dict, receive: Callable, send: Callable):
        """Handle ASGI lifespan events."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    for hook in self.on_startup:
                        await hook()
                except Exception as e:
                    self.logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(e)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                try:
                    for hook in self.on_shutdown:
                        await hook()
                except Exception as e:
                    self.logger.exception("Shutdown hook failed")
                    await send({"type": "lifespan.shutdown.failed", "message": str(e)})
                    return
                await send({"type": "lifespan.shutdown.complete"})
                return
