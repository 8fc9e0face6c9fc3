"""
Dispatcher - entry point for every request.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .executor import RouteExecutor
from .router import Router


class Dispatcher:
    """
    Matches a request to a route and runs that route's executor.

    Unmatched requests get a 404 without entering any pipeline stage.
    """

    __slots__ = ("router", "logger")

    def __init__(self, router: Router, *, logger: Optional[logging.Logger] = None):
        self.router = router
        self.logger = logger or logging.getLogger("nestlet.dispatcher")
        for route in router.routes:
            if route.executor is None:
                route.executor = RouteExecutor(route)

    async def dispatch(self, method: str, path: str, request: Any, response: Any) -> None:
        method = method.upper()
        match = self.router.match(method, path)
        if match is None:
            self.logger.debug(f"No route for {method} {path}")
            response.json({"statusCode": 404, "message": f"Cannot {method} {path}"}, status=404)
            return

        route, params = match
        request.params = params
        await route.executor.execute(request, response)
