"""
Nestlet Faults - Fault Engine.

The FaultEngine is the per-route error handler:
1. Tries the route's filters in order (controller-level first)
2. Falls back to the default mapping when no filter matches
3. Never leaks internal detail in 500 responses
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any, Optional, Sequence

from .core import Fault, Severity
from .filters import FaultFilter, catch_types
from .http import HTTPFault

if TYPE_CHECKING:
    from ..controller.context import ArgumentsHost


INTERNAL_ERROR_BODY = {"statusCode": 500, "message": "Internal Server Error"}

_SEVERITY_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


class FaultEngine:
    """
    Runtime fault processor for one route.

    Usage:
        ```python
        engine = FaultEngine([HttpFaultFilter()])
        try:
            ...
        except Exception as e:
            await engine.handle(e, host)
        ```
    """

    __slots__ = ("filters", "logger")

    def __init__(
        self,
        filters: Optional[Sequence[Any]] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self.filters: list[Any] = list(filters or [])
        self.logger = logger or logging.getLogger("nestlet.faults")

    def register(self, filter_obj: Any) -> None:
        """Append a filter; it is tried after every existing one."""
        self.filters.append(filter_obj)
        self.logger.debug(f"Registered fault filter: {filter_obj.__class__.__name__}")

    def find_filter(self, error: BaseException) -> Optional[Any]:
        """First filter whose declared types match ``error``."""
        for filter_obj in self.filters:
            if isinstance(filter_obj, FaultFilter):
                if filter_obj.can_handle(error):
                    return filter_obj
                continue
            types = catch_types(filter_obj)
            if not types or isinstance(error, types):
                return filter_obj
        return None

    async def handle(self, error: BaseException, host: "ArgumentsHost") -> None:
        """
        Convert ``error`` into a response on ``host``.

        A matching filter owns the response. If the filter itself raises,
        the failure is logged and the default 500 mapping applies.
        """
        filter_obj = self.find_filter(error)
        if filter_obj is not None:
            self.logger.debug(
                f"{filter_obj.__class__.__name__} handling {error.__class__.__name__}"
            )
            try:
                result = filter_obj.catch(error, host)
                if inspect.isawaitable(result):
                    await result
                return
            except Exception:
                self.logger.exception(
                    f"Fault filter {filter_obj.__class__.__name__} raised while handling "
                    f"{error.__class__.__name__}"
                )
                self._write(host, 500, dict(INTERNAL_ERROR_BODY))
                return

        self.handle_default(error, host)

    def handle_default(self, error: BaseException, host: "ArgumentsHost") -> None:
        """Default mapping: HTTP faults keep their status, everything else is a 500."""
        if isinstance(error, HTTPFault):
            status = error.get_status()
            self._log_fault(error, status)
            self._write(host, status, error.to_body())
            return

        self.logger.error(
            f"Unhandled {error.__class__.__name__}: {error}",
            exc_info=(type(error), error, error.__traceback__),
        )
        self._write(host, 500, dict(INTERNAL_ERROR_BODY))

    def _log_fault(self, fault: Fault, status: int) -> None:
        level = logging.ERROR if status >= 500 else _SEVERITY_LEVELS.get(fault.severity, logging.INFO)
        self.logger.log(level, f"{status} {fault}")

    @staticmethod
    def _write(host: "ArgumentsHost", status: int, body: dict) -> None:
        response = host.switch_to_http().get_response()
        if response.ended:
            return
        response.json(body, status=status)
