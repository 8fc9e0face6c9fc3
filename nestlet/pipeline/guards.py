"""
Guards - decide whether a request may reach its handler.
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Awaitable, Sequence, Union

from ..faults import Forbidden

if TYPE_CHECKING:
    from ..controller.context import ExecutionContext


logger = logging.getLogger("nestlet.guards")


class Guard(ABC):
    """
    Base class for guards.

    ``can_activate`` returns a bool, or an awaitable resolving to one.
    """

    @abstractmethod
    def can_activate(self, context: "ExecutionContext") -> Union[bool, Awaitable[bool]]:
        ...


class GuardsConsumer:
    """Runs guards in order; the first denial raises Forbidden."""

    async def try_activate(self, guards: Sequence[Guard], context: "ExecutionContext") -> bool:
        for guard in guards:
            result = guard.can_activate(context)
            if inspect.isawaitable(result):
                result = await result
            if not result:
                logger.debug(f"{guard.__class__.__name__} denied {context.get_handler_name()}")
                raise Forbidden("Forbidden resource")
        return True
