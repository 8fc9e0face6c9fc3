"""
Interceptors - onion layers around handler invocation.

With interceptors [I1, I2] and handler H the order of execution is
I1-before, I2-before, H, I2-after, I1-after. An interceptor that never
calls ``next.handle()`` short-circuits every layer inside it.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Sequence

if TYPE_CHECKING:
    from ..controller.context import ExecutionContext


Next = Callable[[], Awaitable[Any]]


class CallHandler:
    """Handle to the next layer of the onion."""

    __slots__ = ("_next",)

    def __init__(self, next_fn: Next):
        self._next = next_fn

    async def handle(self) -> Any:
        return await self._next()


class Interceptor(ABC):
    @abstractmethod
    def intercept(self, context: "ExecutionContext", next: CallHandler) -> Any:
        """Return the (possibly replaced) result; may be a coroutine."""
        ...


class InterceptorsConsumer:
    async def intercept(
        self,
        interceptors: Sequence[Interceptor],
        context: "ExecutionContext",
        handler: Next,
    ) -> Any:
        if not interceptors:
            return await handler()

        chain = handler
        for interceptor in reversed(interceptors):
            chain = self._wrap(interceptor, context, chain)
        return await chain()

    @staticmethod
    def _wrap(interceptor: Interceptor, context: "ExecutionContext", next_fn: Next) -> Next:
        async def layer() -> Any:
            result = interceptor.intercept(context, CallHandler(next_fn))
            if inspect.isawaitable(result):
                result = await result
            return result
        return layer
