"""
Nestlet Faults - Fault filters.

A fault filter converts an exception raised inside a route pipeline into
a response. Filters declare the exception types they catch with
``@catch(...)``; a filter without a declaration catches everything.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Tuple, Type, TypeVar, Union

if TYPE_CHECKING:
    from ..controller.context import ArgumentsHost


F = TypeVar("F", bound=type)


def catch(*exception_types: Type[BaseException]) -> Callable[[F], F]:
    """
    Declare which exception types a filter handles.

    Example:
        ```python
        @catch(HTTPFault)
        class HttpFaultFilter(FaultFilter):
            def catch(self, error, host):
                host.switch_to_http().get_response().json(error.to_body(), error.status)
        ```
    """
    def decorator(cls: F) -> F:
        cls.__catch_types__ = tuple(exception_types)
        return cls
    return decorator


class FaultFilter(ABC):
    """
    Abstract base class for fault filters.

    Subclasses implement ``catch(error, host)`` which may be sync or
    async and is solely responsible for writing the response.
    """

    __catch_types__: Tuple[Type[BaseException], ...] = ()

    @abstractmethod
    def catch(self, error: BaseException, host: "ArgumentsHost") -> Union[None, Awaitable[None]]:
        ...

    def can_handle(self, error: BaseException) -> bool:
        """Check the error against the declared catch types."""
        types = catch_types(self)
        if not types:
            return True
        return isinstance(error, types)


def catch_types(filter_obj: Any) -> Tuple[Type[BaseException], ...]:
    """Return the exception types declared on a filter (instance or class)."""
    cls = filter_obj if isinstance(filter_obj, type) else type(filter_obj)
    return tuple(getattr(cls, "__catch_types__", ()))
