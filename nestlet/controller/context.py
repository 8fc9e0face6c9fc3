"""
Execution context handed to guards, interceptors and fault filters.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Tuple


class HttpArgumentsHost:
    __slots__ = ("_request", "_response")

    def __init__(self, request: Any, response: Any):
        self._request = request
        self._response = response

    def get_request(self) -> Any:
        return self._request

    def get_response(self) -> Any:
        return self._response

    def get_next(self) -> None:
        return None


class ArgumentsHost:
    """Access to the arguments of the request being handled."""

    def __init__(self, request: Any, response: Any):
        self.request = request
        self.response = response

    def get_args(self) -> Tuple[Any, Any, None]:
        return (self.request, self.response, None)

    def get_arg_by_index(self, index: int) -> Any:
        return self.get_args()[index]

    def switch_to_http(self) -> HttpArgumentsHost:
        return HttpArgumentsHost(self.request, self.response)

    def get_request(self) -> Any:
        return self.request

    def get_response(self) -> Any:
        return self.response


class ExecutionContext(ArgumentsHost):
    """
    One per in-flight request; discarded when the request completes.

    Adds the controller class and handler to the arguments host.
    """

    def __init__(
        self,
        request: Any,
        response: Any,
        controller: Optional[type] = None,
        handler: Optional[Callable[..., Any]] = None,
    ):
        super().__init__(request, response)
        self.controller = controller
        self.handler = handler

    def get_class(self) -> Optional[type]:
        return self.controller

    def get_handler(self) -> Optional[Callable[..., Any]]:
        return self.handler

    def get_handler_name(self) -> str:
        cls = self.controller.__name__ if self.controller else "<none>"
        name = getattr(self.handler, "__name__", "<none>")
        return f"{cls}.{name}"
