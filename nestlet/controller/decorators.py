"""
Controller Method Decorators

HTTP method decorators and parameter markers for controller methods.
Attach metadata without import-time side effects.
"""

from typing import Any, Callable, List, Optional, Sequence, TypeVar

from .metadata import ParamSource, ParamSpec


F = TypeVar("F", bound=Callable[..., Any])


# ============================================================================
# Parameter markers
# ============================================================================

class ParamMarker:
    """Declares the source of one handler argument."""

    __slots__ = ("source", "key")

    def __init__(self, source: ParamSource, key: Optional[str] = None):
        self.source = source
        self.key = key

    def to_spec(self, index: int) -> ParamSpec:
        return ParamSpec(index=index, source=self.source, key=self.key)

    def __repr__(self) -> str:
        key = f"({self.key!r})" if self.key else "()"
        return f"{self.source.name.title()}{key}"


def Req() -> ParamMarker:
    return ParamMarker(ParamSource.REQUEST)


def Res() -> ParamMarker:
    return ParamMarker(ParamSource.RESPONSE)


def Body(key: Optional[str] = None) -> ParamMarker:
    return ParamMarker(ParamSource.BODY, key)


def Query(key: Optional[str] = None) -> ParamMarker:
    return ParamMarker(ParamSource.QUERY, key)


def Param(key: Optional[str] = None) -> ParamMarker:
    return ParamMarker(ParamSource.PARAM, key)


def Header(key: Optional[str] = None) -> ParamMarker:
    return ParamMarker(ParamSource.HEADERS, key.lower() if key else None)


# ============================================================================
# Route decorators
# ============================================================================

class RouteDecorator:
    """
    Base route decorator.

    Attaches metadata to controller methods; the router reads it at bootstrap.
    """

    method: Optional[str] = None

    def __init__(
        self,
        path: Optional[str] = None,
        *,
        params: Optional[Sequence[ParamMarker]] = None,
        guards: Optional[List[Any]] = None,
        pipes: Optional[List[Any]] = None,
        interceptors: Optional[List[Any]] = None,
        filters: Optional[List[Any]] = None,
    ):
        """
        Args:
            path: Sub-path under the controller prefix (default "/").
                  Segments starting with ":" capture a path parameter.
            params: Argument sources, in handler argument order
            guards: Handler-level guards (run after controller-level ones)
            pipes: Handler-level pipes
            interceptors: Handler-level interceptors
            filters: Handler-level fault filters
        """
        self.path = path
        self.params = list(params or [])
        self.guards = list(guards or [])
        self.pipes = list(pipes or [])
        self.interceptors = list(interceptors or [])
        self.filters = list(filters or [])

    def __call__(self, func: F) -> F:
        if not hasattr(func, "__route_metadata__"):
            func.__route_metadata__ = []

        func.__route_metadata__.append({
            "http_method": self.method,
            "path": self.path,
            "params": tuple(marker.to_spec(i) for i, marker in enumerate(self.params)),
            "guards": self.guards,
            "pipes": self.pipes,
            "interceptors": self.interceptors,
            "filters": self.filters,
            "func_name": func.__name__,
        })
        return func


class GET(RouteDecorator):
    method = "GET"


class POST(RouteDecorator):
    method = "POST"


class PUT(RouteDecorator):
    method = "PUT"


class PATCH(RouteDecorator):
    method = "PATCH"


class DELETE(RouteDecorator):
    method = "DELETE"


class HEAD(RouteDecorator):
    method = "HEAD"


class OPTIONS(RouteDecorator):
    method = "OPTIONS"


class ALL(RouteDecorator):
    """Matches every HTTP method."""
    method = "ALL"


def route(method: str, path: Optional[str] = None, **kwargs: Any) -> RouteDecorator:
    """Route decorator for an arbitrary method name."""
    decorator = RouteDecorator(path, **kwargs)
    decorator.method = method.upper()
    return decorator
