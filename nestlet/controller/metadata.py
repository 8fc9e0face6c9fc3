"""
Route metadata - parameter bindings and route entries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple


class ParamSource(str, Enum):
    """Where a handler argument comes from."""

    REQUEST = "request"
    RESPONSE = "response"
    BODY = "body"
    QUERY = "query"
    PARAM = "param"
    HEADERS = "headers"

    @property
    def pipe_type(self) -> Optional[str]:
        """ArgumentMetadata type, or None when pipes do not apply."""
        return {
            ParamSource.BODY: "body",
            ParamSource.QUERY: "query",
            ParamSource.PARAM: "param",
            ParamSource.HEADERS: "custom",
        }.get(self)


@dataclass(frozen=True)
class ParamSpec:
    """One positional handler argument."""

    index: int
    source: ParamSource
    key: Optional[str] = None


@dataclass
class RouteEntry:
    """
    One compiled route.

    ``guards``, ``pipes``, ``interceptors`` and ``filters`` are instances
    created at bootstrap: controller-level entries first, then handler-level.
    """

    method: str
    path: str
    controller: type
    handler_name: str
    handler: Callable[..., Any]
    param_specs: Tuple[ParamSpec, ...] = ()
    guards: List[Any] = field(default_factory=list)
    pipes: List[Any] = field(default_factory=list)
    interceptors: List[Any] = field(default_factory=list)
    filters: List[Any] = field(default_factory=list)
    module: Optional[str] = None
    pattern: Optional[re.Pattern] = field(default=None, repr=False)
    param_names: Tuple[str, ...] = ()
    executor: Any = field(default=None, repr=False)

    @property
    def signature(self) -> str:
        return f"{self.controller.__name__}.{self.handler_name}()"

    def __str__(self) -> str:
        return f"{self.method:<7} {self.path} -> {self.signature}"
