"""
Nestlet controllers - route declaration, route table and request pipeline.
"""

from .base import Controller
from .context import ArgumentsHost, ExecutionContext, HttpArgumentsHost
from .decorators import (
    RouteDecorator,
    GET,
    POST,
    PUT,
    PATCH,
    DELETE,
    HEAD,
    OPTIONS,
    ALL,
    route,
    Req,
    Res,
    Body,
    Query,
    Param,
    Header,
)
from .metadata import ParamSource, ParamSpec, RouteEntry
from .router import Router, normalize_path, compile_path
from .executor import RouteExecutor
from .dispatcher import Dispatcher

__all__ = [
    "Controller",
    "ArgumentsHost",
    "ExecutionContext",
    "HttpArgumentsHost",
    "RouteDecorator",
    "GET",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "HEAD",
    "OPTIONS",
    "ALL",
    "route",
    "Req",
    "Res",
    "Body",
    "Query",
    "Param",
    "Header",
    "ParamSource",
    "ParamSpec",
    "RouteEntry",
    "Router",
    "normalize_path",
    "compile_path",
    "RouteExecutor",
    "Dispatcher",
]
