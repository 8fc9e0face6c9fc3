"""
Nestlet pipeline stages: guards, pipes and interceptors.
"""

from .guards import Guard, GuardsConsumer
from .pipes import ArgumentMetadata, Pipe, PipesConsumer, ParseIntPipe, DefaultValuePipe
from .interceptors import CallHandler, Interceptor, InterceptorsConsumer

__all__ = [
    "Guard",
    "GuardsConsumer",
    "ArgumentMetadata",
    "Pipe",
    "PipesConsumer",
    "ParseIntPipe",
    "DefaultValuePipe",
    "CallHandler",
    "Interceptor",
    "InterceptorsConsumer",
]
