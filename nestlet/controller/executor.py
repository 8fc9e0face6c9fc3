"""
RouteExecutor - runs the request pipeline of one route.

Stage order:
    guards -> body -> argument extraction -> pipes -> interceptors(handler) -> emit

Any exception raised by a stage goes to the route's FaultEngine.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, List, Optional

from ..faults import FaultEngine
from ..pipeline import ArgumentMetadata, GuardsConsumer, InterceptorsConsumer, PipesConsumer
from .context import ExecutionContext
from .metadata import ParamSource, RouteEntry


logger = logging.getLogger("nestlet.executor")


class RouteExecutor:
    __slots__ = ("route", "guards_consumer", "pipes_consumer", "interceptors_consumer", "fault_engine")

    def __init__(
        self,
        route: RouteEntry,
        *,
        guards_consumer: Optional[GuardsConsumer] = None,
        pipes_consumer: Optional[PipesConsumer] = None,
        interceptors_consumer: Optional[InterceptorsConsumer] = None,
        fault_engine: Optional[FaultEngine] = None,
    ):
        self.route = route
        self.guards_consumer = guards_consumer or GuardsConsumer()
        self.pipes_consumer = pipes_consumer or PipesConsumer()
        self.interceptors_consumer = interceptors_consumer or InterceptorsConsumer()
        self.fault_engine = fault_engine or FaultEngine(route.filters)

    async def execute(self, request: Any, response: Any) -> None:
        route = self.route
        context = ExecutionContext(request, response, route.controller, route.handler)

        try:
            await self.guards_consumer.try_activate(route.guards, context)

            body = await request.payload()
            args = self.extract_args(request, response, body)
            args = await self.apply_pipes(args)

            async def call_handler() -> Any:
                logger.debug(f"Calling {route.signature}")
                result = route.handler(*args)
                if inspect.isawaitable(result):
                    result = await result
                return result

            result = await self.interceptors_consumer.intercept(route.interceptors, context, call_handler)

            if not response.ended:
                response.json(result)
        except Exception as error:
            await self.fault_engine.handle(error, context)

    def extract_args(self, request: Any, response: Any, body: Any) -> List[Any]:
        args: List[Any] = [None] * len(self.route.param_specs)
        for spec in self.route.param_specs:
            source, key = spec.source, spec.key
            if source is ParamSource.REQUEST:
                value = request
            elif source is ParamSource.RESPONSE:
                value = response
            elif source is ParamSource.BODY:
                if key is None:
                    value = body
                else:
                    value = body.get(key) if isinstance(body, dict) else None
            elif source is ParamSource.QUERY:
                value = request.query_params.get(key) if key else request.query_params.to_dict()
            elif source is ParamSource.PARAM:
                value = request.params.get(key) if key else dict(request.params)
            elif source is ParamSource.HEADERS:
                value = request.headers.get(key) if key else request.headers.to_dict()
            else:
                value = None
            args[spec.index] = value
        return args

    async def apply_pipes(self, args: List[Any]) -> List[Any]:
        pipes = self.route.pipes
        if not pipes:
            return args
        transformed = list(args)
        for spec in self.route.param_specs:
            pipe_type = spec.source.pipe_type
            if pipe_type is None:
                continue
            metadata = ArgumentMetadata(type=pipe_type, data=spec.key)
            transformed[spec.index] = await self.pipes_consumer.apply_pipes(args[spec.index], metadata, pipes)
        return transformed
