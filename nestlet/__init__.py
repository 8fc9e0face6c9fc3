"""
Nestlet - module-scoped dependency injection and request pipelines for ASGI.

Modules declare providers, controllers, imports and exports; the
application resolves every binding at bootstrap and then dispatches
requests through guards, pipes, interceptors and fault filters.

Example:
    ```python
    from nestlet import Controller, GET, NestletFactory, injectable, module

    @injectable()
    class CatsService:
        def find_all(self):
            return [{"id": 1, "name": "Tom"}]

    @injectable(CatsService)
    class CatsController(Controller):
        prefix = "/cats"

        def __init__(self, cats):
            self.cats = cats

        @GET()
        def find_all(self):
            return self.cats.find_all()

    @module(providers=[CatsService], controllers=[CatsController])
    class AppModule: ...

    app = await NestletFactory.create(AppModule)
    ```
"""

__version__ = "0.1.0"

from .di import (
    ServiceScope,
    Provider,
    injectable,
    module,
    global_module,
    DIError,
    UnknownModule,
    UnresolvedDependency,
    InvalidModuleConfiguration,
    CircularDependency,
    Registry,
    DependenciesScanner,
    Injector,
)
from .faults import (
    Fault,
    FaultDomain,
    Severity,
    HTTPFault,
    BadRequest,
    Unauthorized,
    Forbidden,
    NotFound,
    InternalServerError,
    FaultFilter,
    FaultEngine,
    catch,
)
from .pipeline import (
    Guard,
    Pipe,
    ArgumentMetadata,
    ParseIntPipe,
    DefaultValuePipe,
    Interceptor,
    CallHandler,
)
from .controller import (
    Controller,
    ArgumentsHost,
    ExecutionContext,
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
    RouteEntry,
    Router,
    Dispatcher,
)
from .request import Request
from .response import Response
from .config import Config, ConfigLoader, ConfigError
from .application import Application, NestletFactory

__all__ = [
    "__version__",
    # DI
    "ServiceScope", "Provider", "injectable", "module", "global_module",
    "DIError", "UnknownModule", "UnresolvedDependency", "InvalidModuleConfiguration",
    "CircularDependency", "Registry", "DependenciesScanner", "Injector",
    # Faults
    "Fault", "FaultDomain", "Severity", "HTTPFault", "BadRequest", "Unauthorized",
    "Forbidden", "NotFound", "InternalServerError", "FaultFilter", "FaultEngine", "catch",
    # Pipeline
    "Guard", "Pipe", "ArgumentMetadata", "ParseIntPipe", "DefaultValuePipe",
    "Interceptor", "CallHandler",
    # Controllers
    "Controller", "ArgumentsHost", "ExecutionContext",
    "GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "ALL", "route",
    "Req", "Res", "Body", "Query", "Param", "Header",
    "RouteEntry", "Router", "Dispatcher",
    # HTTP
    "Request", "Response",
    # App
    "Config", "ConfigLoader", "ConfigError", "Application", "NestletFactory",
]
