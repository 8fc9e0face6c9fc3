"""
Application bootstrap.

``NestletFactory.create(AppModule)`` runs, in order:
1. scan the module graph into a fresh registry
2. resolve every provider, modules sorted by distance
3. resolve every controller, same order
4. build the route table
Only the returned Application accepts traffic.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from .asgi import ASGIAdapter, Hook
from .config import Config, configure_logging
from .controller.dispatcher import Dispatcher
from .controller.metadata import RouteEntry
from .controller.router import Router
from .di.errors import DIError
from .di.injector import Injector
from .di.registry import Registry
from .di.scanner import DependenciesScanner


logger = logging.getLogger("nestlet.application")


class Application:
    """
    A bootstrapped application; also an ASGI callable.

    Example:
        ```python
        app = await NestletFactory.create(AppModule)
        cats = app.get(CatsService)
        await app.listen(port=3000)
        ```
    """

    def __init__(
        self,
        registry: Registry,
        injector: Injector,
        router: Router,
        dispatcher: Dispatcher,
        config: Config,
    ):
        self.registry = registry
        self.injector = injector
        self.router = router
        self.dispatcher = dispatcher
        self.config = config
        self.asgi = ASGIAdapter(dispatcher, max_body_size=config.max_body_size)
        self._server: Any = None

    async def __call__(self, scope: dict, receive, send) -> None:
        await self.asgi(scope, receive, send)

    @property
    def routes(self) -> List[RouteEntry]:
        return list(self.router.routes)

    def get(self, token: Any) -> Any:
        """Resolved instance bound to ``token`` in any module, or None."""
        binding = self.registry.find_binding(token)
        if binding is None or not binding.is_resolved:
            return None
        return binding.instance

    def on_startup(self, hook: Hook) -> Hook:
        """Register an async hook run on ASGI ``lifespan.startup``; usable as a decorator."""
        self.asgi.on_startup.append(hook)
        return hook

    def on_shutdown(self, hook: Hook) -> Hook:
        """Register an async hook run on ASGI ``lifespan.shutdown``, in registration order."""
        self.asgi.on_shutdown.append(hook)
        return hook

    async def dispatch(self, method: str, path: str, request: Any, response: Any) -> None:
        await self.dispatcher.dispatch(method, path, request, response)

    async def listen(self, host: Optional[str] = None, port: Optional[int] = None) -> None:
        """Serve with uvicorn until the server is asked to exit."""
        import uvicorn

        host = host or self.config.host
        port = port or self.config.port
        configure_logging(self.config.log_level)

        server_config = uvicorn.Config(
            self,
            host=host,
            port=port,
            log_level=self.config.log_level,
            lifespan="on",
        )
        self._server = uvicorn.Server(server_config)
        logger.info(f"Listening on http://{host}:{port}")
        await self._server.serve()

    async def close(self) -> None:
        if self._server is not None:
            self._server.should_exit = True
            self._server = None
        self.registry.clear()
        self.router.routes = []
        logger.info("Application closed")


class NestletFactory:
    """Bootstraps applications from a root module."""

    @staticmethod
    async def create(root_module: type, *, config: Optional[Config] = None) -> Application:
        config = config or Config()
        registry = Registry()

        try:
            logger.info(f"[1/4] Scanning modules from {root_module.__name__}")
            DependenciesScanner(registry).scan(root_module)

            injector = Injector(registry)
            modules = registry.sorted_modules()

            logger.info("[2/4] Resolving providers")
            for module in modules:
                for binding in list(module.providers.values()):
                    await injector.load_provider(binding, module)

            logger.info("[3/4] Resolving controllers")
            for module in modules:
                for binding in list(module.controllers.values()):
                    await injector.load_controller(binding, module)

            logger.info("[4/4] Mapping routes")
            router = Router(registry, injector)
            router.build()
        except DIError as exc:
            logger.error(f"Bootstrap failed: {exc}")
            raise

        return Application(registry, injector, router, Dispatcher(router), config)
