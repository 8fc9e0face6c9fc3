"""
Router - builds the route table from resolved controllers and matches requests.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import unquote

from ..di.binding import Binding
from ..di.injector import Injector
from ..di.modules import Module
from ..di.registry import Registry
from .metadata import RouteEntry


_SLASHES = re.compile(r"/{2,}")


def normalize_path(*parts: Optional[str]) -> str:
    """
    Join path parts into one absolute path.

    Repeated separators collapse and the trailing separator is dropped,
    except for the root path.

    >>> normalize_path("/cats/", "/:id/")
    '/cats/:id'
    >>> normalize_path(None, None)
    '/'
    """
    joined = "/" + "/".join(part for part in parts if part)
    joined = _SLASHES.sub("/", joined)
    if len(joined) > 1:
        joined = joined.rstrip("/") or "/"
    return joined


def compile_path(path: str) -> Tuple[re.Pattern, Tuple[str, ...]]:
    """
    Compile a path template into an exact-segment-count pattern.

    Segments starting with ``:`` capture one non-empty segment.
    """
    names: List[str] = []
    segments = []
    for segment in path.split("/"):
        if segment.startswith(":") and len(segment) > 1:
            names.append(segment[1:])
            segments.append("([^/]+)")
        else:
            segments.append(re.escape(segment))
    return re.compile("^" + "/".join(segments) + "$"), tuple(names)


def _handler_names(controller: type) -> Iterable[str]:
    """Method names in definition order, base classes first."""
    seen = set()
    for klass in reversed(controller.__mro__):
        if klass is object:
            continue
        for name in klass.__dict__:
            if name not in seen:
                seen.add(name)
                yield name


class Router:
    """
    Route table of one application.

    Routes are tried in registration order; the first match wins.
    """

    def __init__(
        self,
        registry: Registry,
        injector: Injector,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry
        self.injector = injector
        self.logger = logger or logging.getLogger("nestlet.router")
        self.routes: List[RouteEntry] = []
        self._components: Dict[type, Any] = {}

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def build(self) -> List[RouteEntry]:
        self.routes = []
        for module in self.registry.modules:
            for binding in module.controllers.values():
                self.explore(binding, module)
        self.logger.info(f"Mapped {len(self.routes)} route(s)")
        return self.routes

    def explore(self, binding: Binding, module: Module) -> List[RouteEntry]:
        controller = binding.metatype
        instance = binding.instance
        if controller is None or instance is None:
            return []

        prefix = getattr(controller, "prefix", "/")
        entries = []
        for name in _handler_names(controller):
            metas = getattr(getattr(controller, name, None), "__route_metadata__", None)
            if not metas:
                continue
            handler = getattr(instance, name)
            for meta in metas:
                path = normalize_path(prefix, meta["path"])
                pattern, names = compile_path(path)
                entry = RouteEntry(
                    method=meta["http_method"],
                    path=path,
                    controller=controller,
                    handler_name=name,
                    handler=handler,
                    param_specs=meta["params"],
                    guards=self._components_for(module, getattr(controller, "guards", []), meta["guards"]),
                    pipes=self._components_for(module, getattr(controller, "pipes", []), meta["pipes"]),
                    interceptors=self._components_for(
                        module, getattr(controller, "interceptors", []), meta["interceptors"]
                    ),
                    filters=self._components_for(module, getattr(controller, "filters", []), meta["filters"]),
                    module=module.name,
                    pattern=pattern,
                    param_names=names,
                )
                self.routes.append(entry)
                entries.append(entry)
                self.logger.info(f"{entry.method:<7} {entry.path} -> {entry.signature}")
        return entries

    def _components_for(self, module: Module, controller_level: Iterable[Any], handler_level: Iterable[Any]) -> List[Any]:
        return [self._component(module, item) for item in [*controller_level, *handler_level]]

    def _component(self, module: Module, item: Any) -> Any:
        """
        Instance for a guard/pipe/interceptor/filter declaration.

        Classes visible as providers from the controller's module use the
        provider instance; other classes are constructed once without
        arguments and shared. Instances are used as given.
        """
        if not isinstance(item, type):
            return item
        binding = self.injector.find(item, module)
        if binding is not None and binding.is_resolved:
            return binding.instance
        if item not in self._components:
            self._components[item] = item()
        return self._components[item]

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def match(self, method: str, path: str) -> Optional[Tuple[RouteEntry, Dict[str, str]]]:
        method = method.upper()
        for entry in self.routes:
            if entry.method != method and entry.method != "ALL":
                continue
            found = entry.pattern.match(path)
            if found is not None:
                params = {name: unquote(value) for name, value in zip(entry.param_names, found.groups())}
                return entry, params
        return None
