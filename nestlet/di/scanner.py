"""
Scanner - discovers the module graph and wires it into a registry.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Set

from .decorators import is_global_module, is_module, module_metadata
from .errors import InvalidModuleConfigurationError, UnknownModuleError
from .registry import Registry


MODULE_SECTIONS = ("imports", "providers", "controllers", "exports")


class DependenciesScanner:
    """
    Builds the module graph from a root module class.

    Three steps:
    1. Discovery: depth-first walk through imports, registering each
       module once with ``distance = len(scope stack)`` at first visit.
    2. Wiring: import edges, provider and controller bindings, exports.
       Modules wired by an earlier scan of the same registry are skipped.
    3. Global binding: record modules declared global.
    """

    def __init__(self, registry: Registry, *, logger: Optional[logging.Logger] = None):
        self.registry = registry
        self.logger = logger or logging.getLogger("nestlet.scanner")

    def scan(self, root: type) -> None:
        if self.registry.root is root:
            self.logger.debug(f"{root.__name__} already scanned")
            return

        self._discover(root, [], set())
        for module in self.registry.modules:
            if module.metatype not in self.registry.wired:
                self._wire(module.metatype)
                self.registry.wired.add(module.metatype)
        self.registry.bind_global_scope()
        self.registry.root = root

        self.logger.info(f"Scanned {len(self.registry)} module(s) from {root.__name__}")

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def _discover(self, metatype: type, scope: List[type], visited: Set[type]) -> None:
        if metatype in visited:
            return
        visited.add(metatype)
        self.registry.add_module(
            metatype,
            distance=len(scope),
            is_global=is_module(metatype) and is_global_module(metatype),
        )

        if not is_module(metatype):
            return

        imports = module_metadata(metatype).get("imports") or []
        if not isinstance(imports, (list, tuple)):
            return
        for related in imports:
            if is_module(related):
                self._discover(related, scope + [metatype], visited)

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def _wire(self, metatype: type) -> None:
        if not is_module(metatype):
            raise UnknownModuleError(metatype)

        name = metatype.__name__
        metadata = module_metadata(metatype)

        unknown = [key for key in metadata if key not in MODULE_SECTIONS]
        if unknown:
            raise InvalidModuleConfigurationError(
                name, f"unrecognised section(s): {', '.join(sorted(unknown))}"
            )

        sections = {key: self._section(name, key, metadata.get(key)) for key in MODULE_SECTIONS}

        for related in sections["imports"]:
            if not isinstance(related, type):
                raise InvalidModuleConfigurationError(name, f"imports entry {related!r} is not a module class")
            self.registry.add_import(metatype, related)

        for entry in sections["providers"]:
            self.registry.add_provider(metatype, entry)

        for entry in sections["controllers"]:
            if not isinstance(entry, type):
                raise InvalidModuleConfigurationError(name, f"controllers entry {entry!r} is not a class")
            self.registry.add_controller(metatype, entry)

        module = self.registry.get_module(metatype)
        for token in sections["exports"]:
            if not module.has_provider(token):
                raise InvalidModuleConfigurationError(
                    name, f"cannot export {getattr(token, '__name__', token)!r}: not provided by this module"
                )
            self.registry.add_export(metatype, token)

        self.logger.debug(
            f"Wired {name}: {len(module.imports)} import(s), {len(module.providers)} provider(s), "
            f"{len(module.controllers)} controller(s), {len(module.exports)} export(s)"
        )

    @staticmethod
    def _section(module_name: str, key: str, value: Any) -> list:
        if value is None:
            return []
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise InvalidModuleConfigurationError(
                module_name, f"section '{key}' must be a list, got {type(value).__name__}"
            )
        return list(value)
