"""
Registry - the module graph of one application.

The registry is an explicitly owned object: the application creates one
and passes it to the scanner, injector and router. ``clear()`` resets it.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Set

from .binding import Binding
from .errors import UnknownModuleError, token_name
from .modules import Module
from .scopes import ServiceScope


class Registry:
    """Modules keyed by their declaring class, in registration order."""

    def __init__(self):
        self._modules: Dict[type, Module] = {}
        self.global_modules: List[Module] = []
        self.root: Optional[type] = None
        self.wired: Set[type] = set()
        self.logger = logging.getLogger("nestlet.registry")

    # ------------------------------------------------------------------
    # Modules
    # ------------------------------------------------------------------

    def add_module(self, metatype: type, *, distance: int, is_global: bool = False) -> Module:
        """Register a module once; later registrations return the first."""
        existing = self._modules.get(metatype)
        if existing is not None:
            return existing
        module = Module(metatype, distance=distance, is_global=is_global)
        self._modules[metatype] = module
        self.logger.debug(f"Registered module {module.name} (distance={distance})")
        return module

    def has_module(self, metatype: Any) -> bool:
        return metatype in self._modules if isinstance(metatype, type) else False

    def get_module(self, metatype: Any, *, referenced_by: Optional[str] = None) -> Module:
        module = self._modules.get(metatype) if isinstance(metatype, type) else None
        if module is None:
            raise UnknownModuleError(metatype, referenced_by=referenced_by)
        return module

    @property
    def modules(self) -> List[Module]:
        return list(self._modules.values())

    def sorted_modules(self) -> List[Module]:
        """Modules ordered by distance; ties keep registration order."""
        return sorted(self._modules.values(), key=lambda m: m.distance)

    def __iter__(self) -> Iterator[Module]:
        return iter(self._modules.values())

    def __len__(self) -> int:
        return len(self._modules)

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def add_import(self, metatype: type, related: Any) -> None:
        module = self.get_module(metatype)
        module.add_import(self.get_module(related, referenced_by=module.name))

    def add_provider(self, metatype: type, entry: Any) -> Binding:
        module = self.get_module(metatype)
        binding = module.add_provider(Binding.from_declaration(entry, module))
        self._warn_scope(binding)
        return binding

    def add_controller(self, metatype: type, entry: Any) -> Binding:
        module = self.get_module(metatype)
        binding = module.add_controller(Binding.from_declaration(entry, module))
        self._warn_scope(binding)
        return binding

    def add_export(self, metatype: type, token: Any) -> None:
        self.get_module(metatype).add_export(token)

    def bind_global_scope(self) -> None:
        self.global_modules = [m for m in self._modules.values() if m.is_global]
        for module in self.global_modules:
            self.logger.debug(f"Global module {module.name} exports {sorted(map(token_name, module.exports))}")

    def _warn_scope(self, binding: Binding) -> None:
        if binding.scope is not ServiceScope.SINGLETON:
            self.logger.warning(
                f"{binding.name} declares scope '{binding.scope.value}'; "
                f"it will be resolved once and shared like a singleton"
            )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_binding(self, token: Any) -> Optional[Binding]:
        """First provider or controller bound to ``token``, in distance order."""
        for module in self.sorted_modules():
            binding = module.providers.get(token) or module.controllers.get(token)
            if binding is not None:
                return binding
        return None

    def clear(self) -> None:
        self._modules.clear()
        self.global_modules = []
        self.root = None
        self.wired.clear()
