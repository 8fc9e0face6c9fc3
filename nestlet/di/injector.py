"""
Injector - resolves bindings using module-scoped visibility.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, List, Optional, Set

from .binding import Binding
from .errors import CircularDependencyError, UnresolvedDependencyError
from .modules import Module
from .registry import Registry


class Injector:
    """
    Constructs bindings, resolving dependencies through the visibility search.

    Visibility of token T from module M:
    1. M's own providers.
    2. Each import R of M in declared order: R's binding when R exports T,
       otherwise the same search through R's own imports (look-through).
    3. Exported providers of global modules.
    """

    def __init__(self, registry: Registry, *, logger: Optional[logging.Logger] = None):
        self.registry = registry
        self.logger = logger or logging.getLogger("nestlet.injector")
        self._stack: List[Binding] = []

    async def load_provider(self, binding: Binding, module: Module) -> Any:
        return await self.resolve(binding, module)

    async def load_controller(self, binding: Binding, module: Module) -> Any:
        return await self.resolve(binding, module)

    async def resolve(self, binding: Binding, module: Module) -> Any:
        """Return the binding's instance, constructing it on first call."""
        if binding.is_resolved:
            return binding.instance

        if binding.is_pending:
            start = next(i for i, b in enumerate(self._stack) if b is binding)
            cycle = [b.name for b in self._stack[start:]] + [binding.name]
            raise CircularDependencyError(cycle)

        binding.is_pending = True
        self._stack.append(binding)
        try:
            args = []
            for index, token in enumerate(binding.inject):
                dependency = self.lookup(token, module, requested_by=binding.name, index=index)
                args.append(await self.resolve(dependency, dependency.host))

            instance = binding.create(args)
            if inspect.isawaitable(instance):
                instance = await instance
            binding.set_instance(instance)
        finally:
            binding.is_pending = False
            self._stack.pop()

        self.logger.debug(f"Resolved {binding.name} in {module.name}")
        return binding.instance

    # ------------------------------------------------------------------
    # Visibility search
    # ------------------------------------------------------------------

    def lookup(
        self,
        token: Any,
        module: Module,
        *,
        requested_by: str = "<unknown>",
        index: int = 0,
    ) -> Binding:
        binding = module.get_provider(token)
        if binding is not None:
            return binding

        binding = self._lookup_in_imports(module, token, set())
        if binding is not None:
            return binding

        for global_module in self.registry.global_modules:
            if global_module.has_export(token) and global_module.has_provider(token):
                return global_module.get_provider(token)

        raise UnresolvedDependencyError(
            requested_by,
            index,
            token,
            module=module.name,
            candidates=[m.name for m in self.registry if m.has_provider(token)],
        )

    def find(self, token: Any, module: Module) -> Optional[Binding]:
        """Like ``lookup`` but returns None when the token is not visible."""
        try:
            return self.lookup(token, module)
        except UnresolvedDependencyError:
            return None

    def _lookup_in_imports(self, module: Module, token: Any, visited: Set[Module]) -> Optional[Binding]:
        visited.add(module)
        for related in module.imports:
            if related.has_export(token):
                binding = related.get_provider(token)
                if binding is not None:
                    return binding
                continue
            if related in visited:
                continue
            found = self._lookup_in_imports(related, token, visited)
            if found is not None:
                return found
        return None
