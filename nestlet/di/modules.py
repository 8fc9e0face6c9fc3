"""
Module - one node of the module graph.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Set

from .binding import Binding


class Module:
    """
    One unit of composition.

    Imports are shared references to other modules; a module never owns
    the modules it imports. ``distance`` is the import-chain length at
    first discovery, not the shortest path.
    """

    def __init__(
        self,
        metatype: type,
        *,
        distance: int = 0,
        is_global: bool = False,
    ):
        self.metatype = metatype
        self.token = f"{metatype.__module__}.{metatype.__qualname__}"
        self.name = metatype.__name__
        self.distance = distance
        self.is_global = is_global

        self.providers: Dict[Any, Binding] = {}
        self.controllers: Dict[Any, Binding] = {}
        self.imports: List["Module"] = []
        self.exports: Set[Any] = set()

    def add_provider(self, binding: Binding) -> Binding:
        self.providers[binding.token] = binding
        return binding

    def add_controller(self, binding: Binding) -> Binding:
        self.controllers[binding.token] = binding
        return binding

    def add_import(self, other: "Module") -> None:
        if not any(existing is other for existing in self.imports):
            self.imports.append(other)

    def add_export(self, token: Any) -> None:
        self.exports.add(token)

    def has_provider(self, token: Any) -> bool:
        return token in self.providers

    def get_provider(self, token: Any) -> Optional[Binding]:
        return self.providers.get(token)

    def has_export(self, token: Any) -> bool:
        return token in self.exports

    def __repr__(self) -> str:
        return f"<Module {self.name} distance={self.distance}{' global' if self.is_global else ''}>"
