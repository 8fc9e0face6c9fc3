"""
Binding - one (module, token) instance wrapper.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence

from .decorators import MISSING, Provider, get_dependencies, get_scope
from .errors import InvalidModuleConfigurationError, token_name
from .scopes import DEFAULT_SCOPE, ServiceScope, coerce_scope

if TYPE_CHECKING:
    from .modules import Module


class Binding:
    """
    Wraps one provider or controller of one module.

    A binding is constructed from a class (``metatype``), a factory, or a
    fixed value. Once resolved, its instance is never replaced.
    """

    __slots__ = (
        "token", "host", "metatype", "factory", "inject", "scope",
        "instance", "is_resolved", "is_pending",
    )

    def __init__(
        self,
        token: Any,
        host: "Module",
        *,
        metatype: Optional[type] = None,
        factory: Optional[Callable[..., Any]] = None,
        value: Any = MISSING,
        inject: Sequence[Any] = (),
        scope: ServiceScope = DEFAULT_SCOPE,
    ):
        self.token = token
        self.host = host
        self.metatype = metatype
        self.factory = factory
        self.inject = tuple(inject)
        self.scope = scope
        self.instance: Any = None
        self.is_resolved = False
        self.is_pending = False

        if value is not MISSING:
            self.set_instance(value)

    @classmethod
    def from_declaration(cls, entry: Any, host: "Module") -> "Binding":
        """Build a binding from a ``providers``/``controllers`` entry."""
        if isinstance(entry, Provider):
            kind = entry.kind
            if kind is None:
                raise InvalidModuleConfigurationError(
                    host.name,
                    f"provider {token_name(entry.token)} must set exactly one of "
                    f"use_class, use_value or use_factory",
                )
            try:
                scope = coerce_scope(entry.scope)
            except ValueError as exc:
                raise InvalidModuleConfigurationError(host.name, str(exc)) from None
            if kind == "class":
                inject = entry.inject or get_dependencies(entry.use_class)
                return cls(entry.token, host, metatype=entry.use_class, inject=inject, scope=scope)
            if kind == "factory":
                return cls(entry.token, host, factory=entry.use_factory, inject=entry.inject, scope=scope)
            return cls(entry.token, host, value=entry.use_value, scope=scope)

        if isinstance(entry, type):
            return cls(
                entry,
                host,
                metatype=entry,
                inject=get_dependencies(entry),
                scope=get_scope(entry),
            )

        raise InvalidModuleConfigurationError(
            host.name,
            f"expected a class or Provider(...), got {entry!r}",
        )

    @property
    def name(self) -> str:
        if self.metatype is not None:
            return self.metatype.__name__
        return token_name(self.token)

    @property
    def is_value(self) -> bool:
        return self.metatype is None and self.factory is None

    def set_instance(self, instance: Any) -> None:
        if self.is_resolved:
            return
        self.instance = instance
        self.is_resolved = True
        self.is_pending = False

    def create(self, args: Sequence[Any]) -> Any:
        """Call the class or factory with positional arguments."""
        if self.metatype is not None:
            return self.metatype(*args)
        if self.factory is not None:
            return self.factory(*args)
        return self.instance

    def __repr__(self) -> str:
        state = "resolved" if self.is_resolved else "unresolved"
        return f"<Binding {self.name} [{self.scope.value}] {state} in {self.host.name}>"
