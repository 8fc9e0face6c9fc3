"""
Decorators for declaring modules and injectables.

Decorators only attach metadata to the class. Nothing is validated or
instantiated until the scanner reads the metadata at bootstrap.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Sequence, Type, TypeVar

from .scopes import DEFAULT_SCOPE, ServiceScope, coerce_scope


T = TypeVar("T")


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"


MISSING: Any = _Missing()


@dataclass
class Provider:
    """
    Explicit provider declaration.

    Exactly one of ``use_class``, ``use_value`` or ``use_factory`` is set.
    ``inject`` lists the dependency tokens passed positionally to the class
    or factory.

    Example:
        ```python
        @module(providers=[
            CatsService,
            Provider("CONFIG", use_value={"debug": True}),
            Provider("CLOCK", use_factory=make_clock, inject=["CONFIG"]),
        ])
        class AppModule: ...
        ```
    """

    token: Any
    use_class: Optional[type] = None
    use_value: Any = MISSING
    use_factory: Optional[Callable[..., Any]] = None
    inject: Sequence[Any] = field(default_factory=tuple)
    scope: Any = DEFAULT_SCOPE

    @property
    def kind(self) -> Optional[str]:
        kinds = [
            name for name, present in (
                ("class", self.use_class is not None),
                ("value", self.use_value is not MISSING),
                ("factory", self.use_factory is not None),
            ) if present
        ]
        return kinds[0] if len(kinds) == 1 else None


def injectable(
    *inject: Any,
    scope: str = "singleton",
) -> Callable[[Type[T]], Type[T]]:
    """
    Mark a class as injectable and declare its constructor dependencies.

    Dependencies are listed explicitly, in constructor order; each entry
    is a class or a string token.

    Args:
        *inject: Dependency tokens, positional
        scope: Binding scope (singleton, transient, request)

    Example:
        ```python
        @injectable(CatsRepository, "CONFIG")
        class CatsService:
            def __init__(self, repo, config):
                ...
        ```
    """
    resolved_scope = coerce_scope(scope)

    def decorator(cls: Type[T]) -> Type[T]:
        cls.__di_injectable__ = True
        cls.__di_inject__ = tuple(inject)
        cls.__di_scope__ = resolved_scope
        return cls

    return decorator


def module(
    *,
    is_global: bool = False,
    **sections: Any,
) -> Callable[[Type[T]], Type[T]]:
    """
    Declare a module.

    Recognised sections are ``imports``, ``providers``, ``controllers``
    and ``exports``. Unknown sections are kept and rejected by the scanner.

    Example:
        ```python
        @module(
            imports=[DatabaseModule],
            providers=[CatsService],
            controllers=[CatsController],
            exports=[CatsService],
        )
        class CatsModule: ...
        ```
    """
    def decorator(cls: Type[T]) -> Type[T]:
        cls.__module_metadata__ = dict(sections)
        cls.__module_global__ = is_global
        return cls

    return decorator


def global_module(**sections: Any) -> Callable[[Type[T]], Type[T]]:
    """Shorthand for ``@module(is_global=True, ...)``."""
    return module(is_global=True, **sections)


# ============================================================================
# Metadata accessors
# ============================================================================

def is_module(obj: Any) -> bool:
    return isinstance(obj, type) and "__module_metadata__" in obj.__dict__


def module_metadata(cls: type) -> Dict[str, Any]:
    return dict(cls.__dict__.get("__module_metadata__", {}))


def is_global_module(cls: type) -> bool:
    return bool(cls.__dict__.get("__module_global__", False))


def get_dependencies(cls: type) -> tuple:
    return tuple(getattr(cls, "__di_inject__", ()))


def get_scope(cls: type) -> ServiceScope:
    return getattr(cls, "__di_scope__", DEFAULT_SCOPE)
