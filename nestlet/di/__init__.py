"""
Nestlet DI - module-scoped dependency injection.

Modules declare imports, providers, controllers and exports. The scanner
builds the module graph into a Registry; the Injector resolves bindings
using the visibility rules of that graph.
"""

from .scopes import ServiceScope
from .decorators import (
    Provider,
    injectable,
    module,
    global_module,
    is_module,
)
from .errors import (
    DIError,
    UnknownModuleError,
    UnresolvedDependencyError,
    InvalidModuleConfigurationError,
    CircularDependencyError,
    UnknownModule,
    UnresolvedDependency,
    InvalidModuleConfiguration,
    CircularDependency,
)
from .binding import Binding
from .modules import Module
from .registry import Registry
from .scanner import DependenciesScanner
from .injector import Injector

__all__ = [
    "ServiceScope",
    "Provider",
    "injectable",
    "module",
    "global_module",
    "is_module",
    "DIError",
    "UnknownModuleError",
    "UnresolvedDependencyError",
    "InvalidModuleConfigurationError",
    "CircularDependencyError",
    "UnknownModule",
    "UnresolvedDependency",
    "InvalidModuleConfiguration",
    "CircularDependency",
    "Binding",
    "Module",
    "Registry",
    "DependenciesScanner",
    "Injector",
]
