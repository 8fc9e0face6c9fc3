"""
DI-specific error types with rich diagnostics.

All of these are raised during bootstrap and abort startup.
"""

from typing import Any, List, Optional


def token_name(token: Any) -> str:
    """Readable name for an injection token."""
    if isinstance(token, type):
        return token.__name__
    if isinstance(token, str):
        return token
    return repr(token)


class DIError(Exception):
    """Base exception for DI errors."""
    pass


class UnknownModuleError(DIError):
    """A module was referenced that the registry never discovered."""

    def __init__(self, module: Any, referenced_by: Optional[str] = None):
        self.module = module
        self.referenced_by = referenced_by

        msg = f"Unknown module: {token_name(module)}"
        if referenced_by:
            msg += f"\nReferenced by: {referenced_by}"
        msg += "\n\nSuggested fixes:"
        msg += "\n  - Decorate the class with @module(...)"
        msg += "\n  - Make sure the module is reachable through imports from the root module"

        super().__init__(msg)


class UnresolvedDependencyError(DIError):
    """No visible provider for a dependency token."""

    def __init__(
        self,
        requested_by: str,
        index: int,
        token: Any,
        module: Optional[str] = None,
        candidates: Optional[List[str]] = None,
    ):
        self.requested_by = requested_by
        self.index = index
        self.token = token
        self.module = module
        self.candidates = candidates or []

        name = token_name(token)
        msg = (
            f"Cannot resolve dependency of {requested_by}: "
            f"argument at index [{index}] ({name}) is not available"
        )
        if module:
            msg += f" in module {module}"

        if self.candidates:
            msg += "\n\nProvided (but not visible) in:"
            for candidate in self.candidates:
                msg += f"\n  - {candidate}"

        msg += "\n\nSuggested fixes:"
        msg += f"\n  - Add {name} to the providers of {module or 'the module'}"
        msg += f"\n  - Export {name} from the module that provides it and import that module"
        msg += "\n  - Mark the providing module as global"

        super().__init__(msg)


class InvalidModuleConfigurationError(DIError):
    """Module metadata is malformed."""

    def __init__(self, module: str, reason: str):
        self.module = module
        self.reason = reason

        msg = f"Invalid configuration for module {module}: {reason}"
        msg += "\n\nSuggested fixes:"
        msg += "\n  - Only use the sections: imports, providers, controllers, exports"
        msg += "\n  - List classes (or Provider(...) entries) in each section"

        super().__init__(msg)


class CircularDependencyError(DIError):
    """Circular dependency detected while constructing bindings."""

    def __init__(self, cycle: List[str]):
        self.cycle = cycle

        msg = "Detected dependency cycle:"
        for i, name in enumerate(cycle):
            arrow = " ->" if i < len(cycle) - 1 else ""
            msg += f"\n  {name}{arrow}"

        msg += "\n\nSuggested fixes:"
        msg += "\n  - Extract the shared logic into a third provider"
        msg += "\n  - Restructure dependencies to remove cycle"

        super().__init__(msg)


# Short aliases
UnknownModule = UnknownModuleError
UnresolvedDependency = UnresolvedDependencyError
InvalidModuleConfiguration = InvalidModuleConfigurationError
CircularDependency = CircularDependencyError
