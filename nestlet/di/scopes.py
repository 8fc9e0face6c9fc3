"""
Scope definitions.
"""

from enum import Enum


class ServiceScope(str, Enum):
    """Binding lifetime scopes."""

    SINGLETON = "singleton"  # One instance per application
    TRANSIENT = "transient"  # Declared only; cached like singleton
    REQUEST = "request"      # Declared only; cached like singleton


DEFAULT_SCOPE = ServiceScope.SINGLETON


def coerce_scope(scope) -> ServiceScope:
    """Accept a ServiceScope or its string value."""
    if isinstance(scope, ServiceScope):
        return scope
    try:
        return ServiceScope(str(scope).lower())
    except ValueError:
        valid = ", ".join(s.value for s in ServiceScope)
        raise ValueError(f"Unknown scope {scope!r} (expected one of: {valid})") from None
