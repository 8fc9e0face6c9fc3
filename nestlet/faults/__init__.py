"""
Nestlet Faults - typed errors and per-route error handling.

Core exports:
- Fault: Base fault class
- FaultDomain, Severity: Fault taxonomy
- HTTPFault and the common HTTP faults
- FaultFilter, catch: Filter declaration
- FaultEngine: Per-route error handler
"""

from .core import Fault, FaultDomain, Severity
from .http import (
    HTTPFault,
    BadRequest,
    Unauthorized,
    Forbidden,
    NotFound,
    InternalServerError,
)
from .filters import FaultFilter, catch, catch_types
from .engine import FaultEngine, INTERNAL_ERROR_BODY

__all__ = [
    "Fault",
    "FaultDomain",
    "Severity",
    "HTTPFault",
    "BadRequest",
    "Unauthorized",
    "Forbidden",
    "NotFound",
    "InternalServerError",
    "FaultFilter",
    "catch",
    "catch_types",
    "FaultEngine",
    "INTERNAL_ERROR_BODY",
]
