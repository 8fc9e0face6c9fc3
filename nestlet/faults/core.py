"""
Nestlet Faults - fault taxonomy.

Every request-time error the framework raises is a ``Fault``: it carries a
stable code, a domain naming the pipeline area it came from and a
severity that decides how loudly the fault engine logs it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class Severity(str, Enum):
    """How loudly a fault is logged."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class FaultDomain:
    """
    Named area of the framework a fault belongs to.

    Domains compare by name, so a plain string such as ``"routing"``
    equals ``FaultDomain.ROUTING``.
    """

    __slots__ = ("name", "description")

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description

    @property
    def value(self) -> str:
        return self.name

    def __eq__(self, other: Any) -> bool:
        other_name = other.name if isinstance(other, FaultDomain) else other
        return self.name == other_name

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<FaultDomain {self.name}>"


FaultDomain.CONFIG = FaultDomain("config", "Settings could not be loaded")
FaultDomain.ROUTING = FaultDomain("routing", "No route or resource for the request")
FaultDomain.FLOW = FaultDomain("flow", "Raised while running a handler")
FaultDomain.SECURITY = FaultDomain("security", "Rejected by a guard")
FaultDomain.VALIDATION = FaultDomain("validation", "Rejected by a pipe or body parser")
FaultDomain.SYSTEM = FaultDomain("system", "Server-side failure")


DOMAIN_DEFAULTS: Dict[FaultDomain, Severity] = {
    FaultDomain.CONFIG: Severity.FATAL,
    FaultDomain.ROUTING: Severity.WARN,
    FaultDomain.FLOW: Severity.ERROR,
    FaultDomain.SECURITY: Severity.WARN,
    FaultDomain.VALIDATION: Severity.INFO,
    FaultDomain.SYSTEM: Severity.FATAL,
}


class Fault(Exception):
    """
    Structured framework error.

    Subclasses usually pin ``code`` and ``domain`` as class attributes and
    only pass a message.

    Attributes:
        code: Machine-readable identifier, e.g. ``"NOT_FOUND"``
        message: Text for logs and, when ``public``, for clients
        domain: Area of the framework the fault belongs to
        severity: Logging severity; defaults per domain
        public: Whether ``message`` may be shown to clients
        metadata: Free-form context for logs

    Example:
        ```python
        raise Fault("CAT_LOCKED", "Cat 12 is locked", domain=FaultDomain.FLOW, public=True)
        ```
    """

    code: Optional[str] = None
    domain: Optional[FaultDomain] = None

    def __init__(
        self,
        code: Optional[str] = None,
        message: Optional[str] = None,
        *,
        domain: Optional[FaultDomain] = None,
        severity: Optional[Severity] = None,
        public: bool = False,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        code = code or type(self).code
        domain = domain or type(self).domain
        if not code or message is None or domain is None:
            raise TypeError(f"{type(self).__name__} needs a code, a message and a domain")

        super().__init__(message)
        self.code = code
        self.message = message
        self.domain = domain
        self.severity = severity or DOMAIN_DEFAULTS.get(domain, Severity.ERROR)
        self.public = public
        self.metadata = dict(metadata or {})

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, domain={self.domain}, severity={self.severity.value})"

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view of the fault, for structured logs."""
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "public": self.public,
            "metadata": self.metadata,
        }
