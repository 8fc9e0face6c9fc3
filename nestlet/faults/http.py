"""
Nestlet Faults - HTTP faults.

Faults that carry an HTTP status and a response payload. The default
error handling maps them straight onto the response; every other
exception becomes a 500.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from .core import Fault, FaultDomain, Severity


ResponsePayload = Union[str, dict]


class HTTPFault(Fault):
    """
    Base class for faults with an HTTP status.

    ``response`` is either a message string or a dict. A dict is merged
    into the error body after ``statusCode``; its ``message`` key (when
    present) becomes the fault message.

    Example:
        ```python
        raise HTTPFault("I'm a teapot", 418)
        raise HTTPFault({"message": "Invalid data", "errors": ["name"]}, 400)
        ```
    """

    status: int = 500
    code = "HTTP_ERROR"
    default_message = "Internal Server Error"
    domain = FaultDomain.FLOW

    def __init__(
        self,
        response: Optional[ResponsePayload] = None,
        status: Optional[int] = None,
        *,
        severity: Optional[Severity] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        if status is not None:
            self.status = status
        self.response = response if response is not None else self.default_message

        if isinstance(self.response, dict):
            message = str(self.response.get("message", self.__class__.__name__))
        else:
            message = str(self.response)

        super().__init__(
            code=self.code,
            message=message,
            domain=self.domain,
            severity=severity,
            public=self.status < 500,
            metadata=metadata,
        )

    def get_status(self) -> int:
        return self.status

    def get_response(self) -> ResponsePayload:
        return self.response

    def to_body(self) -> dict[str, Any]:
        """JSON error body for this fault."""
        if isinstance(self.response, dict):
            return {"statusCode": self.status, **self.response}
        return {"statusCode": self.status, "message": self.message}


class BadRequest(HTTPFault):
    """400 - malformed input or a rejected argument transform."""
    status = 400
    code = "BAD_REQUEST"
    default_message = "Bad Request"
    domain = FaultDomain.VALIDATION


class Unauthorized(HTTPFault):
    status = 401
    code = "UNAUTHORIZED"
    default_message = "Unauthorized"
    domain = FaultDomain.SECURITY


class Forbidden(HTTPFault):
    """403 - raised when a guard denies the request."""
    status = 403
    code = "FORBIDDEN"
    default_message = "Forbidden"
    domain = FaultDomain.SECURITY


class NotFound(HTTPFault):
    status = 404
    code = "NOT_FOUND"
    default_message = "Not Found"
    domain = FaultDomain.ROUTING


class InternalServerError(HTTPFault):
    status = 500
    code = "INTERNAL_SERVER_ERROR"
    default_message = "Internal Server Error"
    domain = FaultDomain.SYSTEM
