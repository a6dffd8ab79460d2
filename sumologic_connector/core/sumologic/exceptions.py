"""Sumo Logic API exceptions for error handling."""
from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ErrorResponse
    from .ratelimit import RateLimitDescription


class SumoLogicError(Exception):
    """Base exception for all Sumo Logic API operations.

    Attributes:
        message: Human readable description
        rate_limit: Rate-limit metadata observed with the failure (may be None)
        operation: Name of the API operation that failed, set by the API surface
    """

    def __init__(self, message: str, *, rate_limit: Optional["RateLimitDescription"] = None):
        self.message = message
        self.rate_limit = rate_limit
        self.operation: Optional[str] = None
        super().__init__(message)

    def with_operation(self, operation: str) -> "SumoLogicError":
        """Attach the failing operation name, keeping the innermost one."""
        if self.operation is None:
            self.operation = operation
        return self

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message


class URLConstructionError(SumoLogicError):
    """Malformed base URL or path template. No request was attempted."""
    pass


class TransportError(SumoLogicError):
    """Network or serialization failure while talking to the API."""
    pass


class RequestCancelledError(TransportError):
    """The caller cancelled the request before a result was delivered."""
    pass


class SumoLogicAPIError(SumoLogicError):
    """Non-2xx response from the Sumo Logic API.

    Attributes:
        status_code: HTTP status code
        error: Decoded error body (code, message, target)
        url: Request URL that failed
    """

    def __init__(
        self,
        status_code: int,
        error: "ErrorResponse",
        url: str,
        *,
        rate_limit: Optional["RateLimitDescription"] = None,
    ):
        self.status_code = status_code
        self.error = error
        self.url = url
        super().__init__(f"[{status_code}] {error.describe()}", rate_limit=rate_limit)

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def target(self) -> Optional[str]:
        return self.error.target


class NotFoundError(SumoLogicAPIError):
    """The requested resource does not exist (HTTP 404)."""
    pass
