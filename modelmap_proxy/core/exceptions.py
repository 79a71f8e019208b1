"""Core exceptions for the proxy.

Every exception raised on a request path derives from ``ProxyError`` and
knows how to render itself as an OpenAI-style error body, so the app only
needs a single exception handler.
"""

from typing import Any, Optional

STATUS_ERROR_TYPES = {
    400: "invalid_request_error",
    401: "authentication_error",
    402: "insufficient_credits",
    403: "moderation_error",
    404: "not_found_error",
    408: "timeout_error",
    413: "request_too_large",
    429: "rate_limit_error",
    502: "upstream_error",
    529: "overloaded_error",
}


def error_type_for_status(status_code: int) -> str:
    """Map an upstream HTTP status to the error type reported to callers."""
    return STATUS_ERROR_TYPES.get(status_code, "unknown_error")


class ProxyError(Exception):
    """Base exception for proxy errors."""

    status_code = 500
    error_type = "unknown_error"

    def __init__(
        self,
        message: str,
        *,
        param: Optional[str] = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.param = param
        self.code = code

    def to_payload(self) -> dict[str, Any]:
        """Render the ``{"error": {...}}`` body returned to the caller."""
        error: dict[str, Any] = {"message": self.message, "type": self.error_type}
        if self.param is not None:
            error["param"] = self.param
        if self.code is not None:
            error["code"] = self.code
        return {"error": error}


class AuthError(ProxyError):
    """Raised when a forwarding route is called without a usable bearer token."""

    status_code = 401
    error_type = "authentication_error"

    def __init__(self, message: str = "Missing Bearer token") -> None:
        super().__init__(message)


class ValidationError(ProxyError):
    """Raised when an incoming request is invalid."""

    status_code = 400
    error_type = "invalid_request_error"


class UpstreamError(ProxyError):
    """Raised when the upstream answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_type = error_type_for_status(status_code)


class NetworkError(ProxyError):
    """Raised when the upstream could not be reached or timed out.

    The caller only ever sees a generic message; the underlying httpx
    exception is kept as ``__cause__`` for logging.
    """

    status_code = 408
    error_type = "timeout_error"

    def __init__(self, message: str = "Network error or timeout") -> None:
        super().__init__(message)
