"""
API error taxonomy for the report API.

One exception class per HTTP status the API is known to return, a NetworkError
for failures that never produced a response, and classify_error() which sorts
any exception into client / server / network / unknown for the retry policy.
"""

from enum import Enum
from typing import Any, Dict, Optional

import httpx


class ApiError(Exception):
    """
    Base class for all report API errors.

    Attributes:
        message: Error description (from the response body when available)
        status_code: HTTP status (0 when no response was received)
        url: Request URL
        method: Request method
        error_code: API error code from the response body
        details: Extra structured details from the response body
        response_body: Decoded response body, if any
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        url: str = "",
        method: str = "",
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        response_body: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.url = url
        self.method = method
        self.error_code = error_code
        self.details = details
        self.response_body = response_body
        super().__init__(message)

    def describe(self) -> str:
        """Multi-line developer-facing description."""
        parts = [
            f"{type(self).__name__}: {self.message}",
            f"  Status: {self.status_code}",
            f"  Method: {self.method}",
            f"  URL: {self.url}",
        ]
        if self.error_code:
            parts.append(f"  Error Code: {self.error_code}")
        return "\n".join(parts)


class NetworkError(ApiError):
    """Connection failures, timeouts and other errors without an HTTP response."""

    def __init__(self, message: str, url: str = "", method: str = "", status_code: int = 0):
        super().__init__(message, status_code=status_code, url=url, method=method)


class BadRequestError(ApiError):
    """400 Bad Request - client sent invalid data."""


class UnauthorizedError(ApiError):
    """401 Unauthorized - authentication required or failed."""


class ForbiddenError(ApiError):
    """403 Forbidden - authenticated but not permitted."""


class NotFoundError(ApiError):
    """404 Not Found."""


class ConflictError(ApiError):
    """409 Conflict - resource already exists or state conflict."""


class InternalServerError(ApiError):
    """500 Internal Server Error."""


class ServiceUnavailableError(ApiError):
    """503 Service Unavailable."""


class UnknownApiError(ApiError):
    """Any other HTTP error status."""


ERROR_CLASS_BY_STATUS = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    500: InternalServerError,
    503: ServiceUnavailableError,
}


def error_from_response(response: httpx.Response, url: str, method: str) -> ApiError:
    """
    Build the matching ApiError subclass from an error response.

    Understands both body shapes the API uses:
        {"success": false, "error": {"code": ..., "message": ...}}
        {"message": ..., "code": ..., "details": {...}}

    Args:
        response: Error response
        url: Request URL
        method: Request method

    Returns:
        ApiError subclass instance (not raised)
    """
    try:
        body = response.json() if response.content else None
    except ValueError:
        body = None

    message = None
    error_code = None
    details = None

    if isinstance(body, dict):
        nested = body.get("error")
        if isinstance(nested, dict):
            message = nested.get("message")
            error_code = nested.get("code")
        message = message or body.get("message")
        error_code = error_code or body.get("code")
        details = body.get("details")

    if not message:
        message = f"HTTP {response.status_code}: {response.reason_phrase or 'Request failed'}"

    error_class = ERROR_CLASS_BY_STATUS.get(response.status_code, UnknownApiError)
    return error_class(
        message,
        status_code=response.status_code,
        url=url,
        method=method,
        error_code=error_code,
        details=details,
        response_body=body,
    )


class ErrorKind(str, Enum):
    """Retry-relevant classification of a failure."""

    CLIENT = "client"
    SERVER = "server"
    NETWORK = "network"
    UNKNOWN = "unknown"


def classify_error(error: BaseException) -> ErrorKind:
    """
    Classify an exception for retry purposes.

    - NetworkError, httpx timeouts and transport errors: NETWORK
    - HTTP 4xx: CLIENT
    - HTTP 5xx: SERVER
    - anything else: UNKNOWN
    """
    if isinstance(error, (NetworkError, httpx.TransportError)):
        return ErrorKind.NETWORK

    status_code = None
    if isinstance(error, ApiError):
        status_code = error.status_code
    elif isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code

    if status_code is not None:
        if 400 <= status_code < 500:
            return ErrorKind.CLIENT
        if 500 <= status_code < 600:
            return ErrorKind.SERVER

    return ErrorKind.UNKNOWN


def is_client_error(error: BaseException) -> bool:
    return classify_error(error) is ErrorKind.CLIENT
