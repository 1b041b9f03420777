"""
Error taxonomy for the proxy layer.

Each error carries the HTTP status and the client-facing message; the
FastAPI exception handlers in main.py turn them into `{"error": ...}` bodies.
"""
from typing import Any, Dict, Optional


class ProxyError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class BadRequestError(ProxyError):
    """Malformed identifier or unknown logical endpoint."""

    status_code = 400
    default_message = "Bad request"


class InvalidMatchIdError(BadRequestError):
    default_message = "Invalid match ID"


class UnknownEndpointError(BadRequestError):
    default_message = "Unknown endpoint"


class NotFoundError(ProxyError):
    """Well-formed identifier with no matching record."""

    status_code = 404
    default_message = "Match not found"


class UpstreamUnavailableError(ProxyError):
    """Network failure, non-2xx status or unusable body from a live provider."""

    status_code = 502
    default_message = "Upstream unavailable"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[str] = None,
        url: Optional[str] = None,
        upstream_status: Optional[int] = None,
    ):
        super().__init__(message, details)
        self.url = url
        self.upstream_status = upstream_status


class CooldownActiveError(ProxyError):
    """A live refresh was requested before the cooldown window elapsed."""

    status_code = 429
    default_message = "Refresh cooldown active"

    def __init__(self, retry_after: int, message: Optional[str] = None):
        super().__init__(message)
        self.retry_after = retry_after

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.default_message,
            "message": self.message,
            "retryAfter": self.retry_after,
        }
