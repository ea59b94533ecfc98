"""
Domain exceptions for the StoreHub client.

Implements a hierarchy distinguishing between recoverable runtime errors
(network glitches, rejected requests, stale sessions) that are turned into
operator notices, and fatal errors (configuration issues) that stop the
process.
"""

from __future__ import annotations

from typing import Any, Optional


class StoreHubError(Exception):
    """Base class for all StoreHub client exceptions."""
    pass


class RecoverableError(StoreHubError):
    """
    Errors the operator can recover from by retrying or reopening the order.

    Examples:
    - Backend unreachable
    - Request rejected by the server
    - Response body in an unexpected shape
    """
    pass


class TransportError(RecoverableError):
    """The request never produced an HTTP response (DNS, refused, timeout)."""
    pass


class ApiError(RecoverableError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str, payload: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload

    def __str__(self) -> str:
        return f"{self.message} (HTTP {self.status_code})"


class SessionExpiredError(ApiError):
    """Access token rejected and the refresh token could not renew it."""

    def __init__(self, message: str = "Session expired"):
        super().__init__(401, message)


class EnvelopeError(RecoverableError):
    """Response body did not match the expected shape."""
    pass


class OrderValidationError(StoreHubError):
    """Client-side rejection raised before any request is issued."""
    pass


class FatalError(StoreHubError):
    """
    Errors requiring operator intervention before the client can run.

    Examples:
    - Missing or malformed configuration
    - Unknown session backend
    """
    pass


class ConfigurationError(FatalError):
    """Invalid client configuration."""
    pass
