"""Exceptions raised by the IntelX client."""

from __future__ import annotations

from typing import Optional


class IntelXError(Exception):
    """Base exception for IntelX client errors."""

    pass


class ConfigurationError(IntelXError):
    """Raised when the client configuration is missing or invalid."""

    pass


class RequestConstructionError(IntelXError):
    """Raised when a request cannot be built from the given inputs."""

    pass


class NetworkError(IntelXError):
    """Raised on failures below the HTTP layer (connection, DNS, TLS)."""

    pass


class APITimeoutError(NetworkError):
    """Raised when API request times out."""

    pass


class HTTPStatusError(IntelXError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str, body: Optional[bytes] = None):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.body = body


class DecodeError(IntelXError):
    """Raised when a response payload does not match the expected schema."""

    pass


class ContextCancelled(IntelXError):
    """Raised when the caller cancelled the call."""

    pass


class DeadlineExceeded(ContextCancelled):
    """Raised when the call context's deadline has passed."""

    pass
