"""
Error taxonomy for integration_client.

Configuration and builder errors are raised synchronously. Transport
failures are raised by transports only and captured by the client into
``last_error`` instead of propagating.
"""
from typing import Optional


class IntegrationClientError(Exception):
    """Base class for integration_client errors."""


class InvalidConfiguration(IntegrationClientError, ValueError):
    """Raised for a bad base URL, timeout or authentication configuration."""


class UnsupportedOperation(IntegrationClientError):
    """Raised when a builder call conflicts with the client mode."""


class FileNotFound(IntegrationClientError, FileNotFoundError):
    """Raised when a file queued for upload does not exist."""


class TransportError(IntegrationClientError):
    """Raised by a transport when no HTTP response was received.

    Covers connection, TLS and timeout failures as well as redirect loops.
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause
