"""
Configurable synchronous HTTP request client.

Builds one outbound request from composable pieces (method, endpoint,
query parameters, body, headers, authentication), executes it over an
httpx-backed transport, and normalizes the outcome into a Response.
"""
from .types import (
    HttpMethod,
    FileAttachment,
    LogEntry,
    RequestSpec,
    Response,
)
from .errors import (
    IntegrationClientError,
    InvalidConfiguration,
    UnsupportedOperation,
    FileNotFound,
    TransportError,
)
from .headers import Header, HeaderSet
from .config import ClientConfig, TimeoutConfig
from .auth.auth_handler import (
    AuthHandler,
    NoAuth,
    BearerAuth,
    BasicAuth,
    ApiKeyAuth,
    create_auth,
)
from .core.transport import (
    Transport,
    TransportRequest,
    TransportResponse,
    HttpxTransport,
)
from .core.base_client import IntegrationClient
from .retry import BackoffStrategy, RetryConfig, RetryExecutor, RetryResult
from .factory import create_client, create_json_client

__all__ = [
    # Types
    "HttpMethod",
    "FileAttachment",
    "LogEntry",
    "RequestSpec",
    "Response",
    # Errors
    "IntegrationClientError",
    "InvalidConfiguration",
    "UnsupportedOperation",
    "FileNotFound",
    "TransportError",
    # Headers
    "Header",
    "HeaderSet",
    # Config
    "ClientConfig",
    "TimeoutConfig",
    # Auth
    "AuthHandler",
    "NoAuth",
    "BearerAuth",
    "BasicAuth",
    "ApiKeyAuth",
    "create_auth",
    # Transport
    "Transport",
    "TransportRequest",
    "TransportResponse",
    "HttpxTransport",
    # Client
    "IntegrationClient",
    # Retry
    "BackoffStrategy",
    "RetryConfig",
    "RetryExecutor",
    "RetryResult",
    # Factory
    "create_client",
    "create_json_client",
]

__version__ = "0.1.0"
