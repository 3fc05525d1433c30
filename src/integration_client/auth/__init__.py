"""
Auth handlers for integration_client.
"""
from .auth_handler import (
    AUTH_TYPES,
    AuthHandler,
    NoAuth,
    BearerAuth,
    BasicAuth,
    ApiKeyAuth,
    create_auth,
    auth_from_config,
)

__all__ = [
    "AUTH_TYPES",
    "AuthHandler",
    "NoAuth",
    "BearerAuth",
    "BasicAuth",
    "ApiKeyAuth",
    "create_auth",
    "auth_from_config",
]
