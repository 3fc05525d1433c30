"""
Auth handler utilities for integration_client.

Each authentication scheme is its own type, validated when it is built.
A handler contributes either a request header or transport-level
credentials, never both.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from ..errors import InvalidConfiguration

logger = logging.getLogger(__name__)
LOG_PREFIX = f"[AUTH:{__file__}]"

AUTH_TYPES = ("none", "bearer", "basic", "api_key")


def _mask_value(val: Optional[str]) -> str:
    """Mask sensitive value for logging, showing first 4 chars."""
    if not val:
        return "<empty>"
    if len(val) <= 4:
        return "*" * len(val)
    return val[:4] + "*" * (len(val) - 4)


class AuthHandler(ABC):
    """Auth handler interface."""

    type: str = "none"

    @abstractmethod
    def get_header(self) -> Optional[Tuple[str, str]]:
        """Header to append to the request, if any."""
        ...

    def get_credentials(self) -> Optional[Tuple[str, str]]:
        """Transport-level (username, password) credentials, if any."""
        return None


@dataclass(frozen=True)
class NoAuth(AuthHandler):
    """No authentication."""

    type = "none"

    def get_header(self) -> Optional[Tuple[str, str]]:
        return None


@dataclass(frozen=True)
class BearerAuth(AuthHandler):
    """Bearer token auth."""

    token: str
    type = "bearer"

    def get_header(self) -> Optional[Tuple[str, str]]:
        logger.debug(f"{LOG_PREFIX} BearerAuth.get_header: token={_mask_value(self.token)}")
        return ("Authorization", f"Bearer {self.token}")

    def __repr__(self) -> str:
        return f"BearerAuth(token={_mask_value(self.token)!r})"


@dataclass(frozen=True)
class BasicAuth(AuthHandler):
    """HTTP basic auth, applied as transport credentials."""

    username: str
    password: str
    type = "basic"

    def get_header(self) -> Optional[Tuple[str, str]]:
        return None

    def get_credentials(self) -> Optional[Tuple[str, str]]:
        logger.debug(f"{LOG_PREFIX} BasicAuth.get_credentials: username={self.username}")
        return (self.username, self.password)

    def __repr__(self) -> str:
        return f"BasicAuth(username={self.username!r}, password={_mask_value(self.password)!r})"


@dataclass(frozen=True)
class ApiKeyAuth(AuthHandler):
    """API key sent in a caller-named header."""

    header: str
    key: str
    type = "api_key"

    def get_header(self) -> Optional[Tuple[str, str]]:
        logger.debug(
            f"{LOG_PREFIX} ApiKeyAuth.get_header: header={self.header}, key={_mask_value(self.key)}"
        )
        return (self.header, self.key)

    def __repr__(self) -> str:
        return f"ApiKeyAuth(header={self.header!r}, key={_mask_value(self.key)!r})"


def _require_str(credentials: Mapping[str, Any], field_name: str, auth_type: str) -> str:
    value = credentials.get(field_name)
    if not isinstance(value, str):
        raise InvalidConfiguration(
            f"{auth_type} authentication requires a string '{field_name}' in credentials"
        )
    return value


def create_auth(auth_type: Optional[str], credentials: Any = None) -> AuthHandler:
    """Create an auth handler from a ``(type, credentials)`` pair.

    Accepted shapes:
    - bearer: a token string, or ``{"token": ...}``
    - basic: ``{"username": ..., "password": ...}`` or a 2-tuple
    - api_key: ``{"header": ..., "key": ...}``
    - none / None: no authentication

    Raises:
        InvalidConfiguration: unknown type or malformed credentials.
    """
    if auth_type is None:
        return NoAuth()
    if not isinstance(auth_type, str):
        raise InvalidConfiguration(f"Authentication type must be a string, got {auth_type!r}")

    normalized = auth_type.strip().lower().replace("-", "_")
    logger.debug(f"{LOG_PREFIX} create_auth: type={normalized}")

    if normalized == "none":
        return NoAuth()

    if normalized == "bearer":
        if isinstance(credentials, Mapping):
            credentials = credentials.get("token")
        if not isinstance(credentials, str) or not credentials:
            raise InvalidConfiguration("bearer authentication requires a non-empty token")
        return BearerAuth(credentials)

    if normalized == "basic":
        if isinstance(credentials, (tuple, list)) and len(credentials) == 2:
            credentials = {"username": credentials[0], "password": credentials[1]}
        if not isinstance(credentials, Mapping):
            raise InvalidConfiguration(
                "basic authentication requires {'username': ..., 'password': ...} credentials"
            )
        return BasicAuth(
            _require_str(credentials, "username", "basic"),
            _require_str(credentials, "password", "basic"),
        )

    if normalized == "api_key":
        if not isinstance(credentials, Mapping):
            raise InvalidConfiguration(
                "api_key authentication requires {'header': ..., 'key': ...} credentials"
            )
        header = _require_str(credentials, "header", "api_key")
        if not header.strip() or ":" in header:
            raise InvalidConfiguration(f"Invalid api_key header name: {header!r}")
        return ApiKeyAuth(header.strip(), _require_str(credentials, "key", "api_key"))

    raise InvalidConfiguration(
        f"Invalid auth type: {auth_type}. Must be one of: {list(AUTH_TYPES)}"
    )


def auth_from_config(authentication: Any) -> AuthHandler:
    """Create an auth handler from a ``{"type", "credentials"}`` mapping.

    Both keys are required; a handler instance is passed through unchanged.
    """
    if authentication is None:
        return NoAuth()
    if isinstance(authentication, AuthHandler):
        return authentication
    if not isinstance(authentication, Mapping) or \
            "type" not in authentication or "credentials" not in authentication:
        raise InvalidConfiguration(
            'Authentication configuration requires "type" and "credentials".'
        )
    return create_auth(authentication["type"], authentication["credentials"])
