"""
Configuration for integration_client.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union
from urllib.parse import urlparse

from .auth.auth_handler import AuthHandler, NoAuth, auth_from_config
from .errors import InvalidConfiguration
from .headers import HeaderInput, HeaderSet
from .types import LogEntry

logger = logging.getLogger("integration_client.config")

DEFAULT_TIMEOUT_SECONDS = 30.0

# Construction keys as accepted in config mappings -> ClientConfig field
_CONFIG_KEYS = {
    "baseURL": "base_url",
    "baseUrl": "base_url",
    "base_url": "base_url",
    "headers": "headers",
    "authentication": "authentication",
    "auth": "authentication",
    "timeout": "timeout",
    "verifySSL": "verify_ssl",
    "verify_ssl": "verify_ssl",
    "userAgent": "user_agent",
    "user_agent": "user_agent",
    "useJson": "use_json",
    "use_json": "use_json",
    "enableLogging": "enable_logging",
    "enable_logging": "enable_logging",
    "debug": "debug",
    "logSink": "log_sink",
    "log_sink": "log_sink",
}


@dataclass
class TimeoutConfig:
    """Timeout configuration in seconds."""

    connect: float = DEFAULT_TIMEOUT_SECONDS
    read: float = DEFAULT_TIMEOUT_SECONDS
    write: float = DEFAULT_TIMEOUT_SECONDS
    pool: float = DEFAULT_TIMEOUT_SECONDS


@dataclass
class ClientConfig:
    """Client configuration.

    ``authentication`` may be an ``AuthHandler`` or a ``{"type", "credentials"}``
    mapping. ``headers`` may be a ``HeaderSet``, a list of ``"Name: value"``
    strings or ``(name, value)`` pairs, or a dict.
    """

    base_url: Optional[str] = None
    headers: Union[HeaderSet, Iterable[HeaderInput], Dict[str, str], None] = None
    authentication: Union[AuthHandler, Mapping[str, Any], None] = None
    timeout: Union[TimeoutConfig, float, None] = DEFAULT_TIMEOUT_SECONDS
    verify_ssl: bool = True
    user_agent: Optional[str] = None
    use_json: bool = False
    enable_logging: bool = False
    debug: bool = False
    log_sink: Optional[Callable[[LogEntry], None]] = None

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "ClientConfig":
        """Build a config from a construction mapping.

        Accepts the camelCase keys (``baseURL``, ``verifySSL``, ``userAgent``,
        ``useJson``) as well as snake_case field names. Unknown keys raise.
        """
        kwargs: Dict[str, Any] = {}
        for key, value in options.items():
            if key not in _CONFIG_KEYS:
                raise InvalidConfiguration(f"Unknown configuration key: {key}")
            kwargs[_CONFIG_KEYS[key]] = value
        return cls(**kwargs)


@dataclass
class ResolvedConfig:
    """Client configuration with defaults applied and values validated."""

    base_url: Optional[str]
    headers: HeaderSet
    auth: AuthHandler
    timeout: TimeoutConfig
    verify_ssl: bool
    user_agent: Optional[str]
    use_json: bool
    enable_logging: bool
    debug: bool
    log_sink: Optional[Callable[[LogEntry], None]] = field(default=None, repr=False)


def is_ssl_verify_disabled_by_env() -> bool:
    """
    Check if SSL verification is disabled via environment variables.

    Returns True if any of these are set:
    - NODE_TLS_REJECT_UNAUTHORIZED=0
    - SSL_CERT_VERIFY=0
    """
    node_tls = os.environ.get("NODE_TLS_REJECT_UNAUTHORIZED", "")
    ssl_cert_verify = os.environ.get("SSL_CERT_VERIFY", "")
    return node_tls == "0" or ssl_cert_verify == "0"


def validate_base_url(url: Any) -> str:
    """Validate an absolute URL and strip trailing slashes."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidConfiguration(f"Invalid URL: {url}")

    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidConfiguration(f"Invalid URL: {url}")
    if parsed.hostname is None or " " in url.strip():
        raise InvalidConfiguration(f"Invalid URL: {url}")
    try:
        parsed.port
    except ValueError as e:
        raise InvalidConfiguration(f"Invalid URL: {url}") from e

    return url.strip().rstrip("/")


def normalize_timeout(timeout: Union[TimeoutConfig, float, None]) -> TimeoutConfig:
    """Normalize timeout config."""
    if timeout is None:
        return TimeoutConfig()
    if isinstance(timeout, bool):
        raise InvalidConfiguration(f"Invalid timeout: {timeout!r}")
    if isinstance(timeout, (int, float)):
        if timeout < 0:
            raise InvalidConfiguration(f"Timeout must be non-negative, got {timeout}")
        return TimeoutConfig(connect=timeout, read=timeout, write=timeout, pool=timeout)
    if isinstance(timeout, TimeoutConfig):
        for name in ("connect", "read", "write", "pool"):
            if getattr(timeout, name) < 0:
                raise InvalidConfiguration(f"Timeout '{name}' must be non-negative")
        return timeout
    raise InvalidConfiguration(f"Invalid timeout: {timeout!r}")


def normalize_headers(headers: Union[HeaderSet, Iterable[HeaderInput], None]) -> HeaderSet:
    """Copy caller-supplied headers into a fresh HeaderSet."""
    if headers is None:
        return HeaderSet()
    if isinstance(headers, HeaderSet):
        return headers.copy()
    try:
        return HeaderSet(headers)
    except (TypeError, ValueError) as e:
        raise InvalidConfiguration(f"Invalid headers: {e}") from e


def resolve_config(config: Union[ClientConfig, Mapping[str, Any], None]) -> ResolvedConfig:
    """Validate configuration and apply defaults."""
    if config is None:
        config = ClientConfig()
    elif isinstance(config, Mapping):
        config = ClientConfig.from_dict(config)

    base_url = validate_base_url(config.base_url) if config.base_url is not None else None
    auth = auth_from_config(config.authentication) if config.authentication is not None else NoAuth()

    verify_ssl = bool(config.verify_ssl)
    if verify_ssl and is_ssl_verify_disabled_by_env():
        logger.warning("resolve_config: SSL verification disabled by environment")
        verify_ssl = False

    return ResolvedConfig(
        base_url=base_url,
        headers=normalize_headers(config.headers),
        auth=auth,
        timeout=normalize_timeout(config.timeout),
        verify_ssl=verify_ssl,
        user_agent=config.user_agent or None,
        use_json=bool(config.use_json),
        enable_logging=bool(config.enable_logging),
        debug=bool(config.debug),
        log_sink=config.log_sink,
    )

