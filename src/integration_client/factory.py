"""
Factory functions for creating integration clients.
"""
from typing import Any, Mapping, Optional

import httpx

from .config import ClientConfig
from .core.base_client import IntegrationClient
from .core.transport import HttpxTransport, Transport


def create_client(
    config: Optional[Mapping[str, Any]] = None,
    *,
    transport: Optional[Transport] = None,
    httpx_client: Optional[httpx.Client] = None,
    **options: Any,
) -> IntegrationClient:
    """
    Create an IntegrationClient from a construction mapping and/or keywords.

    Keywords override keys of ``config``. Both camelCase construction keys
    and snake_case names are accepted.

    Example:
        client = create_client(
            {"baseURL": "https://api.example.com", "useJson": True},
            authentication={"type": "bearer", "credentials": "token"},
        )
    """
    merged = dict(config or {})
    merged.update(options)

    if transport is None and httpx_client is not None:
        transport = HttpxTransport(httpx_client=httpx_client)

    return IntegrationClient(ClientConfig.from_dict(merged), transport=transport)


def create_json_client(base_url: str, **options: Any) -> IntegrationClient:
    """Create a client in JSON mode for ``base_url``."""
    options.setdefault("use_json", True)
    return create_client(base_url=base_url, **options)
