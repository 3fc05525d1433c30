"""
Core modules for integration_client.
"""
from .base_client import IntegrationClient
from .request_builder import (
    build_url,
    build_headers,
    build_body,
    build_query_string,
    flatten_params,
    form_encode,
    join_endpoint,
)
from .transport import HttpxTransport, Transport, TransportRequest, TransportResponse

__all__ = [
    "IntegrationClient",
    "build_url",
    "build_headers",
    "build_body",
    "build_query_string",
    "flatten_params",
    "form_encode",
    "join_endpoint",
    "HttpxTransport",
    "Transport",
    "TransportRequest",
    "TransportResponse",
]
