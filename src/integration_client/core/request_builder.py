"""
Request builder utilities for integration_client.

Pure functions that turn a RequestSpec plus client configuration into the
pieces handed to the transport: target URL, header list and encoded body.
"""
import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode, urlparse

from ..auth.auth_handler import AuthHandler
from ..errors import InvalidConfiguration, UnsupportedOperation
from ..headers import HeaderSet
from ..types import (
    FORM_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    QUERY_METHODS,
    FileAttachment,
    ParamValue,
    RequestSpec,
)

logger = logging.getLogger("integration_client.request_builder")

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def join_endpoint(base_url: Optional[str], endpoint: str) -> str:
    """Join base URL and endpoint with exactly one separating slash.

    Without a base URL the endpoint must itself be an absolute URL.
    """
    if base_url is None:
        parsed = urlparse(endpoint)
        if parsed.scheme in ("http", "https") and parsed.netloc:
            return endpoint
        raise InvalidConfiguration(
            f"Cannot resolve endpoint {endpoint!r}: base URL is not set"
        )
    return f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"


def _scalar(value: Any) -> ParamValue:
    if isinstance(value, _SEQUENCE_TYPES):
        return ",".join("" if v is None else _format_value(v) for v in value)
    return value


def flatten_params(params: Optional[Mapping[str, Any]]) -> Tuple[Tuple[str, ParamValue], ...]:
    """Flatten query params.

    Sequence values are joined with commas; mapping values expand to
    bracket-notation keys (``filter[status]=open``).
    """
    if not params:
        return ()
    pairs: List[Tuple[str, ParamValue]] = []
    for key, value in params.items():
        if isinstance(value, Mapping):
            pairs.extend(_form_pairs(value, str(key)))
        else:
            pairs.append((str(key), _scalar(value)))
    return tuple(pairs)


def _format_value(value: Any) -> str:
    # http_build_query conventions
    if value is True:
        return "1"
    if value is False:
        return "0"
    return str(value)


def _form_pairs(data: Any, prefix: Optional[str] = None) -> Iterable[Tuple[str, str]]:
    """Yield form pairs, using bracket notation for nested values."""
    if isinstance(data, Mapping):
        items = data.items()
    elif isinstance(data, _SEQUENCE_TYPES):
        items = enumerate(data)
    else:
        if prefix is not None and data is not None:
            yield prefix, _format_value(data)
        return

    for key, value in items:
        name = str(key) if prefix is None else f"{prefix}[{key}]"
        if value is None or isinstance(value, FileAttachment):
            continue
        if isinstance(value, (Mapping,) + _SEQUENCE_TYPES):
            yield from _form_pairs(value, name)
        else:
            yield name, _format_value(value)


def build_query_string(params: Iterable[Tuple[str, ParamValue]]) -> str:
    """URL-encode params in insertion order, dropping None values."""
    pairs = [(key, _format_value(value)) for key, value in params if value is not None]
    return urlencode(pairs)


def build_url(spec: RequestSpec) -> str:
    """Resolve the final target URL.

    Params are appended only for GET and DELETE; other methods ignore them.
    """
    url = spec.url
    if spec.params and spec.method in QUERY_METHODS:
        query_str = build_query_string(spec.params)
        if query_str:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}{query_str}"
    logger.debug(f"build_url: method={spec.method}, url={url}")
    return url


def build_headers(
    default_headers: HeaderSet,
    request_headers: Iterable[Tuple[str, str]] = (),
    auth: Optional[AuthHandler] = None,
) -> HeaderSet:
    """Merge default and one-shot headers, then apply the auth header.

    One-shot headers follow the defaults; nothing is deduplicated.
    """
    result = default_headers.copy()
    result.extend(request_headers)

    if auth is not None:
        auth_header = auth.get_header()
        if auth_header:
            result.add(*auth_header)
        logger.debug(f"build_headers: applied auth type={auth.type}")

    return result


def form_encode(data: Any) -> str:
    """Encode a mapping as application/x-www-form-urlencoded."""
    return urlencode(list(_form_pairs(data)))


def build_body(
    spec: RequestSpec,
    headers: HeaderSet,
    use_json: bool,
) -> Tuple[Optional[Union[str, bytes]], Optional[List[Tuple[str, str]]], Optional[Dict[str, FileAttachment]]]:
    """Encode the request body.

    Returns ``(content, form_fields, files)``. ``form_fields`` and ``files``
    are set only for multipart uploads, in which case ``content`` is None.
    In JSON mode a ``Content-Type: application/json`` header is appended to
    ``headers`` unless a content-type header is already present.
    """
    if not spec.has_body:
        return None, None, None

    data = spec.data

    if use_json:
        if not headers.has("Content-Type"):
            headers.add("Content-Type", JSON_CONTENT_TYPE)
        if isinstance(data, (str, bytes)):
            return data, None, None
        try:
            return json.dumps(data), None, None
        except TypeError as e:
            raise UnsupportedOperation(f"Request body is not JSON serializable: {e}") from e

    if isinstance(data, (str, bytes)):
        return data, None, None

    if spec.has_files:
        files = {
            str(key): value
            for key, value in data.items()
            if isinstance(value, FileAttachment)
        }
        return None, list(_form_pairs(data)), files

    if not headers.has("Content-Type"):
        headers.add("Content-Type", FORM_CONTENT_TYPE)
    return form_encode(data), None, None
