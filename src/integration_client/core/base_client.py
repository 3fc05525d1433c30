"""
Integration client: fluent request builder over a pluggable transport.
"""
import json
import logging
import os
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..auth.auth_handler import ApiKeyAuth, AuthHandler, create_auth
from ..config import (
    ClientConfig,
    TimeoutConfig,
    normalize_headers,
    normalize_timeout,
    resolve_config,
    validate_base_url,
)
from ..console import mask_headers, print_request, print_response
from ..errors import FileNotFound, InvalidConfiguration, TransportError, UnsupportedOperation
from ..headers import HeaderInput, HeaderSet
from ..retry import RetryConfig, RetryEventListener, RetryExecutor, ShouldRetry
from ..types import (
    JSON_CONTENT_TYPE,
    FileAttachment,
    LogEntry,
    ParamValue,
    RequestSpec,
    Response,
)
from .request_builder import build_body, build_headers, build_url, flatten_params, join_endpoint
from .transport import HttpxTransport, Transport, TransportRequest

logger = logging.getLogger("integration_client.base_client")

ResultCallback = Callable[[Dict[str, Any]], Any]
HeadersArg = Union[HeaderSet, Iterable[HeaderInput]]


def _collect_response_headers(pairs: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """Lower-case header names; the first occurrence of a name wins."""
    result: Dict[str, str] = {}
    for name, value in pairs:
        key = name.strip().lower()
        if key and key not in result:
            result[key] = value.strip()
    return result


class IntegrationClient:
    """Synchronous HTTP client with a fluent request builder.

    Configure the client once, describe a request with the builder methods
    (or a verb shortcut), then ``execute``. Each execute consumes the
    pending request: method, endpoint, params, data and one-shot headers
    are reset whether the call succeeds or not.

    Not safe for concurrent use; share one instance per thread at most.
    """

    def __init__(
        self,
        config: Union[ClientConfig, Mapping[str, Any], None] = None,
        transport: Optional[Transport] = None,
    ):
        self._config = resolve_config(config)
        self._transport: Transport = transport if transport is not None else HttpxTransport()
        self.logs: List[LogEntry] = []

        self._method: Optional[str] = None
        self._endpoint: Optional[str] = None
        self._params: Tuple[Tuple[str, ParamValue], ...] = ()
        self._data: Any = None
        self._request_headers: Optional[HeaderSet] = None

        self.last_response: Optional[Response] = None
        self.last_error: Optional[str] = None

        if self._config.use_json:
            self.set_use_json(True)

    # ------------------------------------------------------------------
    # Configuration surface
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> Optional[str]:
        return self._config.base_url

    @property
    def headers(self) -> HeaderSet:
        """Default headers sent with every request."""
        return self._config.headers

    @property
    def authentication(self) -> AuthHandler:
        return self._config.auth

    @property
    def timeout(self) -> TimeoutConfig:
        return self._config.timeout

    @property
    def verify_ssl(self) -> bool:
        return self._config.verify_ssl

    @property
    def user_agent(self) -> Optional[str]:
        return self._config.user_agent

    @property
    def use_json(self) -> bool:
        return self._config.use_json

    @property
    def logging_enabled(self) -> bool:
        return self._config.enable_logging

    def set_base_url(self, url: str) -> "IntegrationClient":
        """Set the base URL; raises InvalidConfiguration unless absolute."""
        self._config.base_url = validate_base_url(url)
        return self

    def set_authentication(
        self,
        auth_type: Union[str, AuthHandler, None],
        credentials: Any = None,
    ) -> "IntegrationClient":
        """Set authentication from a type name and credentials.

        ``set_authentication(None)`` removes authentication.
        """
        if isinstance(auth_type, AuthHandler):
            self._config.auth = auth_type
        else:
            self._config.auth = create_auth(auth_type, credentials)
        return self

    def set_headers(self, headers: Union[HeaderSet, Iterable[HeaderInput], None]) -> "IntegrationClient":
        """Replace the default header set."""
        self._config.headers = normalize_headers(headers)
        return self

    def add_header(self, name: str, value: Optional[str] = None) -> "IntegrationClient":
        """Append a default header; ``"Name: value"`` strings are split."""
        self._config.headers.add(name, value)
        return self

    def remove_header(self, name: str, value: Optional[str] = None) -> "IntegrationClient":
        """Remove default headers by name, optionally only those with ``value``."""
        self._config.headers.remove(name, value)
        return self

    def set_use_json(self, use_json: bool = True) -> "IntegrationClient":
        """Toggle JSON mode and the matching Content-Type/Accept headers."""
        self._config.use_json = bool(use_json)

        if use_json:
            self.remove_header("Content-Type")
            self.remove_header("Accept")
            self.add_header("Content-Type", JSON_CONTENT_TYPE)
            self.add_header("Accept", JSON_CONTENT_TYPE)
        else:
            self.remove_header("Content-Type", JSON_CONTENT_TYPE)
            self.remove_header("Accept", JSON_CONTENT_TYPE)

        return self

    def set_timeout(self, timeout: Union[TimeoutConfig, float]) -> "IntegrationClient":
        self._config.timeout = normalize_timeout(timeout)
        return self

    def set_verify_ssl(self, verify_ssl: bool = True) -> "IntegrationClient":
        self._config.verify_ssl = bool(verify_ssl)
        return self

    def set_user_agent(self, user_agent: Optional[str]) -> "IntegrationClient":
        self._config.user_agent = user_agent or None
        return self

    def enable_logging(self, enabled: bool = True) -> "IntegrationClient":
        self._config.enable_logging = bool(enabled)
        return self

    def log(self, message: str, data: Any = None) -> "IntegrationClient":
        """Record a log entry when logging is enabled."""
        logger.debug(f"{message}: {data}" if data is not None else message)
        if self._config.enable_logging:
            entry = LogEntry(message=message, data=data)
            self.logs.append(entry)
            if self._config.log_sink is not None:
                self._config.log_sink(entry)
        return self

    # ------------------------------------------------------------------
    # Request builder
    # ------------------------------------------------------------------

    @property
    def method(self) -> Optional[str]:
        return self._method

    @property
    def endpoint(self) -> Optional[str]:
        return self._endpoint

    @property
    def params(self) -> Dict[str, ParamValue]:
        return dict(self._params)

    @property
    def data(self) -> Any:
        return self._data

    @property
    def request_headers(self) -> Optional[HeaderSet]:
        return self._request_headers

    def set_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        data: Any = None,
        headers: Union[HeaderSet, Iterable[HeaderInput], None] = None,
    ) -> "IntegrationClient":
        """Configure a whole request; ``headers`` apply to this call only."""
        self.set_method(method)
        self.set_endpoint(endpoint)
        if params is not None:
            self.set_params(params)
        if data is not None:
            self.set_data(data)
        if headers is not None:
            self._request_headers = normalize_headers(headers)
        return self

    def set_method(self, method: str) -> "IntegrationClient":
        self._method = method.strip().upper()
        return self

    def set_endpoint(self, endpoint: str) -> "IntegrationClient":
        self._endpoint = join_endpoint(self._config.base_url, endpoint)
        return self

    def set_params(self, params: Optional[Mapping[str, Any]] = None) -> "IntegrationClient":
        """Set query params; list values are stored comma-joined."""
        self._params = flatten_params(params)
        return self

    def set_data(self, data: Any = None) -> "IntegrationClient":
        """Replace the request body (mapping or raw str/bytes)."""
        self._data = dict(data) if isinstance(data, Mapping) else data
        return self

    def add_field(self, key: str, value: Any) -> "IntegrationClient":
        if not isinstance(self._data, dict):
            self._data = {}
        self._data[key] = value
        return self

    def add_file(self, key: str, file_path: str) -> "IntegrationClient":
        """Queue a file for multipart upload.

        Raises:
            UnsupportedOperation: JSON mode is active.
            FileNotFound: ``file_path`` does not exist.
        """
        if self._config.use_json:
            raise UnsupportedOperation(
                "File upload is not supported with JSON. Disable JSON mode first."
            )
        if not os.path.isfile(file_path):
            raise FileNotFound(f"File not found: {file_path}")

        if not isinstance(self._data, dict):
            self._data = {}
        self._data[key] = FileAttachment(os.path.realpath(file_path))
        return self

    def pending_request(self) -> RequestSpec:
        """Snapshot the pending request without consuming it."""
        if not self._method:
            raise InvalidConfiguration("Request method is not set")
        if not self._endpoint:
            raise InvalidConfiguration("Request endpoint is not set")

        data = dict(self._data) if isinstance(self._data, dict) else self._data
        return RequestSpec(
            method=self._method,
            url=self._endpoint,
            params=self._params,
            data=data,
            headers=self._request_headers.as_pairs() if self._request_headers else (),
        )

    # ------------------------------------------------------------------
    # Response state
    # ------------------------------------------------------------------

    @property
    def status_code(self) -> Optional[int]:
        return self.last_response.status if self.last_response else None

    @property
    def response_headers(self) -> Optional[Dict[str, str]]:
        if self.last_response is None or self.last_response.status is None:
            return None
        return self.last_response.headers

    @property
    def response_body(self) -> Any:
        return self.last_response.body if self.last_response else None

    def json_response(self) -> Any:
        """Return the last response body as decoded JSON, or None."""
        if self.last_response is None:
            return None
        if self._config.use_json:
            return self.last_response.body
        return self.last_response.json()

    def clear_request(self) -> "IntegrationClient":
        self._method = None
        self._endpoint = None
        self._params = ()
        self._data = None
        self._request_headers = None
        return self

    def clear_response(self) -> "IntegrationClient":
        self.last_response = None
        self.last_error = None
        return self

    def clear_last_error(self) -> "IntegrationClient":
        self.last_error = None
        return self

    def clear_logs(self) -> "IntegrationClient":
        self.logs = []
        return self

    def clear(self) -> "IntegrationClient":
        """Reset pending request and response state."""
        self.clear_request()
        self.clear_response()
        return self

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _take_request(self) -> RequestSpec:
        try:
            return self.pending_request()
        finally:
            self.clear_request()

    def _decode_body(self, text: str) -> Any:
        if not self._config.use_json:
            return text
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            logger.debug("IntegrationClient: response body is not valid JSON, keeping raw text")
            return text

    def _sensitive_headers(self) -> List[str]:
        auth = self._config.auth
        return [auth.header] if isinstance(auth, ApiKeyAuth) else []

    def _send(self, spec: RequestSpec) -> Response:
        """Perform one round trip for ``spec`` and record the outcome."""
        config = self._config
        url = build_url(spec)
        headers = build_headers(config.headers, spec.headers, config.auth)
        content, form_fields, files = build_body(spec, headers, config.use_json)

        request = TransportRequest(
            method=spec.method,
            url=url,
            headers=list(headers.as_pairs()),
            content=content,
            form_fields=form_fields,
            files=files,
            credentials=config.auth.get_credentials(),
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
            user_agent=config.user_agent,
        )

        masked = mask_headers(request.headers, self._sensitive_headers())
        self.log("Sending request", {"method": spec.method, "url": url, "headers": masked})
        if config.debug:
            print_request(spec.method, url, request.headers, spec.data, self._sensitive_headers())

        try:
            raw = self._transport.send(request)
        except TransportError as e:
            response = Response(error=str(e) or type(e).__name__, url=url)
            logger.warning(f"IntegrationClient: {spec.method} {url} failed: {response.error}")
            self.log("Transport error", {"url": url, "error": response.error})
        else:
            response = Response(
                status=raw.status,
                headers=_collect_response_headers(raw.headers),
                body=self._decode_body(raw.text),
                url=url,
            )
            self.log("Received response", {"url": url, "status": response.status})

        if config.debug:
            print_response(url, response.status, response.headers, response.body, response.error)

        self.last_response = response
        self.last_error = response.error
        return response

    def execute(self) -> Response:
        """Send the pending request.

        Transport failures are not raised: they come back as a Response with
        ``error`` set (also stored in ``last_error``). The returned Response is
        truthy iff the status is 2xx.

        Raises:
            InvalidConfiguration: method or endpoint missing.
        """
        self.clear_response()
        spec = self._take_request()
        return self._send(spec)

    def execute_with_retry(
        self,
        max_attempts: int = 3,
        delay_seconds: float = 1,
        retry_config: Optional[RetryConfig] = None,
        should_retry: Optional[ShouldRetry] = None,
        listeners: Iterable[RetryEventListener] = (),
    ) -> Response:
        """Send the pending request, retrying failed attempts.

        The same request is re-sent on every attempt. By default transport
        failures and 5xx responses are retried with a fixed delay between
        attempts, ignoring any Retry-After header; ``retry_config`` selects
        another backoff strategy (and Retry-After handling) and
        ``should_retry`` replaces the retry policy.
        """
        if retry_config is None:
            retry_config = RetryConfig(
                max_attempts=max_attempts,
                base_delay_seconds=delay_seconds,
                max_delay_seconds=max(30.0, delay_seconds),
                respect_retry_after=False,
            )
        executor = RetryExecutor(retry_config)
        for listener in listeners:
            executor.on(listener)

        self.clear_response()
        spec = self._take_request()

        def attempt() -> Response:
            self.clear_response()
            return self._send(spec)

        result = executor.run(attempt, should_retry)
        self.log("Retry finished", {"attempts": result.attempts, "status": result.response.status})
        return result.response

    def execute_with_callbacks(
        self,
        on_success: ResultCallback,
        on_error: ResultCallback,
    ) -> Any:
        """Execute once and dispatch the outcome to a callback.

        ``on_success`` gets ``{status, headers, body}`` for a status in
        ``[200, 400)``; ``on_error`` gets ``{status, headers, error, body}``
        for a status of 400 or above or a transport failure. Returns the
        callback's result, or None when neither applies.
        """
        response = self.execute()
        status = response.status

        if response.error is None and status is not None and 200 <= status < 400:
            return on_success({
                "status": status,
                "headers": response.headers,
                "body": response.body,
            })
        if (status is not None and status >= 400) or response.error:
            return on_error({
                "status": status,
                "headers": response.headers if status is not None else None,
                "error": response.error,
                "body": response.body,
            })
        return None

    # ------------------------------------------------------------------
    # Verb shortcuts
    # ------------------------------------------------------------------

    def _shortcut(
        self,
        method: str,
        endpoint: str,
        params: Optional[Mapping[str, Any]],
        data: Any = None,
        headers: Optional[HeadersArg] = None,
    ) -> Response:
        self.clear()
        self.set_request(method, endpoint, params=params or {}, data=data, headers=headers)
        return self.execute()

    def get(self, endpoint: str, params: Optional[Mapping[str, Any]] = None, headers: Optional[HeadersArg] = None) -> Response:
        """GET request."""
        return self._shortcut("GET", endpoint, params, headers=headers)

    def post(self, endpoint: str, data: Any = None, params: Optional[Mapping[str, Any]] = None, headers: Optional[HeadersArg] = None) -> Response:
        """POST request."""
        return self._shortcut("POST", endpoint, params, data, headers)

    def put(self, endpoint: str, data: Any = None, params: Optional[Mapping[str, Any]] = None, headers: Optional[HeadersArg] = None) -> Response:
        """PUT request."""
        return self._shortcut("PUT", endpoint, params, data, headers)

    def patch(self, endpoint: str, data: Any = None, params: Optional[Mapping[str, Any]] = None, headers: Optional[HeadersArg] = None) -> Response:
        """PATCH request."""
        return self._shortcut("PATCH", endpoint, params, data, headers)

    def delete(self, endpoint: str, params: Optional[Mapping[str, Any]] = None, headers: Optional[HeadersArg] = None) -> Response:
        """DELETE request."""
        return self._shortcut("DELETE", endpoint, params, headers=headers)

    def __repr__(self) -> str:
        return (
            f"IntegrationClient(base_url={self.base_url!r}, "
            f"auth={self._config.auth!r}, use_json={self.use_json})"
        )
