"""
Type definitions for integration_client.
"""
import json
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Literal, Mapping, Optional, Tuple, Union

# HTTP methods
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

# Methods whose params go into the query string
QUERY_METHODS = ("GET", "DELETE")

# Methods that carry a request body
BODY_METHODS = ("POST", "PUT", "PATCH")

# Query/body scalar after flattening
ParamValue = Union[str, int, float, bool, None]

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
LOG_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class FileAttachment:
    """A local file queued for multipart upload."""

    path: str

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)

    def __str__(self) -> str:
        # Legacy multipart convention: absolute path prefixed with "@"
        return f"@{self.path}"


@dataclass(frozen=True)
class RequestSpec:
    """Immutable snapshot of one outbound request."""

    method: str
    url: str
    params: Tuple[Tuple[str, ParamValue], ...] = ()
    data: Any = None
    headers: Tuple[Tuple[str, str], ...] = ()

    @property
    def has_body(self) -> bool:
        return self.method in BODY_METHODS and bool(self.data)

    @property
    def has_files(self) -> bool:
        return isinstance(self.data, Mapping) and any(
            isinstance(value, FileAttachment) for value in self.data.values()
        )


@dataclass(frozen=True)
class Response:
    """Outcome of one execute call.

    ``status`` is ``None`` when the transport failed before a response was
    received; in that case ``error`` holds the failure text.
    """

    status: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    error: Optional[str] = None
    url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is not None and 200 <= self.status < 300

    @property
    def is_transport_error(self) -> bool:
        return self.error is not None

    @property
    def is_redirect(self) -> bool:
        return self.status is not None and 300 <= self.status < 400

    @property
    def is_client_error(self) -> bool:
        return self.status is not None and 400 <= self.status < 500

    @property
    def is_server_error(self) -> bool:
        return self.status is not None and 500 <= self.status < 600

    def json(self) -> Any:
        """Return the body as decoded JSON, or None when it is not JSON."""
        if self.body is None or isinstance(self.body, (dict, list)):
            return self.body
        if isinstance(self.body, (str, bytes)) and self.body:
            try:
                return json.loads(self.body)
            except ValueError:
                return None
        return None

    def __bool__(self) -> bool:
        return self.ok


@dataclass
class LogEntry:
    """In-memory log record kept by the client when logging is enabled."""

    message: str
    data: Any = None
    timestamp: str = field(
        default_factory=lambda: datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
    )
