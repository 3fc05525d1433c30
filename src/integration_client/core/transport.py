"""
Transport layer for integration_client.

The client never touches sockets itself; it hands a fully built
TransportRequest to a Transport and gets back a TransportResponse or a
TransportError. HttpxTransport is the default implementation.
"""
import logging
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

import httpx

from ..config import TimeoutConfig
from ..errors import TransportError
from ..types import FileAttachment

logger = logging.getLogger("integration_client.transport")


@dataclass
class TransportRequest:
    """Everything a transport needs for one round trip."""

    method: str
    url: str
    headers: List[Tuple[str, str]] = field(default_factory=list)
    content: Optional[Union[str, bytes]] = None
    form_fields: Optional[List[Tuple[str, str]]] = None
    files: Optional[Dict[str, FileAttachment]] = None
    credentials: Optional[Tuple[str, str]] = None
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    verify_ssl: bool = True
    user_agent: Optional[str] = None
    follow_redirects: bool = True


@dataclass
class TransportResponse:
    """Raw response as received by the transport."""

    status: int
    headers: List[Tuple[str, str]] = field(default_factory=list)
    text: str = ""
    url: Optional[str] = None


class Transport(Protocol):
    """Transport interface."""

    def send(self, request: TransportRequest) -> TransportResponse:
        """Perform one HTTP round trip.

        Raises:
            TransportError: no response was received.
        """
        ...


def _to_httpx_timeout(timeout: TimeoutConfig) -> httpx.Timeout:
    return httpx.Timeout(
        connect=timeout.connect,
        read=timeout.read,
        write=timeout.write,
        pool=timeout.pool,
    )


def _request_headers(request: TransportRequest) -> List[Tuple[str, str]]:
    headers = list(request.headers)
    if request.user_agent and not any(
        name.lower() == "user-agent" for name, _ in headers
    ):
        headers.append(("User-Agent", request.user_agent))
    return headers


class HttpxTransport:
    """Transport backed by httpx.

    By default a short-lived ``httpx.Client`` is opened for each send so that
    sockets never outlive the call. A caller-owned client can be injected
    instead; its lifetime is then the caller's responsibility and its own
    TLS settings apply.
    """

    def __init__(
        self,
        httpx_client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._httpx_client = httpx_client
        self._transport = transport

    def _create_client(self, request: TransportRequest) -> httpx.Client:
        kwargs: Dict[str, Any] = {
            "timeout": _to_httpx_timeout(request.timeout),
            "verify": request.verify_ssl,
            "follow_redirects": request.follow_redirects,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.Client(**kwargs)

    def send(self, request: TransportRequest) -> TransportResponse:
        logger.debug(f"HttpxTransport.send: {request.method} {request.url}")
        try:
            with ExitStack() as stack:
                client = self._httpx_client
                if client is None:
                    client = stack.enter_context(self._create_client(request))

                files = None
                if request.files:
                    files = {
                        key: (attachment.filename, stack.enter_context(open(attachment.path, "rb")))
                        for key, attachment in request.files.items()
                    }

                response = client.request(
                    method=request.method,
                    url=request.url,
                    headers=_request_headers(request),
                    content=request.content,
                    data=dict(request.form_fields) if request.form_fields is not None else None,
                    files=files,
                    auth=request.credentials,
                    timeout=_to_httpx_timeout(request.timeout),
                    follow_redirects=request.follow_redirects,
                )
                return TransportResponse(
                    status=response.status_code,
                    headers=list(response.headers.multi_items()),
                    text=response.text,
                    url=str(response.url),
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            message = str(e) or type(e).__name__
            logger.warning(f"HttpxTransport.send: {request.method} {request.url} failed: {message}")
            raise TransportError(message, e) from e
        except ValueError as e:
            # httpx rejects header values it cannot encode
            logger.warning(f"HttpxTransport.send: invalid request for {request.url}: {e}")
            raise TransportError(f"Invalid request: {e}", e) from e
        except OSError as e:
            logger.warning(f"HttpxTransport.send: could not read upload file: {e}")
            raise TransportError(str(e), e) from e
