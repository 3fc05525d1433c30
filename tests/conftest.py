"""
Shared fixtures for integration_client tests.
"""
from typing import List, Optional, Sequence, Union

import pytest

from integration_client.config import ClientConfig
from integration_client.core.base_client import IntegrationClient
from integration_client.core.transport import TransportRequest, TransportResponse
from integration_client.errors import TransportError

Outcome = Union[TransportResponse, Exception]


class RecordingTransport:
    """Fake transport that records requests and replays scripted outcomes.

    Outcomes are consumed in order; the last one repeats once the script
    runs out. An Exception outcome is raised instead of returned.
    """

    def __init__(self, outcomes: Optional[Sequence[Outcome]] = None):
        self.requests: List[TransportRequest] = []
        self._outcomes = list(outcomes or [TransportResponse(status=200)])

    def send(self, request: TransportRequest) -> TransportResponse:
        self.requests.append(request)
        if len(self._outcomes) > 1:
            outcome = self._outcomes.pop(0)
        else:
            outcome = self._outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def last(self) -> TransportRequest:
        return self.requests[-1]

    @property
    def call_count(self) -> int:
        return len(self.requests)


def header_names(request: TransportRequest) -> List[str]:
    return [name.lower() for name, _ in request.headers]


@pytest.fixture(autouse=True)
def clear_ssl_env(monkeypatch):
    """Keep TLS env overrides from leaking into tests."""
    monkeypatch.delenv("NODE_TLS_REJECT_UNAUTHORIZED", raising=False)
    monkeypatch.delenv("SSL_CERT_VERIFY", raising=False)


@pytest.fixture
def transport():
    """Recording transport answering 200 with an empty body."""
    return RecordingTransport()


@pytest.fixture
def client_config():
    """Sample ClientConfig for testing."""
    return ClientConfig(base_url="https://api.example.com")


@pytest.fixture
def client(client_config, transport):
    """Client wired to the recording transport."""
    return IntegrationClient(client_config, transport=transport)


@pytest.fixture
def json_client(transport):
    """JSON-mode client wired to the recording transport."""
    return IntegrationClient(
        ClientConfig(base_url="https://api.example.com", use_json=True),
        transport=transport,
    )


@pytest.fixture
def failing_transport():
    """Transport whose every send fails at the connection level."""
    return RecordingTransport([TransportError("Connection refused")])
