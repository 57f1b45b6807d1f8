from __future__ import annotations

import httpx
import pytest

from abillio.api import AbillioClient, reset_client
from abillio.config import AbillioConfig

API_KEY = "test-key"
API_SECRET = "test-secret"
BASE_URL = "https://api.example.test"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, status=200, body=None, text=None, exc=None):
        self.calls = []
        self.status = status
        self.body = {} if body is None else body
        self.text = text
        self.exc = exc
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.exc is not None:
            raise self.exc(f"simulated {self.exc.__name__}", request=request)
        if self.text is not None:
            return httpx.Response(self.status, text=self.text)
        return httpx.Response(self.status, json=self.body)


@pytest.fixture
def config():
    return AbillioConfig(api_key=API_KEY, api_secret=API_SECRET, base_url=BASE_URL)


@pytest.fixture
def make_client(config):
    clients = []

    def _make(transport: httpx.BaseTransport) -> AbillioClient:
        client = AbillioClient(config, transport=transport)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for name in ("ABILLIO_API_URL", "ABILLIO_API_KEY", "ABILLIO_API_SECRET", "ABILLIO_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    reset_client()
    yield
    reset_client()
