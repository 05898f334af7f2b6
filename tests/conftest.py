"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from akasha_mcp.backend import BackendClient
from akasha_mcp.config import GatewayConfig

BACKEND_URL = "http://akasha.test"

SNIPPETS = {
    "snippets": [
        {"text": "Action and its fruit bind the actor.", "tradition": "buddhism", "score": 0.91},
        {"text": "As you sow, so shall you reap.", "tradition": "buddhism", "score": 0.84},
    ]
}

Handler = Callable[[httpx.Request], httpx.Response]


def make_backend(handler: Handler) -> BackendClient:
    """Build a BackendClient whose HTTP calls go to ``handler``."""
    return BackendClient(BACKEND_URL, transport=httpx.MockTransport(handler))


class RecordingHandler:
    """Mock backend handler that records requests and replies with a fixed response."""

    def __init__(self, status_code: int = 200, payload: object = SNIPPETS) -> None:
        self.status_code = status_code
        self.payload = payload
        self.requests: list[httpx.Request] = []

    @property
    def bodies(self) -> list[dict]:
        return [json.loads(request.content) for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.payload, str):
            return httpx.Response(self.status_code, text=self.payload)
        return httpx.Response(self.status_code, json=self.payload)


@pytest.fixture
def backend_handler() -> RecordingHandler:
    """Backend that answers every search with SNIPPETS."""
    return RecordingHandler()


@pytest.fixture
def backend(backend_handler: RecordingHandler) -> BackendClient:
    return make_backend(backend_handler)


@pytest.fixture
def config() -> GatewayConfig:
    return GatewayConfig(backend_url=BACKEND_URL, keepalive_interval=0.05)


@pytest.fixture
def make_handler() -> type[RecordingHandler]:
    """Factory for mock backend handlers: make_handler(status_code, payload)."""
    return RecordingHandler


@pytest.fixture
def backend_factory() -> Callable[[Handler], BackendClient]:
    """Factory for backend clients bound to a mock handler."""
    return make_backend
