"""Shared fixtures: the sample discovery document and mock HTTP clients.

No test talks to the network; HTTP goes through ``httpx.MockTransport``
handlers that record every request they see.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from discoclient.discovery import ServiceDescriptor

FIXTURES = Path(__file__).parent / "fixtures"
BUZZ_PATH = FIXTURES / "buzz.json"

with open(BUZZ_PATH) as f:
    _BUZZ: dict[str, Any] = json.load(f)


# ---------------------------------------------------------------------------
# Discovery documents
# ---------------------------------------------------------------------------

@pytest.fixture
def buzz_doc() -> dict[str, Any]:
    """A fresh copy of the sample document, safe to mutate."""
    return copy.deepcopy(_BUZZ)


@pytest.fixture
def buzz(buzz_doc) -> ServiceDescriptor:
    return ServiceDescriptor.from_json(buzz_doc)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status_code: int = 200, content: bytes = b'{"ok": true}') -> None:
        self.status_code = status_code
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.content)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_client():
    """Return a factory building clients around a handler; all are closed at teardown."""
    clients: list[httpx.Client] = []

    def _make(handler):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def client(make_client, recorder) -> httpx.Client:
    return make_client(recorder)
