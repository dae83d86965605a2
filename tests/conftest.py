"""
Shared fixtures: settings, block store doubles, and app/test-client factories.

No Redis server is needed; every app is built around an injected backend.
"""

from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from blockpaste.config import Settings
from blockpaste.database import BlockDatabase, InMemoryBlockStore
from blockpaste.envelope import PasteFormat
from blockpaste.main import create_app


class CountingBlockStore(InMemoryBlockStore):
    """In-memory block store that records how often it is touched."""

    def __init__(self):
        super().__init__()
        self.put_calls = 0
        self.get_calls = 0

    async def put(self, data: bytes) -> str:
        self.put_calls += 1
        return await super().put(data)

    async def get(self, path: str, limit=None) -> bytes:
        self.get_calls += 1
        return await super().get(path, limit)


class HangingBlockStore(InMemoryBlockStore):
    """Block store whose lookups never resolve."""

    def __init__(self):
        super().__init__()
        self.cancelled = 0

    async def get(self, path: str, limit=None) -> bytes:
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        return b""


def make_settings(**overrides) -> Settings:
    """Settings instance with per-test overrides (instance attrs shadow class defaults)."""
    s = Settings()
    s.PASTE_FORMAT = PasteFormat.RAW
    s.MAX_PASTE_SIZE = 1048576
    s.MAX_PATH_LENGTH = 512
    s.STORE_GET_TIMEOUT_MS = 250
    s.HTTP_HOSTNAME = "paste.test"
    s.TLS_CERT_FILE = ""
    s.TLS_KEY_FILE = ""
    for name, value in overrides.items():
        setattr(s, name, value)
    return s


def make_client(backend=None, **overrides) -> TestClient:
    backend = backend if backend is not None else CountingBlockStore()
    app = create_app(
        settings=make_settings(**overrides),
        database=BlockDatabase(backend=backend),
    )
    return TestClient(app)


@pytest.fixture
def backend():
    return CountingBlockStore()


@pytest.fixture
def client(backend):
    """Raw-format app over a counting in-memory store."""
    return make_client(backend)


@pytest.fixture
def structured_client(backend):
    """Structured-format app over a counting in-memory store."""
    return make_client(backend, PASTE_FORMAT=PasteFormat.STRUCTURED)
