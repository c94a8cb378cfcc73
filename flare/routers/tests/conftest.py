"""Fixtures for API tests: an app wired to an in-memory store and fixed clock."""

from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from flare.config import Settings
from flare.main import create_app
from flare.services.store import MemoryStore
from flare.tracking.clock import FixedClock


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def client(memory_store: MemoryStore) -> TestClient:
    app = create_app(
        settings=Settings(storage_backend="memory", environment="test"),
        store=memory_store,
        clock=FixedClock(date(2024, 3, 15)),
    )
    with TestClient(app) as c:
        yield c
