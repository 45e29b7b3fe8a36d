import itertools
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.api.main import app
from src.api.storage import get_store
from src.api.store import NoteStore

# 2024-03-05 14:07:00 UTC, in ms; each note gets a later timestamp
BASE_TIMESTAMP = 1709647620000


@pytest.fixture
def store(tmp_path: Path) -> NoteStore:
    ticks = itertools.count(BASE_TIMESTAMP, 60_000)
    store = NoteStore(
        index_path=str(tmp_path / "notes.json"),
        notes_dir=str(tmp_path / "notes"),
        clock=lambda: next(ticks),
    )
    store.bootstrap()
    return store


@pytest.fixture
def client(store: NoteStore):
    app.dependency_overrides[get_store] = lambda: store
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def base_timestamp() -> int:
    """Timestamp handed to the first note created by the `store` fixture."""
    return BASE_TIMESTAMP
