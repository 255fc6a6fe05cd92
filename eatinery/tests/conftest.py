from __future__ import annotations

import pytest

from eatinery.storage import MemStorage, SqlStorage, seed_storage, set_storage


def _make_store(kind: str):
    if kind == "memory":
        return MemStorage()
    return SqlStorage.from_url("sqlite://")


@pytest.fixture(autouse=True)
def app_storage():
    """Every test starts the API on a freshly seeded in-memory store."""
    store = MemStorage()
    seed_storage(store)
    set_storage(store)
    yield store
    set_storage(None)


@pytest.fixture(params=["memory", "sql"])
def empty_store(request):
    store = _make_store(request.param)
    yield store
    if isinstance(store, SqlStorage):
        store.dispose()


@pytest.fixture
def store(empty_store):
    seed_storage(empty_store)
    return empty_store
