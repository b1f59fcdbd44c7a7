"""
Shared fixtures: an in-memory key-value store and an app bound to it.
"""
import asyncio
import os

os.environ.setdefault("KV_BACKEND", "memory")
os.environ.setdefault("LOG_JSON", "false")

import pytest
from fastapi.testclient import TestClient

from app.core.kv_store import MemoryKVStore
from app.main import create_app
from app.services.favorite_index import FAVORITE_LINKS_KEY, link_key


class InspectableKVStore(MemoryKVStore):
    """Memory store that can be seeded with raw text and list its keys."""

    def put_raw(self, key, raw_value):
        self._data[self._full_key(key)] = {"value": raw_value}

    def keys(self):
        return sorted(self._data)


@pytest.fixture
def kv_store_factory():
    return InspectableKVStore


@pytest.fixture
def kv_store(kv_store_factory):
    return kv_store_factory()


@pytest.fixture
def seed(kv_store):
    """Write link records and the favorite index synchronously."""

    class Seeder:
        def link(self, slug, record, metadata=None):
            asyncio.run(kv_store.put(link_key(slug), record, metadata=metadata))

        def index(self, slugs):
            asyncio.run(kv_store.put(FAVORITE_LINKS_KEY, slugs))

        def read(self, key):
            return asyncio.run(kv_store.get_with_metadata(key))

    return Seeder()


@pytest.fixture
def app(kv_store):
    return create_app(kv_store=kv_store)


@pytest.fixture
def client(app):
    return TestClient(app)
