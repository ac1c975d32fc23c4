import pytest
from django.core.cache import cache

from clinic.services.persistence import MemoryStorage
from clinic.services.runtime import set_store
from clinic.services.store import EntityStore


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture(autouse=True)
def store(storage):
    """Every test runs against a freshly seeded in-memory store."""
    # throttle history lives in the cache
    cache.clear()
    s = EntityStore(storage).hydrate()
    previous = set_store(s)
    yield s
    set_store(previous)
