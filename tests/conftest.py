"""Pytest configuration for tests."""

import pytest

from roster_manager.profiles.base import Profile, Role
from roster_manager.profiles.ids import IdSequence
from roster_manager.store.storage import InMemoryStorage
from roster_manager.store.store import ProfileStore


@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to use only asyncio backend."""
    return "asyncio"


@pytest.fixture
def ids():
    return IdSequence(start=100)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def store(storage, ids):
    return ProfileStore(storage=storage, ids=ids)


@pytest.fixture
def seeded_store(storage, ids):
    """Store holding two profiles with ids 1 and 2."""
    return ProfileStore(
        storage=storage,
        ids=ids,
        profiles=[
            Profile(id=1, name="Juan Pérez", age=25, roles=(Role.MICROFONO, Role.AUDIO)),
            Profile(id=2, name="María García", age=30, roles=(Role.VIDEO,)),
        ],
    )
