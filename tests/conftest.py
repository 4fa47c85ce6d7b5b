"""
Pytest configuration and fixtures.

Factories themselves live in tests/factories.py so TestCase modules can use
them without fixtures.
"""

import pytest

from personalization.app_context import AppContext, InMemoryProfileRepository
from personalization.cache.backends import MemoryBackend
from personalization.cache.store import CacheStore
from personalization.config_loader import AppConfig, CacheConfig
from tests.factories import FakeClock, make_candidate, make_viewer


@pytest.fixture
def clock():
    """Clock frozen at tests.factories.NOW; call clock.advance(seconds) to move it."""
    return FakeClock()


@pytest.fixture
def memory_backend():
    return MemoryBackend()


@pytest.fixture
def small_store(clock):
    """Two-slot, 60-second store without persistence."""
    return CacheStore("test", CacheConfig(ttl_seconds=60, max_size=2, persistent=False), clock=clock)


@pytest.fixture
def profiles():
    return InMemoryProfileRepository(
        candidates=[make_candidate("cand_1")],
        viewers=[make_viewer("viewer_1")],
    )


@pytest.fixture
def app_context(clock, memory_backend, profiles):
    context = AppContext.build(
        AppConfig(),
        profile_repository=profiles,
        backend=memory_backend,
        clock=clock,
    )
    yield context
    context.close()
