"""
Shared pytest fixtures for elephas tests.

This module provides:
- ManualClock: a millisecond clock tests can move by hand
- FakeRedis: a dict-backed stand-in for a redis-py client
- Settings cache / environment isolation

Usage:
    def test_expiry(memory_backend, clock):
        memory_backend.write("h", "v", {"ttl": 1000})
        clock.advance(1001)
        assert memory_backend.read("h") is None
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import pytest

from elephas.backends.memory import MemoryBackend
from elephas.backends.redis import RedisBackend
from elephas.cache import Cache
from elephas.config import clear_settings_cache

# Well ahead of the wall clock, so refreshes always land on the manual clock.
CLOCK_START = 4_000_000_000_000.0


class ManualClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = CLOCK_START):
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, millis: float) -> float:
        self.current += millis
        return self.current

    def set(self, millis: float) -> None:
        self.current = millis


class FakeRedis:
    """Just enough of redis-py's client API for RedisBackend."""

    def __init__(self):
        self.store: dict[str, bytes] = {}
        self.expiries: dict[str, int | None] = {}

    def get(self, key: str) -> bytes | None:
        return self.store.get(key)

    def set(self, key: str, value: Any, px: int | None = None) -> bool:
        self.store[key] = value.encode() if isinstance(value, str) else value
        self.expiries[key] = px
        return True

    def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                self.expiries.pop(key, None)
                removed += 1
        return removed

    def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if key in self.store)


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep ELEPHAS_* variables and .env files from leaking into tests."""
    for name in list(os.environ):
        if name.startswith("ELEPHAS_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def memory_backend(clock) -> MemoryBackend:
    return MemoryBackend(clock=clock)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def redis_backend(fake_redis, clock) -> RedisBackend:
    return RedisBackend(fake_redis, clock=clock)


@pytest.fixture
def cache(memory_backend) -> Cache:
    return Cache(memory_backend, prefix="test-cache")
