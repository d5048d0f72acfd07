"""Pytest configuration for marshalkv tests."""

from types import SimpleNamespace

import pytest

from marshalkv import InMemoryCacheBackend, MarshallingStore


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def backend(clock: FakeClock) -> InMemoryCacheBackend:
    """Create an in-memory backend driven by the fake clock."""
    return InMemoryCacheBackend(maxsize=100, timer=clock)


@pytest.fixture
def store(backend: InMemoryCacheBackend) -> MarshallingStore:
    """Create a marshalling store over the in-memory backend."""
    return MarshallingStore(backend)


@pytest.fixture
def rabbit() -> SimpleNamespace:
    return SimpleNamespace(name="bunny")


@pytest.fixture
def white_rabbit() -> SimpleNamespace:
    return SimpleNamespace(color="white")
