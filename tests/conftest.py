"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It selects the testing environment before settings are imported.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["LIMITER_ENV"] = "testing"
os.environ.setdefault("LIMITER_STORE_BACKEND", "memory")

import pytest

from window_limiter import default
from window_limiter.adapters.store.in_memory import InMemoryStore
from window_limiter.limiter import RateLimiter


class FakeClock:
    """Deterministic clock used to test window expiry."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryStore:
    return InMemoryStore(clock=clock)


@pytest.fixture
def limiter(store: InMemoryStore) -> RateLimiter:
    return RateLimiter(lambda: store)


@pytest.fixture
def reset_default_limiter(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start each test with no process-default limiter configured."""
    monkeypatch.setattr(default, "_default_limiter", None)


class TickingClock(FakeClock):
    """Clock that moves forward by ``step`` after every reading."""

    def __init__(self, start: float = 0.0, step: float = 0.0) -> None:
        super().__init__(start)
        self.step = step

    def __call__(self) -> float:
        now = self.current
        self.current += self.step
        return now


@pytest.fixture
def ticking_clock() -> TickingClock:
    return TickingClock()
