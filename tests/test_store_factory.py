"""Tests for the settings-driven store factory."""

from unittest.mock import patch

import pytest

from window_limiter.adapters.store.factory import create_store_factory
from window_limiter.adapters.store.in_memory import InMemoryStore
from window_limiter.core.config import StoreSettings
from window_limiter.core.errors import ValidationAppError
from window_limiter.limiter import RateLimiter


def test_memory_backend_returns_shared_store() -> None:
    factory = create_store_factory(StoreSettings(backend="memory"))

    first = factory()
    assert isinstance(first, InMemoryStore)
    assert factory() is first


def test_memory_backend_is_case_insensitive() -> None:
    factory = create_store_factory(StoreSettings(backend="MEMORY"))

    limiter = RateLimiter(factory)
    assert isinstance(limiter.store, InMemoryStore)


def test_redis_backend_requires_url() -> None:
    with pytest.raises(ValidationAppError) as exc_info:
        create_store_factory(StoreSettings(backend="redis", redis_url=None))
    assert exc_info.value.code == "store_missing_redis_url"


def test_redis_backend_passes_settings() -> None:
    cfg = StoreSettings(
        backend="redis",
        redis_url="redis://cache:6379/1",
        key_prefix="app:",
        socket_timeout_seconds=0.5,
    )

    with patch("window_limiter.adapters.store.factory.redis_store_factory") as redis_factory:
        factory = create_store_factory(cfg)

    redis_factory.assert_called_once_with(
        "redis://cache:6379/1",
        key_prefix="app:",
        socket_timeout_seconds=0.5,
    )
    assert factory is redis_factory.return_value


def test_unknown_backend_rejected() -> None:
    with pytest.raises(ValidationAppError) as exc_info:
        create_store_factory(StoreSettings(backend="memcached"))
    assert exc_info.value.code == "store_unknown_backend"


def test_defaults_come_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LIMITER_STORE_BACKEND", "redis")
    monkeypatch.setenv("LIMITER_STORE_REDIS_URL", "redis://env-host:6379/0")

    cfg = StoreSettings()

    assert cfg.backend == "redis"
    assert cfg.redis_url == "redis://env-host:6379/0"
    assert cfg.key_prefix == "ratelimit:"
