"""Tests for the process-default limiter functions."""

from datetime import timedelta

import pytest

from window_limiter import default
from window_limiter.adapters.store.base import AbstractStore
from window_limiter.adapters.store.in_memory import InMemoryStore
from window_limiter.core.errors import NoDefaultLimiterError, StoreUnavailableError, ValidationAppError

pytestmark = pytest.mark.usefixtures("reset_default_limiter")


def test_new_lock_without_store_fails() -> None:
    with pytest.raises(NoDefaultLimiterError) as exc_info:
        default.new_lock("k", 5, 10)
    assert exc_info.value.code == "no_default_limiter"


def test_remove_lock_without_store_fails() -> None:
    with pytest.raises(NoDefaultLimiterError):
        default.remove_lock("k")


def test_set_store_rejects_none() -> None:
    with pytest.raises(ValidationAppError):
        default.set_store(None)

    with pytest.raises(NoDefaultLimiterError):
        default.get_default_limiter()


def test_set_store_enables_forwarding(store: InMemoryStore) -> None:
    default.set_store(lambda: store)

    lock = default.new_lock("login:1.2.3.4", 2, timedelta(seconds=10))
    lock.hit()
    lock.hit()
    assert default.new_lock("login:1.2.3.4", 2, timedelta(seconds=10)).is_allowed() is False

    default.remove_lock("login:1.2.3.4")
    assert default.new_lock("login:1.2.3.4", 2, timedelta(seconds=10)).is_allowed() is True
    assert default.get_default_limiter().store is store


def test_set_store_again_replaces_limiter(store: InMemoryStore) -> None:
    default.set_store(lambda: store)
    first = default.get_default_limiter()

    other = InMemoryStore()
    default.set_store(lambda: other)

    assert default.get_default_limiter() is not first
    assert default.get_default_limiter().store is other


def test_failed_set_store_keeps_previous_limiter(store: InMemoryStore) -> None:
    default.set_store(lambda: store)
    previous = default.get_default_limiter()

    def _broken() -> AbstractStore:
        raise StoreUnavailableError(code="store_unavailable", message="down")

    with pytest.raises(StoreUnavailableError):
        default.set_store(_broken)

    assert default.get_default_limiter() is previous


def test_package_exports_default_functions() -> None:
    import window_limiter

    assert window_limiter.set_store is default.set_store
    assert window_limiter.new_lock is default.new_lock
    assert window_limiter.remove_lock is default.remove_lock
