"""Unit tests for the in-memory store backend."""

import threading

import pytest

from window_limiter.adapters.store.in_memory import InMemoryStore
from window_limiter.core.errors import NoSuchKeyError, ValidationAppError


def test_init_sets_counter_to_zero(store: InMemoryStore) -> None:
    store.init_with_ttl("k", 10)

    assert store.get("k") == 0
    assert store.get_ttl("k") == 10


def test_init_overwrites_existing_entry(store: InMemoryStore) -> None:
    store.init_with_ttl("k", 10)
    store.increment("k")
    store.increment("k")

    store.init_with_ttl("k", 30)

    assert store.get("k") == 0
    assert store.get_ttl("k") == 30


def test_increment_returns_new_value(store: InMemoryStore) -> None:
    store.init_with_ttl("k", 10)

    assert store.increment("k") == 1
    assert store.increment("k") == 2
    assert store.get("k") == 2


def test_missing_key_raises_no_such_key(store: InMemoryStore) -> None:
    with pytest.raises(NoSuchKeyError):
        store.get("missing")
    with pytest.raises(NoSuchKeyError):
        store.increment("missing")
    with pytest.raises(NoSuchKeyError):
        store.get_ttl("missing")


def test_entry_expires_when_ttl_elapses(store: InMemoryStore, clock) -> None:
    store.init_with_ttl("k", 10)
    store.increment("k")

    clock.advance(9.5)
    assert store.get_ttl("k") == 1
    assert store.get("k") == 1

    clock.advance(0.5)
    with pytest.raises(NoSuchKeyError):
        store.get("k")
    assert len(store) == 0


def test_increment_does_not_revive_expired_entry(store: InMemoryStore, clock) -> None:
    store.init_with_ttl("k", 1)
    clock.advance(2)

    with pytest.raises(NoSuchKeyError):
        store.increment("k")


def test_zero_ttl_entry_is_absent_immediately(store: InMemoryStore) -> None:
    store.init_with_ttl("k", 0)

    with pytest.raises(NoSuchKeyError):
        store.get("k")


def test_negative_ttl_rejected(store: InMemoryStore) -> None:
    with pytest.raises(ValidationAppError):
        store.init_with_ttl("k", -1)


def test_delete_is_idempotent(store: InMemoryStore) -> None:
    store.init_with_ttl("k", 10)

    store.delete("k")
    store.delete("k")

    with pytest.raises(NoSuchKeyError):
        store.get("k")


def test_clear_removes_everything(store: InMemoryStore) -> None:
    store.init_with_ttl("a", 10)
    store.init_with_ttl("b", 10)

    store.clear()

    assert len(store) == 0


def test_concurrent_increments_are_not_lost() -> None:
    store = InMemoryStore()
    store.init_with_ttl("k", 60)
    per_thread = 200

    def _worker() -> None:
        for _ in range(per_thread):
            store.increment("k")

    threads = [threading.Thread(target=_worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert store.get("k") == 8 * per_thread


def test_get_ttl_of_live_entry_is_at_least_one_second(ticking_clock) -> None:
    store = InMemoryStore(clock=ticking_clock)
    store.init_with_ttl("k", 10)

    # Each clock reading moves time forward; the entry is live at 9.75.
    ticking_clock.current = 9.75
    ticking_clock.step = 0.25

    assert store.get_ttl("k") == 1
