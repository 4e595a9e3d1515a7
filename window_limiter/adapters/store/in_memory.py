"""In-memory store backend.

Notes:
- Per-process only: running multiple workers gives each its own counters.
- Thread-safe: every operation runs under one lock, so increments are atomic.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from window_limiter.adapters.store.base import AbstractStore
from window_limiter.core.errors import ValidationAppError, no_such_key
from window_limiter.core.logging import hash_key


@dataclass
class _Entry:
    counter: int
    expires_at: float


class InMemoryStore(AbstractStore):
    """Map of key -> (counter, expiry) with lazy TTL eviction.

    Expired entries are dropped the first time they are touched after their
    deadline, so from the caller's point of view they cease to exist exactly
    when the TTL elapses.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the in-memory store.

        Args:
            clock: Time source function returning UNIX time in seconds.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for entry in self._entries.values() if entry.expires_at > now)

    def _live_entry_locked(self, key: str, now: float) -> _Entry:
        entry = self._entries.get(key)
        if entry is None:
            raise no_such_key(hash_key(key))
        if entry.expires_at <= now:
            del self._entries[key]
            raise no_such_key(hash_key(key))
        return entry

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def init_with_ttl(self, key: str, ttl_seconds: int) -> None:
        if ttl_seconds < 0:
            raise ValidationAppError(
                code="invalid_ttl",
                message="ttl_seconds must be >= 0",
                details={"key_hash": hash_key(key), "ttl_seconds": ttl_seconds},
            )
        with self._lock:
            self._entries[key] = _Entry(counter=0, expires_at=self._clock() + ttl_seconds)

    def get(self, key: str) -> int:
        with self._lock:
            return self._live_entry_locked(key, self._clock()).counter

    def get_ttl(self, key: str) -> int:
        with self._lock:
            now = self._clock()
            entry = self._live_entry_locked(key, now)
            return int(math.ceil(entry.expires_at - now))

    def increment(self, key: str) -> int:
        with self._lock:
            entry = self._live_entry_locked(key, self._clock())
            entry.counter += 1
            return entry.counter

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._entries.clear()
