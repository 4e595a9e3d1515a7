"""Per-key window lock.

A lock is a cheap view over one store entry: it carries the key, the
allowance and the store reference, and every answer it gives is read from
the store. Checking (``is_allowed``) and recording (``hit``) are separate
calls, so a burst of concurrent callers can pass the check before any of
them records a hit; only the increment itself is atomic.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from window_limiter.adapters.store.base import AbstractStore
from window_limiter.core.logging import hash_key

logger = logging.getLogger(__name__)


class WindowLock:
    """Allows ``allowed`` events per fixed window for ``key``.

    An allowance of 0 means no limit is configured.
    """

    def __init__(self, store: AbstractStore, key: str, allowed: int, window_seconds: int) -> None:
        self._store = store
        self._key = key
        self._allowed = allowed
        self._window_seconds = window_seconds

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"WindowLock(key_hash={hash_key(self._key)}, allowed={self._allowed}, "
            f"window_seconds={self._window_seconds})"
        )

    @property
    def key(self) -> str:
        return self._key

    @property
    def allowed(self) -> int:
        return self._allowed

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    def _read_counter(self) -> int | None:
        """Read the counter, or None when the store cannot answer."""
        try:
            return self._store.get(self._key)
        except Exception as exc:  # noqa: BLE001 - fail open on any store error
            logger.warning(
                "rate_limit.store_read_failed",
                extra={
                    "key_hash": hash_key(self._key),
                    "error_type": type(exc).__name__,
                },
            )
            return None

    def is_allowed(self) -> bool:
        """Return True if one more event may happen in the current window.

        Store read failures let the event through: availability of the
        guarded action wins over strict enforcement while the store is down.
        """
        if self._allowed == 0:
            return True

        hits = self._read_counter()
        if hits is None:
            return True
        return hits < self._allowed

    def remaining(self) -> int | None:
        """Events left in the current window.

        Returns None when no limit is configured or the store cannot be read.
        """
        if self._allowed == 0:
            return None

        hits = self._read_counter()
        if hits is None:
            return None
        return max(0, self._allowed - hits)

    def hit(self) -> int:
        """Record one event and return the new counter.

        Raises:
            NoSuchKeyError: If the window has expired or was removed.
            StoreUnavailableError: If the store could not record the event.
        """
        return self._store.increment(self._key)

    def get_ttl(self) -> timedelta:
        """Time left in the current window; zero if the key does not exist."""
        try:
            seconds = self._store.get_ttl(self._key)
        except Exception:  # noqa: BLE001 - TTL reporting is advisory
            return timedelta(0)
        if seconds < 0:
            return timedelta(0)
        return timedelta(seconds=seconds)
