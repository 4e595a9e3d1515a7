"""Rate limiter manager.

Owns one store (built once from a store factory) and hands out window locks
over it. The manager keeps no counting state of its own.
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta

from window_limiter.adapters.store.base import AbstractStore, StoreFactory
from window_limiter.core.errors import AppError, StoreUnavailableError, ValidationAppError
from window_limiter.core.logging import hash_key
from window_limiter.lock import WindowLock

logger = logging.getLogger(__name__)


def window_to_seconds(window: timedelta | float) -> int:
    """Convert a window length to whole seconds, rounding up.

    Args:
        window: A timedelta or a number of seconds.

    Returns:
        Whole seconds; any positive sub-second window yields 1.

    Raises:
        ValidationAppError: If the window is negative.
    """
    seconds = window.total_seconds() if isinstance(window, timedelta) else float(window)
    if seconds < 0:
        raise ValidationAppError(
            code="invalid_window",
            message="window must be >= 0 seconds",
        )
    return int(math.ceil(seconds))


class RateLimiter:
    """Creates and removes fixed-window locks backed by a shared store."""

    def __init__(self, store_factory: StoreFactory | None) -> None:
        """Build the limiter, invoking ``store_factory`` exactly once.

        Args:
            store_factory: Zero-argument callable returning a store.

        Raises:
            ValidationAppError: If no factory is given.
            StoreUnavailableError: If the factory fails.
        """
        if store_factory is None:
            raise ValidationAppError(
                code="missing_store_factory",
                message="A store factory is required",
            )
        try:
            store = store_factory()
        except AppError:
            raise
        except Exception as exc:
            raise StoreUnavailableError(
                code="store_unavailable",
                message=f"Store factory failed: {exc}",
            ) from exc
        self._store: AbstractStore = store

    @property
    def store(self) -> AbstractStore:
        return self._store

    def new_lock(self, key: str, allowed: int, window: timedelta | float) -> WindowLock:
        """Return a lock for ``key``, starting a new window if none is live.

        An existing window keeps its counter; only TTL expiry (or
        ``remove_lock``) resets it.

        Args:
            key: Rate limit key (e.g., "login:1.2.3.4").
            allowed: Events allowed per window; 0 means unlimited.
            window: Window length as a timedelta or seconds.

        Returns:
            WindowLock over the store entry for ``key``.

        Raises:
            ValidationAppError: On an empty key or negative allowed/window.
            StoreUnavailableError: If a new window could not be created.
        """
        if not key:
            raise ValidationAppError(code="invalid_key", message="key must be a non-empty string")
        if allowed < 0:
            raise ValidationAppError(
                code="invalid_allowed",
                message="allowed must be >= 0",
                details={"allowed": allowed},
            )
        secs = window_to_seconds(window)

        lock = WindowLock(self._store, key, allowed, secs)

        try:
            ttl = self._store.get_ttl(key)
        except Exception:  # noqa: BLE001 - unreadable TTL starts a new window
            ttl = -1

        if ttl < 0:
            # Either there is no key or the key has expired.
            self._store.init_with_ttl(key, secs)
            logger.debug(
                "rate_limit.window_started",
                extra={
                    "key_hash": hash_key(key),
                    "allowed": allowed,
                    "window_s": secs,
                },
            )

        return lock

    def remove_lock(self, key: str) -> None:
        """Delete the window for ``key`` before its TTL would expire it."""
        self._store.delete(key)
