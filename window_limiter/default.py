"""Process-default rate limiter.

Convenience functions over one module-wide RateLimiter. The instance is
absent until ``set_store`` is called and then lives for the rest of the
process. Code that can pass a RateLimiter around explicitly should do so;
this module exists for top-level call sites.
"""

from __future__ import annotations

import logging
import threading
from datetime import timedelta

from window_limiter.adapters.store.base import StoreFactory
from window_limiter.core.errors import NoDefaultLimiterError, ValidationAppError
from window_limiter.limiter import RateLimiter
from window_limiter.lock import WindowLock

logger = logging.getLogger(__name__)


_default_limiter: RateLimiter | None = None
_default_lock = threading.Lock()


def set_store(store_factory: StoreFactory | None) -> None:
    """Create the process-default limiter from ``store_factory``.

    Calling it again replaces the current instance. If building the new
    limiter fails, the previous one stays installed.

    Raises:
        ValidationAppError: If ``store_factory`` is None.
        StoreUnavailableError: If the factory fails.
    """

    global _default_limiter

    if store_factory is None:
        raise ValidationAppError(
            code="missing_store_factory",
            message="Store factory cannot be None",
        )

    limiter = RateLimiter(store_factory)
    with _default_lock:
        replaced = _default_limiter is not None
        _default_limiter = limiter

    logger.info(
        "rate_limit.default_configured",
        extra={"store": type(limiter.store).__name__, "replaced": replaced},
    )


def get_default_limiter() -> RateLimiter:
    """Return the process-default limiter.

    Raises:
        NoDefaultLimiterError: If ``set_store`` was never called.
    """

    limiter = _default_limiter
    if limiter is None:
        raise NoDefaultLimiterError(
            code="no_default_limiter",
            message="No such rate limiter; call set_store() first",
        )
    return limiter


def new_lock(key: str, allowed: int, window: timedelta | float) -> WindowLock:
    """Create a lock on the process-default limiter."""

    return get_default_limiter().new_lock(key, allowed, window)


def remove_lock(key: str) -> None:
    """Remove a lock from the process-default limiter."""

    get_default_limiter().remove_lock(key)
