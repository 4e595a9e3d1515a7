"""Store-backed fixed-window rate limiter.

Typical use:

    limiter = RateLimiter(create_store_factory())
    lock = limiter.new_lock("login:1.2.3.4", 5, timedelta(seconds=10))
    if not lock.is_allowed():
        ...  # reject
    lock.hit()
"""

from window_limiter.adapters.store import (
    AbstractStore,
    InMemoryStore,
    RedisStore,
    StoreFactory,
    create_store_factory,
    redis_store_factory,
)
from window_limiter.core.errors import (
    AppError,
    NoDefaultLimiterError,
    NoSuchKeyError,
    StoreUnavailableError,
    ValidationAppError,
)
from window_limiter.default import get_default_limiter, new_lock, remove_lock, set_store
from window_limiter.limiter import RateLimiter
from window_limiter.lock import WindowLock

__all__ = [
    "AbstractStore",
    "AppError",
    "InMemoryStore",
    "NoDefaultLimiterError",
    "NoSuchKeyError",
    "RateLimiter",
    "RedisStore",
    "StoreFactory",
    "StoreUnavailableError",
    "ValidationAppError",
    "WindowLock",
    "create_store_factory",
    "get_default_limiter",
    "new_lock",
    "redis_store_factory",
    "remove_lock",
    "set_store",
]
