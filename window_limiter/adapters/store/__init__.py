"""Store adapters - abstract over the key/value + TTL backends."""

from window_limiter.adapters.store.base import AbstractStore, StoreFactory
from window_limiter.adapters.store.factory import create_store_factory
from window_limiter.adapters.store.in_memory import InMemoryStore
from window_limiter.adapters.store.redis_store import RedisStore, redis_store_factory

__all__ = [
    "AbstractStore",
    "InMemoryStore",
    "RedisStore",
    "StoreFactory",
    "create_store_factory",
    "redis_store_factory",
]
