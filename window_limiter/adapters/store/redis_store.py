"""Redis store backend (redis-py).

Counting state lives in Redis so every service instance pointing at the same
server enforces the same limits. Windows are plain integer keys with an
expiry set by ``SET ... EX``; Redis itself drops them when the TTL elapses.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, TypeVar

import redis

from window_limiter.adapters.store.base import AbstractStore, StoreFactory
from window_limiter.core.errors import StoreUnavailableError, no_such_key
from window_limiter.core.logging import hash_key

logger = logging.getLogger(__name__)

T = TypeVar("T")

# INCR would recreate an expired key without a TTL; only bump live windows.
_INCREMENT_IF_EXISTS = """
if redis.call('EXISTS', KEYS[1]) == 0 then
    return false
end
return redis.call('INCR', KEYS[1])
"""


class RedisStore(AbstractStore):
    """Store backed by a synchronous Redis client.

    Commands issued through one store are serialized by a lock so that a
    single connection is never used by two threads at once.
    """

    def __init__(self, client: redis.Redis, *, key_prefix: str = "ratelimit:") -> None:
        self._client = client
        self._key_prefix = key_prefix
        self._lock = threading.Lock()
        self._increment_script = client.register_script(_INCREMENT_IF_EXISTS)

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        key_prefix: str = "ratelimit:",
        socket_timeout_seconds: float = 2.0,
    ) -> "RedisStore":
        """Build a store from a ``redis://`` URL."""
        client = redis.Redis.from_url(
            url,
            socket_timeout=socket_timeout_seconds,
            socket_connect_timeout=socket_timeout_seconds,
            decode_responses=True,
        )
        return cls(client, key_prefix=key_prefix)

    def _name(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    def _do(self, command: str, key: str, fn: Callable[[], T]) -> T:
        with self._lock:
            try:
                return fn()
            except redis.RedisError as exc:
                logger.warning(
                    "store.unavailable",
                    extra={
                        "backend": "redis",
                        "command": command,
                        "key_hash": hash_key(key),
                        "error_type": type(exc).__name__,
                    },
                )
                raise StoreUnavailableError(
                    code="store_unavailable",
                    message=f"Redis {command} failed: {exc}",
                    details={"backend": "redis", "key_hash": hash_key(key)},
                ) from exc

    def ping(self) -> None:
        """Check connectivity; raises StoreUnavailableError when unreachable."""
        self._do("PING", "", self._client.ping)

    def delete(self, key: str) -> None:
        self._do("DEL", key, lambda: self._client.delete(self._name(key)))

    def init_with_ttl(self, key: str, ttl_seconds: int) -> None:
        name = self._name(key)
        if ttl_seconds <= 0:
            # Redis rejects EX 0; a zero-length window is simply absent.
            self._do("DEL", key, lambda: self._client.delete(name))
            return
        self._do("SET", key, lambda: self._client.set(name, 0, ex=ttl_seconds))

    def get(self, key: str) -> int:
        value: Any = self._do("GET", key, lambda: self._client.get(self._name(key)))
        if value is None:
            raise no_such_key(hash_key(key))
        return int(value)

    def get_ttl(self, key: str) -> int:
        # -2 when the key does not exist, -1 when it has no expiry.
        return int(self._do("TTL", key, lambda: self._client.ttl(self._name(key))))

    def increment(self, key: str) -> int:
        value: Any = self._do(
            "INCR",
            key,
            lambda: self._increment_script(keys=[self._name(key)]),
        )
        if value is None:
            raise no_such_key(hash_key(key))
        return int(value)


def redis_store_factory(
    url: str,
    *,
    key_prefix: str = "ratelimit:",
    socket_timeout_seconds: float = 2.0,
) -> StoreFactory:
    """Return a factory building a RedisStore and checking it is reachable.

    The factory pings the server so that an unreachable Redis fails limiter
    construction instead of the first lock.
    """

    def _factory() -> AbstractStore:
        store = RedisStore.from_url(
            url,
            key_prefix=key_prefix,
            socket_timeout_seconds=socket_timeout_seconds,
        )
        store.ping()
        return store

    return _factory
