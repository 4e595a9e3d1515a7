"""Store interfaces.

The limiter depends on this abstraction (not a concrete backend) so storage
can be swapped (in-memory for tests, Redis for production) without changing
the lock or manager code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable


class AbstractStore(ABC):
    """Key/value + TTL capability required by the rate limiter.

    Implementations must make ``increment`` atomic with respect to concurrent
    callers on the same key. If the underlying client is not thread-safe the
    store serializes access to it.
    """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the entry for ``key``; no error if it is already absent."""
        raise NotImplementedError

    @abstractmethod
    def init_with_ttl(self, key: str, ttl_seconds: int) -> None:
        """Create or reset ``key`` to zero with the given time to live.

        Args:
            key: Rate limit key.
            ttl_seconds: Window length in seconds.

        Raises:
            StoreUnavailableError: On backend failure.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, key: str) -> int:
        """Return the counter for ``key``.

        Raises:
            NoSuchKeyError: If the entry is absent or expired.
            StoreUnavailableError: On backend failure.
        """
        raise NotImplementedError

    @abstractmethod
    def get_ttl(self, key: str) -> int:
        """Return the seconds before ``key`` expires.

        A negative value, like NoSuchKeyError, means absent or expired.
        """
        raise NotImplementedError

    @abstractmethod
    def increment(self, key: str) -> int:
        """Atomically add one to the counter for ``key`` and return the new value.

        Raises:
            NoSuchKeyError: If the entry is absent or expired.
            StoreUnavailableError: On backend failure.
        """
        raise NotImplementedError


# Zero-argument callable returning a store; raises StoreUnavailableError on failure.
StoreFactory = Callable[[], AbstractStore]
