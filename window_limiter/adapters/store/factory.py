"""Factory for building store factories from settings."""

from window_limiter.adapters.store.base import AbstractStore, StoreFactory
from window_limiter.adapters.store.in_memory import InMemoryStore
from window_limiter.adapters.store.redis_store import redis_store_factory
from window_limiter.core.config import StoreSettings, settings
from window_limiter.core.errors import ValidationAppError


def create_store_factory(store_settings: StoreSettings | None = None) -> StoreFactory:
    """Build a store factory based on the configured backend.

    Reads configuration from window_limiter.core.config.settings unless
    explicit settings are passed. Validates backend-specific requirements.

    Returns:
        StoreFactory: Zero-argument callable returning a store.

    Raises:
        ValidationAppError: If backend-specific requirements are not met.
    """
    cfg = store_settings or settings.store
    backend = cfg.backend.lower()

    if backend == "memory":
        # One store per factory: every limiter built from it shares counters.
        store = InMemoryStore()

        def _memory_factory() -> AbstractStore:
            return store

        return _memory_factory

    if backend == "redis":
        if not cfg.redis_url:
            raise ValidationAppError(
                code="store_missing_redis_url",
                message="Redis backend requires LIMITER_STORE_REDIS_URL environment variable",
                details={"backend": backend},
            )
        return redis_store_factory(
            cfg.redis_url,
            key_prefix=cfg.key_prefix,
            socket_timeout_seconds=cfg.socket_timeout_seconds,
        )

    raise ValidationAppError(
        code="store_unknown_backend",
        message=f"Unknown store backend: '{backend}'. Supported backends: memory, redis",
        details={"backend": backend},
    )
