"""Rate limiting dependency for FastAPI routes.

This module wires window locks into the HTTP layer.

Strategy:
- One fixed window per client per guarded route family (the key prefix).
- The client is identified by its X-API-Key header, falling back to the
  client IP.
- The check and the hit are separate calls; a denied request is not
  recorded.
"""

import logging
from datetime import timedelta
from typing import Annotated

from fastapi import Header, HTTPException, Request, status

from window_limiter.core.errors import NoSuchKeyError
from window_limiter.core.logging import hash_key
from window_limiter.default import get_default_limiter
from window_limiter.limiter import RateLimiter
from window_limiter.lock import WindowLock

logger = logging.getLogger(__name__)


def build_rate_limit_key(prefix: str, request: Request, x_api_key: str | None) -> str:
    """Build the limiter key for the current request.

    Args:
        prefix: Namespace of the guarded action (e.g., "login").
        request: FastAPI request.
        x_api_key: API key value from the X-API-Key header.

    Returns:
        str: Namespaced limiter key.
    """

    if x_api_key:
        return f"{prefix}:api_key:{x_api_key}"

    client_host = request.client.host if request.client else "unknown"
    return f"{prefix}:ip:{client_host}"


class RateLimitGuard:
    """FastAPI dependency enforcing a fixed-window limit.

    Usage:
        login_limit = RateLimitGuard(allowed=5, window=timedelta(seconds=10), key_prefix="login")

        @router.post("/login", dependencies=[Depends(login_limit)])
        def login(...): ...
    """

    def __init__(
        self,
        allowed: int,
        window: timedelta | float,
        *,
        key_prefix: str,
        limiter: RateLimiter | None = None,
        include_headers: bool = True,
    ) -> None:
        self.allowed = allowed
        self.window = window
        self.key_prefix = key_prefix
        self.include_headers = include_headers
        self._limiter = limiter

    @property
    def limiter(self) -> RateLimiter:
        return self._limiter or get_default_limiter()

    def __call__(
        self,
        request: Request,
        x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
    ) -> WindowLock:
        """Record one event for the requester or raise HTTP 429.

        Raises:
            HTTPException: 429 Too Many Requests when the window is exhausted.
            StoreUnavailableError: If the window cannot be created or the hit
                cannot be recorded.
        """

        key = build_rate_limit_key(self.key_prefix, request, x_api_key)
        key_hash = hash_key(key)
        key_type = "api_key" if x_api_key else "ip"

        lock = self.limiter.new_lock(key, self.allowed, self.window)

        if lock.is_allowed():
            try:
                hits = lock.hit()
            except NoSuchKeyError:
                # The window expired between new_lock() and hit(); start a new one.
                lock = self.limiter.new_lock(key, self.allowed, self.window)
                hits = lock.hit()
            logger.info(
                "rate_limit.allowed",
                extra={
                    "key_type": key_type,
                    "key_hash": key_hash,
                    "limit": self.allowed,
                    "hits": hits,
                    "window_s": lock.window_seconds,
                },
            )
            return lock

        retry_after = int(lock.get_ttl().total_seconds())
        logger.warning(
            "rate_limit.exceeded",
            extra={
                "key_type": key_type,
                "key_hash": key_hash,
                "limit": self.allowed,
                "window_s": lock.window_seconds,
                "retry_after_s": retry_after,
            },
        )

        headers: dict[str, str] = {}
        if self.include_headers:
            headers["Retry-After"] = str(retry_after)
            headers["X-RateLimit-Limit"] = str(self.allowed)
            headers["X-RateLimit-Remaining"] = "0"

        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded. Try again later.",
            headers=headers or None,
        )
