"""Limiter-level exception types.

This module defines the errors raised by stores, the manager and the
process-default façade, enabling consistent error handling, logging, and
API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional; rate-limit keys are only ever carried hashed.
    """

    key_hash: str
    backend: str
    ttl_seconds: int
    allowed: int


@dataclass
class AppError(Exception):
    """Base error for limiter/store failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class StoreUnavailableError(AppError):
    """Raised when the backing store is unreachable or errored."""


class NoSuchKeyError(AppError):
    """Raised by stores when an entry is absent or expired."""


class NoDefaultLimiterError(AppError):
    """Raised when the process-default limiter is used before set_store()."""


def no_such_key(key_hash: str) -> NoSuchKeyError:
    """Build the NoSuchKeyError stores raise for a missing/expired entry."""
    return NoSuchKeyError(
        code="no_such_key",
        message="No such key",
        details={"key_hash": key_hash},
    )
