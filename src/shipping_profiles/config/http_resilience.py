"""Retry, rate limit and cache settings for the catalog HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Literal

import httpx

RETRYABLE_STATUSES: frozenset[int] = frozenset(
    {
        HTTPStatus.TOO_MANY_REQUESTS,
        HTTPStatus.INTERNAL_SERVER_ERROR,
        HTTPStatus.BAD_GATEWAY,
        HTTPStatus.SERVICE_UNAVAILABLE,
        HTTPStatus.GATEWAY_TIMEOUT,
    }
)


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Backoff retries for idempotent requests.

    Cart validation is a POST and is never retried: a failed validation
    simply leaves the option out of the cart's offer.
    """

    attempts: int = 3
    backoff_factor: float = 0.25
    max_backoff_wait: float = 5.0
    backoff_jitter: float = 1.0
    methods: frozenset[str] = frozenset({"GET", "HEAD"})
    statuses: frozenset[int] = RETRYABLE_STATUSES
    exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """Response cache; only successful lookups are stored."""

    backend: Literal["sqlite", "memory"] = "memory"
    ttl_seconds: float | None = None
    sqlite_path: str | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 10.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
