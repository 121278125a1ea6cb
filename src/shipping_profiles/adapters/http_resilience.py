"""Async HTTP client for the catalog services: retries, rate limiting, caching."""

from __future__ import annotations

from http import HTTPStatus
from logging import getLogger
from typing import TYPE_CHECKING, Self

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as CachedResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from shipping_profiles.config.storage import get_storage_config

if TYPE_CHECKING:
    from types import TracebackType

    from shipping_profiles.config.http_resilience import CacheConfig, ResilienceConfig, RetryPolicy

log = getLogger(__name__)


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.attempts,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        backoff_jitter=policy.backoff_jitter,
        respect_retry_after_header=True,
        allowed_methods=tuple(policy.methods),
        status_forcelist=tuple(policy.statuses),
        retry_on_exceptions=policy.exceptions,
    )


class ResilientClient:
    """One ``httpx.AsyncClient`` per collaborator, configured from ``ResilienceConfig``."""

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit is not None
            else None
        )
        transport = RetryTransport(retry=build_retry(config.retry))
        base_url = config.base_url or ""

        if config.cache is None:
            self._client = httpx.AsyncClient(
                base_url=base_url, timeout=config.timeout_seconds, transport=transport
            )
        else:
            self._client = AsyncCacheClient(
                base_url=base_url,
                timeout=config.timeout_seconds,
                transport=transport,
                storage=_cache_storage(config.cache),
                policy=FilterPolicy(response_filters=[_SuccessfulResponses()]),
            )
            log.debug("Caching %s responses in %s", config.name, config.cache.backend)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, *, params: dict[str, str] | None = None) -> httpx.Response:
        return await self._throttled(self._client.build_request("GET", url, params=params))

    async def post(self, url: str, *, json: object = None) -> httpx.Response:
        return await self._throttled(self._client.build_request("POST", url, json=json))

    async def _throttled(self, request: httpx.Request) -> httpx.Response:
        if self._limiter is None:
            return await self._client.send(request)
        async with self._limiter:
            return await self._client.send(request)


class _SuccessfulResponses(BaseFilter[CachedResponse]):
    """Keep 404s and errors out of the cache so new catalog records show up."""

    def needs_body(self) -> bool:
        return False

    def apply(self, item: CachedResponse, body: bytes | None) -> bool:  # noqa: ARG002
        return item.status_code == HTTPStatus.OK


def _cache_storage(config: CacheConfig) -> AsyncSqliteStorage:
    match config.backend:
        case "memory":
            database_path = ":memory:"
        case "sqlite":
            database_path = config.sqlite_path or str(get_storage_config().http_cache_path())
        case _:
            raise ValueError(f"Unsupported cache backend: {config.backend}")
    return AsyncSqliteStorage(database_path=database_path, default_ttl=config.ttl_seconds)
