"""Catalog service (products, shipping options) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

PRODUCT_SERVICE_URL_ENV = "PRODUCT_SERVICE_URL"
SHIPPING_OPTION_SERVICE_URL_ENV = "SHIPPING_OPTION_SERVICE_URL"
CATALOG_TIMEOUT_ENV = "CATALOG_TIMEOUT_SECONDS"
DEFAULT_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True, slots=True)
class CatalogConfig:
    products: ResilienceConfig
    shipping_options: ResilienceConfig


def get_catalog_config() -> CatalogConfig:
    values = require_env_vars((PRODUCT_SERVICE_URL_ENV, SHIPPING_OPTION_SERVICE_URL_ENV))
    timeout = env_float(CATALOG_TIMEOUT_ENV, DEFAULT_TIMEOUT_SECONDS)
    return CatalogConfig(
        products=ResilienceConfig(
            name="products",
            base_url=values[PRODUCT_SERVICE_URL_ENV],
            timeout_seconds=timeout,
            ratelimit=RateLimit(max_calls=50, per_seconds=1.0),
            cache=CacheConfig(backend="memory", ttl_seconds=60.0),
        ),
        shipping_options=ResilienceConfig(
            name="shipping_options",
            base_url=values[SHIPPING_OPTION_SERVICE_URL_ENV],
            timeout_seconds=timeout,
            ratelimit=RateLimit(max_calls=50, per_seconds=1.0),
            cache=None,
        ),
    )
