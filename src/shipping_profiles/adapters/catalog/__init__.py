"""HTTP adapters for the product and shipping option services."""

from __future__ import annotations

from .client import CatalogAPIError, ProductServiceClient, ShippingOptionServiceClient
from .schema import (
    CartPayload,
    ProductPayload,
    ShippingOptionPayload,
)
from .translator import cart_to_payload, translate_product, translate_shipping_option

__all__ = [
    "CartPayload",
    "CatalogAPIError",
    "ProductPayload",
    "ProductServiceClient",
    "ShippingOptionPayload",
    "ShippingOptionServiceClient",
    "cart_to_payload",
    "translate_product",
    "translate_shipping_option",
]
