"""Ports for the sibling catalog services (products and shipping options)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from shipping_profiles.domain.model import (
        Cart,
        Product,
        ProductId,
        ShippingOption,
        ShippingOptionId,
    )


@runtime_checkable
class ProductService(Protocol):
    async def retrieve(self, product_id: ProductId) -> Product:
        """Return the product or raise ``NotFoundError``."""
        ...


@runtime_checkable
class ShippingOptionService(Protocol):
    async def retrieve(self, option_id: ShippingOptionId) -> ShippingOption:
        """Return the shipping option or raise ``NotFoundError``."""
        ...

    async def validate_cart_option(self, option_id: ShippingOptionId, cart: Cart) -> ShippingOption:
        """Return the option if ``cart`` qualifies for it, otherwise raise."""
        ...


__all__ = ["ProductService", "ShippingOptionService"]
