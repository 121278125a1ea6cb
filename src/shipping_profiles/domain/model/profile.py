"""Shipping profile aggregate.

A profile groups catalog products with the shipping options that may fulfil
them. Products can be shared between profiles; a shipping option belongs to
at most one profile at a time, which is enforced by the persistence layer
when options are assigned (see ``ShippingProfileRepository.transfer_shipping_option``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from shipping_profiles.domain.model.entity import Entity, utc_now

if TYPE_CHECKING:
    from datetime import datetime

    from shipping_profiles.domain.model.primitives import (
        Metadata,
        ProductId,
        ShippingOptionId,
    )


@dataclass(eq=False, kw_only=True)
class ShippingProfile(Entity):
    name: str
    products: list[ProductId] = field(default_factory=list["ProductId"])
    shipping_options: list[ShippingOptionId] = field(default_factory=list["ShippingOptionId"])
    metadata: Metadata = field(default_factory=dict[str, object])
    created_at: datetime = field(default_factory=utc_now)

    def has_product(self, product_id: ProductId) -> bool:
        return product_id in self.products

    def has_shipping_option(self, option_id: ShippingOptionId) -> bool:
        return option_id in self.shipping_options

    def add_product(self, product_id: ProductId) -> bool:
        """Append ``product_id`` unless already present. Returns whether it changed."""
        if self.has_product(product_id):
            return False
        self.products.append(product_id)
        return True

    def remove_product(self, product_id: ProductId) -> bool:
        if not self.has_product(product_id):
            return False
        self.products.remove(product_id)
        return True

    def add_shipping_option(self, option_id: ShippingOptionId) -> bool:
        if self.has_shipping_option(option_id):
            return False
        self.shipping_options.append(option_id)
        return True

    def remove_shipping_option(self, option_id: ShippingOptionId) -> bool:
        if not self.has_shipping_option(option_id):
            return False
        self.shipping_options.remove(option_id)
        return True

    def set_metadata(self, key: str, value: object) -> None:
        self.metadata[key] = value
