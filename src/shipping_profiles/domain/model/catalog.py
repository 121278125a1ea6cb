"""Catalog records owned by sibling services (products, shipping options)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shipping_profiles.domain.model.enums import PriceType, RequirementType
    from shipping_profiles.domain.model.primitives import (
        Amount,
        ProductId,
        RegionId,
        ShippingOptionId,
    )


@dataclass(frozen=True, slots=True, kw_only=True)
class Product:
    id: ProductId
    title: str
    handle: str | None = None


@dataclass(frozen=True, slots=True)
class ShippingOptionPrice:
    type: PriceType
    amount: Amount | None = None


@dataclass(frozen=True, slots=True)
class ShippingRequirement:
    type: RequirementType
    value: Amount


@dataclass(frozen=True, slots=True, kw_only=True)
class ShippingOption:
    """A fulfilment method with price and requirement rules, scoped to a region."""

    id: ShippingOptionId
    name: str
    region_id: RegionId
    provider_id: str
    price: ShippingOptionPrice
    requirements: tuple[ShippingRequirement, ...] = ()
    data: dict[str, object] = field(default_factory=dict[str, object])
