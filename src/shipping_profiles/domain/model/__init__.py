"""Public domain model surface."""

from __future__ import annotations

from shipping_profiles.domain.model.cart import (
    BundleLineItem,
    Cart,
    LineItem,
    LineItemContent,
    SimpleLineItem,
    iter_contents,
    product_ids_in_cart,
)
from shipping_profiles.domain.model.catalog import (
    Product,
    ShippingOption,
    ShippingOptionPrice,
    ShippingRequirement,
)
from shipping_profiles.domain.model.entity import Entity, new_id, utc_now
from shipping_profiles.domain.model.enums import ExpandableField, PriceType, RequirementType
from shipping_profiles.domain.model.primitives import (
    Amount,
    Metadata,
    ProductId,
    ProfileId,
    RegionId,
    ShippingOptionId,
)
from shipping_profiles.domain.model.profile import ShippingProfile

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    "utc_now",
    # profiles
    "ShippingProfile",
    # catalog
    "Product",
    "ShippingOption",
    "ShippingOptionPrice",
    "ShippingRequirement",
    # cart
    "Cart",
    "LineItem",
    "LineItemContent",
    "SimpleLineItem",
    "BundleLineItem",
    "iter_contents",
    "product_ids_in_cart",
    # enums
    "ExpandableField",
    "PriceType",
    "RequirementType",
    # primitives
    "Amount",
    "Metadata",
    "ProductId",
    "ProfileId",
    "RegionId",
    "ShippingOptionId",
]
