"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class PriceType(StrEnum):
    FLAT_RATE = "flat_rate"
    CALCULATED = "calculated"


class RequirementType(StrEnum):
    MIN_SUBTOTAL = "min_subtotal"
    MAX_SUBTOTAL = "max_subtotal"


class ExpandableField(StrEnum):
    """Profile fields that `decorate` can replace with resolved records."""

    PRODUCTS = "products"
    SHIPPING_OPTIONS = "shipping_options"
