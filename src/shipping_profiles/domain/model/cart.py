"""Cart shapes consumed by shipping option resolution.

Line items come in two shapes: a simple item carrying a single product, or a
bundle whose content is a list of sub-items, each referencing its own product.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from shipping_profiles.domain.model.entity import new_id

if TYPE_CHECKING:
    from collections.abc import Iterator
    from uuid import UUID

    from shipping_profiles.domain.model.primitives import Amount, ProductId, RegionId


@dataclass(frozen=True, slots=True, kw_only=True)
class LineItemContent:
    product_id: ProductId
    quantity: int = 1
    unit_price: Amount = 0

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be at least 1")

    @property
    def total(self) -> Amount:
        return self.unit_price * self.quantity


@dataclass(frozen=True, slots=True, kw_only=True)
class SimpleLineItem:
    content: LineItemContent
    id: UUID = field(default_factory=new_id)


@dataclass(frozen=True, slots=True, kw_only=True)
class BundleLineItem:
    content: tuple[LineItemContent, ...]
    id: UUID = field(default_factory=new_id)


type LineItem = SimpleLineItem | BundleLineItem


def iter_contents(item: LineItem) -> Iterator[LineItemContent]:
    match item:
        case SimpleLineItem(content=content):
            yield content
        case BundleLineItem(content=contents):
            yield from contents


@dataclass(slots=True, kw_only=True)
class Cart:
    region_id: RegionId
    items: list[LineItem] = field(default_factory=list["LineItem"])
    id: UUID = field(default_factory=new_id)

    @property
    def subtotal(self) -> Amount:
        return sum(content.total for item in self.items for content in iter_contents(item))


def product_ids_in_cart(cart: Cart) -> list[ProductId]:
    """Return the distinct product ids referenced by the cart, in first-seen order."""

    seen: dict[ProductId, None] = {}
    for item in cart.items:
        for content in iter_contents(item):
            seen.setdefault(content.product_id, None)
    return list(seen)
