from __future__ import annotations

from datetime import UTC, datetime, timedelta
from itertools import count
from typing import TYPE_CHECKING
from uuid import UUID

from shipping_profiles.domain.model import (
    BundleLineItem,
    Cart,
    LineItemContent,
    PriceType,
    Product,
    RequirementType,
    ShippingOption,
    ShippingOptionPrice,
    ShippingProfile,
    ShippingRequirement,
    SimpleLineItem,
    new_id,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from shipping_profiles.domain.ports.unit_of_work import ShippingProfileUnitOfWork

EU_REGION = UUID("6f1e8a1c-2b6e-4f0c-9d2a-3e1b2c4d5e6f")
US_REGION = UUID("0b9d1f7e-8c4a-4e3b-a2d1-9f8e7d6c5b4a")

_BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)
_CLOCK = count()


def make_profile(
    name: str = "Default",
    *,
    products: Iterable[UUID] = (),
    shipping_options: Iterable[UUID] = (),
    metadata: dict[str, object] | None = None,
) -> ShippingProfile:
    """Build a profile; successive calls get strictly increasing ``created_at``."""
    return ShippingProfile(
        name=name,
        products=list(products),
        shipping_options=list(shipping_options),
        metadata=dict(metadata or {}),
        created_at=_BASE_TIME + timedelta(seconds=next(_CLOCK)),
    )


def make_product(title: str = "T-Shirt") -> Product:
    return Product(id=new_id(), title=title, handle=title.lower().replace(" ", "-"))


def make_option(
    name: str = "Standard",
    *,
    region_id: UUID = EU_REGION,
    amount: int | None = 500,
    min_subtotal: int | None = None,
    max_subtotal: int | None = None,
) -> ShippingOption:
    requirements: list[ShippingRequirement] = []
    if min_subtotal is not None:
        requirements.append(ShippingRequirement(RequirementType.MIN_SUBTOTAL, min_subtotal))
    if max_subtotal is not None:
        requirements.append(ShippingRequirement(RequirementType.MAX_SUBTOTAL, max_subtotal))
    return ShippingOption(
        id=new_id(),
        name=name,
        region_id=region_id,
        provider_id="manual",
        price=ShippingOptionPrice(
            PriceType.FLAT_RATE if amount is not None else PriceType.CALCULATED, amount
        ),
        requirements=tuple(requirements),
    )


def make_cart(
    *product_ids: UUID,
    region_id: UUID = EU_REGION,
    unit_price: int = 1000,
    bundle: Iterable[UUID] = (),
) -> Cart:
    """One simple line item per product id, plus an optional bundle item."""
    items: list[SimpleLineItem | BundleLineItem] = [
        SimpleLineItem(content=LineItemContent(product_id=pid, unit_price=unit_price))
        for pid in product_ids
    ]
    bundled = tuple(LineItemContent(product_id=pid, unit_price=unit_price) for pid in bundle)
    if bundled:
        items.append(BundleLineItem(content=bundled))
    return Cart(region_id=region_id, items=items)


async def seed_profiles(
    unit_of_work_factory: Callable[[], ShippingProfileUnitOfWork],
    *profiles: ShippingProfile,
) -> None:
    async with unit_of_work_factory() as uow:
        for profile in profiles:
            await uow.repositories.profiles.add(profile)
        await uow.commit()
