"""Translate catalog wire payloads to domain records and back."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shipping_profiles.domain.model import (
    BundleLineItem,
    Product,
    ShippingOption,
    ShippingOptionPrice,
    ShippingRequirement,
    SimpleLineItem,
)

from .schema import CartPayload, LineItemContentPayload, LineItemPayload

if TYPE_CHECKING:
    from shipping_profiles.domain.model import Cart, LineItem, LineItemContent

    from .schema import ProductPayload, ShippingOptionPayload


def translate_product(payload: ProductPayload) -> Product:
    return Product(id=payload.id, title=payload.title, handle=payload.handle)


def translate_shipping_option(payload: ShippingOptionPayload) -> ShippingOption:
    return ShippingOption(
        id=payload.id,
        name=payload.name,
        region_id=payload.region_id,
        provider_id=payload.provider_id,
        price=ShippingOptionPrice(type=payload.price.type, amount=payload.price.amount),
        requirements=tuple(
            ShippingRequirement(type=requirement.type, value=requirement.value)
            for requirement in payload.requirements
        ),
        data=dict(payload.data),
    )


def cart_to_payload(cart: Cart) -> CartPayload:
    return CartPayload(
        id=cart.id,
        region_id=cart.region_id,
        subtotal=cart.subtotal,
        items=[_line_item_to_payload(item) for item in cart.items],
    )


def _line_item_to_payload(item: LineItem) -> LineItemPayload:
    match item:
        case SimpleLineItem(content=content):
            return LineItemPayload(id=item.id, content=_content_to_payload(content))
        case BundleLineItem(content=contents):
            return LineItemPayload(
                id=item.id,
                content=[_content_to_payload(content) for content in contents],
            )


def _content_to_payload(content: LineItemContent) -> LineItemContentPayload:
    return LineItemContentPayload(
        product_id=content.product_id,
        quantity=content.quantity,
        unit_price=content.unit_price,
    )
