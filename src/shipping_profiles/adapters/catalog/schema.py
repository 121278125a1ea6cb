"""Wire schemas for the product and shipping option services."""

from __future__ import annotations

import logging
from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from shipping_profiles.domain.model import PriceType, RequirementType

log = logging.getLogger(__name__)


class CatalogBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "Catalog %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class ProductPayload(CatalogBaseModel):
    id: UUID
    title: str
    handle: str | None = None


class ProductResponse(CatalogBaseModel):
    product: ProductPayload


class ShippingOptionPricePayload(CatalogBaseModel):
    type: PriceType
    amount: int | None = None


class ShippingRequirementPayload(CatalogBaseModel):
    type: RequirementType
    value: int


class ShippingOptionPayload(CatalogBaseModel):
    id: UUID
    name: str
    region_id: UUID
    provider_id: str
    price: ShippingOptionPricePayload
    requirements: list[ShippingRequirementPayload] = Field(
        default_factory=list[ShippingRequirementPayload]
    )
    data: dict[str, object] = Field(default_factory=dict[str, object])


class ShippingOptionResponse(CatalogBaseModel):
    shipping_option: ShippingOptionPayload


class LineItemContentPayload(CatalogBaseModel):
    product_id: UUID
    quantity: int
    unit_price: int


class LineItemPayload(CatalogBaseModel):
    id: UUID
    content: LineItemContentPayload | list[LineItemContentPayload]


class CartPayload(CatalogBaseModel):
    id: UUID
    region_id: UUID
    subtotal: int
    items: list[LineItemPayload]


class CartValidationRequest(CatalogBaseModel):
    cart: CartPayload


class ErrorResponse(CatalogBaseModel):
    type: str | None = None
    message: str
