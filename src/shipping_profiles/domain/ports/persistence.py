"""Ports for persisting shipping profiles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from shipping_profiles.domain.model import ShippingProfile

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from shipping_profiles.domain.model import ProductId, ProfileId, ShippingOptionId


@dataclass(frozen=True, slots=True)
class ProfileSelector:
    """Query over profiles.

    Each non-empty field restricts the result to profiles that contain *any* of
    the given values; fields are combined with AND. An empty selector matches
    every profile.
    """

    ids: tuple[ProfileId, ...] = ()
    products: tuple[ProductId, ...] = ()
    shipping_options: tuple[ShippingOptionId, ...] = ()

    @classmethod
    def containing_products(cls, product_ids: Iterable[ProductId]) -> ProfileSelector:
        return cls(products=tuple(product_ids))

    @classmethod
    def holding_option(cls, option_id: ShippingOptionId) -> ProfileSelector:
        return cls(shipping_options=(option_id,))

    def matches(self, profile: ShippingProfile) -> bool:
        if self.ids and profile.id not in self.ids:
            return False
        if self.products and not _intersects(profile.products, self.products):
            return False
        if self.shipping_options and not _intersects(
            profile.shipping_options, self.shipping_options
        ):
            return False
        return True


def _intersects(values: Iterable[object], candidates: tuple[object, ...]) -> bool:
    return any(value in candidates for value in values)


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    async def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ShippingProfileRepository(Repository[ShippingProfile], Protocol):
    """Persistence contract for shipping profiles.

    Mutating methods return whether a profile matched, mirroring the matched
    count of a document store update. Implementations raise ``StorageError``
    for any underlying fault.
    """

    async def find(self, selector: ProfileSelector) -> Sequence[ShippingProfile]: ...

    async def get(self, profile_id: ProfileId) -> ShippingProfile | None: ...

    async def update_fields(self, profile_id: ProfileId, fields: Mapping[str, object]) -> bool: ...

    async def delete(self, profile_id: ProfileId) -> bool: ...

    async def add_product(self, profile_id: ProfileId, product_id: ProductId) -> bool: ...

    async def remove_product(self, profile_id: ProfileId, product_id: ProductId) -> bool: ...

    async def transfer_shipping_option(
        self, option_id: ShippingOptionId, profile_id: ProfileId
    ) -> ProfileId | None:
        """Make ``profile_id`` the sole holder of ``option_id`` in one atomic step.

        Returns the id of the profile the option was detached from, if any.
        """
        ...

    async def remove_shipping_option(
        self, profile_id: ProfileId, option_id: ShippingOptionId
    ) -> bool: ...

    async def set_metadata(self, profile_id: ProfileId, key: str, value: object) -> bool: ...
