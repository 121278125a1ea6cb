"""In-process adapters: a profile document store and catalog services.

Used for local runs and tests. Units of work against the same
``InMemoryProfileStore`` are serialised by a store-wide lock, so each one
behaves like a serializable transaction.
"""

from __future__ import annotations

import asyncio
from copy import deepcopy
from typing import TYPE_CHECKING, Literal

from shipping_profiles.domain.errors import NotFoundError, ShippingOptionIneligibleError
from shipping_profiles.domain.model import RequirementType
from shipping_profiles.domain.ports.unit_of_work import ShippingProfileRepositories

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from types import TracebackType

    from shipping_profiles.domain.model import (
        Cart,
        Product,
        ProductId,
        ProfileId,
        ShippingOption,
        ShippingOptionId,
        ShippingProfile,
    )
    from shipping_profiles.domain.ports.persistence import ProfileSelector


class InMemoryProfileStore:
    """Profile documents keyed by id. Documents are never shared with callers."""

    def __init__(self, profiles: Iterable[ShippingProfile] = ()) -> None:
        self.documents: dict[ProfileId, ShippingProfile] = {
            profile.id: deepcopy(profile) for profile in profiles
        }
        self.lock = asyncio.Lock()

    def snapshot(self) -> dict[ProfileId, ShippingProfile]:
        return deepcopy(self.documents)

    def restore(self, snapshot: Mapping[ProfileId, ShippingProfile]) -> None:
        self.documents = deepcopy(dict(snapshot))


class InMemoryShippingProfileRepository:
    def __init__(self, store: InMemoryProfileStore) -> None:
        self._store = store

    @property
    def _documents(self) -> dict[ProfileId, ShippingProfile]:
        return self._store.documents

    async def add(self, entity: ShippingProfile) -> None:
        self._documents[entity.id] = deepcopy(entity)

    async def find(self, selector: ProfileSelector) -> Sequence[ShippingProfile]:
        matches = [doc for doc in self._documents.values() if selector.matches(doc)]
        matches.sort(key=lambda doc: doc.created_at)
        return [deepcopy(doc) for doc in matches]

    async def get(self, profile_id: ProfileId) -> ShippingProfile | None:
        document = self._documents.get(profile_id)
        return deepcopy(document) if document is not None else None

    async def update_fields(self, profile_id: ProfileId, fields: Mapping[str, object]) -> bool:
        document = self._documents.get(profile_id)
        if document is None:
            return False
        for name, value in fields.items():
            setattr(document, name, value)
        return True

    async def delete(self, profile_id: ProfileId) -> bool:
        return self._documents.pop(profile_id, None) is not None

    async def add_product(self, profile_id: ProfileId, product_id: ProductId) -> bool:
        document = self._documents.get(profile_id)
        if document is None:
            return False
        document.add_product(product_id)
        return True

    async def remove_product(self, profile_id: ProfileId, product_id: ProductId) -> bool:
        document = self._documents.get(profile_id)
        if document is None:
            return False
        document.remove_product(product_id)
        return True

    async def transfer_shipping_option(
        self, option_id: ShippingOptionId, profile_id: ProfileId
    ) -> ProfileId | None:
        target = self._documents.get(profile_id)
        if target is None:
            raise NotFoundError(f"Shipping Profile with {profile_id} was not found")

        previous_owner: ProfileId | None = None
        for document in self._documents.values():
            if document.id != profile_id and document.remove_shipping_option(option_id):
                previous_owner = document.id
        target.add_shipping_option(option_id)
        return previous_owner

    async def remove_shipping_option(
        self, profile_id: ProfileId, option_id: ShippingOptionId
    ) -> bool:
        document = self._documents.get(profile_id)
        if document is None:
            return False
        document.remove_shipping_option(option_id)
        return True

    async def set_metadata(self, profile_id: ProfileId, key: str, value: object) -> bool:
        document = self._documents.get(profile_id)
        if document is None:
            return False
        document.set_metadata(key, deepcopy(value))
        return True


class InMemoryUnitOfWork:
    """Unit of work over an ``InMemoryProfileStore``.

    Changes not committed when the block exits are discarded.
    """

    def __init__(self, store: InMemoryProfileStore) -> None:
        self._store = store
        self._repositories = ShippingProfileRepositories(
            profiles=InMemoryShippingProfileRepository(store)
        )
        self._snapshot: dict[ProfileId, ShippingProfile] | None = None

    @property
    def repositories(self) -> ShippingProfileRepositories:
        return self._repositories

    async def __aenter__(self) -> InMemoryUnitOfWork:
        await self._store.lock.acquire()
        self._snapshot = self._store.snapshot()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        try:
            await self.rollback()
        finally:
            self._snapshot = None
            self._store.lock.release()
        return False

    async def commit(self) -> None:
        self._snapshot = self._store.snapshot()

    async def rollback(self) -> None:
        if self._snapshot is not None:
            self._store.restore(self._snapshot)


class InMemoryProductService:
    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._products: dict[ProductId, Product] = {product.id: product for product in products}

    def register(self, product: Product) -> None:
        self._products[product.id] = product

    async def retrieve(self, product_id: ProductId) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise NotFoundError(f"Product with {product_id} was not found")
        return product


class InMemoryShippingOptionService:
    """Shipping options with in-process cart validation.

    A cart qualifies for an option when it belongs to the option's region and
    its subtotal satisfies every requirement: ``min_subtotal`` is inclusive,
    ``max_subtotal`` is exclusive.
    """

    def __init__(self, options: Iterable[ShippingOption] = ()) -> None:
        self._options: dict[ShippingOptionId, ShippingOption] = {
            option.id: option for option in options
        }

    def register(self, option: ShippingOption) -> None:
        self._options[option.id] = option

    async def retrieve(self, option_id: ShippingOptionId) -> ShippingOption:
        option = self._options.get(option_id)
        if option is None:
            raise NotFoundError(f"Shipping option with {option_id} was not found")
        return option

    async def validate_cart_option(self, option_id: ShippingOptionId, cart: Cart) -> ShippingOption:
        option = await self.retrieve(option_id)
        if option.region_id != cart.region_id:
            raise ShippingOptionIneligibleError(
                f"Shipping option {option.name} is not available in the cart's region"
            )

        subtotal = cart.subtotal
        for requirement in option.requirements:
            match requirement.type:
                case RequirementType.MIN_SUBTOTAL if subtotal < requirement.value:
                    raise ShippingOptionIneligibleError(
                        f"Cart subtotal {subtotal} is below the minimum of {requirement.value}"
                    )
                case RequirementType.MAX_SUBTOTAL if subtotal >= requirement.value:
                    raise ShippingOptionIneligibleError(
                        f"Cart subtotal {subtotal} exceeds the maximum of {requirement.value}"
                    )
                case _:
                    pass
        return option
