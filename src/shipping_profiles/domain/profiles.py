"""Profile store: CRUD and membership operations over shipping profiles."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import fields as dataclass_fields
from logging import getLogger
from typing import TYPE_CHECKING, Final

from shipping_profiles.domain.errors import InvalidArgumentError, InvalidDataError, NotFoundError
from shipping_profiles.domain.identifiers import validate_id
from shipping_profiles.domain.model import ExpandableField, ShippingProfile
from shipping_profiles.domain.ports.persistence import ProfileSelector
from shipping_profiles.domain.ports.unit_of_work import ShippingProfileUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from shipping_profiles.domain.model import ProfileId
    from shipping_profiles.domain.ports.catalog import ProductService, ShippingOptionService
    from shipping_profiles.domain.ports.persistence import ShippingProfileRepository

UnitOfWorkFactory = Callable[[], ShippingProfileUnitOfWork]

log = getLogger(__name__)

_GUARDED_FIELDS: Final[dict[str, str]] = {
    "metadata": "Use set_metadata to update metadata fields",
    "products": "Use add_product, remove_product to update the products field",
    "shipping_options": (
        "Use add_shipping_option, remove_shipping_option to update the shipping_options field"
    ),
}
_UPDATABLE_FIELDS: Final[frozenset[str]] = frozenset({"name"})
_REQUIRED_DECORATED_FIELDS: Final[tuple[str, ...]] = ("id", "metadata")
_PROFILE_FIELDS: Final[frozenset[str]] = frozenset(f.name for f in dataclass_fields(ShippingProfile))


class ShippingProfileService:
    """Manages shipping profiles and their product and shipping option membership.

    Every public operation runs inside its own unit of work: mutations are
    committed on success and rolled back when an error propagates.
    """

    def __init__(
        self,
        *,
        unit_of_work_factory: UnitOfWorkFactory,
        product_service: ProductService,
        shipping_option_service: ShippingOptionService,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._products = product_service
        self._shipping_options = shipping_option_service

    async def list(self, selector: ProfileSelector | None = None) -> Sequence[ShippingProfile]:
        """Return the profiles matching ``selector`` (all profiles when omitted)."""

        async with self._unit_of_work_factory() as uow:
            found = await uow.repositories.profiles.find(selector or ProfileSelector())
        return list(found)

    async def retrieve(self, profile_id: object) -> ShippingProfile:
        """Get a profile by id.

        Raises ``InvalidArgumentError`` for malformed ids and ``NotFoundError``
        when no profile has the id.
        """

        validated_id = validate_id(profile_id)
        async with self._unit_of_work_factory() as uow:
            return await _retrieve(uow.repositories.profiles, validated_id)

    async def update(self, profile_id: object, update: Mapping[str, object]) -> None:
        """Apply a shallow field update.

        Metadata, product and shipping option changes have dedicated methods;
        attempting them here raises ``InvalidDataError``.
        """

        validated_id = validate_id(profile_id)
        _check_update(update)
        if not update:
            return

        async with self._unit_of_work_factory() as uow:
            await uow.repositories.profiles.update_fields(validated_id, dict(update))
            await uow.commit()

    async def delete(self, profile_id: object) -> None:
        """Delete a profile. Deleting a profile that does not exist is a no-op."""

        validated_id = validate_id(profile_id)
        async with self._unit_of_work_factory() as uow:
            profiles = uow.repositories.profiles
            try:
                profile = await _retrieve(profiles, validated_id)
            except NotFoundError:
                return
            await profiles.delete(profile.id)
            await uow.commit()
        log.info("Deleted shipping profile %s", profile.id)

    async def add_product(self, profile_id: object, product_id: object) -> None:
        """Add a product to a profile. Adding an existing member is a no-op."""

        validated_id = validate_id(profile_id)
        validated_product_id = validate_id(product_id, label="productId")
        async with self._unit_of_work_factory() as uow:
            profiles = uow.repositories.profiles
            profile = await _retrieve(profiles, validated_id)
            product = await self._products.retrieve(validated_product_id)
            if profile.has_product(product.id):
                return
            await profiles.add_product(profile.id, product.id)
            await uow.commit()

    async def remove_product(self, profile_id: object, product_id: object) -> None:
        """Remove a product from a profile. Removing a non-member is a no-op."""

        validated_id = validate_id(profile_id)
        validated_product_id = validate_id(product_id, label="productId")
        async with self._unit_of_work_factory() as uow:
            profiles = uow.repositories.profiles
            profile = await _retrieve(profiles, validated_id)
            if not profile.has_product(validated_product_id):
                return
            await profiles.remove_product(profile.id, validated_product_id)
            await uow.commit()

    async def add_shipping_option(self, profile_id: object, option_id: object) -> None:
        """Assign a shipping option to a profile.

        A shipping option belongs to at most one profile, so an option held by
        another profile is moved here in a single repository operation.
        """

        validated_id = validate_id(profile_id)
        validated_option_id = validate_id(option_id, label="optionId")
        async with self._unit_of_work_factory() as uow:
            profiles = uow.repositories.profiles
            profile = await _retrieve(profiles, validated_id)
            option = await self._shipping_options.retrieve(validated_option_id)
            if profile.has_shipping_option(option.id):
                return
            previous_owner = await profiles.transfer_shipping_option(option.id, profile.id)
            await uow.commit()

        if previous_owner is not None:
            log.info(
                "Moved shipping option %s from profile %s to profile %s",
                option.id,
                previous_owner,
                profile.id,
            )

    async def remove_shipping_option(self, profile_id: object, option_id: object) -> None:
        """Remove an option from a profile. Removing an option it does not hold is a no-op."""

        validated_id = validate_id(profile_id)
        validated_option_id = validate_id(option_id, label="optionId")
        async with self._unit_of_work_factory() as uow:
            profiles = uow.repositories.profiles
            profile = await _retrieve(profiles, validated_id)
            await profiles.remove_shipping_option(profile.id, validated_option_id)
            await uow.commit()

    async def set_metadata(self, profile_id: object, key: object, value: object) -> None:
        """Set ``metadata[key] = value``, keeping the other metadata keys."""

        validated_id = validate_id(profile_id)
        if not isinstance(key, str):
            raise InvalidArgumentError("Key type is invalid. Metadata keys must be strings")

        async with self._unit_of_work_factory() as uow:
            await uow.repositories.profiles.set_metadata(validated_id, key, value)
            await uow.commit()

    async def decorate(
        self,
        profile: ShippingProfile,
        fields: Iterable[str],
        expand_fields: Iterable[str] = (),
    ) -> dict[str, object]:
        """Project ``profile`` to ``fields`` plus ``id`` and ``metadata``.

        Fields listed in ``expand_fields`` (``products``, ``shipping_options``)
        are replaced by the records resolved from the catalog services, in the
        order stored on the profile. A failing lookup aborts the decoration.
        """

        decorated: dict[str, object] = {}
        for name in (*fields, *_REQUIRED_DECORATED_FIELDS):
            if name in _PROFILE_FIELDS:
                decorated[name] = _copy_value(getattr(profile, name))

        expand = set(expand_fields)
        if ExpandableField.PRODUCTS in expand:
            decorated["products"] = list(
                await asyncio.gather(*(self._products.retrieve(pid) for pid in profile.products))
            )
        if ExpandableField.SHIPPING_OPTIONS in expand:
            decorated["shipping_options"] = list(
                await asyncio.gather(
                    *(self._shipping_options.retrieve(oid) for oid in profile.shipping_options)
                )
            )
        return decorated


async def _retrieve(repository: ShippingProfileRepository, profile_id: ProfileId) -> ShippingProfile:
    profile = await repository.get(profile_id)
    if profile is None:
        raise NotFoundError(f"Shipping Profile with {profile_id} was not found")
    return profile


def _check_update(update: Mapping[str, object]) -> None:
    for name, message in _GUARDED_FIELDS.items():
        if name in update:
            raise InvalidDataError(message)

    unknown = sorted(set(update) - _UPDATABLE_FIELDS)
    if unknown:
        raise InvalidDataError(f"Shipping profile fields cannot be updated: {', '.join(unknown)}")

    name = update.get("name")
    if "name" in update and not isinstance(name, str):
        raise InvalidDataError("Shipping profile name must be a string")


def _copy_value(value: object) -> object:
    if isinstance(value, list):
        return list(value)  # pyright: ignore[reportUnknownArgumentType]
    if isinstance(value, dict):
        return dict(value)  # pyright: ignore[reportUnknownArgumentType]
    return value
