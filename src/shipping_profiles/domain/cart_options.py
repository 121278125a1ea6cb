"""Resolve the shipping options a cart may be offered."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from shipping_profiles.domain.model import product_ids_in_cart
from shipping_profiles.domain.ports.persistence import ProfileSelector

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from shipping_profiles.domain.model import (
        Cart,
        ShippingOption,
        ShippingOptionId,
        ShippingProfile,
    )
    from shipping_profiles.domain.ports.catalog import ShippingOptionService

log = getLogger(__name__)


class ProfileFinder(Protocol):
    async def list(self, selector: ProfileSelector | None = None) -> Sequence[ShippingProfile]: ...


class CartOptionResolver:
    """Finds the profiles covering a cart and keeps the options the cart qualifies for."""

    def __init__(
        self,
        *,
        profiles: ProfileFinder,
        shipping_option_service: ShippingOptionService,
    ) -> None:
        self._profiles = profiles
        self._shipping_options = shipping_option_service

    async def fetch_cart_options(self, cart: Cart) -> list[ShippingOption]:
        """Return the validated shipping options for ``cart`` in discovery order.

        Options failing cart validation are left out of the result; the
        failure is not propagated.
        """

        product_ids = product_ids_in_cart(cart)
        if not product_ids:
            return []

        profiles = await self._profiles.list(ProfileSelector.containing_products(product_ids))
        option_ids = distinct_option_ids(profiles)
        if not option_ids:
            return []

        validated = await asyncio.gather(
            *(self._validate(option_id, cart) for option_id in option_ids)
        )
        options = [option for option in validated if option is not None]
        log.debug(
            "Cart %s: %d of %d shipping options offered from %d profiles",
            cart.id,
            len(options),
            len(option_ids),
            len(profiles),
        )
        return options

    async def _validate(self, option_id: ShippingOptionId, cart: Cart) -> ShippingOption | None:
        try:
            return await self._shipping_options.validate_cart_option(option_id, cart)
        except Exception:  # noqa: BLE001
            return None


def distinct_option_ids(profiles: Iterable[ShippingProfile]) -> list[ShippingOptionId]:
    """Flatten the option ids of ``profiles``, keeping the first occurrence of each."""

    seen: dict[ShippingOptionId, None] = {}
    for profile in profiles:
        for option_id in profile.shipping_options:
            seen.setdefault(option_id, None)
    return list(seen)
