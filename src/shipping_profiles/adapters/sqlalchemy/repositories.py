"""Repository implementations backed by SQLAlchemy async sessions."""

from __future__ import annotations

from collections import defaultdict
from contextlib import contextmanager
from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from shipping_profiles.adapters.sqlalchemy.mappings import (
    shipping_profile_option_table,
    shipping_profile_product_table,
    shipping_profile_table,
)
from shipping_profiles.domain.errors import NotFoundError, StorageError
from shipping_profiles.domain.model import ShippingProfile
from shipping_profiles.domain.ports.persistence import ProfileSelector

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence
    from uuid import UUID

    from sqlalchemy import CursorResult, Row, Table
    from sqlalchemy.ext.asyncio import AsyncSession

    from shipping_profiles.domain.model import ProductId, ProfileId, ShippingOptionId


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Translate SQLAlchemy failures into ``StorageError``."""

    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageError(f"Failed to {operation}: {exc}") from exc


class SqlAlchemyShippingProfileRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, entity: ShippingProfile) -> None:
        with storage_errors("add shipping profile"):
            await self.session.execute(
                insert(shipping_profile_table).values(
                    id=entity.id,
                    name=entity.name,
                    profile_metadata=dict(entity.metadata),
                    created_at=entity.created_at,
                )
            )
            if entity.products:
                await self.session.execute(
                    insert(shipping_profile_product_table),
                    [
                        {"profile_id": entity.id, "product_id": product_id, "position": position}
                        for position, product_id in enumerate(entity.products)
                    ],
                )
            if entity.shipping_options:
                await self.session.execute(
                    insert(shipping_profile_option_table),
                    [
                        {"profile_id": entity.id, "option_id": option_id, "position": position}
                        for position, option_id in enumerate(entity.shipping_options)
                    ],
                )

    async def find(self, selector: ProfileSelector) -> Sequence[ShippingProfile]:
        profile = shipping_profile_table.c
        stmt = select(shipping_profile_table)
        if selector.ids:
            stmt = stmt.where(profile.id.in_(selector.ids))
        if selector.products:
            stmt = stmt.where(
                profile.id.in_(
                    select(shipping_profile_product_table.c.profile_id).where(
                        shipping_profile_product_table.c.product_id.in_(selector.products)
                    )
                )
            )
        if selector.shipping_options:
            stmt = stmt.where(
                profile.id.in_(
                    select(shipping_profile_option_table.c.profile_id).where(
                        shipping_profile_option_table.c.option_id.in_(selector.shipping_options)
                    )
                )
            )
        stmt = stmt.order_by(profile.created_at, profile.id)

        with storage_errors("find shipping profiles"):
            rows = (await self.session.execute(stmt)).all()
            return await self._hydrate(rows)

    async def get(self, profile_id: ProfileId) -> ShippingProfile | None:
        found = await self.find(ProfileSelector(ids=(profile_id,)))
        return found[0] if found else None

    async def update_fields(self, profile_id: ProfileId, fields: Mapping[str, object]) -> bool:
        values = {shipping_profile_table.c[name]: value for name, value in fields.items()}
        with storage_errors("update shipping profile"):
            result = await self.session.execute(
                update(shipping_profile_table)
                .where(shipping_profile_table.c.id == profile_id)
                .values(values)
            )
        return _rowcount(result) > 0

    async def delete(self, profile_id: ProfileId) -> bool:
        with storage_errors("delete shipping profile"):
            for table in (shipping_profile_product_table, shipping_profile_option_table):
                await self.session.execute(delete(table).where(table.c.profile_id == profile_id))
            result = await self.session.execute(
                delete(shipping_profile_table).where(shipping_profile_table.c.id == profile_id)
            )
        return _rowcount(result) > 0

    async def add_product(self, profile_id: ProfileId, product_id: ProductId) -> bool:
        products = shipping_profile_product_table.c
        with storage_errors("add product to shipping profile"):
            if not await self._exists(profile_id):
                return False
            existing = await self.session.scalar(
                select(products.position)
                .where(products.profile_id == profile_id)
                .where(products.product_id == product_id)
            )
            if existing is not None:
                return True
            position = await self._next_position(shipping_profile_product_table, profile_id)
            await self.session.execute(
                insert(shipping_profile_product_table).values(
                    profile_id=profile_id, product_id=product_id, position=position
                )
            )
        return True

    async def remove_product(self, profile_id: ProfileId, product_id: ProductId) -> bool:
        products = shipping_profile_product_table.c
        with storage_errors("remove product from shipping profile"):
            if not await self._exists(profile_id):
                return False
            await self.session.execute(
                delete(shipping_profile_product_table)
                .where(products.profile_id == profile_id)
                .where(products.product_id == product_id)
            )
        return True

    async def transfer_shipping_option(
        self, option_id: ShippingOptionId, profile_id: ProfileId
    ) -> ProfileId | None:
        options = shipping_profile_option_table.c
        with storage_errors("assign shipping option"):
            if not await self._exists(profile_id):
                raise NotFoundError(f"Shipping Profile with {profile_id} was not found")

            current_owner = await self.session.scalar(
                select(options.profile_id).where(options.option_id == option_id).with_for_update()
            )
            if current_owner == profile_id:
                return None
            if current_owner is not None:
                await self.session.execute(
                    delete(shipping_profile_option_table).where(options.option_id == option_id)
                )

            position = await self._next_position(shipping_profile_option_table, profile_id)
            await self.session.execute(
                insert(shipping_profile_option_table).values(
                    option_id=option_id, profile_id=profile_id, position=position
                )
            )
        return cast("UUID | None", current_owner)

    async def remove_shipping_option(
        self, profile_id: ProfileId, option_id: ShippingOptionId
    ) -> bool:
        options = shipping_profile_option_table.c
        with storage_errors("remove shipping option from shipping profile"):
            if not await self._exists(profile_id):
                return False
            await self.session.execute(
                delete(shipping_profile_option_table)
                .where(options.profile_id == profile_id)
                .where(options.option_id == option_id)
            )
        return True

    async def set_metadata(self, profile_id: ProfileId, key: str, value: object) -> bool:
        profile = shipping_profile_table.c
        with storage_errors("set shipping profile metadata"):
            current = await self.session.scalar(
                select(profile.profile_metadata).where(profile.id == profile_id).with_for_update()
            )
            if current is None:
                return False
            merged = {**cast("dict[str, object]", current), key: value}
            await self.session.execute(
                update(shipping_profile_table)
                .where(profile.id == profile_id)
                .values(profile_metadata=merged)
            )
        return True

    async def _exists(self, profile_id: ProfileId) -> bool:
        found = await self.session.scalar(
            select(shipping_profile_table.c.id).where(shipping_profile_table.c.id == profile_id)
        )
        return found is not None

    async def _next_position(self, table: Table, profile_id: ProfileId) -> int:
        stmt = select(func.coalesce(func.max(table.c.position), -1) + 1).where(
            table.c.profile_id == profile_id
        )
        return int((await self.session.execute(stmt)).scalar_one())

    async def _hydrate(self, rows: Sequence[Row[tuple[object, ...]]]) -> list[ShippingProfile]:
        if not rows:
            return []
        profile_ids = [row.id for row in rows]

        products: defaultdict[UUID, list[UUID]] = defaultdict(list)
        product_rows = await self.session.execute(
            select(
                shipping_profile_product_table.c.profile_id,
                shipping_profile_product_table.c.product_id,
            )
            .where(shipping_profile_product_table.c.profile_id.in_(profile_ids))
            .order_by(shipping_profile_product_table.c.position)
        )
        for owner_id, product_id in product_rows:
            products[owner_id].append(product_id)

        options: defaultdict[UUID, list[UUID]] = defaultdict(list)
        option_rows = await self.session.execute(
            select(
                shipping_profile_option_table.c.profile_id,
                shipping_profile_option_table.c.option_id,
            )
            .where(shipping_profile_option_table.c.profile_id.in_(profile_ids))
            .order_by(shipping_profile_option_table.c.position)
        )
        for owner_id, option_id in option_rows:
            options[owner_id].append(option_id)

        return [
            ShippingProfile(
                id=row.id,
                name=row.name,
                products=products[row.id],
                shipping_options=options[row.id],
                metadata=dict(row.profile_metadata or {}),
                created_at=row.created_at,
            )
            for row in rows
        ]


def _rowcount(result: object) -> int:
    return cast("CursorResult[tuple[object, ...]]", result).rowcount


if TYPE_CHECKING:
    from shipping_profiles.domain.ports.persistence import ShippingProfileRepository

    _session_stub = cast("AsyncSession", object())
    _repo_check: ShippingProfileRepository = SqlAlchemyShippingProfileRepository(_session_stub)
