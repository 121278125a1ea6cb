"""SQLAlchemy table metadata for shipping profiles."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
    Uuid,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

shipping_profile_table = Table(
    "shipping_profile",
    metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("name", String, nullable=False),
    Column("profile_metadata", JSON, nullable=False, default=dict),
    Column("created_at", UTCDateTime, nullable=False),
)

# products may be listed by several profiles
shipping_profile_product_table = Table(
    "shipping_profile_product",
    metadata,
    Column(
        "profile_id",
        UUIDColumnType,
        ForeignKey("shipping_profile.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("product_id", UUIDColumnType, primary_key=True),
    Column("position", Integer, nullable=False),
    Index("ix_shipping_profile_product_product_id", "product_id"),
)

# option_id is the primary key: an option is held by at most one profile
shipping_profile_option_table = Table(
    "shipping_profile_option",
    metadata,
    Column("option_id", UUIDColumnType, primary_key=True),
    Column(
        "profile_id",
        UUIDColumnType,
        ForeignKey("shipping_profile.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("position", Integer, nullable=False),
)


async def create_all_tables(engine: AsyncEngine) -> None:
    """Create database tables for the shipping profile metadata."""

    log.info("Creating all tables")
    async with engine.begin() as connection:
        await connection.run_sync(metadata.create_all)
