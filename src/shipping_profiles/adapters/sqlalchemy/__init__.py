"""SQLAlchemy adapter package for shipping profiles."""

from __future__ import annotations

from .mappings import (
    create_all_tables,
    metadata,
    shipping_profile_option_table,
    shipping_profile_product_table,
    shipping_profile_table,
)
from .repositories import SqlAlchemyShippingProfileRepository, storage_errors
from .unit_of_work import (
    SqlAlchemyShippingProfileUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyShippingProfileRepository",
    "SqlAlchemyShippingProfileUnitOfWork",
    "StartupError",
    "create_all_tables",
    "metadata",
    "shipping_profile_option_table",
    "shipping_profile_product_table",
    "shipping_profile_table",
    "shutdown",
    "startup",
    "storage_errors",
]
