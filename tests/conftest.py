from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from shipping_profiles.adapters.memory import (
    InMemoryProductService,
    InMemoryProfileStore,
    InMemoryShippingOptionService,
    InMemoryUnitOfWork,
)
from shipping_profiles.adapters.sqlalchemy.mappings import create_all_tables
from shipping_profiles.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyShippingProfileUnitOfWork,
    shutdown,
    startup,
)
from shipping_profiles.domain.profiles import ShippingProfileService, UnitOfWorkFactory

os.environ.setdefault("DATABASE_URI", "sqlite+aiosqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'profiles.db'}")
    await create_all_tables(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def sqlite_unit_of_work(sqlite_engine: AsyncEngine) -> AsyncIterator[UnitOfWorkFactory]:
    await startup(engine=sqlite_engine, force=True)
    try:
        yield SqlAlchemyShippingProfileUnitOfWork
    finally:
        await shutdown()


@pytest.fixture
def profile_store() -> InMemoryProfileStore:
    return InMemoryProfileStore()


@pytest.fixture
def memory_unit_of_work(profile_store: InMemoryProfileStore) -> UnitOfWorkFactory:
    return lambda: InMemoryUnitOfWork(profile_store)


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def unit_of_work_factory(
    request: pytest.FixtureRequest, tmp_path: Path
) -> AsyncIterator[UnitOfWorkFactory]:
    """Run a test once against each storage adapter."""
    if request.param == "memory":
        store = InMemoryProfileStore()
        yield lambda: InMemoryUnitOfWork(store)
        return

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'profiles.db'}")
    await startup(engine=engine, force=True)
    try:
        yield SqlAlchemyShippingProfileUnitOfWork
    finally:
        await shutdown()


@pytest.fixture
def product_service() -> InMemoryProductService:
    return InMemoryProductService()


@pytest.fixture
def shipping_option_service() -> InMemoryShippingOptionService:
    return InMemoryShippingOptionService()


@pytest.fixture
def profile_service(
    unit_of_work_factory: UnitOfWorkFactory,
    product_service: InMemoryProductService,
    shipping_option_service: InMemoryShippingOptionService,
) -> ShippingProfileService:
    return ShippingProfileService(
        unit_of_work_factory=unit_of_work_factory,
        product_service=product_service,
        shipping_option_service=shipping_option_service,
    )
