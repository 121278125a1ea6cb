from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import pytest_asyncio

from shipping_profiles.adapters.catalog import ProductServiceClient, ShippingOptionServiceClient
from shipping_profiles.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyShippingProfileUnitOfWork,
    is_started,
    shutdown,
)
from shipping_profiles.app import create_app, create_in_memory_app
from shipping_profiles.config import CatalogConfig, MissingConfigurationError, ResilienceConfig
from shipping_profiles.domain.model import new_id
from tests.helpers.profiles import make_cart, make_option, make_product, make_profile

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path


@pytest_asyncio.fixture(autouse=True)
async def reset_storage() -> AsyncIterator[None]:
    await shutdown()
    yield
    await shutdown()


@pytest.mark.asyncio
async def test_in_memory_app_resolves_cart_options() -> None:
    product = make_product()
    standard, premium = make_option("Standard"), make_option("Premium", min_subtotal=10_000)
    profile = make_profile(products=[product.id], shipping_options=[standard.id, premium.id])

    async with create_in_memory_app(
        profiles=[profile], products=[product], shipping_options=[standard, premium]
    ) as app:
        options = await app.cart_options.fetch_cart_options(make_cart(product.id))
        await app.profiles.remove_shipping_option(profile.id, standard.id)
        remaining = await app.cart_options.fetch_cart_options(make_cart(product.id))

    assert options == [standard]
    assert remaining == []


@pytest.mark.asyncio
async def test_create_app_wires_sqlalchemy_and_http_clients(tmp_path: Path) -> None:
    catalog_config = CatalogConfig(
        products=ResilienceConfig(name="products", base_url="https://products.test", cache=None),
        shipping_options=ResilienceConfig(
            name="shipping_options", base_url="https://options.test", cache=None
        ),
    )

    app = await create_app(
        catalog_config=catalog_config,
        database_uri=f"sqlite+aiosqlite:///{tmp_path / 'app.db'}",
    )
    async with app:
        assert is_started()
        assert app.catalog is not None
        assert isinstance(app.catalog.products, ProductServiceClient)
        assert isinstance(app.catalog.shipping_options, ShippingOptionServiceClient)
        assert await app.profiles.list() == []
        assert await app.cart_options.fetch_cart_options(make_cart(new_id())) == []


@pytest.mark.asyncio
async def test_storage_operations_need_no_catalog_configuration(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("PRODUCT_SERVICE_URL", raising=False)
    monkeypatch.delenv("SHIPPING_OPTION_SERVICE_URL", raising=False)
    profile = make_profile(products=[new_id()])

    async with await create_app(
        database_uri=f"sqlite+aiosqlite:///{tmp_path / 'app.db'}"
    ) as app:
        async with SqlAlchemyShippingProfileUnitOfWork() as uow:
            await uow.repositories.profiles.add(profile)
            await uow.commit()

        assert [p.id for p in await app.profiles.list()] == [profile.id]
        assert (await app.cart_options.fetch_cart_options(make_cart(new_id()))) == []
        with pytest.raises(MissingConfigurationError, match="PRODUCT_SERVICE_URL"):
            await app.profiles.add_product(profile.id, new_id())

        await app.profiles.delete(profile.id)
        assert await app.profiles.list() == []
