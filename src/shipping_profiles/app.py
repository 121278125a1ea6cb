"""Application wiring entry points."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Self

from shipping_profiles.adapters.catalog import ProductServiceClient, ShippingOptionServiceClient
from shipping_profiles.adapters.memory import (
    InMemoryProductService,
    InMemoryProfileStore,
    InMemoryShippingOptionService,
    InMemoryUnitOfWork,
)
from shipping_profiles.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyShippingProfileUnitOfWork,
    is_started,
    startup,
)
from shipping_profiles.config.catalog import CatalogConfig, get_catalog_config
from shipping_profiles.domain.cart_options import CartOptionResolver
from shipping_profiles.domain.profiles import ShippingProfileService, UnitOfWorkFactory

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType

    from shipping_profiles.domain.model import (
        Cart,
        Product,
        ProductId,
        ShippingOption,
        ShippingOptionId,
        ShippingProfile,
    )
    from shipping_profiles.domain.ports.catalog import ProductService, ShippingOptionService

Closer = Callable[[], Awaitable[None]]

log = getLogger(__name__)


@dataclass(slots=True)
class ShippingProfilesApp:
    """The public surface: the profile store and the cart option resolver."""

    profiles: ShippingProfileService
    cart_options: CartOptionResolver
    catalog: CatalogClients | None = None
    closers: tuple[Closer, ...] = field(default_factory=tuple)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        for close in self.closers:
            await close()


class CatalogClients:
    """HTTP clients for the catalog services, created on first use.

    The catalog configuration is read from the environment only when a
    collaborator call is made, so storage-only work needs no service URLs.
    """

    def __init__(self, config: CatalogConfig | None = None) -> None:
        self._config = config
        self._products: ProductServiceClient | None = None
        self._shipping_options: ShippingOptionServiceClient | None = None

    @property
    def config(self) -> CatalogConfig:
        if self._config is None:
            self._config = get_catalog_config()
        return self._config

    @property
    def products(self) -> ProductServiceClient:
        if self._products is None:
            self._products = ProductServiceClient(config=self.config.products)
        return self._products

    @property
    def shipping_options(self) -> ShippingOptionServiceClient:
        if self._shipping_options is None:
            self._shipping_options = ShippingOptionServiceClient(
                config=self.config.shipping_options
            )
        return self._shipping_options

    async def aclose(self) -> None:
        for client in (self._products, self._shipping_options):
            if client is not None:
                await client.aclose()
        self._products = None
        self._shipping_options = None


class _CatalogProductService:
    def __init__(self, clients: CatalogClients) -> None:
        self._clients = clients

    async def retrieve(self, product_id: ProductId) -> Product:
        return await self._clients.products.retrieve(product_id)


class _CatalogShippingOptionService:
    def __init__(self, clients: CatalogClients) -> None:
        self._clients = clients

    async def retrieve(self, option_id: ShippingOptionId) -> ShippingOption:
        return await self._clients.shipping_options.retrieve(option_id)

    async def validate_cart_option(self, option_id: ShippingOptionId, cart: Cart) -> ShippingOption:
        return await self._clients.shipping_options.validate_cart_option(option_id, cart)


async def create_app(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    product_service: ProductService | None = None,
    shipping_option_service: ShippingOptionService | None = None,
    catalog_config: CatalogConfig | None = None,
    database_uri: str | None = None,
) -> ShippingProfilesApp:
    """Wire the services, defaulting to SQLAlchemy storage and the HTTP catalog clients."""

    if unit_of_work_factory is None:
        if not is_started():
            await startup(database_uri=database_uri)
        unit_of_work_factory = SqlAlchemyShippingProfileUnitOfWork

    catalog = CatalogClients(catalog_config)
    app = _assemble(
        unit_of_work_factory,
        product_service or _CatalogProductService(catalog),
        shipping_option_service or _CatalogShippingOptionService(catalog),
    )
    app.catalog = catalog
    app.closers = (catalog.aclose,)
    log.info("Shipping profiles application ready")
    return app


def create_in_memory_app(
    *,
    profiles: Iterable[ShippingProfile] = (),
    products: Iterable[Product] = (),
    shipping_options: Iterable[ShippingOption] = (),
) -> ShippingProfilesApp:
    """Wire the services against in-process storage and catalog data."""

    store = InMemoryProfileStore(profiles)
    return _assemble(
        lambda: InMemoryUnitOfWork(store),
        InMemoryProductService(products),
        InMemoryShippingOptionService(shipping_options),
    )


def _assemble(
    unit_of_work_factory: UnitOfWorkFactory,
    product_service: ProductService,
    shipping_option_service: ShippingOptionService,
) -> ShippingProfilesApp:
    profiles = ShippingProfileService(
        unit_of_work_factory=unit_of_work_factory,
        product_service=product_service,
        shipping_option_service=shipping_option_service,
    )
    return ShippingProfilesApp(
        profiles=profiles,
        cart_options=CartOptionResolver(
            profiles=profiles,
            shipping_option_service=shipping_option_service,
        ),
    )
