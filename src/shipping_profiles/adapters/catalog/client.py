"""HTTP clients for the product and shipping option services."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, Final, Self

import httpx
from pydantic import ValidationError

from shipping_profiles.adapters.http_resilience import ResilientClient
from shipping_profiles.domain.errors import NotFoundError, ShippingOptionIneligibleError

from .schema import (
    CartValidationRequest,
    ErrorResponse,
    ProductResponse,
    ShippingOptionResponse,
)
from .translator import cart_to_payload, translate_product, translate_shipping_option

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from shipping_profiles.config.http_resilience import ResilienceConfig
    from shipping_profiles.domain.model import (
        Cart,
        Product,
        ProductId,
        ShippingOption,
        ShippingOptionId,
    )


_INELIGIBLE_STATUSES: Final[frozenset[int]] = frozenset(
    {HTTPStatus.BAD_REQUEST, HTTPStatus.CONFLICT, HTTPStatus.UNPROCESSABLE_ENTITY}
)


class CatalogAPIError(RuntimeError):
    """Raised when a catalog service returns an unexpected response."""


class _CatalogServiceClient:
    """Holds one resilient HTTP client for the lifetime of the service client."""

    def __init__(
        self,
        *,
        config: ResilienceConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        if config.base_url is None:
            raise CatalogAPIError(f"Missing base_url in {config.name} resilience configuration")
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

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
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def http(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._config)
        return self._client

    def _raise_for_status(self, response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise CatalogAPIError(
                f"{self._config.name} service answered {response.status_code} "
                f"for {response.request.method} {response.request.url}"
            ) from exc

    def _json(self, response: httpx.Response) -> object:
        try:
            return response.json()
        except ValueError as exc:
            raise CatalogAPIError(f"Unexpected {self._config.name} response payload") from exc


class ProductServiceClient(_CatalogServiceClient):
    async def retrieve(self, product_id: ProductId) -> Product:
        response = await self.http.get(f"products/{product_id}")
        if response.status_code == HTTPStatus.NOT_FOUND:
            raise NotFoundError(f"Product with {product_id} was not found")
        self._raise_for_status(response)

        try:
            payload = ProductResponse.model_validate(self._json(response))
        except ValidationError as exc:
            raise CatalogAPIError("Unexpected products response payload") from exc
        return translate_product(payload.product)


class ShippingOptionServiceClient(_CatalogServiceClient):
    async def retrieve(self, option_id: ShippingOptionId) -> ShippingOption:
        response = await self.http.get(f"shipping-options/{option_id}")
        if response.status_code == HTTPStatus.NOT_FOUND:
            raise NotFoundError(f"Shipping option with {option_id} was not found")
        self._raise_for_status(response)
        return self._parse_option(response)

    async def validate_cart_option(self, option_id: ShippingOptionId, cart: Cart) -> ShippingOption:
        request = CartValidationRequest(cart=cart_to_payload(cart))
        response = await self.http.post(
            f"shipping-options/{option_id}/validate",
            json=request.model_dump(mode="json"),
        )
        if response.status_code == HTTPStatus.NOT_FOUND:
            raise NotFoundError(f"Shipping option with {option_id} was not found")
        if response.status_code in _INELIGIBLE_STATUSES:
            raise ShippingOptionIneligibleError(self._error_message(response, option_id))
        self._raise_for_status(response)
        return self._parse_option(response)

    def _parse_option(self, response: httpx.Response) -> ShippingOption:
        try:
            payload = ShippingOptionResponse.model_validate(self._json(response))
        except ValidationError as exc:
            raise CatalogAPIError("Unexpected shipping options response payload") from exc
        return translate_shipping_option(payload.shipping_option)

    def _error_message(self, response: httpx.Response, option_id: ShippingOptionId) -> str:
        fallback = f"Cart does not qualify for shipping option {option_id}"
        try:
            error = ErrorResponse.model_validate(response.json())
        except (ValueError, ValidationError):
            return fallback
        return error.message or fallback
