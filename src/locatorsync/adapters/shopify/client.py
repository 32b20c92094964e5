"""Shopify REST Admin API client."""

from __future__ import annotations

import asyncio
import json
from datetime import UTC
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from locatorsync.adapters.http_resilience import ResilientClient, raise_for_status
from locatorsync.domain.errors import ExternalServiceError
from locatorsync.domain.ports import OrderPage

from .schema import AssetResponse, CustomerResponse, OrdersResponse, ThemesResponse
from .translator import translate_customer, translate_order

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from locatorsync.config.http_resilience import ResilienceConfig
    from locatorsync.config.shopify import ShopifyConfig
    from locatorsync.domain.model import CustomerDetail, CustomerId

log = getLogger(__name__)

SERVICE_NAME = "shopify"
MAIN_THEME_ROLE = "main"


def _isoformat(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def next_page_cursor(response: httpx.Response) -> str | None:
    """Return the ``page_info`` token of the ``rel="next"`` link, if any."""

    link = response.links.get("next")
    if not link or "url" not in link:
        return None
    return httpx.URL(link["url"]).params.get("page_info")


class ShopifyClient:
    """Orders, customers and theme assets of one shop.

    Each public method runs its own event loop, so it can be called from plain
    synchronous code.
    """

    def __init__(
        self,
        *,
        config: ShopifyConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
        request_delay_seconds: float = 0.5,
    ) -> None:
        self.config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._request_delay_seconds = request_delay_seconds

    def list_orders(
        self,
        channel: str,
        since: datetime,
        cursor: str | None = None,
        *,
        page_size: int = 250,
    ) -> OrderPage:
        return asyncio.run(
            self._list_orders_async(channel=channel, since=since, cursor=cursor, limit=page_size)
        )

    def get_customer(self, customer_id: CustomerId) -> CustomerDetail:
        return asyncio.run(self._get_customer_async(customer_id))

    def get_asset(self, key: str) -> str | None:
        """Return the asset's text in the main theme, or ``None`` if it does not exist."""

        return asyncio.run(self._get_asset_async(key))

    def put_asset(self, key: str, value: str) -> None:
        asyncio.run(self._put_asset_async(key, value))

    async def _list_orders_async(
        self,
        *,
        channel: str,
        since: datetime,
        cursor: str | None,
        limit: int,
    ) -> OrderPage:
        # Shopify rejects filter parameters alongside page_info
        params: dict[str, str | int]
        if cursor is None:
            params = {
                "limit": limit,
                "status": "any",
                "source_name": channel,
                "created_at_min": _isoformat(since),
            }
        else:
            params = {"limit": limit, "page_info": cursor}

        async with self._client_factory(self._resilience) as client:
            response = await client.get("orders.json", params=params)
            payload = _validate(response, OrdersResponse)

        orders = tuple(translate_order(order) for order in payload.orders)
        log.debug(f"Fetched {len(orders)} orders from {channel}")
        return OrderPage(orders=orders, next_cursor=next_page_cursor(response))

    async def _get_customer_async(self, customer_id: CustomerId) -> CustomerDetail:
        async with self._client_factory(self._resilience) as client:
            response = await client.get(f"customers/{customer_id}.json")
            payload = _validate(response, CustomerResponse)
        if self._request_delay_seconds:
            await asyncio.sleep(self._request_delay_seconds)
        return translate_customer(payload.customer)

    async def _main_theme_id(self, client: ResilientClient) -> str:
        response = await client.get("themes.json")
        themes = _validate(response, ThemesResponse).themes
        for theme in themes:
            if theme.role == MAIN_THEME_ROLE:
                return theme.id
        raise ExternalServiceError(SERVICE_NAME, "No main theme found")

    async def _get_asset_async(self, key: str) -> str | None:
        async with self._client_factory(self._resilience) as client:
            theme_id = await self._main_theme_id(client)
            response = await client.get(
                f"themes/{theme_id}/assets.json", params={"asset[key]": key}
            )
            if response.status_code == httpx.codes.NOT_FOUND:
                log.warning(f"Asset {key} does not exist in theme {theme_id}")
                return None
            return _validate(response, AssetResponse).asset.value

    async def _put_asset_async(self, key: str, value: str) -> None:
        async with self._client_factory(self._resilience) as client:
            theme_id = await self._main_theme_id(client)
            response = await client.put(
                f"themes/{theme_id}/assets.json",
                json={"asset": {"key": key, "value": value}},
            )
            raise_for_status(SERVICE_NAME, response)
        log.debug(f"Asset {key} updated ({len(value)} characters)")


def _validate[ModelT: BaseModel](response: httpx.Response, model: type[ModelT]) -> ModelT:
    raise_for_status(SERVICE_NAME, response)
    try:
        return model.model_validate(response.json())
    except (json.JSONDecodeError, ValidationError) as exc:
        log.error(f"Unexpected Shopify payload for {response.request.url.path}: {exc}")
        raise ExternalServiceError(SERVICE_NAME, "Unexpected response payload") from exc
