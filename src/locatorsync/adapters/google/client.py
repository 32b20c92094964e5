"""Address resolution through the Google Geocoding API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from locatorsync.adapters.http_resilience import ResilientClient
from locatorsync.config.google import GOOGLE_GEOCODE_URL
from locatorsync.domain.model import Coordinates

from .schema import GeocodeResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from locatorsync.config.google import GoogleGeocodingConfig
    from locatorsync.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

STATUS_OK = "OK"


def should_cache_geocode_payload(payload: object) -> bool:
    """Only successful lookups are cached; quota and transient errors are retried later."""

    return isinstance(payload, dict) and payload.get("status") == STATUS_OK


class GoogleGeocoder:
    """``AddressResolver`` that never raises: every failure is logged and yields ``None``."""

    def __init__(
        self,
        *,
        config: GoogleGeocodingConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
        url: str = GOOGLE_GEOCODE_URL,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._url = url

    def resolve(self, address: str) -> Coordinates | None:
        if not address.strip():
            return None
        try:
            return asyncio.run(self._resolve_async(address))
        except Exception as exc:  # noqa: BLE001
            log.error(f"Geocoding error for {address}: {exc}")
            return None

    async def _resolve_async(self, address: str) -> Coordinates | None:
        params = {"address": address, "key": self._config.api_key}
        async with self._client_factory(self._resilience) as client:
            response = await client.get(self._url, params=params)

        if not response.is_success:
            log.error(f"Geocoding request failed with status {response.status_code}")
            return None

        payload = GeocodeResponse.model_validate(response.json())
        if payload.status != STATUS_OK or not payload.results:
            detail = f": {payload.error_message}" if payload.error_message else ""
            log.debug(f"No geocoding result for {address} ({payload.status}{detail})")
            return None

        location = payload.results[0].geometry.location
        return Coordinates(lat=location.lat, lng=location.lng)
