"""Catalog repository backed by the main theme's locations asset."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from locatorsync.adapters.catalog_document import parse_document, render_document

if TYPE_CHECKING:
    from locatorsync.domain.model import CatalogSnapshot

    from .client import ShopifyClient

log = getLogger(__name__)


class ShopifyCatalogStore:
    """Reads and writes ``assets/locations-data.js`` in the shop's main theme.

    An unparsable asset reads as an empty catalog; transport failures propagate as
    ``ExternalServiceError``.
    """

    def __init__(self, client: ShopifyClient, *, asset_key: str | None = None) -> None:
        self._client = client
        self._asset_key = asset_key or client.config.asset_key

    def read(self) -> CatalogSnapshot:
        content = self._client.get_asset(self._asset_key)
        snapshot = parse_document(content)
        log.info(
            f"Loaded catalog: {len(snapshot.manual_locations)} manual, "
            f"{len(snapshot.store_locations)} store locations, {len(snapshot.skus)} SKUs"
        )
        return snapshot

    def write(self, snapshot: CatalogSnapshot) -> None:
        content = render_document(snapshot)
        self._client.put_asset(self._asset_key, content)
        log.info(f"Published catalog to {self._asset_key}")
