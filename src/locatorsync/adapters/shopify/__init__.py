"""Public interface for the Shopify adapter."""

from __future__ import annotations

from .catalog import ShopifyCatalogStore
from .client import ShopifyClient, next_page_cursor
from .translator import translate_customer, translate_order

__all__ = [
    "ShopifyCatalogStore",
    "ShopifyClient",
    "next_page_cursor",
    "translate_customer",
    "translate_order",
]
