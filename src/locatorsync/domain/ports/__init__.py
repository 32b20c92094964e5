"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import CustomerDirectory, OrderPage, OrderSource
from .geocoding import AddressResolver
from .notification import Alerter, NotificationChannel
from .persistence import CatalogRepository, SubmissionRepository

__all__ = [
    "AddressResolver",
    "Alerter",
    "CatalogRepository",
    "CustomerDirectory",
    "NotificationChannel",
    "OrderPage",
    "OrderSource",
    "SubmissionRepository",
]
