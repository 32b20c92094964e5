"""Public domain model surface."""

from __future__ import annotations

from locatorsync.domain.model.catalog import CatalogSnapshot
from locatorsync.domain.model.enums import LocationSource, LocationStatus, SubmissionStatus
from locatorsync.domain.model.location import Location
from locatorsync.domain.model.orders import CustomerDetail, LineItem, Order, OrderActivity
from locatorsync.domain.model.primitives import (
    Coordinates,
    CustomerId,
    LocationId,
    PostalAddress,
    Sku,
    unique_skus,
)
from locatorsync.domain.model.submission import Submission, format_full_address

__all__ = [
    "CatalogSnapshot",
    "Coordinates",
    "CustomerDetail",
    "CustomerId",
    "LineItem",
    "Location",
    "LocationId",
    "LocationSource",
    "LocationStatus",
    "Order",
    "OrderActivity",
    "PostalAddress",
    "Sku",
    "Submission",
    "SubmissionStatus",
    "format_full_address",
    "unique_skus",
]
