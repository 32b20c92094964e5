"""Transient order-platform records consumed by the aggregator and reconciler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from .primitives import CustomerId, PostalAddress


@dataclass(frozen=True, slots=True)
class LineItem:
    sku: str | None
    product_exists: bool


@dataclass(frozen=True, slots=True)
class Order:
    id: str
    customer_id: CustomerId | None
    created_at: datetime | None = None
    source_name: str | None = None
    line_items: tuple[LineItem, ...] = ()


@dataclass(frozen=True, slots=True)
class CustomerDetail:
    id: CustomerId
    first_name: str | None = None
    last_name: str | None = None
    default_address: PostalAddress | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def display_name(self) -> str:
        """Company name from the default address, falling back to the person's name."""

        company = self.default_address.company if self.default_address else None
        if company and company.strip():
            return company.strip()
        return self.full_name or self.id


@dataclass(frozen=True, slots=True)
class OrderActivity:
    """Per-customer summary of order history within the lookback window.

    ``active_customer_ids`` keeps first-seen order so reconciliation is deterministic.
    """

    active_customer_ids: tuple[CustomerId, ...] = ()
    skus_by_customer: Mapping[CustomerId, tuple[str, ...]] = field(
        default_factory=dict["CustomerId", "tuple[str, ...]"]
    )
    sales_channel_by_customer: Mapping[CustomerId, str | None] = field(
        default_factory=dict["CustomerId", "str | None"]
    )

    def skus_for(self, customer_id: CustomerId) -> tuple[str, ...]:
        return self.skus_by_customer.get(customer_id, ())

    def sales_channel_for(self, customer_id: CustomerId) -> str | None:
        return self.sales_channel_by_customer.get(customer_id)
