"""Ports for fetching order history from the commerce platform."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from locatorsync.domain.model import CustomerDetail, CustomerId, Order


@dataclass(frozen=True, slots=True)
class OrderPage:
    """One page of orders plus the opaque cursor for the next page, if any."""

    orders: tuple[Order, ...]
    next_cursor: str | None = None


@runtime_checkable
class CustomerDirectory(Protocol):
    """Lookup of customer details by id."""

    def get_customer(self, customer_id: CustomerId) -> CustomerDetail: ...


@runtime_checkable
class OrderSource(CustomerDirectory, Protocol):
    """Paginated order listing per sales channel."""

    def list_orders(
        self,
        channel: str,
        since: datetime,
        cursor: str | None = None,
        *,
        page_size: int = 250,
    ) -> OrderPage: ...


__all__ = ["CustomerDirectory", "OrderPage", "OrderSource"]
