"""Summarise remote order history into per-customer activity."""

from __future__ import annotations

import time
from logging import getLogger
from typing import TYPE_CHECKING

from locatorsync.domain.model import OrderActivity, unique_skus
from locatorsync.domain.time_windows import lookback_start, utcnow

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from datetime import datetime

    from locatorsync.domain.model import CustomerId, Order
    from locatorsync.domain.ports import OrderSource
    from locatorsync.domain.time_windows import Clock

log = getLogger(__name__)

DEFAULT_LOOKBACK_MONTHS = 12
DEFAULT_PAGE_SIZE = 250
DEFAULT_PAGE_DELAY_SECONDS = 0.5


def fetch_activity(
    source: OrderSource,
    channels: Sequence[str],
    *,
    lookback_months: int = DEFAULT_LOOKBACK_MONTHS,
    page_size: int = DEFAULT_PAGE_SIZE,
    page_delay_seconds: float = DEFAULT_PAGE_DELAY_SECONDS,
    clock: Clock = utcnow,
    sleep: Callable[[float], None] = time.sleep,
) -> OrderActivity:
    """Fetch every order in the lookback window across ``channels`` and summarise it.

    Pages are requested one at a time and the loop waits ``page_delay_seconds`` between
    pages to stay under the provider's rate limit. Errors from the source
    propagate: a partial order history would prune live locations.
    """

    since = lookback_start(lookback_months, clock=clock)
    log.debug(f"Fetching orders from {since.isoformat()} onwards")

    orders: list[Order] = []
    for channel in channels:
        cursor: str | None = None
        while True:
            page = source.list_orders(channel, since, cursor, page_size=page_size)
            orders.extend(page.orders)
            log.debug(
                f"Fetched {len(page.orders)} orders from {channel}. "
                f"Total orders so far: {len(orders)}"
            )
            if not page.next_cursor:
                break
            cursor = page.next_cursor
            sleep(page_delay_seconds)

    activity = aggregate_orders(orders, since=since)
    log.info(
        f"Found {len(activity.active_customer_ids)} unique active customers across "
        f"{len(channels)} channels in the past {lookback_months} months"
    )
    return activity


def aggregate_orders(orders: Iterable[Order], *, since: datetime | None = None) -> OrderActivity:
    """Group orders by customer; pure and deterministic for a given input order."""

    skus: dict[CustomerId, list[str | None]] = {}
    channels: dict[CustomerId, str | None] = {}

    for order in orders:
        customer_id = order.customer_id
        if not customer_id:
            continue
        if since is not None and order.created_at is not None and order.created_at < since:
            continue
        bucket = skus.setdefault(customer_id, [])
        bucket.extend(item.sku for item in order.line_items if item.product_exists)
        if channels.get(customer_id) is None and order.source_name is not None:
            channels[customer_id] = order.source_name
        else:
            channels.setdefault(customer_id, None)

    return OrderActivity(
        active_customer_ids=tuple(skus),
        skus_by_customer={customer_id: unique_skus(values) for customer_id, values in skus.items()},
        sales_channel_by_customer=channels,
    )


__all__ = ["aggregate_orders", "fetch_activity"]
