from __future__ import annotations

from datetime import UTC, datetime

from locatorsync.domain.model import LineItem, Order
from locatorsync.domain.order_activity import aggregate_orders, fetch_activity
from locatorsync.domain.time_windows import lookback_start, subtract_months
from tests.helpers.locations import FakeOrderSource, fixed_clock, make_order


def test_aggregate_orders_keeps_first_seen_customer_order() -> None:
    activity = aggregate_orders(
        [
            make_order("1", "c2", "A"),
            make_order("2", "c1", "B"),
            make_order("3", "c2", "C"),
        ]
    )

    assert activity.active_customer_ids == ("c2", "c1")
    assert activity.skus_for("c2") == ("A", "C")
    assert activity.skus_for("c1") == ("B",)


def test_aggregate_orders_ignores_orders_without_customer() -> None:
    activity = aggregate_orders([make_order("1", None, "A"), make_order("2", "", "B")])

    assert activity.active_customer_ids == ()


def test_aggregate_orders_only_counts_existing_products_with_sku() -> None:
    order = Order(
        id="1",
        customer_id="c1",
        line_items=(
            LineItem(sku="A", product_exists=True),
            LineItem(sku="GONE", product_exists=False),
            LineItem(sku=None, product_exists=True),
            LineItem(sku="", product_exists=True),
            LineItem(sku="A", product_exists=True),
        ),
    )

    activity = aggregate_orders([order])

    assert activity.skus_for("c1") == ("A",)


def test_aggregate_orders_customer_without_products_is_still_active() -> None:
    order = Order(id="1", customer_id="c1", line_items=(LineItem("X", product_exists=False),))

    activity = aggregate_orders([order])

    assert activity.active_customer_ids == ("c1",)
    assert activity.skus_for("c1") == ()


def test_aggregate_orders_sales_channel_is_first_non_null_source() -> None:
    activity = aggregate_orders(
        [
            make_order("1", "c1", "A", source_name=None),
            make_order("2", "c1", "B", source_name="Airgoods"),
            make_order("3", "c1", "C", source_name="Faire"),
        ]
    )

    assert activity.sales_channel_for("c1") == "Airgoods"


def test_aggregate_orders_drops_orders_before_window() -> None:
    since = datetime(2024, 1, 1, tzinfo=UTC)
    activity = aggregate_orders(
        [
            make_order("1", "old", "A", created_at=datetime(2023, 12, 31, tzinfo=UTC)),
            make_order("2", "new", "B", created_at=datetime(2024, 1, 1, tzinfo=UTC)),
        ],
        since=since,
    )

    assert activity.active_customer_ids == ("new",)


def test_fetch_activity_pages_each_channel_and_sleeps_between_pages() -> None:
    source = FakeOrderSource(
        pages={
            "Faire": [[make_order("1", "c1", "A")], [make_order("2", "c2", "B")]],
            "Airgoods": [[make_order("3", "c1", "C", source_name="Airgoods")]],
        }
    )
    sleeps: list[float] = []

    activity = fetch_activity(
        source,
        ["Faire", "Airgoods"],
        page_delay_seconds=0.25,
        clock=fixed_clock,
        sleep=sleeps.append,
    )

    assert source.list_calls == [("Faire", None), ("Faire", "1"), ("Airgoods", None)]
    assert sleeps == [0.25]
    assert activity.active_customer_ids == ("c1", "c2")
    assert activity.skus_for("c1") == ("A", "C")


def test_fetch_activity_is_deterministic() -> None:
    source = FakeOrderSource(pages={"Faire": [[make_order("1", "c1", "A", "B")]]})

    first = fetch_activity(source, ["Faire"], clock=fixed_clock, sleep=lambda _: None)
    second = fetch_activity(source, ["Faire"], clock=fixed_clock, sleep=lambda _: None)

    assert first == second


def test_lookback_start_uses_calendar_months() -> None:
    assert lookback_start(12, clock=fixed_clock) == datetime(2023, 6, 15, 12, 0, tzinfo=UTC)


def test_subtract_months_clamps_day() -> None:
    value = datetime(2024, 3, 31, tzinfo=UTC)

    assert subtract_months(value, 1) == datetime(2024, 2, 29, tzinfo=UTC)
    assert subtract_months(value, 13) == datetime(2023, 2, 28, tzinfo=UTC)
