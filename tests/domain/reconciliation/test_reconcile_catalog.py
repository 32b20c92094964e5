from __future__ import annotations

from dataclasses import replace

from locatorsync.domain.model import (
    CatalogSnapshot,
    Coordinates,
    CustomerDetail,
    Location,
    LocationSource,
    LocationStatus,
    OrderActivity,
)
from locatorsync.domain.order_activity import aggregate_orders
from locatorsync.domain.reconciliation import (
    GEOCODE_FAILED_REASON,
    NO_ADDRESS_REASON,
    LocationReconciler,
    reconcile_catalog,
)
from tests.helpers.locations import (
    FakeCustomerDirectory,
    FakeResolver,
    make_customer,
    make_location,
    make_order,
)

SPRINGFIELD = Coordinates(lat=39.78, lng=-89.65)


def _manual(
    location_id: str,
    *skus: str,
    status: LocationStatus = LocationStatus.ACTIVE,
) -> Location:
    return Location(
        id=location_id,
        name=f"Manual {location_id}",
        address="9 Elm St, Springfield, IL 62701, US",
        coordinates=SPRINGFIELD,
        skus=skus,
        status=status,
        source=LocationSource.MANUAL,
    )


def _activity(*orders: tuple[str, tuple[str, ...]]) -> OrderActivity:
    return aggregate_orders(
        make_order(str(index), customer_id, *skus)
        for index, (customer_id, skus) in enumerate(orders)
    )


def test_new_customer_is_geocoded_and_added() -> None:
    customers = FakeCustomerDirectory({"7": make_customer("7", company="Hop Shop")})
    resolver = FakeResolver(default=SPRINGFIELD)

    result = reconcile_catalog(
        _activity(("7", ("IPA",))),
        CatalogSnapshot(),
        [],
        customers=customers,
        resolver=resolver,
    )

    (location,) = result.snapshot.store_locations
    assert location.id == "7"
    assert location.name == "Hop Shop"
    assert location.address == "1 Main St, Springfield, IL 62701, US"
    assert location.coordinates == SPRINGFIELD
    assert location.skus == ("IPA",)
    assert location.sales_channel == "Faire"
    assert [entry.location_id for entry in result.changes.new] == ["7"]
    assert resolver.calls == ["1 Main St, Springfield, IL 62701, US"]


def test_name_falls_back_to_first_and_last_name() -> None:
    customers = FakeCustomerDirectory({"7": make_customer("7", first_name="Ada", last_name="Lee")})

    result = reconcile_catalog(
        _activity(("7", ("IPA",))),
        CatalogSnapshot(),
        [],
        customers=customers,
        resolver=FakeResolver(default=SPRINGFIELD),
    )

    assert result.snapshot.store_locations[0].name == "Ada Lee"


def test_reconciliation_is_idempotent() -> None:
    activity = _activity(("1", ("IPA",)), ("2", ("LAGER",)))
    customers = FakeCustomerDirectory(
        {"1": make_customer("1", company="One"), "2": make_customer("2", company="Two")}
    )
    reconciler = LocationReconciler(customers, FakeResolver(default=SPRINGFIELD))

    first = reconciler.reconcile(activity, CatalogSnapshot(), [])
    second = reconciler.reconcile(activity, first.snapshot, [])

    assert second.snapshot == first.snapshot
    assert second.changes.new == ()
    assert second.changes.removed == ()
    assert customers.calls == ["1", "2"]


def test_manual_location_takes_precedence_over_derived_entry() -> None:
    catalog = CatalogSnapshot(store_locations=(make_location("42", "IPA"),))
    manual = _manual("42", "STOUT")

    result = reconcile_catalog(
        _activity(("42", ("IPA",))),
        catalog,
        [manual],
        customers=FakeCustomerDirectory(),
        resolver=FakeResolver(),
    )

    assert result.snapshot.store_locations == (manual,)
    assert result.snapshot.manual_locations == (manual,)


def test_rejected_manual_location_is_never_exported() -> None:
    catalog = CatalogSnapshot(store_locations=(make_location("42", "IPA"),))
    rejected = _manual("42", status=LocationStatus.REJECTED)
    other_rejected = _manual("m-1", status=LocationStatus.REJECTED)

    result = reconcile_catalog(
        _activity(("42", ("IPA",))),
        catalog,
        [rejected, other_rejected],
        customers=FakeCustomerDirectory(),
        resolver=FakeResolver(),
    )

    exported_ids = [location.id for location in result.snapshot.store_locations]
    assert exported_ids == []
    assert result.snapshot.manual_locations == ()
    assert [entry.location_id for entry in result.changes.removed] == ["42"]
    assert result.changes.removed[0].name == "Store 42"


def test_rejected_manual_id_removes_inactive_derived_location() -> None:
    catalog = CatalogSnapshot(
        store_locations=(make_location("42", "IPA"), make_location("7", "LAGER"))
    )

    result = reconcile_catalog(
        _activity(("7", ("LAGER",))),
        catalog,
        [_manual("42", status=LocationStatus.REJECTED)],
        customers=FakeCustomerDirectory(),
        resolver=FakeResolver(),
    )

    assert [loc.id for loc in result.snapshot.store_locations] == ["7"]
    assert [entry.location_id for entry in result.changes.removed] == ["42"]


def test_manual_locations_are_exported_first() -> None:
    catalog = CatalogSnapshot(store_locations=(make_location("1", "IPA"),))

    result = reconcile_catalog(
        _activity(("1", ("IPA",))),
        catalog,
        [_manual("m-1", "STOUT")],
        customers=FakeCustomerDirectory(),
        resolver=FakeResolver(),
    )

    assert [loc.id for loc in result.snapshot.store_locations] == ["m-1", "1"]


def test_sku_universe_never_shrinks() -> None:
    catalog = CatalogSnapshot(store_locations=(make_location("1", "IPA"),), skus=("OLD", "IPA"))

    result = reconcile_catalog(
        _activity(("1", ("LAGER",))),
        catalog,
        [_manual("m-1", "STOUT")],
        customers=FakeCustomerDirectory(),
        resolver=FakeResolver(),
    )

    assert result.snapshot.skus == ("OLD", "IPA", "STOUT", "LAGER")


def test_existing_location_skus_are_replaced_not_merged() -> None:
    catalog = CatalogSnapshot(store_locations=(make_location("7", "A", "B"),))

    result = reconcile_catalog(
        _activity(("7", ("B", "C"))),
        catalog,
        [],
        customers=FakeCustomerDirectory(),
        resolver=FakeResolver(),
    )

    (location,) = result.snapshot.store_locations
    assert location.skus == ("B", "C")
    (entry,) = result.changes.updated
    assert entry.previous_skus == ("A", "B")
    assert entry.skus == ("B", "C")
    assert entry.skus_changed


def test_customer_without_address_is_a_problem() -> None:
    customer = make_customer("9", address1=None, city="", zip_code=None, company="Ghost")
    resolver = FakeResolver(default=SPRINGFIELD)

    result = reconcile_catalog(
        _activity(("9", ("IPA",))),
        CatalogSnapshot(),
        [],
        customers=FakeCustomerDirectory({"9": customer}),
        resolver=resolver,
    )

    assert result.snapshot.store_locations == ()
    (problem,) = result.changes.problem
    assert problem.location_id == "9"
    assert problem.reason == NO_ADDRESS_REASON
    assert resolver.calls == []


def test_customer_without_default_address_is_a_problem() -> None:
    customer = CustomerDetail(id="9", first_name="Ada", last_name="Lee", default_address=None)
    resolver = FakeResolver(default=SPRINGFIELD)

    result = reconcile_catalog(
        _activity(("9", ("IPA",))),
        CatalogSnapshot(),
        [],
        customers=FakeCustomerDirectory({"9": customer}),
        resolver=resolver,
    )

    assert result.snapshot.store_locations == ()
    (problem,) = result.changes.problem
    assert problem.name == "Ada Lee"
    assert problem.reason == NO_ADDRESS_REASON
    assert resolver.calls == []


def test_geocoding_failure_is_a_problem() -> None:
    result = reconcile_catalog(
        _activity(("5", ("IPA",))),
        CatalogSnapshot(),
        [],
        customers=FakeCustomerDirectory({"5": make_customer("5", company="Nowhere Inc")}),
        resolver=FakeResolver(default=None),
    )

    assert result.snapshot.store_locations == ()
    (problem,) = result.changes.problem
    assert problem.reason == GEOCODE_FAILED_REASON
    assert problem.name == "Nowhere Inc"
    assert problem.address == "1 Main St, Springfield, IL 62701, US"


def test_inactive_locations_are_pruned() -> None:
    catalog = CatalogSnapshot(
        store_locations=(make_location("42", "IPA", name="Old Pub"), make_location("1", "IPA"))
    )

    result = reconcile_catalog(
        _activity(("1", ("IPA",))),
        catalog,
        [],
        customers=FakeCustomerDirectory(),
        resolver=FakeResolver(),
    )

    assert [loc.id for loc in result.snapshot.store_locations] == ["1"]
    (removed,) = result.changes.removed
    assert removed.location_id == "42"
    assert removed.name == "Old Pub"


def test_failure_for_one_customer_does_not_abort_the_pass() -> None:
    customers = FakeCustomerDirectory(
        {"2": make_customer("2", company="Two")},
        failures={"1": RuntimeError("customer lookup timed out")},
    )

    result = reconcile_catalog(
        _activity(("1", ("IPA",)), ("2", ("IPA",))),
        CatalogSnapshot(),
        [],
        customers=customers,
        resolver=FakeResolver(default=SPRINGFIELD),
    )

    assert [loc.id for loc in result.snapshot.store_locations] == ["2"]
    (problem,) = result.changes.problem
    assert problem.location_id == "1"
    assert problem.reason == "customer lookup timed out"


def test_later_manual_entry_wins_for_repeated_id() -> None:
    stale = _manual("m-1", "IPA")
    fresh = replace(stale, name="Renamed")

    result = reconcile_catalog(
        OrderActivity(),
        CatalogSnapshot(manual_locations=(stale,)),
        [stale, fresh],
        customers=FakeCustomerDirectory(),
        resolver=FakeResolver(),
    )

    assert [loc.name for loc in result.snapshot.store_locations] == ["Renamed"]
