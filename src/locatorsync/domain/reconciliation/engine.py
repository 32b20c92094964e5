"""Merge the published catalog, manual locations and order activity into a new catalog.

One pass, in this order:

1. prune store locations that are neither active customers nor manual locations,
   and those whose id belongs to a rejected manual location
2. reconcile each active customer in order (manual wins, else refresh SKUs of the
   existing entry, else geocode and create)
3. keep manual locations that are not rejected
4. export eligible manual locations first, then every reconciled store location whose
   id is not owned by a manual location
5. grow the SKU universe with every exported SKU

Each step returns a new ``PassState``; the only side effects are the customer lookups
and geocoding requests made for customers without an entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from locatorsync.domain.model import CatalogSnapshot, Location

from .contracts import (
    GEOCODE_FAILED_REASON,
    NO_ADDRESS_REASON,
    ChangeBuckets,
    ChangeEntry,
    ChangeKind,
    ReconciliationResult,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from locatorsync.domain.model import CustomerId, LocationId, OrderActivity, Sku
    from locatorsync.domain.ports import AddressResolver, CustomerDirectory

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PassState:
    """Reconciled store locations by id (insertion ordered) plus the buckets so far."""

    locations: Mapping[LocationId, Location]
    changes: ChangeBuckets

    def put(self, location: Location) -> PassState:
        return PassState({**self.locations, location.id: location}, self.changes)

    def drop(self, location_id: LocationId) -> PassState:
        remaining = {key: value for key, value in self.locations.items() if key != location_id}
        return PassState(remaining, self.changes)

    def discard(self, location_id: LocationId) -> PassState:
        """Drop an existing entry and record it as removed; no-op for unknown ids."""

        existing = self.locations.get(location_id)
        if existing is None:
            return self
        return self.drop(location_id).record(
            ChangeKind.REMOVED, ChangeEntry.for_location(existing)
        )

    def record(self, kind: ChangeKind, entry: ChangeEntry) -> PassState:
        return PassState(self.locations, self.changes.add(kind, entry))


@dataclass(slots=True)
class LocationReconciler:
    """Run full reconciliation of one pass against the injected collaborators."""

    customers: CustomerDirectory
    resolver: AddressResolver

    def reconcile(
        self,
        activity: OrderActivity,
        catalog: CatalogSnapshot,
        manual_locations: Iterable[Location],
    ) -> ReconciliationResult:
        return reconcile_catalog(
            activity,
            catalog,
            manual_locations,
            customers=self.customers,
            resolver=self.resolver,
        )


def reconcile_catalog(
    activity: OrderActivity,
    catalog: CatalogSnapshot,
    manual_locations: Iterable[Location],
    *,
    customers: CustomerDirectory,
    resolver: AddressResolver,
) -> ReconciliationResult:
    """Reconcile ``catalog`` with ``activity`` and ``manual_locations``.

    ``manual_locations`` should contain the catalog's manual list followed by the
    conversions produced this pass; when ids repeat the later entry wins.
    """

    manual_by_id = index_by_id(manual_locations, keep="last")
    active_ids = set(activity.active_customer_ids)

    state = prune_inactive(catalog.store_locations, active_ids, manual_by_id)
    log.debug(f"After removing inactive customers: {len(state.locations)} store locations")

    for customer_id in activity.active_customer_ids:
        state = _reconcile_customer(
            state,
            customer_id,
            activity=activity,
            manual_by_id=manual_by_id,
            customers=customers,
            resolver=resolver,
        )

    eligible_manual = tuple(
        location for location in manual_by_id.values() if location.is_exportable
    )
    exported = merge_locations(eligible_manual, state.locations.values(), manual_ids=manual_by_id)
    skus = sku_universe(catalog.skus, exported)

    changes = state.changes
    log.info(
        f"Reconciled catalog: {len(exported)} exported, {len(changes.new)} new, "
        f"{len(changes.updated)} updated, {len(changes.removed)} removed, "
        f"{len(changes.problem)} problems"
    )
    return ReconciliationResult(
        snapshot=CatalogSnapshot(
            store_locations=exported,
            manual_locations=eligible_manual,
            skus=skus,
        ),
        changes=changes,
    )


def index_by_id(
    locations: Iterable[Location],
    *,
    keep: Literal["first", "last"] = "first",
) -> dict[LocationId, Location]:
    """Map locations by id; repeated ids keep the first position and the chosen value."""

    indexed: dict[LocationId, Location] = {}
    for location in locations:
        if location.id in indexed and keep == "first":
            log.warning(f"Ignoring duplicate location id {location.id}")
            continue
        indexed[location.id] = location
    return indexed


def prune_inactive(
    store_locations: Iterable[Location],
    active_ids: set[CustomerId],
    manual_by_id: Mapping[LocationId, Location],
) -> PassState:
    state = PassState({}, ChangeBuckets())
    for location in index_by_id(store_locations).values():
        manual = manual_by_id.get(location.id)
        if manual is not None and not manual.is_exportable:
            log.debug(f"Removing location replaced by a rejected manual entry: {location.name}")
            state = state.record(ChangeKind.REMOVED, ChangeEntry.for_location(location))
            continue
        if location.id in active_ids or manual is not None:
            state = state.put(location)
            continue
        log.debug(f"Removing inactive customer: {location.name}, {location.address}")
        state = state.record(ChangeKind.REMOVED, ChangeEntry.for_location(location))
    return state


def merge_locations(
    eligible_manual: Iterable[Location],
    store_locations: Iterable[Location],
    *,
    manual_ids: Mapping[LocationId, Location],
) -> tuple[Location, ...]:
    """Manual locations first; store locations owned by any manual id are dropped."""

    return (
        *eligible_manual,
        *(location for location in store_locations if location.id not in manual_ids),
    )


def sku_universe(previous: Iterable[Sku], exported: Iterable[Location]) -> tuple[Sku, ...]:
    seen: dict[Sku, None] = dict.fromkeys(sku for sku in previous if sku)
    for location in exported:
        for sku in location.skus:
            seen.setdefault(sku, None)
    return tuple(seen)


def _reconcile_customer(
    state: PassState,
    customer_id: CustomerId,
    *,
    activity: OrderActivity,
    manual_by_id: Mapping[LocationId, Location],
    customers: CustomerDirectory,
    resolver: AddressResolver,
) -> PassState:
    log.debug(f"Processing customer ID: {customer_id}")
    try:
        manual = manual_by_id.get(customer_id)
        if manual is not None:
            log.debug(f"Using manual location for customer {customer_id}")
            return state.put(manual) if manual.is_exportable else state.discard(customer_id)

        existing = state.locations.get(customer_id)
        skus = activity.skus_for(customer_id)
        if existing is not None:
            # full reassignment: SKUs no longer ordered drop off the pin
            refreshed = existing.with_skus(skus)
            entry = ChangeEntry.for_location(refreshed, previous_skus=existing.skus)
            return state.put(refreshed).record(ChangeKind.UPDATED, entry)

        return _add_customer(
            state,
            customer_id,
            activity=activity,
            customers=customers,
            resolver=resolver,
        )
    except Exception as exc:  # noqa: BLE001
        log.error(f"Error processing customer {customer_id}: {exc}")
        return state.record(
            ChangeKind.PROBLEM,
            ChangeEntry(location_id=customer_id, reason=str(exc) or type(exc).__name__),
        )


def _add_customer(
    state: PassState,
    customer_id: CustomerId,
    *,
    activity: OrderActivity,
    customers: CustomerDirectory,
    resolver: AddressResolver,
) -> PassState:
    customer = customers.get_customer(customer_id)
    address = customer.default_address
    if address is None or not address.is_usable:
        log.debug(f"Customer {customer_id} does not have address data, skipping")
        return state.record(
            ChangeKind.PROBLEM,
            ChangeEntry(
                location_id=customer_id,
                name=customer.full_name or None,
                reason=NO_ADDRESS_REASON,
            ),
        )

    formatted = address.format()
    coordinates = resolver.resolve(formatted)
    if coordinates is None:
        log.debug(f"Failed to geocode address for customer {customer_id}, skipping")
        return state.record(
            ChangeKind.PROBLEM,
            ChangeEntry(
                location_id=customer_id,
                name=customer.display_name,
                address=formatted,
                reason=GEOCODE_FAILED_REASON,
            ),
        )

    location = Location(
        id=customer_id,
        name=customer.display_name,
        address=formatted,
        coordinates=coordinates,
        skus=activity.skus_for(customer_id),
        sales_channel=activity.sales_channel_for(customer_id),
    )
    log.debug(f"Added new location: {location.name}, {location.address}")
    return state.put(location).record(ChangeKind.NEW, ChangeEntry.for_location(location))


__all__ = [
    "LocationReconciler",
    "index_by_id",
    "merge_locations",
    "prune_inactive",
    "reconcile_catalog",
    "sku_universe",
]
