from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

import pytest

from locatorsync.domain.errors import NotFoundError, ValidationError
from locatorsync.domain.location_management import LocationManager
from locatorsync.domain.model import (
    CatalogSnapshot,
    Coordinates,
    Location,
    LocationSource,
    LocationStatus,
)
from tests.helpers.locations import (
    FIXED_NOW,
    InMemoryCatalog,
    InMemorySubmissionRepository,
    fixed_clock,
    make_location,
)


def _manual(location_id: str, name: str, *skus: str, day: int = 1) -> Location:
    return Location(
        id=location_id,
        name=name,
        address=f"{location_id} Elm St, Portland, OR 97201, US",
        skus=skus,
        source=LocationSource.MANUAL,
        submitted_at=datetime(2024, 3, day, tzinfo=UTC),
    )


@pytest.fixture
def catalog() -> InMemoryCatalog:
    first = _manual("m-1", "Corner Shop", "IPA", day=1)
    second = _manual("m-2", "Bottle Bar", "LAGER", day=20)
    derived = make_location("7", "IPA")
    return InMemoryCatalog(
        CatalogSnapshot(
            store_locations=(first, second, derived),
            manual_locations=(first, second),
            skus=("IPA", "LAGER"),
        )
    )


@pytest.fixture
def repository() -> InMemorySubmissionRepository:
    rejected = replace(
        _manual("m-3", "Closed Cafe", day=10),
        status=LocationStatus.REJECTED,
        rejection_reason="closed",
    )
    return InMemorySubmissionRepository(rejected=[rejected])


@pytest.fixture
def manager(catalog: InMemoryCatalog, repository: InMemorySubmissionRepository) -> LocationManager:
    return LocationManager(catalog, repository, clock=fixed_clock)


def test_list_manual_locations_includes_rejected_archive(manager: LocationManager) -> None:
    assert [loc.id for loc in manager.list_manual_locations()] == ["m-1", "m-2", "m-3"]


def test_update_manual_location_rewrites_both_lists(
    manager: LocationManager, catalog: InMemoryCatalog
) -> None:
    updated = manager.update_manual_location(
        "m-1", {"name": "Corner Shop & Deli", "lat": "45.5", "lng": -122.6, "skus": ["IPA", "IPA"]}
    )

    assert updated.name == "Corner Shop & Deli"
    assert updated.coordinates == Coordinates(lat=45.5, lng=-122.6)
    assert updated.skus == ("IPA",)
    assert updated.updated_at == FIXED_NOW
    written = catalog.writes[-1]
    assert written.manual_locations[0] == updated
    assert written.store_locations[0] == updated
    assert written.store_locations[2].id == "7"


def test_update_rejects_unknown_fields(manager: LocationManager, catalog: InMemoryCatalog) -> None:
    with pytest.raises(ValidationError) as excinfo:
        manager.update_manual_location("m-1", {"status": "active"})

    assert excinfo.value.fields == ("status",)
    assert catalog.writes == []


def test_update_unknown_location_raises(manager: LocationManager) -> None:
    with pytest.raises(NotFoundError):
        manager.update_manual_location("nope", {"name": "x"})


def test_archive_manual_location(manager: LocationManager, catalog: InMemoryCatalog) -> None:
    archived = manager.archive_manual_location("m-2")

    assert archived.status is LocationStatus.ARCHIVED
    assert archived.archive_reason == "Archived by admin"
    assert archived.archived_at == FIXED_NOW
    assert catalog.snapshot.manual_locations[1].status is LocationStatus.ARCHIVED


def test_bulk_archive_counts_matches(manager: LocationManager) -> None:
    assert manager.bulk_archive_locations(["m-1", "m-2", "missing"]) == 2

    stats = manager.location_stats()
    assert (stats.total, stats.active, stats.archived, stats.rejected) == (3, 0, 2, 1)


def test_bulk_archive_without_matches_raises(
    manager: LocationManager, catalog: InMemoryCatalog
) -> None:
    with pytest.raises(NotFoundError):
        manager.bulk_archive_locations(["missing"])

    assert catalog.writes == []


def test_search_locations_filters(manager: LocationManager) -> None:
    assert [loc.id for loc in manager.search_locations("bottle")] == ["m-2"]
    assert [loc.id for loc in manager.search_locations(product="IPA")] == ["m-1"]
    assert [
        loc.id for loc in manager.search_locations(status=LocationStatus.REJECTED)
    ] == ["m-3"]
    assert [
        loc.id
        for loc in manager.search_locations(
            date_from=datetime(2024, 3, 5, tzinfo=UTC),
            date_to=datetime(2024, 3, 15, tzinfo=UTC),
        )
    ] == ["m-3"]
