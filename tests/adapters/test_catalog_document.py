from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from locatorsync.adapters.catalog_document import (
    DocumentParseError,
    decode_document,
    parse_document,
    render_document,
)
from locatorsync.adapters.catalog_file import FileCatalogStore
from locatorsync.domain.model import (
    CatalogSnapshot,
    Coordinates,
    Location,
    LocationSource,
    LocationStatus,
)
from tests.helpers.locations import make_location

if TYPE_CHECKING:
    from pathlib import Path


def _document(manual: list[object], store: list[object], skus: list[object]) -> str:
    return (
        f"var manualLocations = {json.dumps(manual)};\n"
        f"var storeLocations = {json.dumps(store)};\n"
        f"var skus = {json.dumps(skus)};"
    )


def _array(content: str, name: str) -> list[dict[str, object]]:
    return json.loads(content.split(f"var {name} = ")[1].split(";")[0])


def _manual_location() -> Location:
    return Location(
        id="4b9f",
        name="Corner Shop",
        address="1 Elm St, Portland, OR 97201, US",
        coordinates=Coordinates(lat=45.5, lng=-122.6),
        skus=("IPA",),
        source=LocationSource.MANUAL,
        contact_name="Sam",
        channel="Direct",
        submitted_at=datetime(2024, 3, 1, tzinfo=UTC),
        approved_at=datetime(2024, 3, 2, 8, 30, tzinfo=UTC),
        extra={"notes": "ask for Sam"},
    )


def test_render_emits_three_arrays_with_manual_first() -> None:
    snapshot = CatalogSnapshot(
        store_locations=(make_location("7", "IPA"), _manual_location()),
        manual_locations=(_manual_location(),),
        skus=("IPA",),
    )

    content = render_document(snapshot)

    assert content.startswith("var manualLocations = [")
    assert "\nvar storeLocations = [" in content
    assert content.endswith('var skus = [\n  "IPA"\n];')
    assert [item["id"] for item in _array(content, "storeLocations")] == ["4b9f", "7"]


def test_manual_record_shape() -> None:
    content = render_document(CatalogSnapshot(manual_locations=(_manual_location(),)))
    record = _array(content, "manualLocations")[0]

    assert record["notes"] == "ask for Sam"
    assert record["isManual"] is True
    assert record["status"] == "active"
    assert record["contact"] == "Sam"
    assert record["submittedAt"] == "2024-03-01T00:00:00.000Z"
    assert record["approvedAt"] == "2024-03-02T08:30:00.000Z"
    assert "rejectedAt" not in record
    assert "archivedAt" not in record


def test_decode_round_trips_manual_and_derived_locations() -> None:
    snapshot = CatalogSnapshot(
        store_locations=(make_location("7", "IPA", "STOUT"),),
        manual_locations=(_manual_location(),),
        skus=("IPA", "STOUT"),
    )

    decoded = decode_document(render_document(snapshot))

    assert decoded == snapshot


def test_decode_round_trips_bracket_semicolon_in_strings() -> None:
    manual = Location(
        id="m-7",
        name="Bar [Main]; Annex",
        address="Unit ]; 5, 2 Dock Rd, Portland, OR 97201, US",
        coordinates=Coordinates(lat=45.5, lng=-122.6),
        skus=("KEG [20L];",),
        source=LocationSource.MANUAL,
        extra={"notes": "var skus = [];"},
    )
    snapshot = CatalogSnapshot(
        store_locations=(make_location("7", "KEG [20L];", name="Tap ];Room"),),
        manual_locations=(manual,),
        skus=("KEG [20L];", "IPA"),
    )

    decoded = decode_document(render_document(snapshot))

    assert decoded == snapshot


def test_decode_normalizes_numeric_ids_and_keeps_unknown_keys() -> None:
    content = _document(
        [],
        [{"id": 6431, "name": "Hop Shop", "address": "x", "lat": 1, "lng": 2, "rating": 5}],
        ["IPA", "IPA", ""],
    )

    snapshot = decode_document(content)

    location = snapshot.store_locations[0]
    assert location.id == "6431"
    assert location.extra == {"rating": 5}
    assert snapshot.skus == ("IPA",)


def test_decode_drops_manual_entries_from_store_list() -> None:
    manual = {"id": "m-1", "name": "Manual", "isManual": True, "status": "archived"}
    stray = {"id": "m-2", "name": "Stray", "isManual": True}
    derived = {"id": "9", "name": "Derived"}

    snapshot = decode_document(_document([manual], [manual, stray, derived], []))

    assert [loc.id for loc in snapshot.store_locations] == ["9"]
    assert snapshot.manual_locations[0].status is LocationStatus.ARCHIVED


def test_decode_skips_invalid_records() -> None:
    snapshot = decode_document(_document([], [{"name": "no id"}, {"id": "1"}], []))

    assert [loc.id for loc in snapshot.store_locations] == ["1"]


def test_decode_raises_on_missing_array() -> None:
    with pytest.raises(DocumentParseError):
        decode_document("var storeLocations = [];")


@pytest.mark.parametrize("content", [None, "", "var manualLocations = [oops];"])
def test_parse_document_falls_back_to_empty(content: str | None) -> None:
    assert parse_document(content) == CatalogSnapshot.empty()


def test_file_catalog_store_round_trip(tmp_path: Path) -> None:
    store = FileCatalogStore(tmp_path / "nested" / "locations-data.js")
    snapshot = CatalogSnapshot(store_locations=(make_location("7", "IPA"),), skus=("IPA",))

    assert store.read() == CatalogSnapshot.empty()
    store.write(snapshot)

    assert store.read() == snapshot
    assert [p.name for p in store.path.parent.iterdir()] == ["locations-data.js"]
