"""Codec for the published ``locations-data.js`` document.

The storefront loads the catalog as a script holding three array literals::

    var manualLocations = [...];
    var storeLocations = [...];
    var skus = [...];

``storeLocations`` is the merged list the map renders (manual first);
``manualLocations`` repeats the manual entries so they can be told apart on read.
"""

from __future__ import annotations

import json
import re
from logging import getLogger
from typing import TYPE_CHECKING

from locatorsync.domain.model import CatalogSnapshot, LocationSource, unique_skus

from .location_records import location_to_record, locations_from_records

if TYPE_CHECKING:
    from locatorsync.domain.model import Location

log = getLogger(__name__)

_ARRAY_PATTERNS = {
    # JSON strings cannot hold raw newlines, so a line start is always outside a literal
    name: re.compile(rf"^var {name}\s*=\s*", re.MULTILINE)
    for name in ("manualLocations", "storeLocations", "skus")
}
_DECODER = json.JSONDecoder()


class DocumentParseError(ValueError):
    """Raised when one of the array literals is missing or not valid JSON."""


def _extract_array(content: str, name: str) -> list[object]:
    match = _ARRAY_PATTERNS[name].search(content)
    if match is None:
        raise DocumentParseError(f"{name} not found")
    try:
        value, _ = _DECODER.raw_decode(content, match.end())
    except json.JSONDecodeError as exc:
        raise DocumentParseError(f"{name} is not valid JSON: {exc}") from exc
    if not isinstance(value, list):
        raise DocumentParseError(f"{name} is not an array")
    return value


def decode_document(content: str) -> CatalogSnapshot:
    """Parse ``content``; raises ``DocumentParseError`` on malformed input."""

    manual = locations_from_records(_extract_array(content, "manualLocations"), manual=True)
    manual_ids = {location.id for location in manual}
    store = [
        location
        for location in locations_from_records(_extract_array(content, "storeLocations"))
        # the merged list repeats the manual entries; keep only derived ones
        if location.id not in manual_ids and location.source is not LocationSource.MANUAL
    ]
    return CatalogSnapshot(
        store_locations=tuple(store),
        manual_locations=tuple(manual),
        skus=unique_skus(_extract_array(content, "skus")),
    )


def parse_document(content: str | None) -> CatalogSnapshot:
    """Parse ``content``, falling back to an empty snapshot when it is unusable."""

    if not content:
        log.warning("Locations document is empty, starting with empty data")
        return CatalogSnapshot.empty()
    try:
        return decode_document(content)
    except DocumentParseError as exc:
        log.error(f"Couldn't parse existing locations data ({exc}), starting with empty data")
        return CatalogSnapshot.empty()


def _dump(values: list[object]) -> str:
    return json.dumps(values, indent=2, ensure_ascii=False)


def render_document(snapshot: CatalogSnapshot) -> str:
    manual: list[Location] = list(snapshot.manual_locations)
    manual_ids = {location.id for location in manual}
    merged = [
        *manual,
        *(location for location in snapshot.store_locations if location.id not in manual_ids),
    ]
    return (
        f"var manualLocations = {_dump([location_to_record(loc) for loc in manual])};\n"
        f"var storeLocations = {_dump([location_to_record(loc) for loc in merged])};\n"
        f"var skus = {_dump(list(snapshot.skus))};"
    )


__all__ = ["DocumentParseError", "decode_document", "parse_document", "render_document"]
