"""Operator maintenance of manual locations already published in the catalog."""

from __future__ import annotations

from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING

from locatorsync.domain.errors import NotFoundError, ValidationError
from locatorsync.domain.model import Coordinates, LocationStatus, unique_skus
from locatorsync.domain.time_windows import utcnow

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from datetime import datetime

    from locatorsync.domain.model import CatalogSnapshot, Location, LocationId
    from locatorsync.domain.ports import CatalogRepository, SubmissionRepository
    from locatorsync.domain.time_windows import Clock

log = getLogger(__name__)

DEFAULT_ARCHIVE_REASON = "Archived by admin"
DEFAULT_BULK_ARCHIVE_REASON = "Bulk archived by admin"

_TEXT_FIELDS = {
    "name": "name",
    "address": "address",
    "contact": "contact_name",
    "contactName": "contact_name",
    "contact_name": "contact_name",
    "email": "email",
    "phone": "phone",
    "channel": "channel",
}


@dataclass(frozen=True, slots=True)
class LocationStats:
    total: int = 0
    active: int = 0
    archived: int = 0
    rejected: int = 0


def apply_location_updates(location: Location, updates: Mapping[str, object]) -> Location:
    """Return ``location`` with the editable fields in ``updates`` applied."""

    changes: dict[str, object] = {}
    unknown: list[str] = []
    for key, value in updates.items():
        if key in _TEXT_FIELDS:
            changes[_TEXT_FIELDS[key]] = None if value is None else str(value).strip()
        elif key == "skus":
            if not isinstance(value, (list, tuple)):
                raise ValidationError("skus must be a list", fields=("skus",))
            changes["skus"] = unique_skus(value)
        elif key not in {"lat", "lng"}:
            unknown.append(key)

    if unknown:
        fields = tuple(sorted(unknown))
        raise ValidationError(f"Unsupported fields: {', '.join(fields)}", fields=fields)

    if "lat" in updates or "lng" in updates:
        changes["coordinates"] = _coordinates(location, updates)

    if not changes.get("name", location.name):
        raise ValidationError("Location name cannot be blank", fields=("name",))
    return replace(location, **changes)


def _coordinates(location: Location, updates: Mapping[str, object]) -> Coordinates:
    current = location.coordinates
    lat = updates.get("lat", current.lat if current else None)
    lng = updates.get("lng", current.lng if current else None)
    try:
        return Coordinates(lat=float(lat), lng=float(lng))  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValidationError("lat and lng must both be numbers", fields=("lat", "lng")) from exc


def _replace_by_id(
    locations: Iterable[Location], updated: Mapping[LocationId, Location]
) -> tuple[Location, ...]:
    return tuple(updated.get(location.id, location) for location in locations)


class LocationManager:
    """Edit, archive and query manual locations.

    Each mutation is a single read-modify-write of the catalog; the published
    ``storeLocations`` copy is kept in step with ``manualLocations``.
    """

    def __init__(
        self,
        catalog: CatalogRepository,
        submissions: SubmissionRepository,
        *,
        clock: Clock = utcnow,
    ) -> None:
        self._catalog = catalog
        self._submissions = submissions
        self._clock = clock

    def list_manual_locations(self) -> list[Location]:
        """Published manual locations followed by the rejected archive."""

        snapshot = self._catalog.read()
        return [*snapshot.manual_locations, *self._submissions.load_rejected()]

    def update_manual_location(
        self, location_id: LocationId, updates: Mapping[str, object]
    ) -> Location:
        snapshot = self._catalog.read()
        current = snapshot.manual_by_id().get(location_id)
        if current is None:
            raise NotFoundError("Location", location_id)

        updated = replace(apply_location_updates(current, updates), updated_at=self._clock())
        self._write(snapshot, {location_id: updated})
        log.info(f"Updated manual location {location_id}")
        return updated

    def archive_manual_location(
        self, location_id: LocationId, reason: str = DEFAULT_ARCHIVE_REASON
    ) -> Location:
        snapshot = self._catalog.read()
        current = snapshot.manual_by_id().get(location_id)
        if current is None:
            raise NotFoundError("Location", location_id)

        archived = self._archived(current, reason)
        self._write(snapshot, {location_id: archived})
        log.info(f"Archived manual location {location_id}: {reason}")
        return archived

    def bulk_archive_locations(
        self, location_ids: Iterable[LocationId], reason: str = DEFAULT_BULK_ARCHIVE_REASON
    ) -> int:
        wanted = set(location_ids)
        snapshot = self._catalog.read()
        archived = {
            location.id: self._archived(location, reason)
            for location in snapshot.manual_locations
            if location.id in wanted
        }
        if not archived:
            raise NotFoundError("Location", ", ".join(sorted(wanted)) or "<none>")

        self._write(snapshot, archived)
        log.info(f"Archived {len(archived)} manual locations: {reason}")
        return len(archived)

    def location_stats(self) -> LocationStats:
        locations = self.list_manual_locations()
        return LocationStats(
            total=len(locations),
            active=sum(1 for loc in locations if loc.status is LocationStatus.ACTIVE),
            archived=sum(1 for loc in locations if loc.status is LocationStatus.ARCHIVED),
            rejected=sum(1 for loc in locations if loc.status is LocationStatus.REJECTED),
        )

    def search_locations(
        self,
        query: str | None = None,
        *,
        status: LocationStatus | None = None,
        product: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> list[Location]:
        """Filter manual locations; every given criterion must match.

        ``query`` is a case-insensitive substring of the name or address. Date bounds
        apply to ``submitted_at`` and exclude locations without one.
        """

        needle = query.strip().lower() if query else ""
        results: list[Location] = []
        for location in self.list_manual_locations():
            if needle and needle not in f"{location.name}\n{location.address}".lower():
                continue
            if status is not None and location.status is not status:
                continue
            if product and product not in location.skus:
                continue
            if date_from or date_to:
                submitted = location.submitted_at
                if submitted is None:
                    continue
                if date_from and submitted < date_from:
                    continue
                if date_to and submitted > date_to:
                    continue
            results.append(location)
        return results

    def _archived(self, location: Location, reason: str) -> Location:
        return replace(
            location,
            status=LocationStatus.ARCHIVED,
            archived_at=self._clock(),
            archive_reason=reason,
        )

    def _write(self, snapshot: CatalogSnapshot, updated: Mapping[LocationId, Location]) -> None:
        self._catalog.write(
            replace(
                snapshot,
                manual_locations=_replace_by_id(snapshot.manual_locations, updated),
                store_locations=_replace_by_id(snapshot.store_locations, updated),
            )
        )


__all__ = [
    "DEFAULT_ARCHIVE_REASON",
    "DEFAULT_BULK_ARCHIVE_REASON",
    "LocationManager",
    "LocationStats",
    "apply_location_updates",
]
