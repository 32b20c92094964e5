"""JSON record shape of a location, shared by the catalog document and the rejected archive."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from locatorsync.domain.model import (
    Coordinates,
    Location,
    LocationSource,
    LocationStatus,
    unique_skus,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

log = getLogger(__name__)


def format_timestamp(value: datetime | None) -> str | None:
    """``2024-05-01T12:00:00.000Z``, the form browsers produce with ``toISOString``."""

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _id_to_str(value: object) -> object:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(int(value))
    return value


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class LocationRecord(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    name: str = ""
    address: str = ""
    lat: float | None = None
    lng: float | None = None
    skus: list[Any] = Field(default_factory=list)
    sales_channel: str | None = Field(default=None, alias="salesChannel")

    contact: str | None = None
    email: str | None = None
    phone: str | None = None
    channel: str | None = None
    is_manual: bool | None = Field(default=None, alias="isManual")
    status: str | None = None
    rejection_reason: str | None = Field(default=None, alias="rejectionReason")
    archive_reason: str | None = Field(default=None, alias="archiveReason")

    submitted_at: datetime | None = Field(default=None, alias="submittedAt")
    approved_at: datetime | None = Field(default=None, alias="approvedAt")
    rejected_at: datetime | None = Field(default=None, alias="rejectedAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    archived_at: datetime | None = Field(default=None, alias="archivedAt")

    _normalize_id = field_validator("id", mode="before")(_id_to_str)
    _normalize_timestamps = field_validator(
        "submitted_at", "approved_at", "rejected_at", "updated_at", "archived_at", mode="before"
    )(_blank_to_none)

    def to_location(self, *, manual: bool = False) -> Location:
        coordinates = (
            Coordinates(lat=self.lat, lng=self.lng)
            if self.lat is not None and self.lng is not None
            else None
        )
        is_manual = manual or bool(self.is_manual)
        return Location(
            id=self.id,
            name=self.name,
            address=self.address,
            coordinates=coordinates,
            skus=unique_skus(self.skus),
            sales_channel=self.sales_channel,
            status=_status(self.status),
            source=LocationSource.MANUAL if is_manual else LocationSource.DERIVED,
            contact_name=self.contact,
            email=self.email,
            phone=self.phone,
            channel=self.channel,
            rejection_reason=self.rejection_reason,
            archive_reason=self.archive_reason,
            submitted_at=self.submitted_at,
            approved_at=self.approved_at,
            rejected_at=self.rejected_at,
            updated_at=self.updated_at,
            archived_at=self.archived_at,
            extra=dict(self.model_extra or {}),
        )


def _status(raw: str | None) -> LocationStatus:
    if raw is None:
        return LocationStatus.ACTIVE
    try:
        return LocationStatus(raw.lower())
    except ValueError:
        log.warning(f"Unknown location status {raw!r}, treating as active")
        return LocationStatus.ACTIVE


def location_from_record(data: object, *, manual: bool = False) -> Location | None:
    """Parse one record; returns ``None`` (and logs) when it is unusable."""

    try:
        return LocationRecord.model_validate(data).to_location(manual=manual)
    except ValidationError as exc:
        log.warning(f"Skipping invalid location record: {exc.errors()[0]['msg']}")
        return None


def locations_from_records(items: Iterable[object], *, manual: bool = False) -> list[Location]:
    return [
        location
        for location in (location_from_record(item, manual=manual) for item in items)
        if location is not None
    ]


def location_to_record(location: Location) -> dict[str, object]:
    """Plain JSON-ready mapping with camelCase keys; unknown keys come first."""

    record: dict[str, object] = dict(cast(Mapping[str, object], location.extra))
    coordinates = location.coordinates
    record.update(
        {
            "id": location.id,
            "name": location.name,
            "address": location.address,
            "lat": coordinates.lat if coordinates else None,
            "lng": coordinates.lng if coordinates else None,
        }
    )

    if not location.is_manual:
        record["skus"] = list(location.skus)
        if location.sales_channel is not None:
            record["salesChannel"] = location.sales_channel
        return record

    record.update(
        {
            "contact": location.contact_name,
            "email": location.email,
            "phone": location.phone,
            "channel": location.channel,
            "submittedAt": format_timestamp(location.submitted_at),
        }
    )
    if location.status is LocationStatus.REJECTED:
        record["rejectedAt"] = format_timestamp(location.rejected_at)
        record["rejectionReason"] = location.rejection_reason
    else:
        record["approvedAt"] = format_timestamp(location.approved_at)

    record["skus"] = list(location.skus)
    if location.sales_channel is not None:
        record["salesChannel"] = location.sales_channel
    record["isManual"] = True
    record["status"] = location.status.value

    optional = {
        "updatedAt": format_timestamp(location.updated_at),
        "archivedAt": format_timestamp(location.archived_at),
        "archiveReason": location.archive_reason,
    }
    record.update({key: value for key, value in optional.items() if value is not None})
    return record


__all__ = [
    "LocationRecord",
    "format_timestamp",
    "location_from_record",
    "location_to_record",
    "locations_from_records",
]
