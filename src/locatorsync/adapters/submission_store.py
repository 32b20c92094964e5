"""JSON file persistence for pending submissions and the rejected archive."""

from __future__ import annotations

import json
from datetime import datetime
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from locatorsync.domain.errors import ExternalServiceError
from locatorsync.domain.model import (
    Coordinates,
    Submission,
    SubmissionStatus,
    format_full_address,
    unique_skus,
)

from .catalog_file import write_text_atomic
from .location_records import (
    format_timestamp,
    location_to_record,
    locations_from_records,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from locatorsync.config.storage import StorageConfig
    from locatorsync.domain.model import Location

log = getLogger(__name__)

SERVICE_NAME = "submission-store"


class CoordinatesRecord(BaseModel):
    lat: float
    lng: float


class SubmissionRecord(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    business_name: str = Field(alias="businessName")
    contact_name: str | None = Field(default=None, alias="contactName")
    email: str | None = None
    phone: str | None = None
    street: str = Field(default="", alias="address")
    city: str = ""
    state: str = ""
    zip_code: str = Field(default="", alias="zipCode")
    country: str = ""
    full_address: str | None = Field(default=None, alias="fullAddress")
    coordinates: CoordinatesRecord | None = None
    channel: str | None = None
    carried_products: list[Any] = Field(default_factory=list, alias="carriedProducts")
    submitted_at: datetime = Field(alias="submittedAt")
    status: SubmissionStatus = SubmissionStatus.PENDING
    approved_at: datetime | None = Field(default=None, alias="approvedAt")
    rejected_at: datetime | None = Field(default=None, alias="rejectedAt")
    rejection_reason: str | None = Field(default=None, alias="rejectionReason")

    @field_validator("status", mode="before")
    @classmethod
    def _lowercase_status(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    def to_submission(self) -> Submission:
        return Submission(
            id=self.id,
            business_name=self.business_name,
            street=self.street,
            city=self.city,
            state=self.state,
            zip_code=self.zip_code,
            country=self.country,
            full_address=self.full_address
            or format_full_address(self.street, self.city, self.state, self.zip_code, self.country),
            submitted_at=self.submitted_at,
            coordinates=(
                Coordinates(lat=self.coordinates.lat, lng=self.coordinates.lng)
                if self.coordinates
                else None
            ),
            contact_name=self.contact_name,
            email=self.email,
            phone=self.phone,
            channel=self.channel,
            carried_products=unique_skus(self.carried_products),
            status=self.status,
            approved_at=self.approved_at,
            rejected_at=self.rejected_at,
            rejection_reason=self.rejection_reason,
            extra=dict(self.model_extra or {}),
        )


def submission_to_record(submission: Submission) -> dict[str, object]:
    coordinates = submission.coordinates
    record: dict[str, object] = dict(submission.extra)
    record.update(
        {
            "id": submission.id,
            "businessName": submission.business_name,
            "contactName": submission.contact_name,
            "email": submission.email,
            "phone": submission.phone,
            "address": submission.street,
            "city": submission.city,
            "state": submission.state,
            "zipCode": submission.zip_code,
            "country": submission.country,
            "fullAddress": submission.full_address,
            "coordinates": (
                {"lat": coordinates.lat, "lng": coordinates.lng} if coordinates else None
            ),
            "channel": submission.channel,
            "carriedProducts": list(submission.carried_products),
            "submittedAt": format_timestamp(submission.submitted_at),
            "status": submission.status.value,
        }
    )
    if submission.approved_at is not None:
        record["approvedAt"] = format_timestamp(submission.approved_at)
    if submission.rejected_at is not None:
        record["rejectedAt"] = format_timestamp(submission.rejected_at)
    if submission.rejection_reason is not None:
        record["rejectionReason"] = submission.rejection_reason
    return record


class JsonSubmissionRepository:
    """Two JSON array files: the pending store (overwritten) and the rejected archive.

    Missing files read as empty lists. Every write replaces the file atomically.
    """

    def __init__(self, pending_path: Path | str, rejected_path: Path | str) -> None:
        self.pending_path = Path(pending_path)
        self.rejected_path = Path(rejected_path)

    @classmethod
    def from_storage(cls, storage: StorageConfig) -> JsonSubmissionRepository:
        return cls(storage.pending_path(), storage.rejected_path())

    def load_pending(self) -> list[Submission]:
        submissions: list[Submission] = []
        for item in self._read_array(self.pending_path):
            try:
                submissions.append(SubmissionRecord.model_validate(item).to_submission())
            except ValidationError as exc:
                raise ExternalServiceError(
                    SERVICE_NAME, f"invalid submission in {self.pending_path}: {exc}"
                ) from exc
        return submissions

    def save_pending(self, submissions: Sequence[Submission]) -> None:
        self._write_array(self.pending_path, [submission_to_record(s) for s in submissions])

    def load_rejected(self) -> list[Location]:
        return locations_from_records(self._read_array(self.rejected_path), manual=True)

    def append_rejected(self, locations: Sequence[Location]) -> int:
        """Append locations whose id is not archived yet; returns how many were added."""

        existing = self._read_array(self.rejected_path)
        known_ids = {item.get("id") for item in existing if isinstance(item, dict)}
        added = [location for location in locations if location.id not in known_ids]
        if not added:
            return 0
        self._write_array(
            self.rejected_path, [*existing, *(location_to_record(loc) for loc in added)]
        )
        return len(added)

    def _read_array(self, path: Path) -> list[Any]:
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise ExternalServiceError(SERVICE_NAME, f"cannot read {path}: {exc}") from exc
        if not content.strip():
            return []
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ExternalServiceError(SERVICE_NAME, f"{path} is not valid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise ExternalServiceError(SERVICE_NAME, f"{path} does not hold a JSON array")
        return data

    def _write_array(self, path: Path, items: list[Any]) -> None:
        try:
            write_text_atomic(path, json.dumps(items, indent=2, ensure_ascii=False))
        except OSError as exc:
            raise ExternalServiceError(SERVICE_NAME, f"cannot write {path}: {exc}") from exc
        log.debug(f"Wrote {len(items)} records to {path}")
