from __future__ import annotations

import json
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from locatorsync.adapters.submission_store import JsonSubmissionRepository
from locatorsync.config import StorageConfig
from locatorsync.domain.errors import ExternalServiceError
from locatorsync.domain.model import (
    Coordinates,
    Location,
    LocationSource,
    LocationStatus,
    Submission,
    SubmissionStatus,
)

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def repository(tmp_path: Path) -> JsonSubmissionRepository:
    return JsonSubmissionRepository.from_storage(StorageConfig(data_dir=tmp_path))


def _submission(submission_id: str = "sub-1") -> Submission:
    return Submission(
        id=submission_id,
        business_name="Corner Shop",
        street="1 Elm St",
        city="Portland",
        state="OR",
        zip_code="97201",
        country="US",
        full_address="1 Elm St, Portland, OR 97201, US",
        submitted_at=datetime(2024, 3, 1, 9, tzinfo=UTC),
        coordinates=Coordinates(lat=45.5, lng=-122.6),
        channel="Direct",
        carried_products=("IPA", "STOUT"),
    )


def _rejected(location_id: str) -> Location:
    return Location(
        id=location_id,
        name="Closed Cafe",
        source=LocationSource.MANUAL,
        status=LocationStatus.REJECTED,
        rejected_at=datetime(2024, 3, 5, tzinfo=UTC),
        rejection_reason="closed",
    )


def test_missing_files_read_as_empty(repository: JsonSubmissionRepository) -> None:
    assert repository.load_pending() == []
    assert repository.load_rejected() == []


def test_pending_round_trip(repository: JsonSubmissionRepository) -> None:
    approved = replace(
        _submission("sub-2"),
        status=SubmissionStatus.APPROVED,
        approved_at=datetime(2024, 3, 2, tzinfo=UTC),
    )
    repository.save_pending([_submission(), approved])

    loaded = repository.load_pending()

    assert loaded == [_submission(), approved]
    raw = json.loads(repository.pending_path.read_text(encoding="utf-8"))
    assert raw[0]["businessName"] == "Corner Shop"
    assert raw[0]["address"] == "1 Elm St"
    assert raw[0]["submittedAt"] == "2024-03-01T09:00:00.000Z"
    assert raw[1]["approvedAt"] == "2024-03-02T00:00:00.000Z"


def test_load_pending_accepts_external_records(repository: JsonSubmissionRepository) -> None:
    repository.pending_path.write_text(
        json.dumps(
            [
                {
                    "id": "abc",
                    "businessName": "Bottle Bar",
                    "address": "2 Oak Ave",
                    "city": "Salem",
                    "state": "OR",
                    "zipCode": "97301",
                    "country": "US",
                    "carriedProducts": ["IPA", "IPA", ""],
                    "submittedAt": "2024-04-01T10:00:00.000Z",
                    "status": "PENDING",
                    "referrer": "trade show",
                }
            ]
        ),
        encoding="utf-8",
    )

    [submission] = repository.load_pending()

    assert submission.full_address == "2 Oak Ave, Salem, OR 97301, US"
    assert submission.carried_products == ("IPA",)
    assert submission.status is SubmissionStatus.PENDING
    assert submission.coordinates is None
    assert submission.extra == {"referrer": "trade show"}


@pytest.mark.parametrize("content", ["{not json", '{"id": "x"}'])
def test_corrupt_pending_store_raises(repository: JsonSubmissionRepository, content: str) -> None:
    repository.pending_path.write_text(content, encoding="utf-8")

    with pytest.raises(ExternalServiceError):
        repository.load_pending()


def test_blank_pending_store_reads_as_empty(repository: JsonSubmissionRepository) -> None:
    repository.pending_path.write_text("  \n", encoding="utf-8")

    assert repository.load_pending() == []


def test_append_rejected_skips_known_ids(repository: JsonSubmissionRepository) -> None:
    assert repository.append_rejected([_rejected("r-1")]) == 1
    assert repository.append_rejected([_rejected("r-1"), _rejected("r-2")]) == 1

    archive = repository.load_rejected()

    assert [location.id for location in archive] == ["r-1", "r-2"]
    assert archive[0].status is LocationStatus.REJECTED
    assert archive[0].rejection_reason == "closed"
    assert archive[0].is_manual
