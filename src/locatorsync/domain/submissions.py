"""Lifecycle of operator-curated submissions.

A submission is created ``pending``, an operator approves or rejects it, and a
reconciliation pass consumes every decided submission into a manual location. The
pass consumes in two phases: ``plan_consumption`` converts without writing and
``commit_consumption`` rewrites the stores, which the application only calls after
the catalog has been published. Manual location ids are derived from the submission
id, so replaying a plan after a crash yields the same locations instead of
duplicates.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING
from uuid import UUID, uuid4, uuid5

from locatorsync.domain.errors import NotFoundError, ValidationError
from locatorsync.domain.model import (
    Location,
    LocationSource,
    LocationStatus,
    Submission,
    SubmissionStatus,
    format_full_address,
    unique_skus,
)
from locatorsync.domain.time_windows import utcnow

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from locatorsync.domain.model import Coordinates
    from locatorsync.domain.ports import AddressResolver, NotificationChannel, SubmissionRepository
    from locatorsync.domain.time_windows import Clock

log = getLogger(__name__)

MANUAL_LOCATION_NAMESPACE = UUID("6f1c2d3e-8a4b-5c6d-9e0f-1a2b3c4d5e6f")

_REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("business_name", "business name"),
    ("street", "street"),
    ("city", "city"),
    ("state", "state"),
    ("zip_code", "postal code"),
    ("country", "country"),
)

# camelCase keys used by the intake form, plus the snake_case field names
_DRAFT_KEYS: dict[str, tuple[str, ...]] = {
    "business_name": ("businessName", "business_name", "name"),
    "street": ("address", "street", "address1"),
    "city": ("city",),
    "state": ("state", "province"),
    "zip_code": ("zipCode", "zip_code", "zip", "postalCode"),
    "country": ("country",),
    "contact_name": ("contactName", "contact_name"),
    "email": ("email",),
    "phone": ("phone",),
    "channel": ("channel",),
}


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True, slots=True, kw_only=True)
class SubmissionDraft:
    """Raw intake data before validation."""

    business_name: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    channel: str | None = None
    carried_products: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> SubmissionDraft:
        values: dict[str, str] = {}
        for field_name, keys in _DRAFT_KEYS.items():
            for key in keys:
                if key in data and data[key] is not None:
                    values[field_name] = _text(data[key])
                    break
        products = data.get("carriedProducts", data.get("carried_products", ()))
        carried = unique_skus(products) if isinstance(products, (list, tuple)) else ()
        return cls(
            business_name=values.get("business_name", ""),
            street=values.get("street", ""),
            city=values.get("city", ""),
            state=values.get("state", ""),
            zip_code=values.get("zip_code", ""),
            country=values.get("country", ""),
            contact_name=values.get("contact_name") or None,
            email=values.get("email") or None,
            phone=values.get("phone") or None,
            channel=values.get("channel") or None,
            carried_products=carried,
        )

    def missing_fields(self) -> tuple[str, ...]:
        return tuple(
            label for attribute, label in _REQUIRED_FIELDS if not _text(getattr(self, attribute))
        )

    @property
    def full_address(self) -> str:
        return format_full_address(
            _text(self.street),
            _text(self.city),
            _text(self.state),
            _text(self.zip_code),
            _text(self.country),
        )


@dataclass(frozen=True, slots=True)
class ConsumptionPlan:
    """Conversions computed from the pending store, not yet written back."""

    approved: tuple[Location, ...] = ()
    rejected: tuple[Location, ...] = ()
    remaining_pending: int = 0
    consumed_ids: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.consumed_ids


@dataclass(frozen=True, slots=True)
class ProcessedSubmissions:
    approved: tuple[Location, ...]
    rejected: tuple[Location, ...]
    remaining_pending: int


def manual_location_id(submission_id: str) -> str:
    """Stable location id for the manual location converted from ``submission_id``."""

    return str(uuid5(MANUAL_LOCATION_NAMESPACE, submission_id))


def to_manual_location(submission: Submission) -> Location:
    if submission.status is SubmissionStatus.PENDING:
        raise ValueError(f"Submission {submission.id} has not been decided")
    rejected = submission.status is SubmissionStatus.REJECTED
    return Location(
        id=manual_location_id(submission.id),
        name=submission.business_name,
        address=submission.full_address,
        coordinates=submission.coordinates,
        skus=unique_skus(submission.carried_products),
        status=LocationStatus.REJECTED if rejected else LocationStatus.ACTIVE,
        source=LocationSource.MANUAL,
        contact_name=submission.contact_name,
        email=submission.email,
        phone=submission.phone,
        channel=submission.channel,
        submitted_at=submission.submitted_at,
        approved_at=None if rejected else submission.approved_at,
        rejected_at=submission.rejected_at if rejected else None,
        rejection_reason=submission.rejection_reason if rejected else None,
    )


class SubmissionService:
    """Manages submissions from intake to consumption into manual locations."""

    def __init__(
        self,
        repository: SubmissionRepository,
        resolver: AddressResolver,
        *,
        notifier: NotificationChannel | None = None,
        clock: Clock = utcnow,
        id_factory: Callable[[], UUID] = uuid4,
    ) -> None:
        self._repository = repository
        self._resolver = resolver
        self._notifier = notifier
        self._clock = clock
        self._id_factory = id_factory

    def submit(self, draft: SubmissionDraft) -> Submission:
        """Validate, geocode (best effort) and store a new pending submission."""

        missing = draft.missing_fields()
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", fields=missing)

        full_address = draft.full_address
        coordinates = self._geocode(full_address)

        submission = Submission(
            id=str(self._id_factory()),
            business_name=_text(draft.business_name),
            street=_text(draft.street),
            city=_text(draft.city),
            state=_text(draft.state),
            zip_code=_text(draft.zip_code),
            country=_text(draft.country),
            full_address=full_address,
            coordinates=coordinates,
            contact_name=draft.contact_name,
            email=draft.email,
            phone=draft.phone,
            channel=draft.channel,
            carried_products=unique_skus(draft.carried_products),
            submitted_at=self._clock(),
        )

        submissions = self._repository.load_pending()
        submissions.append(submission)
        self._repository.save_pending(submissions)
        log.info(f"Stored submission {submission.id} for {submission.business_name}")

        self._announce(submission)
        return submission

    def approve(self, submission_id: str) -> Submission:
        submissions = self._repository.load_pending()
        submission = _find(submissions, submission_id)
        if submission.status is SubmissionStatus.APPROVED:
            log.debug(f"Submission {submission_id} already approved")
            return submission

        submission.status = SubmissionStatus.APPROVED
        submission.approved_at = self._clock()
        submission.rejected_at = None
        submission.rejection_reason = None
        self._repository.save_pending(submissions)
        return submission

    def reject(self, submission_id: str, reason: str | None = None) -> Submission:
        submissions = self._repository.load_pending()
        submission = _find(submissions, submission_id)
        if submission.status is SubmissionStatus.REJECTED:
            log.debug(f"Submission {submission_id} already rejected")
            return submission

        submission.status = SubmissionStatus.REJECTED
        submission.rejected_at = self._clock()
        submission.rejection_reason = reason
        submission.approved_at = None
        self._repository.save_pending(submissions)
        return submission

    def list_submissions(self) -> list[Submission]:
        return self._repository.load_pending()

    def list_pending(self) -> list[Submission]:
        return [s for s in self._repository.load_pending() if s.status is SubmissionStatus.PENDING]

    def list_rejected(self) -> list[Location]:
        return self._repository.load_rejected()

    def plan_consumption(self) -> ConsumptionPlan:
        submissions = self._repository.load_pending()
        approved = [s for s in submissions if s.status is SubmissionStatus.APPROVED]
        rejected = [s for s in submissions if s.status is SubmissionStatus.REJECTED]
        remaining = [s for s in submissions if s.status is SubmissionStatus.PENDING]
        return ConsumptionPlan(
            approved=tuple(to_manual_location(s) for s in approved),
            rejected=tuple(to_manual_location(s) for s in rejected),
            remaining_pending=len(remaining),
            consumed_ids=frozenset(s.id for s in (*approved, *rejected)),
        )

    def commit_consumption(self, plan: ConsumptionPlan) -> ProcessedSubmissions:
        """Archive rejected conversions and drop consumed entries from the pending store.

        The pending store is re-read so submissions that arrived after planning survive.
        """

        if plan.is_empty:
            return ProcessedSubmissions(
                approved=(), rejected=(), remaining_pending=plan.remaining_pending
            )

        if plan.rejected:
            archived = self._repository.append_rejected(plan.rejected)
            log.info(f"Archived {archived} rejected manual locations")

        kept = [s for s in self._repository.load_pending() if s.id not in plan.consumed_ids]
        self._repository.save_pending(kept)
        remaining = sum(1 for s in kept if s.status is SubmissionStatus.PENDING)
        return ProcessedSubmissions(
            approved=plan.approved,
            rejected=plan.rejected,
            remaining_pending=remaining,
        )

    def process_approved(self) -> ProcessedSubmissions:
        """Consume every decided submission at once (plan followed by commit)."""

        return self.commit_consumption(self.plan_consumption())

    def _geocode(self, address: str) -> Coordinates | None:
        try:
            coordinates = self._resolver.resolve(address)
        except Exception as exc:  # noqa: BLE001
            log.warning(f"Geocoding failed for {address}: {exc}")
            return None
        if coordinates is None:
            log.info(f"No coordinates for {address}; storing submission without them")
        return coordinates

    def _announce(self, submission: Submission) -> None:
        if self._notifier is None:
            return
        message = (
            f"New location submission: \n{submission.business_name}\n\n"
            f"Address:\n{submission.full_address}\n\n"
            f"Channel or Deal Owner:\n{submission.channel or 'n/a'}"
        )
        try:
            self._notifier.post(message)
        except Exception:  # noqa: BLE001
            log.exception("Failed to send submission notification")


def _find(submissions: list[Submission], submission_id: str) -> Submission:
    for submission in submissions:
        if submission.id == submission_id:
            return submission
    raise NotFoundError("Submission", submission_id)


__all__ = [
    "ConsumptionPlan",
    "ProcessedSubmissions",
    "SubmissionDraft",
    "SubmissionService",
    "manual_location_id",
    "to_manual_location",
]
