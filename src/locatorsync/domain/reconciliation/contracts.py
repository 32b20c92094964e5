"""Result types shared by the reconciler, the orchestrator and the change notifier.

All types are immutable: the reconciler folds each step into a new value instead of
pushing into shared lists.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from locatorsync.domain.model import CatalogSnapshot, Location, LocationId, Sku

NO_ADDRESS_REASON = "no address data"
GEOCODE_FAILED_REASON = "Failed to geocode address"


class ChangeKind(StrEnum):
    NEW = "new"
    UPDATED = "updated"
    REMOVED = "removed"
    PROBLEM = "problem"


@dataclass(frozen=True, slots=True, kw_only=True)
class ChangeEntry:
    """One classified outcome, detailed enough to drive the change report."""

    location_id: LocationId
    name: str | None = None
    address: str | None = None
    reason: str | None = None
    previous_skus: tuple[Sku, ...] = ()
    skus: tuple[Sku, ...] = ()

    @classmethod
    def for_location(cls, location: Location, **overrides: object) -> ChangeEntry:
        entry = cls(
            location_id=location.id,
            name=location.name,
            address=location.address,
            skus=location.skus,
        )
        return replace(entry, **overrides) if overrides else entry

    @property
    def label(self) -> str:
        return self.name or self.location_id

    @property
    def skus_changed(self) -> bool:
        return set(self.previous_skus) != set(self.skus)


@dataclass(frozen=True, slots=True)
class ChangeBuckets:
    new: tuple[ChangeEntry, ...] = ()
    updated: tuple[ChangeEntry, ...] = ()
    removed: tuple[ChangeEntry, ...] = ()
    problem: tuple[ChangeEntry, ...] = ()

    def add(self, kind: ChangeKind, entry: ChangeEntry) -> ChangeBuckets:
        current: tuple[ChangeEntry, ...] = getattr(self, kind.value)
        return replace(self, **{kind.value: (*current, entry)})

    def entries(self, kind: ChangeKind) -> tuple[ChangeEntry, ...]:
        return getattr(self, kind.value)

    @property
    def is_empty(self) -> bool:
        return not (self.new or self.updated or self.removed or self.problem)


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    snapshot: CatalogSnapshot
    changes: ChangeBuckets


@dataclass(frozen=True, slots=True)
class ChangeReport:
    """Everything one pass tells the operator about."""

    changes: ChangeBuckets = ChangeBuckets()
    approved_manual: tuple[Location, ...] = ()
    rejected_manual: tuple[Location, ...] = ()
    remaining_pending: int = 0

    @property
    def is_empty(self) -> bool:
        return self.changes.is_empty and not (self.approved_manual or self.rejected_manual)
