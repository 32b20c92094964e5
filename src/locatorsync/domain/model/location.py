"""Location records exported to the store-locator catalog."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from .enums import LocationSource, LocationStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from datetime import datetime

    from .primitives import Coordinates, LocationId, Sku


@dataclass(frozen=True, slots=True, kw_only=True)
class Location:
    """One pin on the store locator.

    Derived locations are keyed by the commerce customer id; manual locations carry a
    UUID minted from the submission they were converted from. ``extra`` keeps document
    keys this model does not know about so a read/write cycle never drops data.
    """

    id: LocationId
    name: str
    address: str = ""
    coordinates: Coordinates | None = None
    skus: tuple[Sku, ...] = ()
    sales_channel: str | None = None
    status: LocationStatus = LocationStatus.ACTIVE
    source: LocationSource = LocationSource.DERIVED

    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    channel: str | None = None
    rejection_reason: str | None = None
    archive_reason: str | None = None

    submitted_at: datetime | None = None
    approved_at: datetime | None = None
    rejected_at: datetime | None = None
    updated_at: datetime | None = None
    archived_at: datetime | None = None

    extra: Mapping[str, object] = field(default_factory=dict["str", "object"])

    @property
    def is_manual(self) -> bool:
        return self.source is LocationSource.MANUAL

    @property
    def is_exportable(self) -> bool:
        return self.status is not LocationStatus.REJECTED

    def with_skus(self, skus: Iterable[Sku]) -> Location:
        return replace(self, skus=tuple(skus))
