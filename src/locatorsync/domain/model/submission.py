"""Operator-curated location submissions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import SubmissionStatus

if TYPE_CHECKING:
    from datetime import datetime

    from .primitives import Coordinates, Sku


def format_full_address(street: str, city: str, state: str, zip_code: str, country: str) -> str:
    return f"{street}, {city}, {state} {zip_code}, {country}"


@dataclass(slots=True, kw_only=True)
class Submission:
    id: str
    business_name: str
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    full_address: str
    submitted_at: datetime
    coordinates: Coordinates | None = None
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    channel: str | None = None
    carried_products: tuple[Sku, ...] = ()
    status: SubmissionStatus = SubmissionStatus.PENDING
    approved_at: datetime | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None
    extra: dict[str, object] = field(default_factory=dict["str", "object"])

    @property
    def is_decided(self) -> bool:
        return self.status is not SubmissionStatus.PENDING
