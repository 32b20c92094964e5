"""Domain primitives: scalar aliases + small value objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

type LocationId = str
type CustomerId = str
type Sku = str


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class PostalAddress:
    """A customer's default address as reported by the order platform."""

    address1: str | None = None
    city: str | None = None
    province: str | None = None
    zip: str | None = None
    country: str | None = None
    company: str | None = None

    @property
    def is_usable(self) -> bool:
        return any(part and part.strip() for part in (self.address1, self.city, self.zip))

    def format(self) -> str:
        def part(value: str | None) -> str:
            return value.strip() if value else ""

        return (
            f"{part(self.address1)}, {part(self.city)}, "
            f"{part(self.province)} {part(self.zip)}, {part(self.country)}"
        )


def unique_skus(values: Iterable[object]) -> tuple[Sku, ...]:
    """Return distinct non-empty SKUs, preserving first-seen order."""

    seen: dict[str, None] = {}
    for value in values:
        if isinstance(value, str) and value.strip():
            seen.setdefault(value, None)
    return tuple(seen)
