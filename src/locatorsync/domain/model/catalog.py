"""The published location catalog, read once and written once per pass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .location import Location
    from .primitives import LocationId, Sku


@dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    store_locations: tuple[Location, ...] = ()
    manual_locations: tuple[Location, ...] = ()
    skus: tuple[Sku, ...] = ()

    @classmethod
    def empty(cls) -> CatalogSnapshot:
        return cls()

    def manual_by_id(self) -> dict[LocationId, Location]:
        return {location.id: location for location in self.manual_locations}
