"""Port for resolving free-text addresses to coordinates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from locatorsync.domain.model import Coordinates


@runtime_checkable
class AddressResolver(Protocol):
    """Resolve an address; implementations must return ``None`` instead of raising."""

    def resolve(self, address: str) -> Coordinates | None: ...
