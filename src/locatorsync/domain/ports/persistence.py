"""Ports for persisting the catalog and operator submissions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from locatorsync.domain.model import CatalogSnapshot, Location, Submission


@runtime_checkable
class CatalogRepository(Protocol):
    """Typed access to the published catalog document.

    ``read`` returns an empty snapshot when the stored document cannot be parsed and
    raises ``ExternalServiceError`` when the store itself is unreachable.
    """

    def read(self) -> CatalogSnapshot: ...

    def write(self, snapshot: CatalogSnapshot) -> None: ...


@runtime_checkable
class SubmissionRepository(Protocol):
    """Pending submissions (whole-file overwrite) and the append-only rejected archive."""

    def load_pending(self) -> list[Submission]: ...

    def save_pending(self, submissions: Sequence[Submission]) -> None: ...

    def load_rejected(self) -> list[Location]: ...

    def append_rejected(self, locations: Sequence[Location]) -> int: ...
