"""Domain error taxonomy."""

from __future__ import annotations


class LocatorSyncError(Exception):
    """Base class for errors raised by the reconciliation domain."""


class ValidationError(LocatorSyncError, ValueError):
    """Raised when input fails validation; nothing is persisted."""

    def __init__(self, message: str, *, fields: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.fields = fields


class NotFoundError(LocatorSyncError, LookupError):
    """Raised when a submission or location id is unknown; no state is mutated."""

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


class ExternalServiceError(LocatorSyncError):
    """Raised when a provider (order source, asset store, messaging) fails."""

    def __init__(self, service: str, message: str, *, status_code: int | None = None) -> None:
        super().__init__(f"{service}: {message}")
        self.service = service
        self.status_code = status_code
