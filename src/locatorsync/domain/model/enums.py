"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class LocationStatus(StrEnum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    REJECTED = "rejected"


class LocationSource(StrEnum):
    MANUAL = "manual"
    DERIVED = "derived"


class SubmissionStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
