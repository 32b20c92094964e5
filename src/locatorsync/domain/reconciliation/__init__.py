"""Location reconciliation core.

Merges the published catalog, operator-curated manual locations and order-derived
customer activity into the next catalog, classifying every change as new, updated,
removed or problem.
"""

from __future__ import annotations

from .contracts import (
    GEOCODE_FAILED_REASON,
    NO_ADDRESS_REASON,
    ChangeBuckets,
    ChangeEntry,
    ChangeKind,
    ChangeReport,
    ReconciliationResult,
)
from .engine import LocationReconciler, reconcile_catalog

__all__ = [
    "GEOCODE_FAILED_REASON",
    "NO_ADDRESS_REASON",
    "ChangeBuckets",
    "ChangeEntry",
    "ChangeKind",
    "ChangeReport",
    "LocationReconciler",
    "ReconciliationResult",
    "reconcile_catalog",
]
