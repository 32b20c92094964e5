"""Reconciliation pass defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int

DEFAULT_LOOKBACK_MONTHS = 12
DEFAULT_ORDER_PAGE_SIZE = 250
DEFAULT_PAGE_DELAY_SECONDS = 0.5
DEFAULT_REQUEST_DELAY_SECONDS = 0.5


@dataclass(frozen=True, slots=True)
class SyncConfig:
    lookback_months: int = DEFAULT_LOOKBACK_MONTHS
    order_page_size: int = DEFAULT_ORDER_PAGE_SIZE
    page_delay_seconds: float = DEFAULT_PAGE_DELAY_SECONDS
    request_delay_seconds: float = DEFAULT_REQUEST_DELAY_SECONDS


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        lookback_months=env_int("LOCATORSYNC_LOOKBACK_MONTHS", DEFAULT_LOOKBACK_MONTHS),
        page_delay_seconds=env_float(
            "LOCATORSYNC_PAGE_DELAY_SECONDS", DEFAULT_PAGE_DELAY_SECONDS
        ),
    )
