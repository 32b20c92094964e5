"""Utilities for constraining order fetches to a lookback window."""

from __future__ import annotations

import calendar
from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def subtract_months(value: datetime, months: int) -> datetime:
    """Step back ``months`` calendar months, clamping the day to the target month."""

    if months < 0:
        raise ValueError("Lookback months must be non-negative")
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def lookback_start(months: int, *, clock: Clock = utcnow) -> datetime:
    """Resolve the inclusive UTC start of a ``months``-long lookback window."""

    anchor = clock()
    if anchor.tzinfo is None:
        anchor = anchor.replace(tzinfo=UTC)
    return subtract_months(anchor.astimezone(UTC), months)


__all__ = ["Clock", "lookback_start", "subtract_months", "utcnow"]
