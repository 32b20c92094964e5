"""Ports for outbound operator messaging."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class NotificationChannel(Protocol):
    """Best-effort channel for change reports and intake messages."""

    def post(self, message: str) -> None: ...


@runtime_checkable
class Alerter(Protocol):
    """Independent path used only for fatal errors."""

    def alert(self, message: str) -> None: ...
