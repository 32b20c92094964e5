"""Render change reports and deliver them to operators."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from locatorsync.domain.ports import Alerter, NotificationChannel
    from locatorsync.domain.reconciliation import ChangeEntry, ChangeReport


log = getLogger(__name__)

FATAL_ALERT_TEMPLATE = (
    "An error occurred while updating the map data:\n\n{error}\n\n"
    "Please check the server logs for more details."
)


def _entry_block(entry: ChangeEntry) -> str:
    if entry.address:
        return f"{entry.label}\n{entry.address}\n\n"
    return f"{entry.label}\n\n"


def render_change_report(report: ChangeReport, *, include_updated: bool = False) -> str:
    """Return the operator-facing message, or an empty string when nothing changed."""

    changes = report.changes
    sections: list[str] = []

    if changes.new:
        body = "".join(_entry_block(entry) for entry in changes.new)
        sections.append(f"New locations added: {len(changes.new)}\n\n{body}")

    if report.approved_manual:
        body = "".join(
            f"{location.name}\n{location.address}\n\n" for location in report.approved_manual
        )
        sections.append(
            f"New approved manual locations added: {len(report.approved_manual)}\n\n{body}"
        )

    if include_updated and changes.updated:
        changed = [entry for entry in changes.updated if entry.skus_changed]
        lines = "".join(
            f"- {entry.label}: {', '.join(entry.skus) or 'no products'}\n" for entry in changed
        )
        sections.append(
            f"Existing locations refreshed: {len(changes.updated)} "
            f"({len(changed)} with product changes)\n{lines}"
        )

    if changes.removed:
        body = "".join(_entry_block(entry) for entry in changes.removed)
        sections.append(f"Inactive locations removed: {len(changes.removed)}\n\n{body}")

    if changes.problem:
        lines = "".join(f"- {entry.label}: {entry.reason}\n" for entry in changes.problem)
        sections.append(f"Problems encountered: {len(changes.problem)}\n{lines}")

    return "\n".join(sections)


def log_change_report(report: ChangeReport) -> None:
    """Write the full report, including rejected submissions, to the log."""

    if report.is_empty:
        log.info("No catalog changes in this pass")
        return

    changes = report.changes
    log.info(f"New locations added: {len(changes.new)}")
    for entry in changes.new:
        log.info(f"- {entry.label}, {entry.address}")

    log.info(f"New approved manual locations added: {len(report.approved_manual)}")
    for location in report.approved_manual:
        log.info(f"- {location.name}, {location.address}")

    log.info(f"Rejected manual locations tracked (not exported): {len(report.rejected_manual)}")
    for location in report.rejected_manual:
        log.info(f"- {location.name}, {location.address} (Rejected: {location.rejection_reason})")

    log.info(f"Existing locations refreshed: {len(changes.updated)}")

    log.info(f"Inactive locations removed: {len(changes.removed)}")
    for entry in changes.removed:
        log.info(f"- {entry.label}, {entry.address}")

    log.info(f"Problems encountered: {len(changes.problem)}")
    for entry in changes.problem:
        log.info(f"- {entry.label}: {entry.reason}")

    if report.remaining_pending:
        log.info(f"{report.remaining_pending} submissions still pending approval")


@dataclass(slots=True)
class ChangeNotifier:
    """Send the change report through a best-effort channel."""

    channel: NotificationChannel
    include_updated: bool = False

    def notify(self, report: ChangeReport) -> bool:
        """Return ``True`` when a message was delivered; never raises."""

        message = render_change_report(report, include_updated=self.include_updated)
        if not message:
            log.info("No changes to notify about")
            return False
        try:
            self.channel.post(message)
        except Exception:  # noqa: BLE001
            log.exception("Failed to deliver change report")
            return False
        log.info("Change report sent")
        return True


@dataclass(slots=True)
class FatalErrorAlerter:
    """Alert operators about a run that aborted; used only on the fatal path."""

    alerter: Alerter

    def alert(self, error: BaseException) -> bool:
        message = FATAL_ALERT_TEMPLATE.format(error=error)
        try:
            self.alerter.alert(message)
        except Exception:  # noqa: BLE001
            log.exception("Failed to send fatal error alert")
            return False
        return True


__all__ = [
    "FATAL_ALERT_TEMPLATE",
    "ChangeNotifier",
    "FatalErrorAlerter",
    "log_change_report",
    "render_change_report",
]
