from __future__ import annotations

import pytest

from locatorsync.domain.notifications import (
    ChangeNotifier,
    FatalErrorAlerter,
    render_change_report,
)
from locatorsync.domain.reconciliation import ChangeBuckets, ChangeEntry, ChangeKind, ChangeReport
from tests.helpers.locations import RecordingChannel, make_location


def _report() -> ChangeReport:
    changes = (
        ChangeBuckets()
        .add(ChangeKind.NEW, ChangeEntry(location_id="1", name="Hop Shop", address="1 Main St"))
        .add(ChangeKind.REMOVED, ChangeEntry(location_id="42", name="Old Pub", address="2 Side St"))
        .add(ChangeKind.PROBLEM, ChangeEntry(location_id="9", reason="no address data"))
        .add(
            ChangeKind.UPDATED,
            ChangeEntry(location_id="3", name="Corner", previous_skus=("A",), skus=("B",)),
        )
    )
    return ChangeReport(changes=changes, approved_manual=(make_location("m-1", name="Manual"),))


def test_render_lists_each_section() -> None:
    message = render_change_report(_report())

    assert message.startswith("New locations added: 1\n\nHop Shop\n1 Main St\n\n")
    assert "New approved manual locations added: 1\n\nManual\n" in message
    assert "Inactive locations removed: 1\n\nOld Pub\n2 Side St\n\n" in message
    assert "Problems encountered: 1\n- 9: no address data\n" in message
    assert "refreshed" not in message


def test_render_includes_updated_only_on_request() -> None:
    message = render_change_report(_report(), include_updated=True)

    assert "Existing locations refreshed: 1 (1 with product changes)\n- Corner: B\n" in message


def test_empty_report_renders_nothing_and_sends_nothing() -> None:
    channel = RecordingChannel()

    assert render_change_report(ChangeReport()) == ""
    assert ChangeNotifier(channel).notify(ChangeReport()) is False
    assert channel.messages == []


def test_notifier_posts_report() -> None:
    channel = RecordingChannel()

    assert ChangeNotifier(channel).notify(_report()) is True
    assert channel.messages == [render_change_report(_report())]


def test_notifier_failure_is_swallowed(caplog: pytest.LogCaptureFixture) -> None:
    channel = RecordingChannel(fail=True)

    assert ChangeNotifier(channel).notify(_report()) is False
    assert "Failed to deliver change report" in caplog.text


def test_fatal_alert_message() -> None:
    channel = RecordingChannel()

    FatalErrorAlerter(channel).alert(RuntimeError("shopify: No main theme found"))

    assert channel.messages == [
        "An error occurred while updating the map data:\n\n"
        "shopify: No main theme found\n\n"
        "Please check the server logs for more details."
    ]


def test_fatal_alert_failure_is_reported_not_raised() -> None:
    assert FatalErrorAlerter(RecordingChannel(fail=True)).alert(RuntimeError("boom")) is False
