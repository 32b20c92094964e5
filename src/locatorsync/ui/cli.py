# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from datetime import UTC, datetime
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from locatorsync.adapters.catalog_file import FileCatalogStore
from locatorsync.app import (
    alert_fatal_error,
    approve_submission,
    build_change_notifier,
    build_location_manager,
    list_pending_submissions,
    reject_submission,
    run_map_update,
    submit_location,
)
from locatorsync.config import configure_logging, get_sync_config
from locatorsync.domain.errors import NotFoundError, ValidationError
from locatorsync.domain.model import LocationStatus

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from locatorsync.domain.model import Location, Submission

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Keep the store locator catalog in sync")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    update = subparsers.add_parser("update", help="Reconcile and publish the catalog")
    update.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute changes without publishing or consuming submissions",
    )
    update.add_argument(
        "--lookback-months",
        type=int,
        help="Months of order history to consider (defaults to config)",
    )
    update.add_argument(
        "--catalog-file",
        type=str,
        help="Read and write the catalog document at this path instead of the theme asset",
    )
    update.add_argument("--no-notify", action="store_true", help="Skip the Slack report")
    update.add_argument(
        "--include-updated",
        action="store_true",
        help="List refreshed locations in the Slack report",
    )

    submit = subparsers.add_parser("submit", help="Submit a location for approval")
    submit.add_argument("--business-name", required=True)
    submit.add_argument("--street", required=True)
    submit.add_argument("--city", required=True)
    submit.add_argument("--state", required=True)
    submit.add_argument("--zip", dest="zip_code", required=True)
    submit.add_argument("--country", required=True)
    submit.add_argument("--channel", help="Sales channel or deal owner")
    submit.add_argument("--contact-name")
    submit.add_argument("--email")
    submit.add_argument("--phone")
    submit.add_argument(
        "--product",
        dest="products",
        action="append",
        default=[],
        help="SKU carried by the location (repeatable)",
    )

    approve = subparsers.add_parser("approve", help="Approve a pending submission")
    approve.add_argument("submission_id")

    reject = subparsers.add_parser("reject", help="Reject a pending submission")
    reject.add_argument("submission_id")
    reject.add_argument("--reason", type=str, help="Reason shown to operators")

    subparsers.add_parser("pending", help="List submissions awaiting a decision")

    locations = subparsers.add_parser("locations", help="Manual location management")
    locations.add_argument(
        "--catalog-file",
        type=str,
        help="Use the catalog document at this path instead of the theme asset",
    )
    locations_sub = locations.add_subparsers(dest="locations_command", required=True)
    locations_sub.add_parser("stats", help="Count manual locations by status")

    search = locations_sub.add_parser("search", help="Search manual locations")
    search.add_argument("--query", type=str, help="Substring of the name or address")
    search.add_argument(
        "--status",
        choices=[status.value for status in LocationStatus],
        help="Only locations with this status",
    )
    search.add_argument("--product", type=str, help="Only locations carrying this SKU")
    search.add_argument("--from", dest="date_from", type=str, help="Submitted on or after")
    search.add_argument("--to", dest="date_to", type=str, help="Submitted on or before")

    archive = locations_sub.add_parser("archive", help="Archive one or more manual locations")
    archive.add_argument("location_ids", nargs="+")
    archive.add_argument("--reason", type=str, help="Archive reason")

    edit = locations_sub.add_parser("update", help="Edit a manual location")
    edit.add_argument("location_id")
    edit.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Field to change, e.g. name=..., phone=..., lat=..., skus=A,B (repeatable)",
    )

    return parser.parse_args(list(argv))


def _parse_iso_datetime(value: str) -> datetime:
    try:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        dt = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _parse_assignments(assignments: Sequence[str]) -> dict[str, object]:
    updates: dict[str, object] = {}
    for assignment in assignments:
        key, separator, value = assignment.partition("=")
        if not separator or not key.strip():
            raise ValueError(f"Expected FIELD=VALUE, got {assignment!r}")
        key = key.strip()
        if key == "skus":
            updates[key] = [sku.strip() for sku in value.split(",") if sku.strip()]
        else:
            updates[key] = value
    if not updates:
        raise ValueError("Nothing to update (use --set FIELD=VALUE)")
    return updates


def _format_submission(submission: Submission) -> str:
    return (
        f"{submission.id}  {submission.business_name}  {submission.full_address}  "
        f"(submitted {submission.submitted_at:%Y-%m-%d}, channel {submission.channel or 'n/a'})"
    )


def _format_location(location: Location) -> str:
    return f"{location.id}  [{location.status}]  {location.name}  {location.address}"


def _run_update(args: argparse.Namespace) -> None:
    sync = get_sync_config()
    if args.lookback_months is not None:
        if args.lookback_months <= 0:
            raise ValueError("Lookback months must be positive")
        sync = replace(sync, lookback_months=args.lookback_months)

    notifier = None
    if not args.no_notify and not args.dry_run:
        notifier = build_change_notifier(include_updated=args.include_updated)

    try:
        result = run_map_update(
            catalog=FileCatalogStore(args.catalog_file) if args.catalog_file else None,
            notifier=notifier,
            sync=sync,
            dry_run=args.dry_run,
        )
    except Exception as exc:
        log.exception("Fatal error during map update")
        alert_fatal_error(exc)
        sys.exit(1)

    changes = result.report.changes
    log.info(
        "Map update finished: published=%s, new=%s, updated=%s, removed=%s, problems=%s",
        result.published,
        len(changes.new),
        len(changes.updated),
        len(changes.removed),
        len(changes.problem),
    )


def _run_locations(args: argparse.Namespace) -> None:
    manager = build_location_manager(catalog_file=args.catalog_file)
    if args.locations_command == "stats":
        stats = manager.location_stats()
        print(
            f"total={stats.total} active={stats.active} "
            f"archived={stats.archived} rejected={stats.rejected}"
        )
    elif args.locations_command == "search":
        matches = manager.search_locations(
            args.query,
            status=LocationStatus(args.status) if args.status else None,
            product=args.product,
            date_from=_parse_iso_datetime(args.date_from) if args.date_from else None,
            date_to=_parse_iso_datetime(args.date_to) if args.date_to else None,
        )
        for location in matches:
            print(_format_location(location))
    elif args.locations_command == "archive":
        if len(args.location_ids) == 1:
            location = manager.archive_manual_location(
                args.location_ids[0], **({"reason": args.reason} if args.reason else {})
            )
            log.info("Archived %s", location.name)
        else:
            count = manager.bulk_archive_locations(
                args.location_ids, **({"reason": args.reason} if args.reason else {})
            )
            log.info("Archived %s locations", count)
    elif args.locations_command == "update":
        location = manager.update_manual_location(
            args.location_id, _parse_assignments(args.assignments)
        )
        print(_format_location(location))
    else:
        raise ValueError(f"Unsupported locations command: {args.locations_command}")


def _dispatch(args: argparse.Namespace) -> None:
    if args.command == "update":
        _run_update(args)
    elif args.command == "submit":
        submission = submit_location(
            {
                "businessName": args.business_name,
                "address": args.street,
                "city": args.city,
                "state": args.state,
                "zipCode": args.zip_code,
                "country": args.country,
                "channel": args.channel,
                "contactName": args.contact_name,
                "email": args.email,
                "phone": args.phone,
                "carriedProducts": list(args.products),
            }
        )
        print(submission.id)
    elif args.command == "approve":
        submission = approve_submission(args.submission_id)
        log.info("Approved %s (%s)", submission.id, submission.business_name)
    elif args.command == "reject":
        submission = reject_submission(args.submission_id, args.reason)
        log.info("Rejected %s (%s)", submission.id, submission.business_name)
    elif args.command == "pending":
        pending = list_pending_submissions()
        for submission in pending:
            print(_format_submission(submission))
        log.info("%s submissions awaiting a decision", len(pending))
    elif args.command == "locations":
        _run_locations(args)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else None)

    try:
        _dispatch(parsed_args)
    except (ValidationError, NotFoundError) as exc:
        log.error(str(exc))
        sys.exit(2)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
