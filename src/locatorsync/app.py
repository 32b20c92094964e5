"""Application orchestration entry points."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from locatorsync.adapters.catalog_file import FileCatalogStore
from locatorsync.adapters.email_alert import EmailAlerter
from locatorsync.adapters.google import GoogleGeocoder, should_cache_geocode_payload
from locatorsync.adapters.shopify import ShopifyCatalogStore, ShopifyClient
from locatorsync.adapters.slack import SlackNotifier
from locatorsync.adapters.submission_store import JsonSubmissionRepository
from locatorsync.config import (
    MissingConfigurationError,
    get_email_alert_config,
    get_google_geocoding_config,
    get_shopify_config,
    get_slack_config,
    get_storage_config,
    get_sync_config,
)
from locatorsync.domain.location_management import LocationManager
from locatorsync.domain.notifications import ChangeNotifier, FatalErrorAlerter, log_change_report
from locatorsync.domain.order_activity import fetch_activity
from locatorsync.domain.reconciliation import ChangeReport, reconcile_catalog
from locatorsync.domain.submissions import SubmissionDraft, SubmissionService
from locatorsync.domain.time_windows import utcnow

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from locatorsync.config import StorageConfig, SyncConfig
    from locatorsync.domain.model import Coordinates, Submission
    from locatorsync.domain.ports import (
        AddressResolver,
        Alerter,
        CatalogRepository,
        NotificationChannel,
        OrderSource,
        SubmissionRepository,
    )
    from locatorsync.domain.time_windows import Clock

SleepFn = Callable[[float], None]

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MapUpdateResult:
    report: ChangeReport
    published: bool


class NullResolver:
    """Resolver for commands that never geocode."""

    def resolve(self, address: str) -> Coordinates | None:  # noqa: ARG002
        return None


def build_shopify_client(sync: SyncConfig | None = None) -> ShopifyClient:
    effective_sync = sync or get_sync_config()
    return ShopifyClient(
        config=get_shopify_config(),
        request_delay_seconds=effective_sync.request_delay_seconds,
    )


def build_geocoder(storage: StorageConfig | None = None) -> GoogleGeocoder:
    effective_storage = storage or get_storage_config()
    config = get_google_geocoding_config(
        cache_predicate=should_cache_geocode_payload,
        cache_path=str(effective_storage.http_cache_path()),
    )
    return GoogleGeocoder(config=config)


def build_catalog_store(
    *,
    catalog_file: Path | str | None = None,
    client: ShopifyClient | None = None,
) -> CatalogRepository:
    if catalog_file is not None:
        return FileCatalogStore(catalog_file)
    return ShopifyCatalogStore(client or build_shopify_client())


def build_submission_repository(storage: StorageConfig | None = None) -> SubmissionRepository:
    return JsonSubmissionRepository.from_storage(storage or get_storage_config())


def build_notification_channel() -> NotificationChannel | None:
    try:
        return SlackNotifier(config=get_slack_config())
    except MissingConfigurationError as exc:
        log.warning(f"Slack notifications disabled: {exc}")
        return None


def build_alerter() -> Alerter | None:
    try:
        return EmailAlerter(config=get_email_alert_config())
    except MissingConfigurationError as exc:
        log.warning(f"Email alerts disabled: {exc}")
        return None


def run_map_update(
    *,
    order_source: OrderSource | None = None,
    catalog: CatalogRepository | None = None,
    submissions: SubmissionRepository | None = None,
    resolver: AddressResolver | None = None,
    notifier: ChangeNotifier | None = None,
    channels: Sequence[str] | None = None,
    sync: SyncConfig | None = None,
    dry_run: bool = False,
    sleep: SleepFn = time.sleep,
    clock: Clock = utcnow,
) -> MapUpdateResult:
    """Run one reconciliation pass and publish the catalog.

    Submission decisions are only consumed after the catalog has been published, so
    a failed publish leaves them in place for the next pass. Errors from fetching,
    reading or publishing propagate to the caller.
    """

    effective_sync = sync or get_sync_config()
    if order_source is None or catalog is None or channels is None:
        client = build_shopify_client(effective_sync)
        order_source = order_source or client
        catalog = catalog or ShopifyCatalogStore(client)
        channels = channels if channels is not None else client.config.channels
    effective_channels = tuple(channels)
    effective_catalog = catalog
    effective_source = order_source
    effective_submissions = submissions or build_submission_repository()
    effective_resolver = resolver or build_geocoder()

    log.info(
        "Starting map update: channels=%s, lookback_months=%s, dry_run=%s",
        ", ".join(effective_channels),
        effective_sync.lookback_months,
        dry_run,
    )

    activity = fetch_activity(
        effective_source,
        effective_channels,
        lookback_months=effective_sync.lookback_months,
        page_size=effective_sync.order_page_size,
        page_delay_seconds=effective_sync.page_delay_seconds,
        sleep=sleep,
        clock=clock,
    )
    snapshot = effective_catalog.read()

    service = SubmissionService(effective_submissions, effective_resolver)
    plan = service.plan_consumption()
    log.info(
        f"Processing {len(plan.approved)} approved and {len(plan.rejected)} rejected "
        f"submissions ({plan.remaining_pending} pending)"
    )

    result = reconcile_catalog(
        activity,
        snapshot,
        [*snapshot.manual_locations, *plan.approved, *plan.rejected],
        customers=effective_source,
        resolver=effective_resolver,
    )

    report = ChangeReport(
        changes=result.changes,
        approved_manual=plan.approved,
        rejected_manual=plan.rejected,
        remaining_pending=plan.remaining_pending,
    )

    if dry_run:
        log.info("Dry run: catalog not published, submissions not consumed")
        log_change_report(report)
        return MapUpdateResult(report=report, published=False)

    effective_catalog.write(result.snapshot)
    processed = service.commit_consumption(plan)
    report = ChangeReport(
        changes=result.changes,
        approved_manual=processed.approved,
        rejected_manual=processed.rejected,
        remaining_pending=processed.remaining_pending,
    )
    log_change_report(report)

    if notifier is not None:
        notifier.notify(report)

    log.info("Finished map update")
    return MapUpdateResult(report=report, published=True)


def build_change_notifier(*, include_updated: bool = False) -> ChangeNotifier | None:
    channel = build_notification_channel()
    if channel is None:
        return None
    return ChangeNotifier(channel, include_updated=include_updated)


def alert_fatal_error(error: BaseException, *, alerter: Alerter | None = None) -> bool:
    """Best-effort operator alert for an aborted run."""

    effective_alerter = alerter or build_alerter()
    if effective_alerter is None:
        return False
    return FatalErrorAlerter(effective_alerter).alert(error)


def build_submission_service(
    *,
    repository: SubmissionRepository | None = None,
    resolver: AddressResolver | None = None,
    notifier: NotificationChannel | None = None,
) -> SubmissionService:
    return SubmissionService(
        repository or build_submission_repository(),
        resolver or NullResolver(),
        notifier=notifier,
    )


def submit_location(
    data: Mapping[str, object],
    *,
    service: SubmissionService | None = None,
) -> Submission:
    effective_service = service or build_submission_service(
        resolver=build_geocoder(),
        notifier=build_notification_channel(),
    )
    return effective_service.submit(SubmissionDraft.from_mapping(data))


def approve_submission(
    submission_id: str,
    *,
    service: SubmissionService | None = None,
) -> Submission:
    return (service or build_submission_service()).approve(submission_id)


def reject_submission(
    submission_id: str,
    reason: str | None = None,
    *,
    service: SubmissionService | None = None,
) -> Submission:
    return (service or build_submission_service()).reject(submission_id, reason)


def list_pending_submissions(*, service: SubmissionService | None = None) -> list[Submission]:
    return (service or build_submission_service()).list_pending()


def build_location_manager(*, catalog_file: Path | str | None = None) -> LocationManager:
    return LocationManager(
        build_catalog_store(catalog_file=catalog_file),
        build_submission_repository(),
    )
