from __future__ import annotations

import logging
import threading
import time
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta
from typing import Callable, Optional

from ..attendance.factory import AttendanceStrategyFactory
from ..attendance.model import AttendanceSummary
from ..attendance.reconciliation import ReconciliationEngine
from ..attendance.repository import AttendanceSummaryRepository, GeofenceEventRepository, SitePhotoAttendanceRepository
from ..common.datetime_utils import day_end, day_start, utc_today
from ..core.constants import (
    DEFAULT_BATCH_MAX_WORKERS,
    DEFAULT_PERSIST_ATTEMPTS,
    DEFAULT_PROCESSING_LOOKBACK_DAYS,
    DEFAULT_RETRY_BACKOFF_SECONDS,
)
from ..core.exceptions import TransientStorageError, ValidationError
from ..schedules.repository import ScheduleRepository
from ..tenants.model import AttendanceSettings, Tenant
from ..tenants.repository import AttendanceSettingsRepository, TenantRepository
from .model import BatchFailure, BatchResult, PersistOutcome, TenantContext, TenantRunResult

logger = logging.getLogger(__name__)


class DailyAttendanceBatch:
    """Daily job: reconcile every employee/site key of every active tenant.

    Tenants run one after another; keys inside a tenant are reconciled on a
    bounded thread pool. A key either gets a fully computed summary or is
    reported as a failure, and nothing stops the rest of the run.
    """

    def __init__(
        self,
        tenants: TenantRepository,
        events: GeofenceEventRepository,
        shifts: ScheduleRepository,
        confirmations: SitePhotoAttendanceRepository,
        summaries: AttendanceSummaryRepository,
        settings: AttendanceSettingsRepository | None = None,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        max_workers: int = DEFAULT_BATCH_MAX_WORKERS,
        max_persist_attempts: int = DEFAULT_PERSIST_ATTEMPTS,
        retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if int(max_workers) < 1:
            raise ValidationError("max_workers must be at least 1")
        if int(max_persist_attempts) < 1:
            raise ValidationError("max_persist_attempts must be at least 1")

        self._tenants = tenants
        self._events = events
        self._shifts = shifts
        self._confirmations = confirmations
        self._summaries = summaries
        self._settings = settings
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._max_workers = int(max_workers)
        self._max_attempts = int(max_persist_attempts)
        self._backoff = float(retry_backoff_seconds)
        self._sleep = sleep

    def run_daily_batch(self, work_date: date, *, cancel_event: Optional[threading.Event] = None) -> BatchResult:
        logger.info("Daily attendance batch started for %s", work_date)

        processed = 0
        skipped = 0
        failures: list[BatchFailure] = []
        cancelled = False

        for tenant in self._tenants.list_active():
            if cancel_event is not None and cancel_event.is_set():
                logger.warning("Daily attendance batch for %s cancelled before tenant %s", work_date, tenant.tenant_id)
                cancelled = True
                break

            try:
                context = self._build_context(tenant, work_date)
                run = self._process_tenant(context)
            except Exception as exc:
                logger.exception("Failed to process tenant=%s date=%s", tenant.tenant_id, work_date)
                failures.append(BatchFailure(tenant_id=tenant.tenant_id, employee_id=None, site_id=None, reason=str(exc)))
                continue

            processed += run.processed_count
            skipped += run.skipped_count
            failures.extend(run.failures)

        result = BatchResult(
            work_date=work_date,
            processed_count=processed,
            skipped_count=skipped,
            failures=tuple(failures),
            cancelled=cancelled,
        )
        logger.info(
            "Daily attendance batch finished for %s: processed=%d failed=%d skipped=%d cancelled=%s",
            work_date, result.processed_count, result.failed_count, result.skipped_count, result.cancelled,
        )
        return result

    def run_date_range(
        self,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        *,
        today: Optional[date] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> list[BatchResult]:
        """Re-process a range of days (defaults to the last 30 days ending yesterday)."""

        today = today or utc_today()
        from_date = from_date or today - timedelta(days=DEFAULT_PROCESSING_LOOKBACK_DAYS)
        to_date = to_date or today - timedelta(days=1)

        if from_date > to_date:
            raise ValidationError("from_date must be before or equal to to_date")
        if to_date > today:
            raise ValidationError("to_date cannot be in the future")

        results: list[BatchResult] = []
        current = from_date
        while current <= to_date:
            result = self.run_daily_batch(current, cancel_event=cancel_event)
            results.append(result)
            if result.cancelled:
                break
            current += timedelta(days=1)
        return results

    def _build_context(self, tenant: Tenant, work_date: date) -> TenantContext:
        settings = self._settings.get_for_tenant(tenant.tenant_id) if self._settings else None
        settings = settings or AttendanceSettings.defaults(tenant.tenant_id)
        engine = ReconciliationEngine(settings.to_reconciliation_settings(), strategy_factory=self._factory)
        return TenantContext(tenant_id=tenant.tenant_id, work_date=work_date, settings=settings, engine=engine)

    def _process_tenant(self, context: TenantContext) -> TenantRunResult:
        work_date = context.work_date
        start, end = day_start(work_date), day_end(work_date)

        # Neighbouring days are loaded so visits spanning midnight can be split.
        events = self._events.list_between(
            tenant_id=context.tenant_id,
            start=day_start(work_date - timedelta(days=1)),
            end=day_end(work_date + timedelta(days=1)),
        )
        shifts = self._shifts.list_for_date(tenant_id=context.tenant_id, work_date=work_date)
        confirmations = self._confirmations.list_for_date(tenant_id=context.tenant_id, work_date=work_date)

        failures: list[BatchFailure] = []

        events_by_key = defaultdict(list)
        keys = set()
        for e in events:
            events_by_key[(e.employee_id, e.site_id)].append(e)
            if start <= e.timestamp < end:
                keys.add((e.employee_id, e.site_id))

        # A visit can cover the whole day without a single event dated on it.
        for key, key_events in events_by_key.items():
            if key not in keys and context.engine.has_activity(work_date, key_events):
                keys.add(key)

        shifts_by_key = {}
        duplicated = set()
        for s in shifts:
            key = (s.employee_id, s.site_id)
            if key in shifts_by_key:
                duplicated.add(key)
            shifts_by_key[key] = s
        keys.update(shifts_by_key)

        confirmations_by_key = defaultdict(list)
        for c in confirmations:
            confirmations_by_key[(c.employee_id, c.site_id)].append(c)
        keys.update(confirmations_by_key)

        for key in sorted(duplicated):
            failures.append(self._failure(context, key, "More than one scheduled shift for the day"))
        keys -= duplicated

        computed: list[AttendanceSummary] = []
        skipped = 0
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            futures = {
                key: pool.submit(
                    context.engine.reconcile,
                    key[0],
                    key[1],
                    work_date,
                    events_by_key.get(key, ()),
                    shifts_by_key.get(key),
                    confirmations_by_key.get(key, ()),
                    tenant_id=context.tenant_id,
                )
                for key in sorted(keys)
            }
            for key, future in futures.items():
                try:
                    summary = future.result()
                except Exception as exc:
                    logger.error(
                        "Reconciliation failed tenant=%s employee=%s site=%s date=%s: %s",
                        context.tenant_id, key[0], key[1], work_date, exc,
                    )
                    failures.append(self._failure(context, key, str(exc)))
                    continue
                if summary is None:
                    skipped += 1
                    continue
                computed.append(summary)

        processed = 0
        for summary in computed:
            outcome = self._persist(summary)
            if outcome.ok:
                processed += 1
            else:
                failures.append(
                    self._failure(
                        context,
                        (summary.employee_id, summary.site_id),
                        f"Persist failed after {outcome.attempts} attempt(s): {outcome.error}",
                    )
                )

        return TenantRunResult(
            tenant_id=context.tenant_id,
            processed_count=processed,
            skipped_count=skipped,
            failures=tuple(failures),
        )

    def _persist(self, summary: AttendanceSummary) -> PersistOutcome:
        error = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                self._summaries.upsert(summary)
                return PersistOutcome(ok=True, attempts=attempt)
            except TransientStorageError as exc:
                error = str(exc)
                logger.warning(
                    "Transient error saving summary tenant=%s employee=%s site=%s (attempt %d/%d): %s",
                    summary.tenant_id, summary.employee_id, summary.site_id, attempt, self._max_attempts, exc,
                )
                if attempt < self._max_attempts:
                    self._sleep(self._backoff * attempt)
            except Exception as exc:
                logger.error(
                    "Error saving summary tenant=%s employee=%s site=%s: %s",
                    summary.tenant_id, summary.employee_id, summary.site_id, exc,
                )
                return PersistOutcome(ok=False, attempts=attempt, error=str(exc))
        return PersistOutcome(ok=False, attempts=self._max_attempts, error=error)

    @staticmethod
    def _failure(context: TenantContext, key: tuple, reason: str) -> BatchFailure:
        return BatchFailure(tenant_id=context.tenant_id, employee_id=key[0], site_id=key[1], reason=reason)
