"""Daily attendance reconciliation.

Merges three weakly-correlated signals for one employee at one site on one
day: the roster (``ScheduledShift``), automatic geofence enter/exit events,
and manual site photo attendance. The engine is a pure computation over
already-fetched data; it never touches a repository.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..analytics.utilization import utilization_percent
from ..common.datetime_utils import day_end, day_start, processing_cutoff
from ..core.constants import DEFAULT_DEBOUNCE_MINUTES, DEFAULT_EXPECTED_HOURS_PER_DAY, DEFAULT_GRACE_MINUTES
from ..core.enums import EventType
from ..core.exceptions import InvalidInputError, ValidationError
from ..schedules.model import ScheduledShift
from .factory import AttendanceStrategyFactory
from .model import AttendanceSummary, DayObservation, GeofenceEvent, SitePhotoAttendance
from .time_on_site import TimeOnSite


@dataclass(frozen=True)
class ReconciliationSettings:
    debounce_minutes: int = DEFAULT_DEBOUNCE_MINUTES
    grace_minutes: int = DEFAULT_GRACE_MINUTES
    expected_hours_per_day: Decimal = DEFAULT_EXPECTED_HOURS_PER_DAY

    def __post_init__(self):
        if int(self.debounce_minutes) < 0:
            raise ValidationError("debounce_minutes cannot be negative")
        if int(self.grace_minutes) < 0:
            raise ValidationError("grace_minutes cannot be negative")

    @property
    def debounce(self) -> timedelta:
        return timedelta(minutes=int(self.debounce_minutes))

    @property
    def grace(self) -> timedelta:
        return timedelta(minutes=int(self.grace_minutes))


def _hhmm(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S")


class ReconciliationEngine:
    def __init__(
        self,
        settings: ReconciliationSettings | None = None,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._settings = settings or ReconciliationSettings()
        self._factory = strategy_factory or AttendanceStrategyFactory()

    @property
    def settings(self) -> ReconciliationSettings:
        return self._settings

    def reconcile(
        self,
        employee_id: int,
        site_id: int,
        work_date: date,
        events: Iterable[GeofenceEvent] = (),
        shift: Optional[ScheduledShift] = None,
        confirmations: Iterable[SitePhotoAttendance] = (),
        *,
        tenant_id: Optional[int] = None,
    ) -> Optional[AttendanceSummary]:
        """Produce the day's summary, or ``None`` when nothing was expected and nothing happened.

        ``events`` may include the previous and following day so visits that
        span midnight are split at the boundary.
        """

        events = list(events or ())
        confirmations = list(confirmations or ())
        self._check_keys(employee_id, site_id, work_date, events, shift, confirmations)

        observation = self.observe(work_date, events, has_manual_confirmation=bool(confirmations))
        strategy = self._factory.for_day(observation=observation, shift=shift)
        if strategy is None:
            return None

        decision = strategy.decide(observation=observation, shift=shift, grace=self._settings.grace)

        hours = observation.time_on_site.hours
        variance = None
        expected_hours = self._settings.expected_hours_per_day
        if shift:
            expected_hours = shift.scheduled_hours
            variance = hours - expected_hours

        return AttendanceSummary(
            tenant_id=tenant_id,
            employee_id=employee_id,
            site_id=site_id,
            work_date=work_date,
            expected_start=shift.expected_start if shift else None,
            expected_end=shift.expected_end if shift else None,
            actual_arrival=observation.arrival,
            actual_departure=observation.departure,
            actual_hours_on_site=observation.time_on_site,
            variance_hours=variance,
            flags=decision.flags,
            has_manual_confirmation=observation.has_manual_confirmation,
            entry_count=observation.entry_count,
            exit_count=observation.exit_count,
            is_open_ended=observation.is_open_ended,
            utilization_percent=utilization_percent(hours, expected_hours),
            anomalies=observation.anomalies,
            note="; ".join(n for n in (decision.note, *observation.remarks) if n) or None,
        )

    def observe(self, work_date: date, events: Sequence[GeofenceEvent], *, has_manual_confirmation: bool) -> DayObservation:
        """Reduce a geofence stream to arrival, departure and time on site for ``work_date``."""

        start, end = day_start(work_date), day_end(work_date)
        ordered = self._without_noise(events)
        cleaned = self._debounce(ordered)
        before = [e for e in cleaned if e.timestamp < start]
        on_date = [e for e in cleaned if start <= e.timestamp < end]
        after = [e for e in cleaned if e.timestamp >= end]

        # Still inside at midnight: the first exit (today or later) closes yesterday's visit.
        first_exit_side = on_date or after
        carried_in = bool(before) and before[-1].is_enter and bool(first_exit_side) and not first_exit_side[0].is_enter

        on_date_raw = [e for e in ordered if start <= e.timestamp < end]
        if not on_date_raw and not carried_in:
            return DayObservation(work_date=work_date, has_events=False, has_manual_confirmation=has_manual_confirmation)

        entry_count = sum(1 for e in on_date_raw if e.is_enter)
        exit_count = len(on_date_raw) - entry_count

        anomalies: list[str] = []
        remarks: list[str] = []
        intervals: list[tuple[datetime, datetime]] = []
        open_since: Optional[datetime] = start if carried_in else None

        for event in on_date:
            if event.is_enter:
                if open_since is None:
                    open_since = event.timestamp
                else:
                    # Re-fired Enter while on site: the visit keeps its first Enter.
                    remarks.append(f"Repeated Enter at {_hhmm(event.timestamp)} ignored")
            elif open_since is None:
                anomalies.append(f"Exit at {_hhmm(event.timestamp)} without a matching Enter")
            else:
                intervals.append((open_since, event.timestamp))
                open_since = None

        is_open_ended = False
        if open_since is not None:
            closed_later = bool(after) and not after[0].is_enter
            if closed_later:
                intervals.append((open_since, end))
            else:
                is_open_ended = True
                intervals.append((open_since, max(open_since, processing_cutoff(work_date))))

        arrival = intervals[0][0] if intervals else None
        departure = None
        if open_since is None and arrival is not None:
            exits = [e.timestamp for e in on_date if not e.is_enter and e.timestamp >= arrival]
            departure = exits[-1] if exits else None

        if arrival is None:
            anomalies.append("No qualifying Enter event for the day")

        total = sum((b - a for a, b in intervals), timedelta())
        return DayObservation(
            work_date=work_date,
            has_events=True,
            has_manual_confirmation=has_manual_confirmation,
            arrival=arrival,
            departure=departure,
            time_on_site=TimeOnSite.from_duration(total),
            is_open_ended=is_open_ended,
            entry_count=entry_count,
            exit_count=exit_count,
            anomalies=tuple(anomalies),
            remarks=tuple(remarks),
        )

    def has_activity(self, work_date: date, events: Sequence[GeofenceEvent]) -> bool:
        """True when the events put the employee on site at some point of ``work_date``."""

        return self.observe(work_date, events, has_manual_confirmation=False).has_events

    @staticmethod
    def _without_noise(events: Iterable[GeofenceEvent]) -> list[GeofenceEvent]:
        """Sorted stream without noise.

        A noise-flagged Enter that follows an Exit is a real re-entry and is kept.
        """

        kept: list[GeofenceEvent] = []
        for event in sorted(events, key=lambda e: e.timestamp):
            if event.is_noise and not (event.is_enter and kept and not kept[-1].is_enter):
                continue
            kept.append(event)
        return kept

    def _debounce(self, ordered: Sequence[GeofenceEvent]) -> list[GeofenceEvent]:
        """Drop GPS jitter at the geofence boundary.

        Two consecutive events inside the window either repeat (the later one
        is a near-duplicate) or flip state (the pair is a spurious visit, or a
        momentary step outside); both events of a flip are discarded.
        """

        window = self._settings.debounce
        cleaned: list[GeofenceEvent] = []
        for event in ordered:
            if cleaned and event.timestamp - cleaned[-1].timestamp <= window:
                if cleaned[-1].event_type == event.event_type:
                    continue
                cleaned.pop()
                continue
            cleaned.append(event)
        return cleaned

    @staticmethod
    def _check_keys(employee_id, site_id, work_date, events, shift, confirmations) -> None:
        for e in events:
            if e.employee_id != employee_id or e.site_id != site_id:
                raise InvalidInputError(
                    f"Event for employee {e.employee_id}/site {e.site_id} passed for key {employee_id}/{site_id}"
                )
        for c in confirmations:
            if c.employee_id != employee_id or c.site_id != site_id or c.work_date != work_date:
                raise InvalidInputError(
                    f"Photo attendance for {c.employee_id}/{c.site_id} on {c.work_date} passed for key "
                    f"{employee_id}/{site_id} on {work_date}"
                )
        if shift and (shift.employee_id != employee_id or shift.site_id != site_id or shift.work_date != work_date):
            raise InvalidInputError(
                f"Shift for {shift.employee_id}/{shift.site_id} on {shift.work_date} passed for key "
                f"{employee_id}/{site_id} on {work_date}"
            )
