from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from site_attendance.attendance.model import GeofenceEvent, SitePhotoAttendance
from site_attendance.attendance.reconciliation import ReconciliationEngine, ReconciliationSettings
from site_attendance.attendance.time_on_site import TimeOnSite
from site_attendance.core.enums import AttendanceStatus, EventType
from site_attendance.core.exceptions import InvalidInputError, ValidationError
from site_attendance.schedules.model import ScheduledShift

UTC = timezone.utc
D = date(2026, 3, 2)


def at(h: int, m: int = 0, s: int = 0, day: date = D) -> datetime:
    return datetime(day.year, day.month, day.day, h, m, s, tzinfo=UTC)


def enter(ts: datetime, **kw) -> GeofenceEvent:
    return GeofenceEvent(employee_id=1, site_id=10, event_type=EventType.ENTER, timestamp=ts, **kw)


def exit_(ts: datetime, **kw) -> GeofenceEvent:
    return GeofenceEvent(employee_id=1, site_id=10, event_type=EventType.EXIT, timestamp=ts, **kw)


def shift(start: datetime, end: datetime, day: date = D) -> ScheduledShift:
    return ScheduledShift(employee_id=1, site_id=10, work_date=day, expected_start=start, expected_end=end)


def photo(day: date = D) -> SitePhotoAttendance:
    return SitePhotoAttendance(employee_id=1, site_id=10, work_date=day, captured_at=at(11, day=day), has_image=True)


@pytest.fixture
def engine() -> ReconciliationEngine:
    return ReconciliationEngine()


def test_full_day_inside_grace_is_on_time(engine):
    summary = engine.reconcile(1, 10, D, [enter(at(8, 5)), exit_(at(16, 35))], shift(at(8), at(16, 30)))

    assert summary.status == AttendanceStatus.ON_TIME
    assert summary.actual_arrival == at(8, 5)
    assert summary.actual_departure == at(16, 35)
    assert summary.actual_hours_on_site.hours == Decimal("8.50")
    assert summary.variance_hours == Decimal("0")
    assert summary.utilization_percent == Decimal("100.00")
    assert summary.entry_count == 1 and summary.exit_count == 1
    assert not summary.anomalies


def test_enter_without_exit_is_late_and_open_ended(engine):
    summary = engine.reconcile(1, 10, D, [enter(at(8, 20))], shift(at(8), at(16)))

    assert summary.status == AttendanceStatus.LATE
    assert summary.is_late
    assert summary.actual_departure is None
    assert summary.is_open_ended
    assert summary.actual_hours_on_site == TimeOnSite.from_duration(at(23, 59, 59) - at(8, 20))


def test_scheduled_without_any_signal_is_no_show(engine):
    summary = engine.reconcile(1, 10, D, [], shift(at(8), at(16)))

    assert summary.status == AttendanceStatus.NO_SHOW
    assert summary.actual_hours_on_site == TimeOnSite.zero()
    assert summary.variance_hours == Decimal("-8.00")
    assert summary.actual_arrival is None


def test_manual_confirmation_without_schedule(engine):
    summary = engine.reconcile(1, 10, D, confirmations=[photo()])

    assert summary.status == AttendanceStatus.MANUALLY_CONFIRMED_ONLY
    assert summary.has_manual_confirmation
    assert summary.variance_hours is None
    assert summary.scheduled_hours is None


def test_manual_confirmation_beats_no_show(engine):
    summary = engine.reconcile(1, 10, D, shift=shift(at(8), at(16)), confirmations=[photo()])

    assert summary.status == AttendanceStatus.MANUALLY_CONFIRMED_ONLY
    assert summary.scheduled_hours == Decimal("8.00")


def test_nothing_expected_and_nothing_happened(engine):
    assert engine.reconcile(1, 10, D) is None


def test_unscheduled_visit_has_no_variance(engine):
    summary = engine.reconcile(1, 10, D, [enter(at(9)), exit_(at(12))])

    assert summary.status == AttendanceStatus.ON_TIME
    assert summary.variance_hours is None
    assert summary.expected_start is None
    assert summary.note == "Unscheduled visit"
    # 3h against the default 7.5h day
    assert summary.utilization_percent == Decimal("40.00")


def test_flip_inside_debounce_window_is_discarded(engine):
    events = [enter(at(8)), exit_(at(8, 2)), enter(at(9)), exit_(at(17))]

    summary = engine.reconcile(1, 10, D, events, shift(at(9), at(17)))

    assert summary.actual_arrival == at(9)
    assert summary.actual_hours_on_site.hours == Decimal("8.00")


def test_flip_just_outside_debounce_window_is_kept(engine):
    events = [enter(at(8)), exit_(at(8, 2, 1)), enter(at(9)), exit_(at(17))]

    summary = engine.reconcile(1, 10, D, events, shift(at(9), at(17)))

    assert summary.actual_arrival == at(8)
    assert summary.actual_hours_on_site.total_minutes == 482


def test_near_duplicate_enter_is_dropped(engine):
    events = [enter(at(8)), enter(at(8, 1)), exit_(at(16))]

    summary = engine.reconcile(1, 10, D, events, shift(at(8), at(16)))

    assert summary.status == AttendanceStatus.ON_TIME
    assert summary.actual_hours_on_site.hours == Decimal("8.00")
    assert summary.entry_count == 2


def test_brief_step_outside_is_bridged(engine):
    events = [enter(at(8)), exit_(at(12)), enter(at(12, 1)), exit_(at(16))]

    summary = engine.reconcile(1, 10, D, events, shift(at(8), at(16)))

    assert summary.actual_hours_on_site.hours == Decimal("8.00")
    assert summary.actual_departure == at(16)


def test_lunch_break_is_not_counted(engine):
    events = [enter(at(8)), exit_(at(12)), enter(at(13)), exit_(at(17))]

    summary = engine.reconcile(1, 10, D, events, shift(at(8), at(17)))

    assert summary.actual_hours_on_site.hours == Decimal("8.00")
    assert summary.variance_hours == Decimal("-1.00")
    assert summary.actual_departure == at(17)


def test_grace_boundary_is_on_time(engine):
    summary = engine.reconcile(1, 10, D, [enter(at(8, 10)), exit_(at(16))], shift(at(8), at(16)))
    assert summary.status == AttendanceStatus.ON_TIME


def test_one_second_past_grace_is_late(engine):
    summary = engine.reconcile(1, 10, D, [enter(at(8, 10, 1)), exit_(at(16))], shift(at(8), at(16)))
    assert summary.status == AttendanceStatus.LATE


def test_early_departure(engine):
    summary = engine.reconcile(1, 10, D, [enter(at(8)), exit_(at(15, 30))], shift(at(8), at(16)))

    assert summary.status == AttendanceStatus.EARLY_DEPARTURE
    assert summary.is_early_departure
    assert not summary.is_late


def test_late_and_early_keeps_both_flags(engine):
    summary = engine.reconcile(1, 10, D, [enter(at(8, 30)), exit_(at(15))], shift(at(8), at(16)))

    assert summary.is_late and summary.is_early_departure
    assert summary.status == AttendanceStatus.LATE


def test_visit_across_midnight_is_split_between_days(engine):
    next_day = D + timedelta(days=1)
    events = [enter(at(22)), exit_(at(2, day=next_day))]

    first = engine.reconcile(1, 10, D, events)
    second = engine.reconcile(1, 10, next_day, events)

    assert first.actual_hours_on_site.total_minutes == 120
    assert first.actual_departure is None
    assert not first.is_open_ended
    assert second.actual_hours_on_site.total_minutes == 120
    assert second.actual_arrival == at(0, day=next_day)
    assert second.actual_departure == at(2, day=next_day)
    assert second.status == AttendanceStatus.ON_TIME


def test_noise_events_are_ignored(engine):
    events = [enter(at(8)), enter(at(12), is_noise=True), exit_(at(16))]

    summary = engine.reconcile(1, 10, D, events, shift(at(8), at(16)))

    assert summary.status == AttendanceStatus.ON_TIME
    assert summary.entry_count == 1
    assert summary.actual_hours_on_site.hours == Decimal("8.00")


def test_exit_without_enter_is_incomplete(engine):
    summary = engine.reconcile(1, 10, D, [exit_(at(9))], shift(at(8), at(16)))

    assert summary.status == AttendanceStatus.INCOMPLETE_DATA
    assert summary.actual_hours_on_site == TimeOnSite.zero()
    assert summary.reason
    assert "without a matching Enter" in summary.note


def test_repeated_enter_keeps_the_first_one(engine):
    events = [enter(at(8)), enter(at(10)), exit_(at(16))]

    summary = engine.reconcile(1, 10, D, events, shift(at(8), at(16)))

    assert summary.status == AttendanceStatus.ON_TIME
    assert summary.actual_hours_on_site.hours == Decimal("8.00")
    assert summary.anomalies == ()
    assert "Repeated Enter" in summary.note


def test_events_for_another_employee_are_rejected(engine):
    other = GeofenceEvent(employee_id=2, site_id=10, event_type=EventType.ENTER, timestamp=at(8))

    with pytest.raises(InvalidInputError):
        engine.reconcile(1, 10, D, [other])


def test_shift_for_another_day_is_rejected(engine):
    with pytest.raises(InvalidInputError):
        engine.reconcile(1, 10, D, shift=shift(at(8, day=D + timedelta(days=1)), at(16, day=D + timedelta(days=1)), D + timedelta(days=1)))


def test_reconcile_is_deterministic(engine):
    events = [exit_(at(16)), enter(at(8))]
    a = engine.reconcile(1, 10, D, events, shift(at(8), at(16)), tenant_id=3)
    b = engine.reconcile(1, 10, D, list(reversed(events)), shift(at(8), at(16)), tenant_id=3)

    assert a == b
    assert a.key == (3, 1, 10, D)


def test_custom_grace_and_debounce():
    engine = ReconciliationEngine(ReconciliationSettings(debounce_minutes=0, grace_minutes=0))

    summary = engine.reconcile(1, 10, D, [enter(at(8, 1)), exit_(at(16))], shift(at(8), at(16)))

    assert summary.status == AttendanceStatus.LATE


def test_negative_settings_are_rejected():
    with pytest.raises(ValidationError):
        ReconciliationSettings(grace_minutes=-1)


def test_lunch_break_pairs_are_summed(engine):
    events = [enter(at(8)), exit_(at(12)), enter(at(12, 30)), exit_(at(17))]

    summary = engine.reconcile(1, 10, D, events, shift(at(8), at(17)))

    assert summary.status == AttendanceStatus.ON_TIME
    assert summary.actual_hours_on_site.hours == Decimal("8.50")
    assert summary.actual_departure == at(17)


def test_gps_refire_just_outside_debounce_window_is_tolerated(engine):
    events = [enter(at(8)), enter(at(8, 5)), exit_(at(17))]

    summary = engine.reconcile(1, 10, D, events, shift(at(8), at(17)))

    assert summary.status == AttendanceStatus.ON_TIME
    assert summary.actual_arrival == at(8)
    assert summary.actual_hours_on_site.hours == Decimal("9.00")
    assert not summary.flags.is_incomplete


def test_visit_covering_the_whole_day(engine):
    events = [enter(at(22, day=D - timedelta(days=1))), exit_(at(2, day=D + timedelta(days=1)))]

    summary = engine.reconcile(1, 10, D, events, shift(at(8), at(16)))

    assert summary.status == AttendanceStatus.ON_TIME
    assert summary.actual_arrival == at(0)
    assert summary.actual_departure is None
    assert summary.actual_hours_on_site.total_minutes == 24 * 60
    assert not summary.is_open_ended


def test_visit_still_open_from_yesterday_is_not_counted(engine):
    events = [enter(at(22, day=D - timedelta(days=1)))]

    summary = engine.reconcile(1, 10, D, events, shift(at(8), at(16)))

    assert summary.status == AttendanceStatus.NO_SHOW


def test_noise_flagged_reentry_after_exit_is_kept(engine):
    events = [enter(at(8)), exit_(at(12)), enter(at(12, 30), is_noise=True), exit_(at(17))]

    summary = engine.reconcile(1, 10, D, events, shift(at(8), at(17)))

    assert summary.status == AttendanceStatus.ON_TIME
    assert summary.actual_hours_on_site.hours == Decimal("8.50")


def test_many_anomalies_are_all_kept_in_the_note(engine):
    events = [exit_(at(h)) for h in range(6, 18)]

    summary = engine.reconcile(1, 10, D, events, shift(at(8), at(16)))

    assert summary.status == AttendanceStatus.INCOMPLETE_DATA
    assert len(summary.anomalies) == 13
    assert len(summary.note) > 500
