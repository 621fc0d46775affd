from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

import pytest

from site_attendance.attendance.model import GeofenceEvent
from site_attendance.attendance.reconciliation import ReconciliationEngine
from site_attendance.attendance.service import AttendanceEventService
from site_attendance.core.enums import AttendanceStatus, EventType, TriggerMethod
from site_attendance.core.exceptions import ValidationError
from site_attendance.schedules.model import ScheduledShift
from site_attendance.tenants.model import AttendanceSettings


class InMemoryEvents:
    def __init__(self):
        self.stored: list[tuple[int, GeofenceEvent]] = []

    def first_entry_of_day(self, *, tenant_id: int, employee_id: int, site_id: int, work_date: date) -> Optional[GeofenceEvent]:
        for t, e in self.stored:
            if (t, e.employee_id, e.site_id, e.timestamp.date()) == (tenant_id, employee_id, site_id, work_date) and e.is_enter:
                return e
        return None

    def last_event_before(self, *, tenant_id: int, employee_id: int, site_id: int, at: datetime) -> Optional[GeofenceEvent]:
        earlier = [
            e
            for t, e in self.stored
            if (t, e.employee_id, e.site_id, e.timestamp.date()) == (tenant_id, employee_id, site_id, at.date())
            and e.timestamp < at
            and not e.is_noise
        ]
        return max(earlier, key=lambda e: e.timestamp) if earlier else None

    def add(self, *, tenant_id: int, event: GeofenceEvent) -> int:
        self.stored.append((tenant_id, event))
        return len(self.stored)


class InMemorySettings:
    def __init__(self, by_tenant: dict[int, AttendanceSettings]):
        self.by_tenant = by_tenant

    def get_for_tenant(self, tenant_id: int) -> Optional[AttendanceSettings]:
        return self.by_tenant.get(tenant_id)


def _payload(event_type="Enter", ts="2026-03-02T08:00:00Z", lat="0", lng="0", **extra):
    payload = {"employee_id": "1", "site_id": 10, "event_type": event_type, "timestamp": ts, "latitude": lat, "longitude": lng}
    payload.update(extra)
    return payload


def test_record_event_parses_payload():
    repo = InMemoryEvents()
    event = AttendanceEventService(repo).record_event(5, _payload(event_type="enter", trigger_method="MANUAL"))

    assert event.event_id == 1
    assert event.employee_id == 1
    assert event.event_type == EventType.ENTER
    assert event.trigger_method == TriggerMethod.MANUAL
    assert event.timestamp == datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)
    assert not event.is_noise


def test_reentry_near_first_entry_is_flagged_as_noise():
    repo = InMemoryEvents()
    svc = AttendanceEventService(repo)
    svc.record_event(5, _payload())

    again = svc.record_event(5, _payload(ts="2026-03-02T10:00:00Z", lat="0.0005"))

    assert again.is_noise
    assert repo.stored[-1][1].is_noise


def test_noise_threshold_comes_from_tenant_settings():
    repo = InMemoryEvents()
    settings = InMemorySettings({5: AttendanceSettings(tenant_id=5, noise_threshold_meters=10)})
    svc = AttendanceEventService(repo, settings)
    svc.record_event(5, _payload())

    again = svc.record_event(5, _payload(ts="2026-03-02T10:00:00Z", lat="0.0005"))

    assert not again.is_noise


@pytest.mark.parametrize(
    "payload",
    [
        _payload(event_type="Teleport"),
        _payload(ts="yesterday"),
        _payload(ts=None),
        _payload(employee_id="abc"),
        _payload(lat="95"),
        "not-an-object",
    ],
)
def test_invalid_payloads_are_rejected(payload):
    repo = InMemoryEvents()
    with pytest.raises(ValidationError):
        AttendanceEventService(repo).record_event(5, payload)
    assert repo.stored == []


def test_batch_is_stored_in_time_order():
    repo = InMemoryEvents()
    events = AttendanceEventService(repo).record_events_batch(
        5,
        [
            _payload(event_type="Exit", ts="2026-03-02T16:00:00Z"),
            _payload(event_type="Enter", ts="2026-03-02T08:00:00+00:00"),
        ],
    )

    assert [e.event_type for e in events] == [EventType.ENTER, EventType.EXIT]
    assert [e.event_id for e in events] == [1, 2]


def test_batch_with_one_bad_event_stores_nothing():
    repo = InMemoryEvents()
    with pytest.raises(ValidationError):
        AttendanceEventService(repo).record_events_batch(5, [_payload(), _payload(event_type="?")])
    assert repo.stored == []


def test_lunch_break_reentry_is_not_noise_and_reconciles():
    repo = InMemoryEvents()
    svc = AttendanceEventService(repo)
    for event_type, ts in [
        ("Enter", "2026-03-02T08:00:00Z"),
        ("Exit", "2026-03-02T12:00:00Z"),
        ("Enter", "2026-03-02T12:30:00Z"),
        ("Exit", "2026-03-02T17:00:00Z"),
    ]:
        svc.record_event(5, _payload(event_type=event_type, ts=ts))

    stored = [e for _, e in repo.stored]
    shift = ScheduledShift(
        employee_id=1,
        site_id=10,
        work_date=date(2026, 3, 2),
        expected_start=datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc),
        expected_end=datetime(2026, 3, 2, 17, 0, tzinfo=timezone.utc),
    )
    summary = ReconciliationEngine().reconcile(1, 10, date(2026, 3, 2), stored, shift)

    assert [e.is_noise for e in stored] == [False, False, False, False]
    assert summary.status == AttendanceStatus.ON_TIME
    assert summary.actual_hours_on_site.hours == Decimal("8.50")
