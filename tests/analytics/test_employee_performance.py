from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from site_attendance.analytics.service import AttendanceAnalyticsService
from site_attendance.attendance.model import AttendanceSummaryRow
from site_attendance.core.enums import AttendanceStatus, PerformanceBand
from site_attendance.core.exceptions import ValidationError

START, END = date(2026, 3, 2), date(2026, 3, 6)


def _row(employee_id, name, day, minutes, scheduled, status=AttendanceStatus.ON_TIME):
    return AttendanceSummaryRow(
        tenant_id=1,
        employee_id=employee_id,
        employee_name=name,
        site_id=10,
        site_name="Depot",
        work_date=day,
        minutes_on_site=minutes,
        scheduled_hours=scheduled,
        status=status,
        has_manual_confirmation=False,
    )


class InMemorySummaryRows:
    def __init__(self, rows):
        self.rows = rows

    def list_range(self, *, tenant_id, start, end, employee_id=None):
        return [r for r in self.rows if start <= r.work_date <= end]


class InMemoryPhotoCounts:
    def count_by_employee(self, *, tenant_id, start, end):
        return {2: 3}


class InMemoryHolidays:
    def list_dates(self, *, tenant_id, start, end):
        return [date(2026, 3, 6)]


def _service(rows):
    return AttendanceAnalyticsService(InMemorySummaryRows(rows), InMemoryPhotoCounts(), holidays=InMemoryHolidays())


def test_employee_performance_aggregates_and_sorts():
    rows = [
        _row(1, "Ann", date(2026, 3, 2), 480, Decimal("8.00")),
        _row(1, "Ann", date(2026, 3, 3), 0, Decimal("8.00"), AttendanceStatus.NO_SHOW),
        _row(2, "Bob", date(2026, 3, 2), 450, None),
        _row(2, "Bob", date(2026, 3, 3), 450, None, AttendanceStatus.MANUALLY_CONFIRMED_ONLY),
    ]

    result = _service(rows).employee_performance(1, START, END)
    by_id = {p.employee_id: p for p in result}
    ann, bob = by_id[1], by_id[2]

    assert [p.employee_id for p in result] == [2, 1]

    assert ann.total_hours == Decimal("8.00")
    assert ann.expected_hours == Decimal("16.00")
    assert ann.utilization_percent == Decimal("50.00")
    assert ann.band == PerformanceBand.BELOW_TARGET
    assert ann.days_present == 1
    # Mon..Thu are working days, Fri is a bank holiday
    assert ann.days_absent == 3
    assert ann.spa_count == 0

    assert bob.expected_hours == Decimal("15.0")
    assert bob.utilization_percent == Decimal("100.00")
    assert bob.band == PerformanceBand.EXCELLENT
    assert bob.spa_count == 3
    assert bob.to_dict()["status"] == "Excellent"


def test_employee_performance_rejects_inverted_range():
    with pytest.raises(ValidationError):
        _service([]).employee_performance(1, END, START)
