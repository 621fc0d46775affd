from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..attendance.repository import AttendanceSummaryRepository, SitePhotoAttendanceRepository
from ..core.enums import AttendanceStatus, PerformanceBand
from ..core.exceptions import ValidationError
from ..tenants.model import AttendanceSettings
from ..tenants.repository import AttendanceSettingsRepository, BankHolidayRepository
from .calendar import WorkingDayCalendar
from .utilization import performance_band, utilization_percent


@dataclass(frozen=True)
class EmployeePerformance:
    employee_id: int
    employee_name: str
    total_hours: Decimal
    expected_hours: Decimal
    utilization_percent: Decimal
    variance_hours: Decimal
    band: PerformanceBand
    days_present: int
    days_absent: int
    spa_count: int

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "total_hours": str(self.total_hours),
            "expected_hours": str(self.expected_hours),
            "utilization_percent": str(self.utilization_percent),
            "variance_hours": str(self.variance_hours),
            "status": self.band.value,
            "days_present": self.days_present,
            "days_absent": self.days_absent,
            "spa_count": self.spa_count,
        }


class AttendanceAnalyticsService:
    def __init__(
        self,
        summaries: AttendanceSummaryRepository,
        confirmations: SitePhotoAttendanceRepository,
        settings: AttendanceSettingsRepository | None = None,
        holidays: BankHolidayRepository | None = None,
    ):
        self._summaries = summaries
        self._confirmations = confirmations
        self._settings = settings
        self._holidays = holidays

    def calendar_for(self, tenant_id: int, start: date, end: date, settings: Optional[AttendanceSettings] = None) -> WorkingDayCalendar:
        settings = settings or self._tenant_settings(tenant_id)
        holidays = self._holidays.list_dates(tenant_id=tenant_id, start=start, end=end) if self._holidays else ()
        return WorkingDayCalendar(
            include_saturday=settings.include_saturday,
            include_sunday=settings.include_sunday,
            bank_holidays=frozenset(holidays),
        )

    def employee_performance(self, tenant_id: int, start: date, end: date) -> list[EmployeePerformance]:
        if start > end:
            raise ValidationError("start must be before or equal to end")

        settings = self._tenant_settings(tenant_id)
        working_days = self.calendar_for(tenant_id, start, end, settings).working_days(start, end)
        spa_counts = self._confirmations.count_by_employee(tenant_id=tenant_id, start=start, end=end)

        grouped = defaultdict(list)
        for row in self._summaries.list_range(tenant_id=tenant_id, start=start, end=end):
            grouped[(row.employee_id, row.employee_name)].append(row)

        out = []
        for (employee_id, employee_name), rows in grouped.items():
            total_minutes = sum(r.minutes_on_site for r in rows)
            total_hours = (Decimal(total_minutes) / Decimal(60)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
            expected = sum(
                (r.scheduled_hours if r.scheduled_hours is not None else settings.expected_hours_per_day for r in rows),
                Decimal("0"),
            )
            utilization = utilization_percent(total_hours, expected)
            days_present = len({r.work_date for r in rows if r.status != AttendanceStatus.NO_SHOW})

            out.append(
                EmployeePerformance(
                    employee_id=employee_id,
                    employee_name=employee_name,
                    total_hours=total_hours,
                    expected_hours=expected,
                    utilization_percent=utilization,
                    variance_hours=total_hours - expected,
                    band=performance_band(utilization),
                    days_present=days_present,
                    days_absent=max(working_days - days_present, 0),
                    spa_count=spa_counts.get(employee_id, 0),
                )
            )

        out.sort(key=lambda p: p.utilization_percent, reverse=True)
        return out

    def _tenant_settings(self, tenant_id: int) -> AttendanceSettings:
        settings = self._settings.get_for_tenant(tenant_id) if self._settings else None
        return settings or AttendanceSettings.defaults(tenant_id)
