from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceSummary, AttendanceSummaryRow, GeofenceEvent, SitePhotoAttendance


class GeofenceEventRepository(Protocol):
    def list_between(self, *, tenant_id: int, start: datetime, end: datetime) -> Sequence[GeofenceEvent]:
        """Events with ``start <= timestamp < end``, noise included (flagged)."""

        raise NotImplementedError

    def first_entry_of_day(
        self, *, tenant_id: int, employee_id: int, site_id: int, work_date: date
    ) -> Optional[GeofenceEvent]:
        raise NotImplementedError

    def last_event_before(
        self, *, tenant_id: int, employee_id: int, site_id: int, at: datetime
    ) -> Optional[GeofenceEvent]:
        """Latest non-noise event of the same day strictly before ``at``."""

        raise NotImplementedError

    def add(self, *, tenant_id: int, event: GeofenceEvent) -> int:
        raise NotImplementedError


class SitePhotoAttendanceRepository(Protocol):
    def list_for_date(self, *, tenant_id: int, work_date: date) -> Sequence[SitePhotoAttendance]:
        raise NotImplementedError

    def count_by_employee(self, *, tenant_id: int, start: date, end: date) -> dict[int, int]:
        raise NotImplementedError


class AttendanceSummaryRepository(Protocol):
    def upsert(self, summary: AttendanceSummary) -> None:
        """Create or replace the summary keyed by (tenant, employee, site, date).

        Raises ``TransientStorageError`` when the write may succeed on retry.
        """

        raise NotImplementedError

    def list_range(
        self,
        *,
        tenant_id: int,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceSummaryRow]:
        raise NotImplementedError
