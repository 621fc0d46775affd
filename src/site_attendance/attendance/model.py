from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import ensure_utc
from ..core.enums import AttendanceStatus, EventType, TriggerMethod
from ..geo.coordinate import GeoCoordinate
from .time_on_site import TimeOnSite


@dataclass(frozen=True)
class GeofenceEvent:
    """Enter/exit notification produced by the mobile geofencing app."""

    employee_id: int
    site_id: int
    event_type: EventType
    timestamp: datetime
    coordinate: Optional[GeoCoordinate] = None
    trigger_method: TriggerMethod = TriggerMethod.AUTOMATIC
    is_noise: bool = False
    event_id: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))

    @property
    def is_enter(self) -> bool:
        return self.event_type == EventType.ENTER


@dataclass(frozen=True)
class SitePhotoAttendance:
    """Manual, human-confirmed on-site checkpoint (photo and/or signature)."""

    employee_id: int
    site_id: int
    work_date: date
    captured_at: datetime
    has_image: bool = False
    has_signature: bool = False
    coordinate: Optional[GeoCoordinate] = None
    distance_to_site: Optional[Decimal] = None


@dataclass(frozen=True)
class StatusFlags:
    is_late: bool = False
    is_early_departure: bool = False
    is_no_show: bool = False
    is_incomplete: bool = False
    is_manual_only: bool = False

    @property
    def primary(self) -> AttendanceStatus:
        """Display label; Late wins over EarlyDeparture when both apply."""

        if self.is_incomplete:
            return AttendanceStatus.INCOMPLETE_DATA
        if self.is_no_show:
            return AttendanceStatus.NO_SHOW
        if self.is_manual_only:
            return AttendanceStatus.MANUALLY_CONFIRMED_ONLY
        if self.is_late:
            return AttendanceStatus.LATE
        if self.is_early_departure:
            return AttendanceStatus.EARLY_DEPARTURE
        return AttendanceStatus.ON_TIME


@dataclass(frozen=True)
class AttendanceSummary:
    """Thực thể miền (domain): one reconciled day for an employee at a site.

    Produced only by the reconciliation engine; a re-run supersedes it.
    """

    employee_id: int
    site_id: int
    work_date: date
    expected_start: Optional[datetime]
    expected_end: Optional[datetime]
    actual_arrival: Optional[datetime]
    actual_departure: Optional[datetime]
    actual_hours_on_site: TimeOnSite
    variance_hours: Optional[Decimal]
    flags: StatusFlags
    has_manual_confirmation: bool = False
    entry_count: int = 0
    exit_count: int = 0
    is_open_ended: bool = False
    utilization_percent: Optional[Decimal] = None
    anomalies: tuple[str, ...] = field(default_factory=tuple)
    note: Optional[str] = None
    tenant_id: Optional[int] = None

    @property
    def status(self) -> AttendanceStatus:
        return self.flags.primary

    @property
    def is_late(self) -> bool:
        return self.flags.is_late

    @property
    def is_early_departure(self) -> bool:
        return self.flags.is_early_departure

    @property
    def scheduled_hours(self) -> Optional[Decimal]:
        if self.variance_hours is None:
            return None
        return self.actual_hours_on_site.hours - self.variance_hours

    @property
    def key(self) -> tuple:
        return (self.tenant_id, self.employee_id, self.site_id, self.work_date)

    @property
    def reason(self) -> Optional[str]:
        return "; ".join(self.anomalies) if self.anomalies else None


@dataclass(frozen=True)
class AttendanceSummaryRow:
    """Read-model phục vụ báo cáo: a stored summary joined with names."""

    tenant_id: int
    employee_id: int
    employee_name: str
    site_id: int
    site_name: Optional[str]
    work_date: date
    minutes_on_site: int
    scheduled_hours: Optional[Decimal]
    status: AttendanceStatus
    has_manual_confirmation: bool


@dataclass(frozen=True)
class DayObservation:
    """What the geofence stream and manual confirmations say about one day."""

    work_date: date
    has_events: bool
    has_manual_confirmation: bool
    arrival: Optional[datetime] = None
    departure: Optional[datetime] = None
    time_on_site: TimeOnSite = field(default_factory=TimeOnSite.zero)
    is_open_ended: bool = False
    entry_count: int = 0
    exit_count: int = 0
    anomalies: tuple[str, ...] = field(default_factory=tuple)
    remarks: tuple[str, ...] = field(default_factory=tuple)
