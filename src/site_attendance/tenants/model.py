from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..attendance.reconciliation import ReconciliationSettings
from ..core.constants import (
    DEFAULT_DEBOUNCE_MINUTES,
    DEFAULT_EXPECTED_HOURS_PER_DAY,
    DEFAULT_GEOFENCE_RADIUS_METERS,
    DEFAULT_GRACE_MINUTES,
    DEFAULT_NOISE_THRESHOLD_METERS,
)


@dataclass(frozen=True)
class Tenant:
    tenant_id: int
    name: str
    is_active: bool = True


@dataclass(frozen=True)
class AttendanceSettings:
    """Per-tenant attendance rules. A tenant without a settings row gets the defaults."""

    tenant_id: int
    expected_hours_per_day: Decimal = DEFAULT_EXPECTED_HOURS_PER_DAY
    late_threshold_minutes: int = DEFAULT_GRACE_MINUTES
    debounce_minutes: int = DEFAULT_DEBOUNCE_MINUTES
    geofence_radius_meters: int = DEFAULT_GEOFENCE_RADIUS_METERS
    noise_threshold_meters: int = DEFAULT_NOISE_THRESHOLD_METERS
    include_saturday: bool = False
    include_sunday: bool = False

    @classmethod
    def defaults(cls, tenant_id: int) -> "AttendanceSettings":
        return cls(tenant_id=tenant_id)

    def to_reconciliation_settings(self) -> ReconciliationSettings:
        return ReconciliationSettings(
            debounce_minutes=self.debounce_minutes,
            grace_minutes=self.late_threshold_minutes,
            expected_hours_per_day=self.expected_hours_per_day,
        )


@dataclass(frozen=True)
class BankHoliday:
    tenant_id: int
    holiday_date: date
    name: Optional[str] = None
