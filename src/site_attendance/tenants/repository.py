from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceSettings, Tenant


class TenantRepository(Protocol):
    def list_active(self) -> Sequence[Tenant]:
        raise NotImplementedError


class AttendanceSettingsRepository(Protocol):
    def get_for_tenant(self, tenant_id: int) -> Optional[AttendanceSettings]:
        raise NotImplementedError


class BankHolidayRepository(Protocol):
    def list_dates(self, *, tenant_id: int, start: date, end: date) -> Sequence[date]:
        raise NotImplementedError
