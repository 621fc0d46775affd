from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..attendance.reconciliation import ReconciliationEngine
from ..tenants.model import AttendanceSettings


@dataclass(frozen=True)
class TenantContext:
    """Everything one tenant's run needs, passed explicitly through the batch."""

    tenant_id: int
    work_date: date
    settings: AttendanceSettings
    engine: ReconciliationEngine


@dataclass(frozen=True)
class BatchFailure:
    tenant_id: int
    employee_id: Optional[int]
    site_id: Optional[int]
    reason: str

    def to_dict(self) -> dict:
        return {
            "tenant_id": self.tenant_id,
            "employee_id": self.employee_id,
            "site_id": self.site_id,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class PersistOutcome:
    ok: bool
    attempts: int
    error: Optional[str] = None


@dataclass(frozen=True)
class TenantRunResult:
    tenant_id: int
    processed_count: int = 0
    skipped_count: int = 0
    failures: tuple[BatchFailure, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class BatchResult:
    work_date: date
    processed_count: int = 0
    skipped_count: int = 0
    failures: tuple[BatchFailure, ...] = field(default_factory=tuple)
    cancelled: bool = False

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    def to_dict(self) -> dict:
        return {
            "work_date": self.work_date.strftime("%Y-%m-%d"),
            "processed_count": self.processed_count,
            "failed_count": self.failed_count,
            "skipped_count": self.skipped_count,
            "cancelled": self.cancelled,
            "failures": [f.to_dict() for f in self.failures],
        }
