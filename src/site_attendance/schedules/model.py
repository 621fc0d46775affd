from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from ..common.datetime_utils import ensure_utc
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ScheduledShift:
    """Rostered time for one employee at one site on one day."""

    employee_id: int
    site_id: int
    work_date: date
    expected_start: datetime
    expected_end: datetime

    def __post_init__(self):
        object.__setattr__(self, "expected_start", ensure_utc(self.expected_start))
        object.__setattr__(self, "expected_end", ensure_utc(self.expected_end))
        if self.expected_end <= self.expected_start:
            raise ValidationError("Shift end must be after shift start")

    @property
    def scheduled_hours(self) -> Decimal:
        seconds = Decimal(int((self.expected_end - self.expected_start).total_seconds()))
        return (seconds / Decimal(3600)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
