from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta


@dataclass(frozen=True)
class WorkingDayCalendar:
    """Weekends are off unless the tenant works them; bank holidays are always off."""

    include_saturday: bool = False
    include_sunday: bool = False
    bank_holidays: frozenset[date] = field(default_factory=frozenset)

    def is_working_day(self, day: date) -> bool:
        weekday = day.weekday()
        if weekday == 5 and not self.include_saturday:
            return False
        if weekday == 6 and not self.include_sunday:
            return False
        return day not in self.bank_holidays

    def working_days(self, start: date, end: date) -> int:
        count = 0
        current = start
        while current <= end:
            if self.is_working_day(current):
                count += 1
            current += timedelta(days=1)
        return count
