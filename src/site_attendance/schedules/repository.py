from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import ScheduledShift


class ScheduleRepository(Protocol):
    """Roster source: zero or one shift per employee/site/day."""

    def list_for_date(self, *, tenant_id: int, work_date: date) -> Sequence[ScheduledShift]:
        raise NotImplementedError
