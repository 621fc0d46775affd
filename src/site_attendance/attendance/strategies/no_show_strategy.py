from __future__ import annotations

from datetime import timedelta
from typing import Optional

from ...schedules.model import ScheduledShift
from ..model import DayObservation, StatusFlags
from .base import AttendanceStrategy, StatusDecision


class NoShowStrategy(AttendanceStrategy):
    """Rostered, but neither GPS nor a manual confirmation saw the employee."""

    def decide(self, *, observation: DayObservation, shift: Optional[ScheduledShift], grace: timedelta) -> StatusDecision:
        return StatusDecision(flags=StatusFlags(is_no_show=True))
