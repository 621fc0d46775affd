from __future__ import annotations

from datetime import timedelta
from typing import Optional

from ...schedules.model import ScheduledShift
from ..model import DayObservation, StatusFlags
from .base import AttendanceStrategy, StatusDecision


class ObservedStrategy(AttendanceStrategy):
    """GPS data is consistent: compare it with the roster, if any."""

    def decide(self, *, observation: DayObservation, shift: Optional[ScheduledShift], grace: timedelta) -> StatusDecision:
        if not shift:
            return StatusDecision(flags=StatusFlags(), note="Unscheduled visit")

        is_late = observation.arrival is not None and observation.arrival > shift.expected_start + grace
        is_early = observation.departure is not None and observation.departure < shift.expected_end - grace
        return StatusDecision(flags=StatusFlags(is_late=is_late, is_early_departure=is_early))
