from __future__ import annotations

from datetime import timedelta
from typing import Optional

from ...schedules.model import ScheduledShift
from ..model import DayObservation, StatusFlags
from .base import AttendanceStrategy, StatusDecision


class IncompleteDataStrategy(AttendanceStrategy):
    """Events exist but do not describe a consistent visit."""

    def decide(self, *, observation: DayObservation, shift: Optional[ScheduledShift], grace: timedelta) -> StatusDecision:
        note = "; ".join(observation.anomalies) or "Inconsistent geofence events"
        return StatusDecision(flags=StatusFlags(is_incomplete=True), note=note)
