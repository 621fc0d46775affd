from __future__ import annotations

from datetime import timedelta
from typing import Optional

from ...schedules.model import ScheduledShift
from ..model import DayObservation, StatusFlags
from .base import AttendanceStrategy, StatusDecision


class ManualOnlyStrategy(AttendanceStrategy):
    """Presence is known only from site photo attendance."""

    def decide(self, *, observation: DayObservation, shift: Optional[ScheduledShift], grace: timedelta) -> StatusDecision:
        return StatusDecision(flags=StatusFlags(is_manual_only=True), note="No geofence events; confirmed manually")
