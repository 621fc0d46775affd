from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..schedules.model import ScheduledShift
from .model import DayObservation
from .strategies.base import AttendanceStrategy
from .strategies.incomplete_strategy import IncompleteDataStrategy
from .strategies.manual_only_strategy import ManualOnlyStrategy
from .strategies.no_show_strategy import NoShowStrategy
from .strategies.observed_strategy import ObservedStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the classification rule for a reconciled day.

    Returns ``None`` when nothing was expected and nothing happened, in which
    case no summary is emitted.
    """

    def for_day(self, *, observation: DayObservation, shift: Optional[ScheduledShift]) -> Optional[AttendanceStrategy]:
        if not observation.has_events:
            if observation.has_manual_confirmation:
                return ManualOnlyStrategy()
            if shift:
                return NoShowStrategy()
            return None

        if observation.anomalies or observation.arrival is None:
            return IncompleteDataStrategy()
        return ObservedStrategy()
