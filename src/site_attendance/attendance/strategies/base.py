from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from ...schedules.model import ScheduledShift
from ..model import DayObservation, StatusFlags


@dataclass(frozen=True)
class StatusDecision:
    flags: StatusFlags
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we classify a reconciled day."""

    @abstractmethod
    def decide(self, *, observation: DayObservation, shift: Optional[ScheduledShift], grace: timedelta) -> StatusDecision:
        raise NotImplementedError
