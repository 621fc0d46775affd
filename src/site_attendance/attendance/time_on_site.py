from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from functools import total_ordering

from ..core.exceptions import NegativeDurationError, ValidationError

_TWO_PLACES = Decimal("0.01")


@total_ordering
@dataclass(frozen=True, eq=False)
class TimeOnSite:
    """Whole-minute duration spent on site."""

    total_minutes: int

    def __post_init__(self):
        if isinstance(self.total_minutes, bool) or not isinstance(self.total_minutes, int):
            raise ValidationError("total_minutes must be an integer")
        if self.total_minutes < 0:
            raise NegativeDurationError(f"Duration cannot be negative: {self.total_minutes} minutes")

    @property
    def hours(self) -> Decimal:
        return (Decimal(self.total_minutes) / Decimal(60)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)

    @classmethod
    def zero(cls) -> "TimeOnSite":
        return cls(0)

    @classmethod
    def from_duration(cls, duration: timedelta) -> "TimeOnSite":
        return cls(int(duration.total_seconds() // 60))

    def __add__(self, other: "TimeOnSite") -> "TimeOnSite":
        if not isinstance(other, TimeOnSite):
            return NotImplemented
        return TimeOnSite(self.total_minutes + other.total_minutes)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TimeOnSite):
            return NotImplemented
        return self.total_minutes == other.total_minutes

    def __lt__(self, other: "TimeOnSite") -> bool:
        if not isinstance(other, TimeOnSite):
            return NotImplemented
        return self.total_minutes < other.total_minutes

    def __hash__(self) -> int:
        return hash(self.total_minutes)
