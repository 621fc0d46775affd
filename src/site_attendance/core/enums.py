from __future__ import annotations

from enum import Enum

from .exceptions import ValidationError


class _ParsableEnum(str, Enum):
    @classmethod
    def parse(cls, value):
        """Parse a raw string from an external source (case-insensitive)."""

        if isinstance(value, cls):
            return value
        raw = str(value or "").strip()
        for member in cls:
            if raw.lower() in (member.value.lower(), member.name.lower()):
                return member
        raise ValidationError(f"Invalid {cls.__name__}: {value!r}")


class EventType(_ParsableEnum):
    """Geofence transition reported by the mobile app."""

    ENTER = "Enter"
    EXIT = "Exit"


class TriggerMethod(_ParsableEnum):
    AUTOMATIC = "Automatic"
    MANUAL = "Manual"


class AttendanceStatus(str, Enum):
    """Primary (display) status of a daily attendance summary."""

    ON_TIME = "OnTime"
    LATE = "Late"
    EARLY_DEPARTURE = "EarlyDeparture"
    NO_SHOW = "NoShow"
    INCOMPLETE_DATA = "IncompleteData"
    MANUALLY_CONFIRMED_ONLY = "ManuallyConfirmedOnly"


class PerformanceBand(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    BELOW_TARGET = "Below Target"
    ABSENT = "Absent"
