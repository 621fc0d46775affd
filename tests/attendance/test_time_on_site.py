from datetime import timedelta
from decimal import Decimal

import pytest

from site_attendance.attendance.time_on_site import TimeOnSite
from site_attendance.core.exceptions import NegativeDurationError, ValidationError


def test_hours_are_rounded_to_two_places():
    assert TimeOnSite(90).hours == Decimal("1.50")
    assert TimeOnSite(1).hours == Decimal("0.02")
    assert TimeOnSite(0).hours == Decimal("0.00")


def test_negative_minutes_are_rejected():
    with pytest.raises(NegativeDurationError):
        TimeOnSite(-1)


def test_non_integer_minutes_are_rejected():
    with pytest.raises(ValidationError):
        TimeOnSite(1.5)
    with pytest.raises(ValidationError):
        TimeOnSite(True)


def test_from_duration_floors_to_whole_minutes():
    assert TimeOnSite.from_duration(timedelta(minutes=2, seconds=59)).total_minutes == 2


def test_addition_and_ordering():
    assert TimeOnSite(30) + TimeOnSite(45) == TimeOnSite(75)
    assert TimeOnSite(10) < TimeOnSite(11)
    assert max(TimeOnSite(5), TimeOnSite(50)) == TimeOnSite(50)
    assert TimeOnSite.zero() == TimeOnSite(0)
