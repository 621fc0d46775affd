import pytest

from site_attendance.core.enums import EventType, TriggerMethod
from site_attendance.core.exceptions import ValidationError


@pytest.mark.parametrize("raw", ["Enter", "enter", " ENTER "])
def test_event_type_parse_is_case_insensitive(raw):
    assert EventType.parse(raw) == EventType.ENTER


def test_parse_accepts_members():
    assert TriggerMethod.parse(TriggerMethod.MANUAL) is TriggerMethod.MANUAL


@pytest.mark.parametrize("raw", ["", None, "Leave"])
def test_parse_rejects_unknown_values(raw):
    with pytest.raises(ValidationError):
        EventType.parse(raw)
