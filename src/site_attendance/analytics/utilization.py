from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ..core.enums import PerformanceBand


def utilization_percent(actual_hours, expected_hours) -> Decimal:
    """Actual over expected hours as a percentage (0 when nothing was expected)."""

    expected = Decimal(str(expected_hours))
    if expected <= 0:
        return Decimal("0.00")
    actual = Decimal(str(actual_hours))
    return (actual / expected * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def performance_band(utilization) -> PerformanceBand:
    value = Decimal(str(utilization))
    if value >= 90:
        return PerformanceBand.EXCELLENT
    if value >= 75:
        return PerformanceBand.GOOD
    if value > 0:
        return PerformanceBand.BELOW_TARGET
    return PerformanceBand.ABSENT
