from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (a trailing ``Z`` is accepted) into UTC."""
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(raw))


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def day_start(work_date: date) -> datetime:
    return datetime.combine(work_date, time.min, tzinfo=timezone.utc)


def day_end(work_date: date) -> datetime:
    """Exclusive end of the day (next midnight)."""
    return day_start(work_date) + timedelta(days=1)


def processing_cutoff(work_date: date) -> datetime:
    """Cutoff used for employees still on site when the day is processed."""
    return datetime.combine(work_date, time(23, 59, 59), tzinfo=timezone.utc)


def utc_today() -> date:
    """Current UTC date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc).date()
