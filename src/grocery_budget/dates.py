"""Shared whole-day date arithmetic."""

from datetime import date, datetime


def as_date(value: date | datetime | None = None) -> date:
    """Truncate a datetime to its calendar date. None means today."""
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Whole calendar days from start to end (negative if end is earlier)."""
    return (as_date(end) - as_date(start)).days
