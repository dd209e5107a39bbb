"""Calendar helpers for month keys and month windows."""

import calendar
from datetime import date


def last_day(year: int, month: int) -> int:
    """Return the number of days in the given month."""
    return calendar.monthrange(year, month)[1]


def month_key(year: int, month: int) -> date:
    """Return the canonical budget key for a month: its last calendar day."""
    return date(year, month, last_day(year, month))


def month_window(year: int, month: int) -> tuple[date, date]:
    """Return the half-open window ``[first day, first day of next month)``."""
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)  # noqa: PLR2004
    return start, end


def year_bounds(year: int) -> tuple[date, date]:
    """Return the inclusive first and last day of a year."""
    return date(year, 1, 1), date(year, 12, 31)


def clamp_day(year: int, month: int, day: int) -> date:
    """Return ``day`` of the month, clamped to the month's length (31 -> 28/29/30)."""
    return date(year, month, min(day, last_day(year, month)))
