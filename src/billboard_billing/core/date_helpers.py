"""Date parsing and day-boundary helpers for billing calculations."""

import math
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

from dateutil.relativedelta import relativedelta

SECONDS_PER_DAY = 24 * 60 * 60

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
)


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a raw value into a date.

    Accepts ``date``/``datetime`` instances, ISO strings (with or without a
    time part or timezone suffix) and ``dd/mm/YYYY`` strings.

    Args:
        value: Raw value from an already-fetched record

    Returns:
        Parsed date, or None if the value is empty or unparseable

    Examples:
        >>> parse_date("2024-12-15")
        date(2024, 12, 15)
        >>> parse_date("2024-12-15T10:30:00+00:00")
        date(2024, 12, 15)
        >>> parse_date("not a date") is None
        True
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    return None


def as_date(today: date | datetime | None) -> date:
    """
    Normalize a caller-supplied "now" to a calendar date.

    None reads the system clock. The lifecycle and overdue services accept
    ``today=None`` as a convenience for interactive callers; pass ``today``
    explicitly wherever results must be reproducible.

    Examples:
        >>> as_date(datetime(2024, 6, 15, 23, 59))
        date(2024, 6, 15)
    """
    if today is None:
        return date.today()
    if isinstance(today, datetime):
        return today.date()
    return today


def start_of_day(day: date) -> datetime:
    """Return 00:00:00 of ``day``."""
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    """Return 23:59:59.999999 of ``day``."""
    return datetime.combine(day, time.max)


def noon(day: date) -> datetime:
    """Return 12:00:00 of ``day``."""
    return datetime.combine(day, time(12, 0))


def ceil_days(delta: timedelta) -> int:
    """
    Round a time delta up to whole days.

    Examples:
        >>> ceil_days(timedelta(hours=1))
        1
        >>> ceil_days(timedelta(hours=-1))
        0
    """
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def days_between(earlier: date, later: date) -> int:
    """
    Calendar days from ``earlier`` to ``later``, both taken at start of day.

    Examples:
        >>> days_between(date(2024, 1, 1), date(2024, 1, 31))
        30
        >>> days_between(date(2024, 1, 31), date(2024, 1, 1))
        -30
    """
    return ceil_days(start_of_day(later) - start_of_day(earlier))


def add_months(day: date, months: int) -> date:
    """
    Shift ``day`` by a number of months, clamping to the last day of the month.

    Examples:
        >>> add_months(date(2024, 1, 31), 1)
        date(2024, 2, 29)
        >>> add_months(date(2024, 11, 15), 3)
        date(2025, 2, 15)
    """
    return day + relativedelta(months=months)

