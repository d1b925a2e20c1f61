"""Calendar-date helpers: week/month bounds, range checks, formatting.

All helpers work on plain :class:`datetime.date` values. A ``datetime`` is
reduced to its date before comparison, so time-of-day never matters.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from .const import DAYS_PER_WEEK, DATE_FORMAT
from .exceptions import ParseError

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def to_date(value: date | datetime | str) -> date:
    """Coerce a date, datetime or ``YYYY-MM-DD`` string to a ``date``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_date(value)
    raise ParseError(f"Cannot convert {type(value).__name__} to a date")


def parse_date(value: str) -> date:
    """Parse an ISO calendar date (``YYYY-MM-DD``).

    Raises:
        ParseError: If the string is not a valid calendar date.
    """
    if not isinstance(value, str) or not _DATE_RE.match(value.strip()):
        raise ParseError(f"Invalid date: {value!r}")
    try:
        return isoparse(value.strip()).date()
    except (ValueError, OverflowError) as err:
        raise ParseError(f"Invalid date: {value!r}") from err


def parse_time(value: str) -> str:
    """Validate an ``HH:MM`` time string and return it unchanged.

    Raises:
        ParseError: If the string is not a 24-hour ``HH:MM`` time.
    """
    if not isinstance(value, str) or not _TIME_RE.match(value):
        raise ParseError(f"Invalid time: {value!r}")
    return value


def format_date(value: date | datetime) -> str:
    """Format as zero-padded ``YYYY-MM-DD``."""
    return to_date(value).strftime(DATE_FORMAT)


def week_dates(value: date | datetime) -> list[date]:
    """Return the seven dates of the Sunday-first week containing ``value``."""
    day = to_date(value)
    # date.weekday(): Monday == 0 ... Sunday == 6
    sunday = day - timedelta(days=(day.weekday() + 1) % DAYS_PER_WEEK)
    return [sunday + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]


def week_bounds(value: date | datetime) -> tuple[date, date]:
    """First (Sunday) and last (Saturday) day of the week containing ``value``."""
    days = week_dates(value)
    return days[0], days[-1]


def month_bounds(value: date | datetime) -> tuple[date, date]:
    """First and last day of the month containing ``value``."""
    day = to_date(value)
    return day.replace(day=1), day + relativedelta(day=31)


def is_date_in_range(
    value: date | datetime,
    start: date | datetime,
    end: date | datetime,
) -> bool:
    """Inclusive range test at calendar-day granularity."""
    return to_date(start) <= to_date(value) <= to_date(end)
