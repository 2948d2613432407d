"""Parsing of the DATE and HOURS command-line arguments.

Grammar of DATE:
- `week`, `week+N`, `week-N`: Monday..Friday of the current week shifted by N weeks.
- `today`, `today+N`, `today-N`: a single day, today shifted by N calendar days.
- `YYYY/MM/DD` or `YYYY-MM-DD`: that exact day, zero-padded.

A malformed offset after `week`/`today` counts as 0; only an explicit date
that cannot be parsed, or an offset landing outside the calendar, is an error.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from core.errors import InvalidDateFormat, InvalidHoursFormat

WEEK = "week"
TODAY = "today"
WORKDAYS_PER_WEEK = 5
DEFAULT_HOURS = 8

# Optional sign and ASCII digits only: no whitespace, no underscores.
_INTEGER = re.compile(r"[+-]?[0-9]+")
_DATE_FORMATS = (
    (re.compile(r"[0-9]{4}/[0-9]{2}/[0-9]{2}"), "%Y/%m/%d"),
    (re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}"), "%Y-%m-%d"),
)


def _strict_int(value: str) -> int | None:
    if not _INTEGER.fullmatch(value):
        return None
    return int(value)


def _offset(modifier: str) -> int:
    return _strict_int(modifier) or 0


def week_days(today: date, offset: int = 0) -> list[date]:
    monday = today - timedelta(days=today.weekday()) + timedelta(weeks=offset)
    return [monday + timedelta(days=i) for i in range(WORKDAYS_PER_WEEK)]


def parse_date_expression(token: str, today: date | None = None) -> list[date]:
    """Turn a DATE argument into the ordered list of days it designates."""

    today = today or date.today()

    try:
        if token.startswith(WEEK):
            return week_days(today, _offset(token[len(WEEK):]))
        if token.startswith(TODAY):
            return [today + timedelta(days=_offset(token[len(TODAY):]))]
    except OverflowError:
        raise InvalidDateFormat(token) from None

    for pattern, fmt in _DATE_FORMATS:
        if not pattern.fullmatch(token):
            continue
        try:
            return [datetime.strptime(token, fmt).date()]
        except ValueError:
            break
    raise InvalidDateFormat(token)


def parse_hours(token: str | None, default: int = DEFAULT_HOURS) -> int:
    """Parse the optional HOURS argument."""

    if token is None:
        return default
    hours = _strict_int(token)
    if hours is None or hours < 0:
        raise InvalidHoursFormat(token)
    return hours
