"""Posting-date parsing and display helpers.

Posting dates arrive as free-form strings. The accepted shapes are ISO-8601
dates and date-times (with or without an offset or a trailing ``Z``),
``MM/DD/YYYY`` and ``DD.MM.YYYY``. Date-times are reduced to their calendar
date in their own offset; every comparison in the view pipeline is on
calendar dates, which makes range bounds inclusive at day granularity.
"""

from __future__ import annotations

from datetime import date, datetime

_DATE_FORMATS = ("%m/%d/%Y", "%d.%m.%Y")


def parse_posting_date(value: str | None) -> date | None:
    """Return the calendar date of ``value`` or ``None`` when it does not parse."""

    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    try:
        return datetime.fromisoformat(s).date()
    except ValueError:
        pass
    # Some exports append a time after a space: keep the date part only.
    first = s.split()[0]
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(first, fmt).date()
        except ValueError:
            continue
    return None


def parse_date_bound(value: str | date | None) -> date | None:
    """Parse a date-range bound; empty strings and ``None`` mean "open"."""

    if value is None or isinstance(value, date):
        return value
    s = value.strip()
    if not s:
        return None
    parsed = parse_posting_date(s)
    if parsed is None:
        raise ValueError(f"invalid date: {value!r}; expected YYYY-MM-DD")
    return parsed


def format_medium_date(d: date) -> str:
    """Medium date style, e.g. ``Jan 5, 2024`` (month abbreviation follows the locale)."""

    return f"{d:%b} {d.day}, {d.year}"


__all__ = ["format_medium_date", "parse_date_bound", "parse_posting_date"]
