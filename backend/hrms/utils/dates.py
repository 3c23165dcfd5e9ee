"""Calendar date helpers.

A date-only string such as ``2026-03-07`` names a calendar day in the caller's local
time, not an instant at UTC midnight. Every comparison against "today" goes through
``parse_calendar_date`` so a host running at UTC-8 sees the same weekday and the same
past/future verdict as one at UTC+4.
"""
from __future__ import annotations
import re
from datetime import date, datetime, timedelta
from typing import Any, Optional

DATE_ONLY_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def is_date_only(value: Any) -> bool:
    return isinstance(value, str) and bool(DATE_ONLY_RE.match(value.strip()))


def parse_instant(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp into a naive local datetime; date-only strings map to local midnight."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        try:
            if is_date_only(raw):
                d = date.fromisoformat(raw)
                return datetime(d.year, d.month, d.day)
            dt = datetime.fromisoformat(raw.replace('Z', '+00:00'))
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def parse_calendar_date(value: Any) -> Optional[date]:
    dt = parse_instant(value)
    return dt.date() if dt else None


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5


def count_weekdays(start: date, end: date) -> int:
    """Inclusive number of Monday-Friday days between start and end."""
    days = 0
    current = start
    while current <= end:
        if not is_weekend(current):
            days += 1
        current += timedelta(days=1)
    return days


__all__ = ['is_date_only', 'parse_instant', 'parse_calendar_date', 'is_weekend', 'count_weekdays']
