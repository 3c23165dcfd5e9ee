"""Reusable validation helpers for request payloads.

Each ``check_*`` function is pure: it takes the parsed body / query mapping (plus an
optional clock) and returns every violated rule as an ordered list of messages, empty
when the payload is well formed. The route decorators in ``hrms.decorators.validation``
turn a non-empty list into a single 400 response.
"""
from __future__ import annotations
import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, List, Mapping, Optional
from flask import abort

from hrms.constants.domain import LEAVE_TYPES, HALF_DAY_SESSIONS, EXPENSE_CATEGORIES, TASK_PRIORITIES
from hrms.utils.dates import is_date_only, parse_calendar_date, parse_instant, is_weekend


def validate_status(new_status: str, allowed: Iterable[str], field_name: str = 'status') -> str:
    """Validate that new_status is inside allowed.

    Returns the status (to enable inline usage) or aborts with 400.
    """
    if new_status not in allowed:
        abort(400, description=f"{field_name} invalid")
    return new_status


def is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def is_non_text(value: Any) -> bool:
    """Present but not a string (free-text fields are stored trimmed)."""
    return value is not None and not isinstance(value, str)


def to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(num) or math.isinf(num):
        return None
    return num


def amount_to_cents(value: Any) -> int:
    cents = (Decimal(str(value)) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    return int(cents)


def missing_fields(data: Mapping[str, Any], fields: Iterable[str]) -> List[str]:
    return [f for f in fields if is_missing(data.get(f))]


def check_leave_request(data: Mapping[str, Any], today: Optional[date] = None) -> List[str]:
    today = today or date.today()
    errors: List[str] = []
    leave_type = data.get('leaveType')
    start_raw, end_raw = data.get('startDate'), data.get('endDate')
    if is_missing(leave_type):
        errors.append('Leave type is required')
    if is_missing(start_raw):
        errors.append('Start date is required')
    if is_missing(end_raw):
        errors.append('End date is required')
    if is_missing(data.get('reason')):
        errors.append('Reason is required')
    if is_non_text(data.get('reason')):
        errors.append('Reason must be a string')
    if not is_missing(leave_type) and leave_type not in LEAVE_TYPES:
        errors.append('Invalid leave type')
    start = end = None
    if not is_missing(start_raw):
        start = parse_calendar_date(start_raw)
        if start is None:
            errors.append('Invalid start date')
    if not is_missing(end_raw):
        end = parse_calendar_date(end_raw)
        if end is None:
            errors.append('Invalid end date')
    if start and end and start > end:
        errors.append('End date must be after start date')
    if start and start < today:
        errors.append('Cannot request leave for past dates')
    return errors


def check_half_day_leave_request(data: Mapping[str, Any], today: Optional[date] = None) -> List[str]:
    today = today or date.today()
    errors: List[str] = []
    leave_type, raw, session = data.get('leaveType'), data.get('date'), data.get('session')
    if is_missing(leave_type):
        errors.append('Leave type is required')
    if is_missing(raw):
        errors.append('Date is required')
    if is_missing(session):
        errors.append('Session is required')
    if is_missing(data.get('reason')):
        errors.append('Reason is required')
    if is_non_text(data.get('reason')):
        errors.append('Reason must be a string')
    if not is_missing(leave_type) and leave_type not in LEAVE_TYPES:
        errors.append('Invalid leave type')
    if not is_missing(session) and session not in HALF_DAY_SESSIONS:
        errors.append('Session must be morning or afternoon')
    if not is_missing(raw):
        day = parse_calendar_date(raw)
        if day is None:
            errors.append('Invalid date')
        else:
            if day < today:
                errors.append('Cannot request leave for past dates')
            if is_weekend(day):
                errors.append('Half-day leave cannot be requested on a weekend')
    return errors


def check_expense(data: Mapping[str, Any], now: Optional[datetime] = None) -> List[str]:
    now = now or datetime.now()
    errors: List[str] = []
    category, amount, raw = data.get('category'), data.get('amount'), data.get('date')
    if is_missing(category):
        errors.append('Category is required')
    if is_missing(amount):
        errors.append('Amount is required')
    if is_missing(raw):
        errors.append('Date is required')
    if is_missing(data.get('description')):
        errors.append('Description is required')
    if is_non_text(data.get('description')):
        errors.append('Description must be a string')
    if not is_missing(category) and category not in EXPENSE_CATEGORIES:
        errors.append('Invalid expense category')
    if not is_missing(amount):
        num = to_number(amount)
        if num is None or num <= 0:
            errors.append('Amount must be a positive number')
    if not is_missing(raw):
        when = parse_instant(raw)
        if when is None:
            errors.append('Invalid date')
        elif (when.date() > now.date()) if is_date_only(raw) else (when > now):
            errors.append('Cannot create expense for future dates')
    return errors


def check_task(data: Mapping[str, Any]) -> List[str]:
    errors: List[str] = []
    if is_missing(data.get('title')):
        errors.append('Task title is required')
    if is_missing(data.get('assignedTo')):
        errors.append('Assigned to user ID is required')
    if is_non_text(data.get('title')):
        errors.append('Task title must be a string')
    errors.extend(check_task_update(data))
    return errors


def check_task_update(data: Mapping[str, Any]) -> List[str]:
    errors: List[str] = []
    priority = data.get('priority')
    if not is_missing(priority) and priority not in TASK_PRIORITIES:
        errors.append('Invalid task priority')
    if not is_missing(data.get('dueDate')) and parse_calendar_date(data.get('dueDate')) is None:
        errors.append('Invalid due date')
    if data.get('progress') is not None:
        progress = to_number(data.get('progress'))
        if progress is None or progress < 0 or progress > 100:
            errors.append('Progress must be between 0 and 100')
    return errors


def check_location(location: Any) -> List[str]:
    if location is None:
        return []
    if not isinstance(location, Mapping):
        return ['Invalid location']
    lat_raw, lng_raw = location.get('latitude'), location.get('longitude')
    if lat_raw is None and lng_raw is None:
        return []
    if lat_raw is None or lng_raw is None:
        return ['Location requires both latitude and longitude']
    lat, lng = to_number(lat_raw), to_number(lng_raw)
    if lat is None or lng is None:
        return ['Invalid location coordinates']
    if lat < -90 or lat > 90 or lng < -180 or lng > 180:
        return ['Location coordinates out of valid range']
    return []


def check_attendance(data: Mapping[str, Any]) -> List[str]:
    return check_location(data.get('location'))


def check_identifier(value: Any, name: str = 'id') -> List[str]:
    raw = str(value) if value is not None else ''
    if not raw.isdigit() or int(raw) <= 0:
        return [f'Invalid {name}']
    return []


def id_param(value: Any, name: str = 'id') -> int:
    """Integer value of an identifier query parameter; aborts with 400 when malformed."""
    if check_identifier(value, name):
        abort(400, description=f'Invalid {name}')
    return int(value)


def check_date_range(params: Mapping[str, Any]) -> List[str]:
    start_raw, end_raw = params.get('startDate'), params.get('endDate')
    if is_missing(start_raw) or is_missing(end_raw):
        return []
    start, end = parse_calendar_date(start_raw), parse_calendar_date(end_raw)
    if start is None or end is None:
        return ['Invalid date format']
    if start > end:
        return ['Start date must be before end date']
    return []


__all__ = [
    'validate_status', 'is_missing', 'is_non_text', 'to_number', 'amount_to_cents', 'missing_fields',
    'check_leave_request', 'check_half_day_leave_request', 'check_expense', 'check_task',
    'check_task_update', 'check_location', 'check_attendance', 'check_identifier', 'id_param', 'check_date_range',
]
