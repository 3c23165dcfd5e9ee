"""Route decorators running the payload checks from ``hrms.utils.validation``.

Usage:

@leaves_bp.post('')
@check_permission('leaves', 'create')
@validate_leave_request
def create_leave(): ...

All violations for a request are reported together as one 400 ``ValidationFailed``.
"""
from __future__ import annotations
from functools import wraps
from typing import Callable, List
from flask import request

from hrms.errors import ValidationFailed
from hrms.utils import validation as checks


def json_body() -> dict:
    """The parsed JSON body when it is an object, otherwise an empty dict."""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _body_validator(check: Callable[[dict], List[str]]):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            errors = check(json_body())
            if errors:
                raise ValidationFailed(errors)
            return fn(*args, **kwargs)
        return wrapper
    return decorator


validate_leave_request = _body_validator(checks.check_leave_request)
validate_half_day_leave_request = _body_validator(checks.check_half_day_leave_request)
validate_expense = _body_validator(checks.check_expense)
validate_task = _body_validator(checks.check_task)
validate_task_update = _body_validator(checks.check_task_update)
validate_attendance = _body_validator(checks.check_attendance)


def validate_required_fields(*fields: str):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            missing = checks.missing_fields(json_body(), fields)
            if missing:
                raise ValidationFailed(missing, description=f"Missing required fields: {', '.join(missing)}")
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def validate_object_id(param: str = 'id'):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            errors = checks.check_identifier(kwargs.get(param), param)
            if errors:
                raise ValidationFailed(errors, description=errors[0])
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def validate_date_range(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        errors = checks.check_date_range(request.args)
        if errors:
            raise ValidationFailed(errors, description=errors[0])
        return fn(*args, **kwargs)
    return wrapper


__all__ = [
    'validate_leave_request', 'validate_half_day_leave_request', 'validate_expense', 'validate_task',
    'validate_task_update', 'validate_attendance', 'validate_required_fields', 'validate_object_id',
    'validate_date_range', 'json_body',
]
