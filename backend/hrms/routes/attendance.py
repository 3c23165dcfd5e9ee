from datetime import datetime
from flask import Blueprint, request, abort, g
from sqlalchemy import select
from hrms import get_db
from hrms.models.attendance import Attendance
from hrms.constants.permissions import ROLE_EMPLOYEE, ROLE_CLIENT
from hrms.decorators.auth import authenticate, current_principal
from hrms.decorators.company import scope_to_company, verify_user_company_access
from hrms.decorators.validation import json_body, validate_attendance, validate_date_range
from hrms.utils.dates import parse_calendar_date
from hrms.utils.listing import paginated_response
from hrms.utils.serializers import attendance_dict
from hrms.utils.sorting import apply_multi_sort
from hrms.utils.validation import id_param

attendance_bp = Blueprint('attendance', __name__)
attendance_bp.before_request(authenticate)

SORT_FIELDS = {'date': Attendance.work_date, 'status': Attendance.status}


def _coords(data):
    loc = data.get('location') or {}
    if loc.get('latitude') is None:
        return None, None
    return float(loc['latitude']), float(loc['longitude'])


def _today_record(session, user_id, today):
    return session.execute(
        select(Attendance).where(Attendance.user_id == user_id, Attendance.work_date == today)
    ).scalar_one_or_none()


@attendance_bp.post('/check-in')
@validate_attendance
def check_in():
    user = current_principal()
    data = json_body()
    now = datetime.now()
    session = get_db()
    if _today_record(session, user.id, now.date()):
        abort(400, description='Already checked in for today')
    lat, lng = _coords(data)
    record = Attendance(
        user_id=user.id, company_id=user.company_id, work_date=now.date(), check_in=now,
        check_in_lat=lat, check_in_lng=lng, status=Attendance.STATUS_PRESENT,
    )
    session.add(record)
    session.commit()
    return {'success': True, 'message': 'Successfully checked in', 'data': attendance_dict(record)}, 201


@attendance_bp.post('/check-out')
@validate_attendance
def check_out():
    user = current_principal()
    data = json_body()
    now = datetime.now()
    session = get_db()
    record = _today_record(session, user.id, now.date())
    if record is None or record.check_in is None:
        abort(400, description='Must check in before checking out')
    if record.check_out is not None:
        abort(400, description='Already checked out for today')
    record.check_out = now
    record.check_out_lat, record.check_out_lng = _coords(data)
    session.commit()
    return {'success': True, 'message': 'Successfully checked out', 'data': attendance_dict(record)}


@attendance_bp.get('')
@scope_to_company
@verify_user_company_access
@validate_date_range
def list_attendance():
    user = current_principal()
    q = get_db().query(Attendance)
    if g.company_scope:
        q = q.filter(Attendance.company_id == g.company_scope)
    if user.role in (ROLE_EMPLOYEE, ROLE_CLIENT):
        q = q.filter(Attendance.user_id == user.id)
    elif g.query.get('userId'):
        q = q.filter(Attendance.user_id == id_param(g.query['userId'], 'userId'))
    start, end = parse_calendar_date(g.query.get('startDate')), parse_calendar_date(g.query.get('endDate'))
    if start and end:
        q = q.filter(Attendance.work_date >= start, Attendance.work_date <= end)
    q = apply_multi_sort(q, request.args.get('sort'), SORT_FIELDS, Attendance.id)
    return paginated_response(q, attendance_dict)
