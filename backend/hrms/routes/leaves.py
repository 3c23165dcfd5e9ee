from datetime import date
from flask import Blueprint, request, abort, g
from hrms import get_db
from hrms.models.authz import User
from hrms.models.leave import Leave
from hrms.constants.permissions import ROLE_ADMIN, ROLE_HR, ROLE_EMPLOYEE
from hrms.constants.domain import USER_STATUS_ACTIVE, USER_STATUS_ON_LEAVE
from hrms.decorators.auth import authenticate, authorize, check_permission, current_principal
from hrms.decorators.company import enforce_company_access, scope_to_company
from hrms.decorators.validation import (
    json_body, validate_leave_request, validate_half_day_leave_request, validate_object_id, validate_date_range,
)
from hrms.services.leaves import LEAVE_FSM, find_overlapping_leave, find_half_day_conflict, half_day_conflict_message
from hrms.utils.dates import parse_calendar_date, count_weekdays
from hrms.utils.listing import paginated_response
from hrms.utils.serializers import leave_dict
from hrms.utils.sorting import apply_multi_sort
from hrms.utils.validation import id_param

leaves_bp = Blueprint('leaves', __name__)
leaves_bp.before_request(authenticate)

SORT_FIELDS = {
    'startDate': Leave.start_date,
    'endDate': Leave.end_date,
    'status': Leave.status,
    'leaveType': Leave.leave_type,
    'days': Leave.days,
}

INVALID_TRANSITION = 'Invalid status transition'


def _body() -> dict:
    return json_body()


@leaves_bp.post('')
@check_permission('leaves', 'create')
@validate_leave_request
def create_leave():
    user = current_principal()
    data = _body()
    start, end = parse_calendar_date(data['startDate']), parse_calendar_date(data['endDate'])
    days = count_weekdays(start, end)
    if days == 0:
        abort(400, description='Leave must be at least 1 working day')
    session = get_db()
    if find_overlapping_leave(session, user.id, start, end):
        abort(400, description='Leave dates overlap with existing leave request')
    leave = Leave(
        user_id=user.id, company_id=user.company_id, leave_type=data['leaveType'], is_half_day=False,
        start_date=start, end_date=end, days=float(days), reason=data['reason'].strip(),
        status=Leave.STATUS_PENDING,
    )
    session.add(leave)
    session.commit()
    return {'success': True, 'message': 'Leave request submitted successfully', 'data': leave_dict(leave)}, 201


@leaves_bp.post('/half-day')
@authorize(ROLE_ADMIN, ROLE_HR, ROLE_EMPLOYEE)
@validate_half_day_leave_request
def create_half_day_leave():
    user = current_principal()
    data = _body()
    day = parse_calendar_date(data['date'])
    session = get_db()
    conflict = find_half_day_conflict(session, user.id, day, data['session'])
    if conflict:
        abort(400, description=half_day_conflict_message(conflict))
    leave = Leave(
        user_id=user.id, company_id=user.company_id, leave_type=data['leaveType'], is_half_day=True,
        session=data['session'], start_date=day, end_date=day, days=0.5, reason=data['reason'].strip(),
        status=Leave.STATUS_PENDING,
    )
    session.add(leave)
    session.commit()
    return {'success': True, 'message': 'Half-day leave request submitted successfully', 'data': leave_dict(leave)}, 201


@leaves_bp.get('')
@check_permission('leaves', 'view')
@scope_to_company
@validate_date_range
def list_leaves():
    user = current_principal()
    q = get_db().query(Leave)
    if g.company_scope:
        q = q.filter(Leave.company_id == g.company_scope)
    # Employees only ever see their own requests
    if user.role == ROLE_EMPLOYEE:
        q = q.filter(Leave.user_id == user.id)
    elif g.query.get('userId'):
        q = q.filter(Leave.user_id == id_param(g.query['userId'], 'userId'))
    if g.query.get('status'):
        q = q.filter(Leave.status == g.query['status'])
    if g.query.get('leaveType'):
        q = q.filter(Leave.leave_type == g.query['leaveType'])
    start, end = parse_calendar_date(g.query.get('startDate')), parse_calendar_date(g.query.get('endDate'))
    if start and end:
        q = q.filter(Leave.start_date >= start, Leave.end_date <= end)
    q = apply_multi_sort(q, request.args.get('sort'), SORT_FIELDS, Leave.id)
    return paginated_response(q, leave_dict)


@leaves_bp.get('/<leave_id>')
@validate_object_id('leave_id')
@enforce_company_access(Leave, id_arg='leave_id')
def get_leave(leave_id):
    user = current_principal()
    leave = g.get('resource') or get_db().get(Leave, int(leave_id))
    if leave is None:
        abort(404, description='Leave request not found')
    if user.role == ROLE_EMPLOYEE and leave.user_id != user.id:
        abort(403, description='Access denied')
    return {'success': True, 'data': leave_dict(leave)}


def _review(leave_id, target: str):
    reviewer = current_principal()
    session = get_db()
    leave = g.get('resource') or session.get(Leave, int(leave_id))
    if leave is None:
        abort(404, description='Leave request not found')
    requester = session.get(User, leave.user_id)
    if requester is not None and requester.role == ROLE_HR and reviewer.role != ROLE_ADMIN:
        verb = 'approve' if target == Leave.STATUS_APPROVED else 'reject'
        abort(403, description=f'Only admin can {verb} HR leave requests')
    note = _body().get('reviewNote')
    if target == Leave.STATUS_REJECTED and not note:
        abort(400, description='Review note is required when rejecting leave')
    LEAVE_FSM.assert_can_transition(leave.status, target, INVALID_TRANSITION)
    leave.status = target
    leave.reviewed_by = reviewer.id
    leave.review_note = note
    if target == Leave.STATUS_APPROVED and requester is not None and leave.start_date <= date.today():
        requester.status = USER_STATUS_ON_LEAVE
    session.commit()
    return leave


@leaves_bp.put('/<leave_id>/approve')
@authorize(ROLE_ADMIN, ROLE_HR)
@validate_object_id('leave_id')
@enforce_company_access(Leave, id_arg='leave_id')
def approve_leave(leave_id):
    leave = _review(leave_id, Leave.STATUS_APPROVED)
    return {'success': True, 'message': 'Leave approved successfully', 'data': leave_dict(leave)}


@leaves_bp.put('/<leave_id>/reject')
@authorize(ROLE_ADMIN, ROLE_HR)
@validate_object_id('leave_id')
@enforce_company_access(Leave, id_arg='leave_id')
def reject_leave(leave_id):
    leave = _review(leave_id, Leave.STATUS_REJECTED)
    return {'success': True, 'message': 'Leave rejected successfully', 'data': leave_dict(leave)}


@leaves_bp.put('/<leave_id>/cancel')
@validate_object_id('leave_id')
@enforce_company_access(Leave, id_arg='leave_id')
def cancel_leave(leave_id):
    user = current_principal()
    session = get_db()
    leave = g.get('resource') or session.get(Leave, int(leave_id))
    if leave is None:
        abort(404, description='Leave request not found')
    if leave.user_id != user.id and user.role not in (ROLE_HR, ROLE_ADMIN):
        abort(403, description='Access denied')
    LEAVE_FSM.assert_can_transition(leave.status, Leave.STATUS_CANCELLED, 'Cannot cancel this leave request')
    leave.status = Leave.STATUS_CANCELLED
    requester = session.get(User, leave.user_id)
    if requester is not None and requester.status == USER_STATUS_ON_LEAVE:
        requester.status = USER_STATUS_ACTIVE
    session.commit()
    return {'success': True, 'message': 'Leave cancelled successfully', 'data': leave_dict(leave)}
