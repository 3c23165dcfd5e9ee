from flask import Blueprint, request, abort, g
from hrms import get_db
from hrms.models.authz import User
from hrms.constants.permissions import ROLE_ADMIN, ROLE_HR, ROLE_EMPLOYEE, ROLES
from hrms.constants.domain import USER_STATUSES
from hrms.decorators.auth import authenticate, authorize, current_principal
from hrms.decorators.company import scope_to_company, verify_user_company_access
from hrms.decorators.validation import validate_object_id
from hrms.utils.listing import paginated_response
from hrms.utils.serializers import user_dict
from hrms.utils.sorting import apply_multi_sort
from hrms.utils.validation import validate_status

users_bp = Blueprint('users', __name__)
users_bp.before_request(authenticate)

SORT_FIELDS = {'name': User.name, 'email': User.email, 'role': User.role, 'department': User.department}


@users_bp.get('')
@authorize(ROLE_ADMIN, ROLE_HR)
@scope_to_company
def list_users():
    q = get_db().query(User)
    if g.company_scope:
        q = q.filter(User.company_id == g.company_scope)
    if g.query.get('role'):
        q = q.filter(User.role == validate_status(g.query['role'], ROLES, 'role'))
    if g.query.get('status'):
        q = q.filter(User.status == validate_status(g.query['status'], USER_STATUSES))
    if g.query.get('department'):
        q = q.filter(User.department == g.query['department'])
    q = apply_multi_sort(q, request.args.get('sort'), SORT_FIELDS, User.id)
    return paginated_response(q, user_dict)


@users_bp.get('/<user_id>')
@validate_object_id('user_id')
@verify_user_company_access
def get_user(user_id):
    caller = current_principal()
    target = g.get('target_user') or get_db().get(User, int(user_id))
    if target is None:
        abort(404, description='User not found')
    if caller.role == ROLE_EMPLOYEE and target.id != caller.id:
        abort(403, description='Not authorized to view this user')
    return {'success': True, 'data': user_dict(target)}
