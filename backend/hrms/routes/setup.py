"""First-run bootstrap; only usable while the user table is empty."""
from flask import Blueprint, abort
from flask_jwt_extended import create_access_token
from sqlalchemy import select, func
from hrms import get_db
from hrms.models.authz import User
from hrms.constants.permissions import ROLE_ADMIN
from hrms.constants.domain import USER_STATUS_ACTIVE
from hrms.decorators.validation import json_body
from hrms.utils.serializers import user_dict

setup_bp = Blueprint('setup', __name__)


def _user_count(session) -> int:
    return session.execute(select(func.count(User.id))).scalar_one()


@setup_bp.get('/status')
def setup_status():
    count = _user_count(get_db())
    return {
        'success': True,
        'setupNeeded': count == 0,
        'userCount': count,
        'message': 'Setup needed. Please create first admin at POST /api/setup/first-admin' if count == 0
        else 'Setup complete. Use POST /api/auth/login to login',
    }


@setup_bp.post('/first-admin')
def first_admin():
    session = get_db()
    if _user_count(session) > 0:
        abort(403, description='Setup already completed. Admin user already exists. Please use /api/auth/login')
    data = json_body()
    if not all(isinstance(data.get(k), str) and data[k].strip() for k in ('employeeId', 'name', 'email', 'password')):
        abort(400, description='Please provide employeeId, name, email, and password')
    admin = User(
        employee_id=data['employeeId'], name=data['name'], email=data['email'].lower(),
        role=ROLE_ADMIN, company_id=None, status=USER_STATUS_ACTIVE,
        department=data.get('department') or 'Administration',
        position=data.get('position') or 'System Administrator',
        password_hash='',
    )
    admin.set_password(data['password'])
    session.add(admin)
    session.commit()
    token = create_access_token(identity=str(admin.id), additional_claims={'role': admin.role})
    return {
        'success': True,
        'message': 'First admin created successfully! Setup complete.',
        'token': token,
        'user': user_dict(admin),
    }, 201
