from flask import Blueprint, abort
from flask_jwt_extended import create_access_token
from sqlalchemy import select, or_
from hrms import get_db
from hrms.models.authz import User, Company
from hrms.constants.permissions import ROLES, ROLE_ADMIN, ROLE_HR, ROLE_EMPLOYEE, ROLE_CLIENT
from hrms.constants.domain import USER_STATUS_INACTIVE
from hrms.decorators.auth import protect, authorize, current_principal
from hrms.decorators.validation import json_body, validate_required_fields
from hrms.utils.serializers import user_dict
from hrms.utils.validation import check_identifier

auth_bp = Blueprint('auth', __name__)

# hr may only provision these roles, and only inside its own company
HR_ASSIGNABLE_ROLES = (ROLE_EMPLOYEE, ROLE_CLIENT)


@auth_bp.post('/login')
def login():
    data = json_body()
    email, employee_id, password = data.get('email'), data.get('employeeId'), data.get('password')
    if not (email or employee_id) or not password:
        abort(400, description='Please provide email/employee ID and password')
    session = get_db()
    clauses = []
    if email:
        clauses.append(User.email == str(email).lower())
    if employee_id:
        clauses.append(User.employee_id == str(employee_id))
    user = session.execute(select(User).where(or_(*clauses)).order_by(User.id.asc())).scalars().first()
    if not user or not user.verify_password(password):
        abort(401, description='Invalid credentials')
    if user.status == USER_STATUS_INACTIVE:
        abort(403, description='Your account has been deactivated. Please contact HR.')
    # JWT identity must be a string (flask-jwt-extended v4 requirement)
    token = create_access_token(identity=str(user.id), additional_claims={'role': user.role, 'company_id': user.company_id})
    return {'success': True, 'token': token, 'user': user_dict(user)}


@auth_bp.get('/me')
@protect
def me():
    return {'success': True, 'data': user_dict(current_principal())}


@auth_bp.post('/register')
@protect
@authorize(ROLE_ADMIN, ROLE_HR)
@validate_required_fields('employeeId', 'name', 'email', 'password')
def register():
    caller = current_principal()
    data = json_body()
    role = data.get('role') or ROLE_EMPLOYEE
    if role not in ROLES:
        abort(400, description='Invalid role')
    company_id = data.get('companyId') or caller.company_id
    if company_id is not None:
        if check_identifier(company_id, 'companyId'):
            abort(400, description='Invalid companyId')
        if get_db().get(Company, int(company_id)) is None:
            abort(400, description='Company not found')
    if caller.role == ROLE_HR:
        if role not in HR_ASSIGNABLE_ROLES:
            abort(403, description=f'User role {caller.role} cannot create {role} accounts')
        if caller.company_id is None or str(company_id) != str(caller.company_id):
            abort(403, description='Access denied: Cross-company data access not allowed')
    session = get_db()
    email = str(data['email']).lower()
    clash = session.execute(
        select(User.id).where(or_(User.email == email, User.employee_id == str(data['employeeId'])))
    ).first()
    if clash:
        abort(400, description='User with this email or employee ID already exists')
    user = User(
        employee_id=str(data['employeeId']), name=data['name'], email=email, phone=data.get('phone'),
        role=role, company_id=int(company_id) if company_id is not None else None,
        department=data.get('department'), position=data.get('position'), password_hash='',
    )
    user.set_password(data['password'])
    session.add(user)
    session.commit()
    return {'success': True, 'message': 'User registered successfully', 'user': user_dict(user)}, 201
