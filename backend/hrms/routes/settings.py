"""Admin settings surface for the permission matrix: roles, modules and the caller's own view."""
from flask import Blueprint, abort
from sqlalchemy import select
from hrms import get_db
from hrms.models.authz import Role, PermissionModule
from hrms.constants.permissions import ROLE_ADMIN, ROLE_STATUSES, ROLE_STATUS_ACTIVE, DEFAULT_MODULE_NAMES, full_actions
from hrms.decorators.auth import authenticate, authorize, current_principal, role_store
from hrms.decorators.validation import json_body, validate_object_id
from hrms.services.policy import coerce_flag, normalize_entries
from hrms.services.seeding import active_module_names, ensure_default_modules, ensure_default_roles
from hrms.utils.serializers import role_dict, module_dict
from hrms.utils.validation import validate_status

settings_bp = Blueprint('settings', __name__)
settings_bp.before_request(authenticate)


def _check_entries(entries):
    """Normalized copy of submitted permission entries; 400 on any malformed entry."""
    try:
        normalized = normalize_entries(entries)
    except ValueError as e:
        abort(400, description=str(e))
    return normalized


def _text(data, key) -> str:
    value = data.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        abort(400, description=f'{key} must be a string')
    return value.strip()


def _get_role_or_404(session, role_id) -> Role:
    role = session.get(Role, int(role_id))
    if role is None:
        abort(404, description='Role not found')
    return role


def _get_module_or_404(session, module_id) -> PermissionModule:
    mod = session.get(PermissionModule, int(module_id))
    if mod is None:
        abort(404, description='Module not found')
    return mod


def _all_roles(session):
    return session.execute(select(Role).order_by(Role.is_system.desc(), Role.role_name.asc())).scalars().all()


# --- Roles ---

@settings_bp.get('/roles')
@authorize(ROLE_ADMIN)
def list_roles():
    rows = _all_roles(get_db())
    return {'success': True, 'count': len(rows), 'data': [role_dict(r) for r in rows]}


@settings_bp.post('/roles')
@authorize(ROLE_ADMIN)
def create_role():
    data = json_body()
    name = _text(data, 'roleName').lower()
    if not name:
        abort(400, description='Role name is required')
    session = get_db()
    if session.execute(select(Role.id).where(Role.role_name == name)).first():
        abort(400, description='Role already exists')
    actor = current_principal()
    role = Role(
        role_name=name, description=_text(data, 'description'), is_system=False,
        status=ROLE_STATUS_ACTIVE, permissions=_check_entries(data.get('permissions') or []),
        created_by=actor.id, updated_by=actor.id,
    )
    session.add(role)
    session.commit()
    return {'success': True, 'data': role_dict(role)}, 201


@settings_bp.post('/roles/seed')
@authorize(ROLE_ADMIN)
def seed_roles():
    session = get_db()
    ensure_default_roles(session, actor_id=current_principal().id)
    session.commit()
    return {'success': True, 'message': 'Default roles seeded', 'data': [role_dict(r) for r in _all_roles(session)]}


@settings_bp.get('/roles/my-permissions')
def my_permissions():
    user = current_principal()
    session = get_db()
    if user.role == ROLE_ADMIN:
        modules = active_module_names(session) or list(DEFAULT_MODULE_NAMES)
        return {'success': True, 'data': {
            'role': ROLE_ADMIN,
            'permissions': [{'module': m, 'actions': full_actions()} for m in modules],
        }}
    role = role_store().get_active_role(user.role)
    if role is None:
        return {'success': True, 'data': {'role': user.role, 'permissions': []}}
    return {'success': True, 'data': {'role': role.role_name, 'permissions': role.permissions or []}}


@settings_bp.put('/roles/<role_id>')
@authorize(ROLE_ADMIN)
@validate_object_id('role_id')
def update_role(role_id):
    data = json_body()
    session = get_db()
    role = _get_role_or_404(session, role_id)
    new_name = _text(data, 'roleName').lower()
    if role.is_system and new_name and new_name != role.role_name:
        abort(400, description='Cannot rename system roles')
    if new_name and new_name != role.role_name:
        if session.execute(select(Role.id).where(Role.role_name == new_name)).first():
            abort(400, description='Role already exists')
        role.role_name = new_name
    if 'description' in data:
        role.description = _text(data, 'description')
    if data.get('permissions') is not None:
        role.permissions = _check_entries(data['permissions'])
    if data.get('status'):
        role.status = validate_status(data['status'], ROLE_STATUSES)
    role.updated_by = current_principal().id
    session.commit()
    return {'success': True, 'data': role_dict(role)}


@settings_bp.delete('/roles/<role_id>')
@authorize(ROLE_ADMIN)
@validate_object_id('role_id')
def delete_role(role_id):
    session = get_db()
    role = _get_role_or_404(session, role_id)
    if role.is_system:
        abort(400, description='Cannot delete system roles')
    session.delete(role)
    session.commit()
    return {'success': True, 'message': 'Role deleted'}


@settings_bp.get('/roles/<role_id>/permissions')
@authorize(ROLE_ADMIN)
@validate_object_id('role_id')
def get_role_permissions(role_id):
    role = _get_role_or_404(get_db(), role_id)
    return {'success': True, 'data': {'roleName': role.role_name, 'permissions': role.permissions or []}}


@settings_bp.put('/roles/<role_id>/permissions')
@authorize(ROLE_ADMIN)
@validate_object_id('role_id')
def assign_permissions(role_id):
    data = json_body()
    session = get_db()
    role = _get_role_or_404(session, role_id)
    role.permissions = _check_entries(data.get('permissions'))
    role.updated_by = current_principal().id
    session.commit()
    return {'success': True, 'data': role_dict(role)}


# --- Permission modules ---

@settings_bp.get('/modules')
@authorize(ROLE_ADMIN)
def list_modules():
    rows = get_db().execute(select(PermissionModule).order_by(PermissionModule.sort_order.asc())).scalars().all()
    return {'success': True, 'data': [module_dict(m) for m in rows]}


@settings_bp.post('/modules')
@authorize(ROLE_ADMIN)
def create_module():
    data = json_body()
    name = _text(data, 'name').lower()
    label = _text(data, 'label')
    if not name or not label:
        abort(400, description='Name and label are required')
    session = get_db()
    if session.execute(select(PermissionModule.id).where(PermissionModule.name == name)).first():
        abort(400, description='Module with this name already exists')
    last = session.execute(select(PermissionModule.sort_order).order_by(PermissionModule.sort_order.desc())).scalars().first()
    mod = PermissionModule(
        name=name, label=label, description=_text(data, 'description'),
        sort_order=(last or 0) + 1, is_system=False, is_active=True,
    )
    session.add(mod)
    session.commit()
    return {'success': True, 'data': module_dict(mod)}, 201


@settings_bp.post('/modules/seed')
@authorize(ROLE_ADMIN)
def seed_modules():
    session = get_db()
    ensure_default_modules(session)
    session.commit()
    rows = session.execute(select(PermissionModule).order_by(PermissionModule.sort_order.asc())).scalars().all()
    return {'success': True, 'message': 'Default modules seeded', 'data': [module_dict(m) for m in rows]}


@settings_bp.put('/modules/<module_id>')
@authorize(ROLE_ADMIN)
@validate_object_id('module_id')
def update_module(module_id):
    data = json_body()
    session = get_db()
    mod = _get_module_or_404(session, module_id)
    if 'label' in data:
        mod.label = _text(data, 'label') or mod.label
    if 'description' in data:
        mod.description = _text(data, 'description')
    if 'isActive' in data:
        try:
            mod.is_active = coerce_flag('isActive', data['isActive'])
        except ValueError:
            abort(400, description='isActive must be a boolean')
    if 'sortOrder' in data:
        try:
            mod.sort_order = int(data['sortOrder'])
        except (TypeError, ValueError):
            abort(400, description='sortOrder must be int')
    session.commit()
    return {'success': True, 'data': module_dict(mod)}


@settings_bp.delete('/modules/<module_id>')
@authorize(ROLE_ADMIN)
@validate_object_id('module_id')
def delete_module(module_id):
    session = get_db()
    mod = _get_module_or_404(session, module_id)
    if mod.is_system:
        abort(400, description='Cannot delete system modules')
    # Pull the module from every role's entries
    for role in session.execute(select(Role)).scalars():
        entries = role.permissions or []
        kept = [e for e in entries if e.get('module') != mod.name]
        if len(kept) != len(entries):
            role.permissions = kept
    session.delete(mod)
    session.commit()
    return {'success': True, 'message': 'Module deleted and removed from all roles'}
