from sqlalchemy import select
from hrms import get_db
from hrms.models.authz import PermissionModule, Role
from hrms.constants.permissions import DEFAULT_MODULE_NAMES
from hrms.services.seeding import active_module_names, ensure_default_modules, ensure_default_roles


def test_modules_upsert_is_idempotent(app_instance):
    session = get_db()
    assert ensure_default_modules(session) == (len(DEFAULT_MODULE_NAMES), 0)
    assert ensure_default_modules(session) == (0, len(DEFAULT_MODULE_NAMES))
    session.commit()
    assert active_module_names(session) == DEFAULT_MODULE_NAMES


def test_roles_seed_modules_when_registry_empty(app_instance):
    session = get_db()
    assert ensure_default_roles(session, actor_id=None) == (3, 0)
    session.commit()
    assert session.execute(select(PermissionModule)).scalars().all()
    assert ensure_default_roles(session) == (0, 3)


def test_reseed_restores_edited_system_role(app_instance):
    session = get_db()
    ensure_default_roles(session)
    hr = session.execute(select(Role).where(Role.role_name == 'hr')).scalar_one()
    hr.status = 'inactive'
    hr.permissions = []
    session.commit()
    ensure_default_roles(session)
    session.commit()
    assert hr.status == 'active'
    assert hr.permissions


def test_presets_follow_active_modules(app_instance):
    session = get_db()
    ensure_default_modules(session)
    session.add(PermissionModule(name='assets', label='Assets', description='', sort_order=99, is_system=False, is_active=True))
    payroll = session.execute(select(PermissionModule).where(PermissionModule.name == 'payroll')).scalar_one()
    payroll.is_active = False
    session.commit()
    ensure_default_roles(session)
    admin = session.execute(select(Role).where(Role.role_name == 'admin')).scalar_one()
    modules = [e['module'] for e in admin.permissions]
    assert 'assets' in modules
    assert 'payroll' not in modules
