"""Idempotent seeding of the permission module registry and the default role records.

Shared by the ``/api/settings/*/seed`` endpoints and ``scripts/seed_authz.py``. Neither
function commits; callers decide between commit and rollback (dry run).
"""
from __future__ import annotations
from typing import List, Tuple
import logging
from sqlalchemy import select
from hrms.models.authz import PermissionModule, Role
from hrms.constants.permissions import DEFAULT_MODULES, ROLE_STATUS_ACTIVE, build_role_presets

logger = logging.getLogger(__name__)


def active_module_names(session) -> List[str]:
    return list(session.execute(
        select(PermissionModule.name).where(PermissionModule.is_active.is_(True)).order_by(PermissionModule.sort_order.asc())
    ).scalars())


def ensure_default_modules(session) -> Tuple[int, int]:
    """Upsert the built-in modules as system modules. Returns (created, updated)."""
    existing = {m.name: m for m in session.execute(select(PermissionModule)).scalars()}
    created = updated = 0
    for entry in DEFAULT_MODULES:
        mod = existing.get(entry['name'])
        if mod is None:
            session.add(PermissionModule(
                name=entry['name'], label=entry['label'], description='',
                sort_order=entry['sort_order'], is_system=True, is_active=True,
            ))
            created += 1
        else:
            mod.label = entry['label']
            mod.sort_order = entry['sort_order']
            mod.is_system = True
            updated += 1
    session.flush()
    logger.info('Permission modules seeded (created=%s, updated=%s)', created, updated)
    return created, updated


def ensure_default_roles(session, actor_id=None) -> Tuple[int, int]:
    """Upsert the admin / hr / employee presets over the active modules.

    Seeds the default modules first when the registry has no active module.
    """
    modules = active_module_names(session)
    if not modules:
        ensure_default_modules(session)
        modules = active_module_names(session)
    existing = {r.role_name: r for r in session.execute(select(Role)).scalars()}
    created = updated = 0
    for preset in build_role_presets(modules):
        role = existing.get(preset['role_name'])
        if role is None:
            role = Role(role_name=preset['role_name'], created_by=actor_id)
            session.add(role)
            created += 1
        else:
            updated += 1
        role.description = preset['description']
        role.is_system = True
        role.status = ROLE_STATUS_ACTIVE
        role.permissions = preset['permissions']
        role.updated_by = actor_id
    session.flush()
    logger.info('Default roles seeded (created=%s, updated=%s)', created, updated)
    return created, updated


__all__ = ['active_module_names', 'ensure_default_modules', 'ensure_default_roles']
