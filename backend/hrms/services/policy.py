"""Permission policy resolution for the module/action matrix.

A role resolves to one of two policies:

  Unrestricted        no active role record, or a record without entries. A freshly provisioned
                      install has no roles seeded, so every module/action is allowed until an
                      admin configures them.
  Configured(matrix)  module name -> action flags, taken from the role's entries in order
                      (the first entry for a module wins).

``evaluate`` turns a policy plus (module, action) into either ``None`` (allowed) or the
denial message.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from hrms.constants.permissions import ROLE_ADMIN


class PermissionPolicy:
    def evaluate(self, module: str, action: str = 'view') -> Optional[str]:
        raise NotImplementedError


@dataclass(frozen=True)
class Unrestricted(PermissionPolicy):
    def evaluate(self, module: str, action: str = 'view') -> Optional[str]:
        return None


@dataclass(frozen=True)
class Configured(PermissionPolicy):
    matrix: Mapping[str, Mapping[str, bool]] = field(default_factory=dict)

    def evaluate(self, module: str, action: str = 'view') -> Optional[str]:
        actions = self.matrix.get(module)
        if actions is None:
            return f'You do not have access to {module}'
        if actions.get(action) is not True:
            return f'You do not have {action} permission for {module}'
        return None


def _module_name(entry: Mapping[str, Any]) -> str:
    module = entry.get('module')
    if not isinstance(module, str) or not module.strip():
        raise ValueError('permission entry missing module')
    return module.strip().lower()


def _entry_actions(entry: Mapping[str, Any]) -> Mapping[str, Any]:
    actions = entry.get('actions')
    if actions is None:
        return {}
    if not isinstance(actions, Mapping):
        raise ValueError('permission entry actions must be an object')
    return actions


def coerce_flag(action: str, value: Any) -> bool:
    """Booleans pass through; the strings "true" / "false" are accepted, anything else is rejected."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ('true', 'false'):
        return value.strip().lower() == 'true'
    raise ValueError(f'permission flag {action} must be a boolean')


def normalize_entries(entries: Any) -> List[Dict[str, Any]]:
    """Canonical form of admin-submitted entries: trimmed lower-case module names, boolean flags.

    Raises ValueError describing the first malformed entry.
    """
    if not isinstance(entries, list):
        raise ValueError('permissions must be an array')
    normalized: List[Dict[str, Any]] = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise ValueError('permission entry must be an object')
        actions = _entry_actions(entry)
        normalized.append({
            'module': _module_name(entry),
            'actions': {str(k): coerce_flag(str(k), v) for k, v in actions.items()},
        })
    return normalized


def build_matrix(entries: Iterable[Mapping[str, Any]]) -> Dict[str, Dict[str, bool]]:
    matrix: Dict[str, Dict[str, bool]] = {}
    for entry in entries or []:
        if not isinstance(entry, Mapping):
            raise ValueError('permission entry must be an object')
        module = _module_name(entry)
        if module in matrix:
            continue
        # Only a literal true grants; stored strings or numbers never do
        matrix[module] = {str(k): v is True for k, v in _entry_actions(entry).items()}
    return matrix


def policy_for_record(record) -> PermissionPolicy:
    """Policy for a role record (or ``None`` when the role has no active record)."""
    entries = getattr(record, 'permissions', None) if record is not None else None
    if not entries:
        return Unrestricted()
    return Configured(build_matrix(entries))


def resolve_policy(store, role_name: str) -> PermissionPolicy:
    return policy_for_record(store.get_active_role(role_name))


def check_module_access(store, role_name: str, module: str, action: str = 'view') -> Optional[str]:
    """Return the denial message for ``role_name`` on module/action, or None when allowed."""
    if role_name == ROLE_ADMIN:
        return None
    return resolve_policy(store, role_name).evaluate(module, action)


__all__ = [
    'PermissionPolicy', 'Unrestricted', 'Configured', 'coerce_flag', 'normalize_entries', 'build_matrix',
    'policy_for_record', 'resolve_policy', 'check_module_access',
]
