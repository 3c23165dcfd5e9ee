"""Central role / module / action definitions for the permission matrix.
Module names are admin-configurable at runtime; the lists here only seed a fresh install.
"""
from __future__ import annotations
from typing import Dict, List

ROLE_ADMIN = 'admin'
ROLE_HR = 'hr'
ROLE_EMPLOYEE = 'employee'
ROLE_CLIENT = 'client'
ROLES = (ROLE_ADMIN, ROLE_HR, ROLE_EMPLOYEE, ROLE_CLIENT)

ROLE_STATUS_ACTIVE = 'active'
ROLE_STATUS_INACTIVE = 'inactive'
ROLE_STATUSES = (ROLE_STATUS_ACTIVE, ROLE_STATUS_INACTIVE)

# Baseline action flags every module entry carries; entries may add more.
BASE_ACTIONS = ('view', 'create', 'edit', 'delete')

DEFAULT_MODULES: List[Dict[str, object]] = [
    {'name': 'dashboard', 'label': 'Dashboard', 'sort_order': 1},
    {'name': 'employees', 'label': 'Employees', 'sort_order': 2},
    {'name': 'attendance', 'label': 'Attendance', 'sort_order': 3},
    {'name': 'leaves', 'label': 'Leaves', 'sort_order': 4},
    {'name': 'tasks', 'label': 'Tasks', 'sort_order': 5},
    {'name': 'expenses', 'label': 'Expenses', 'sort_order': 6},
    {'name': 'payroll', 'label': 'Payroll', 'sort_order': 7},
    {'name': 'chat', 'label': 'Chat', 'sort_order': 8},
    {'name': 'announcements', 'label': 'Announcements', 'sort_order': 9},
    {'name': 'policies', 'label': 'Policies', 'sort_order': 10},
    {'name': 'companies', 'label': 'Companies', 'sort_order': 11},
    {'name': 'clients', 'label': 'Clients', 'sort_order': 12},
    {'name': 'settings', 'label': 'Settings', 'sort_order': 13},
    {'name': 'reports', 'label': 'Reports', 'sort_order': 14},
]

DEFAULT_MODULE_NAMES = [m['name'] for m in DEFAULT_MODULES]

EMPLOYEE_MODULES = ['dashboard', 'attendance', 'leaves', 'tasks', 'expenses', 'chat', 'announcements', 'policies']


def full_actions() -> Dict[str, bool]:
    return {a: True for a in BASE_ACTIONS}


def build_role_presets(modules: List[str]) -> List[Dict[str, object]]:
    """Default role records for the given module names (admin / hr / employee)."""
    return [
        {
            'role_name': ROLE_ADMIN,
            'description': 'Full system access',
            'permissions': [{'module': m, 'actions': full_actions()} for m in modules],
        },
        {
            'role_name': ROLE_HR,
            'description': 'HR management access',
            'permissions': [
                {'module': m, 'actions': {'view': True, 'create': True, 'edit': True, 'delete': m != 'payroll'}}
                for m in modules if m not in ('settings', 'companies')
            ],
        },
        {
            'role_name': ROLE_EMPLOYEE,
            'description': 'Basic employee access',
            'permissions': [
                {'module': m, 'actions': {'view': True, 'create': m not in ('announcements', 'policies'), 'edit': False, 'delete': False}}
                for m in EMPLOYEE_MODULES
            ],
        },
    ]
