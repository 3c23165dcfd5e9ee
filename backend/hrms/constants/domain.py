"""Enumerations for the HR resources and the shared error messages."""
from __future__ import annotations

USER_STATUS_ACTIVE = 'active'
USER_STATUS_ON_LEAVE = 'on-leave'
USER_STATUS_INACTIVE = 'inactive'
USER_STATUSES = (USER_STATUS_ACTIVE, USER_STATUS_ON_LEAVE, USER_STATUS_INACTIVE)

LEAVE_TYPES = ('sick', 'paid', 'unpaid')
HALF_DAY_SESSIONS = ('morning', 'afternoon')

EXPENSE_CATEGORIES = ('travel', 'food', 'office-supplies', 'software', 'training', 'other')

TASK_PRIORITIES = ('low', 'medium', 'high')

ERROR_MESSAGES = {
    'UNAUTHORIZED': 'Not authorized to access this route',
    'TOKEN_FAILED': 'Not authorized, token failed',
    'USER_NOT_FOUND': 'User not found',
    'AUTH_SERVER_ERROR': 'Server error in authentication',
    'COMPANY_ACCESS_DENIED': 'Access denied: Cross-company data access not allowed',
    'COMPANY_REQUIRED': 'User must be associated with a company',
    'NOT_FOUND': 'Resource not found',
    'VALIDATION_FAILED': 'Validation failed',
    'PERMISSION_CHECK_FAILED': 'Unable to verify permissions',
}
