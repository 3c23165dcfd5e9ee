"""JSON shapes for API responses (camelCase keys)."""
from __future__ import annotations
from typing import Any, Dict, Optional


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def user_dict(u) -> Dict[str, Any]:
    return {
        'id': u.id,
        'employeeId': u.employee_id,
        'name': u.name,
        'email': u.email,
        'phone': u.phone,
        'role': u.role,
        'companyId': u.company_id,
        'status': u.status,
        'department': u.department,
        'position': u.position,
    }


def role_dict(r) -> Dict[str, Any]:
    return {
        'id': r.id,
        'roleName': r.role_name,
        'description': r.description,
        'isSystem': bool(r.is_system),
        'status': r.status,
        'permissions': r.permissions or [],
        'createdBy': r.created_by,
        'updatedBy': r.updated_by,
    }


def module_dict(m) -> Dict[str, Any]:
    return {
        'id': m.id,
        'name': m.name,
        'label': m.label,
        'description': m.description,
        'isSystem': bool(m.is_system),
        'isActive': bool(m.is_active),
        'sortOrder': m.sort_order,
    }


def leave_dict(lv) -> Dict[str, Any]:
    return {
        'id': lv.id,
        'userId': lv.user_id,
        'companyId': lv.company_id,
        'leaveType': lv.leave_type,
        'isHalfDay': bool(lv.is_half_day),
        'session': lv.session,
        'startDate': _iso(lv.start_date),
        'endDate': _iso(lv.end_date),
        'days': lv.days,
        'reason': lv.reason,
        'status': lv.status,
        'reviewedBy': lv.reviewed_by,
        'reviewNote': lv.review_note,
    }


def expense_dict(e) -> Dict[str, Any]:
    return {
        'id': e.id,
        'userId': e.user_id,
        'companyId': e.company_id,
        'category': e.category,
        'amount': e.amount_cents / 100,
        'amountCents': e.amount_cents,
        'date': _iso(e.expense_date),
        'description': e.description,
        'status': e.status,
    }


def task_dict(t) -> Dict[str, Any]:
    return {
        'id': t.id,
        'title': t.title,
        'description': t.description,
        'assignedTo': t.assigned_to,
        'assignedBy': t.assigned_by,
        'companyId': t.company_id,
        'priority': t.priority,
        'status': t.status,
        'progress': t.progress,
        'dueDate': _iso(t.due_date),
    }


def attendance_dict(a) -> Dict[str, Any]:
    def _loc(lat, lng):
        return {'latitude': lat, 'longitude': lng} if lat is not None else None
    return {
        'id': a.id,
        'userId': a.user_id,
        'companyId': a.company_id,
        'date': _iso(a.work_date),
        'checkIn': _iso(a.check_in),
        'checkOut': _iso(a.check_out),
        'checkInLocation': _loc(a.check_in_lat, a.check_in_lng),
        'checkOutLocation': _loc(a.check_out_lat, a.check_out_lng),
        'status': a.status,
    }


def policy_dict(p) -> Dict[str, Any]:
    return {
        'id': p.id,
        'companyId': p.company_id,
        'title': p.title,
        'category': p.category,
        'content': p.content,
        'isActive': bool(p.is_active),
    }
