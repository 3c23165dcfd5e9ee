"""Leave request rules that need the database: overlap and half-day conflict detection."""
from __future__ import annotations
from datetime import date
from typing import Optional
from sqlalchemy import select, and_, or_
from hrms.models.leave import Leave
from hrms.utils.fsm import TransitionValidator

LEAVE_FSM = TransitionValidator({
    Leave.STATUS_PENDING: {Leave.STATUS_APPROVED, Leave.STATUS_REJECTED, Leave.STATUS_CANCELLED},
    Leave.STATUS_APPROVED: {Leave.STATUS_CANCELLED},
})


def find_overlapping_leave(session, user_id: int, start: date, end: date) -> Optional[Leave]:
    """An open leave of the user sharing at least one calendar day with [start, end]."""
    return session.execute(
        select(Leave).where(
            Leave.user_id == user_id,
            Leave.status.in_(Leave.OPEN_STATUSES),
            Leave.start_date <= end,
            Leave.end_date >= start,
        ).order_by(Leave.id.asc())
    ).scalars().first()


def find_half_day_conflict(session, user_id: int, day: date, session_name: str) -> Optional[Leave]:
    """Open full-day leave covering ``day``, or an open half-day on ``day`` for the same session."""
    return session.execute(
        select(Leave).where(
            Leave.user_id == user_id,
            Leave.status.in_(Leave.OPEN_STATUSES),
            or_(
                and_(Leave.is_half_day.is_(False), Leave.start_date <= day, Leave.end_date >= day),
                and_(Leave.is_half_day.is_(True), Leave.session == session_name, Leave.start_date == day),
            ),
        ).order_by(Leave.is_half_day.asc(), Leave.id.asc())
    ).scalars().first()


def half_day_conflict_message(conflict: Leave) -> str:
    if conflict.is_half_day:
        return 'A half-day leave already exists for this date and session'
    return 'A full-day leave already exists on this date'


__all__ = ['LEAVE_FSM', 'find_overlapping_leave', 'find_half_day_conflict', 'half_day_conflict_message']
