"""Read-only store adapters consulted by the authorization gates.

Gates depend on these small interfaces rather than on the ORM session so tests (or an
alternative backend) can hand them fakes at gate or application construction time.
"""
from __future__ import annotations
from typing import Callable, Optional, Protocol, Any
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from hrms.models.authz import Role, User
from hrms.constants.permissions import ROLE_STATUS_ACTIVE


class RoleStore(Protocol):
    def get_active_role(self, role_name: str) -> Optional[Any]: ...


class UserStore(Protocol):
    def get_user(self, user_id: Any) -> Optional[Any]: ...


def _coerce_id(raw) -> Optional[int]:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


class SqlRoleStore:
    def __init__(self, session_factory: Callable):
        self.session_factory = session_factory

    def get_active_role(self, role_name: str) -> Optional[Role]:
        session = self.session_factory()
        try:
            return session.execute(
                select(Role).where(Role.role_name == role_name, Role.status == ROLE_STATUS_ACTIVE).order_by(Role.id.asc())
            ).scalars().first()
        except SQLAlchemyError:
            session.rollback()
            raise


class SqlUserStore:
    def __init__(self, session_factory: Callable):
        self.session_factory = session_factory

    def get_user(self, user_id) -> Optional[User]:
        pk = _coerce_id(user_id)
        if pk is None:
            return None
        session = self.session_factory()
        try:
            return session.get(User, pk)
        except SQLAlchemyError:
            session.rollback()
            raise


__all__ = ['RoleStore', 'UserStore', 'SqlRoleStore', 'SqlUserStore']
