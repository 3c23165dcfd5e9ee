"""Company (tenant) isolation gates.

Three strategies:
  enforce_company_access(lookup)   single identified resource must belong to the caller's company
  scope_to_company                 listing queries get the caller's company injected
  verify_user_company_access       a referenced peer user must share the caller's company

Admins bypass the resource and peer checks. A resource or peer with no company is shared by
every tenant. Whether a caller without a company is tolerated is governed per strategy by
``TENANT_STRICT_RESOURCE_SCOPE`` (default False) and ``TENANT_STRICT_QUERY_SCOPE`` (default True).
"""
from __future__ import annotations
from functools import wraps
from typing import Any, Callable, Optional
import logging
from flask import current_app, g, request
from werkzeug.exceptions import HTTPException
from hrms import get_db
from hrms.constants.domain import ERROR_MESSAGES
from hrms.constants.permissions import ROLE_ADMIN
from hrms.decorators.auth import current_principal, user_store
from hrms.errors import Forbidden, NotFound, InternalError, ValidationFailed
from hrms.utils.validation import check_identifier

logger = logging.getLogger(__name__)

COMPANY_QUERY_PARAM = 'companyId'


def same_company(a: Optional[Any], b: Optional[Any]) -> bool:
    return (str(a) if a is not None else None) == (str(b) if b is not None else None)


def _resolve_lookup(lookup) -> Callable[[Any], Any]:
    """Accept a mapped model class or a plain ``id -> resource | None`` callable."""
    if hasattr(lookup, '__table__'):
        model = lookup

        def load(resource_id):
            try:
                pk = int(resource_id)
            except (TypeError, ValueError):
                return None
            return get_db().get(model, pk)
        return load
    return lookup


def enforce_company_access(lookup, id_arg: str = 'id'):
    load = _resolve_lookup(lookup)

    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = current_principal()
            if user.role == ROLE_ADMIN:
                return fn(*args, **kwargs)
            if user.company_id is None:
                if current_app.config.get('TENANT_STRICT_RESOURCE_SCOPE', False):
                    raise Forbidden(ERROR_MESSAGES['COMPANY_REQUIRED'])
                logger.warning('User %s (%s) has no company associated', user.id, user.role)
                return fn(*args, **kwargs)
            try:
                resource_id = kwargs.get(id_arg)
                if resource_id is not None:
                    resource = load(resource_id)
                    if resource is None:
                        raise NotFound(ERROR_MESSAGES['NOT_FOUND'])
                    owner = getattr(resource, 'company_id', None)
                    if owner is not None and not same_company(owner, user.company_id):
                        raise Forbidden(ERROR_MESSAGES['COMPANY_ACCESS_DENIED'])
                    g.resource = resource
            except HTTPException:
                raise
            except Exception:
                logger.exception('Company access check failed')
                raise InternalError('Error verifying company access')
            return fn(*args, **kwargs)
        return wrapper
    return outer


def scope_to_company(fn):
    """Inject the caller's company into the effective query (``g.query``, int ``g.company_scope``)."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = current_principal()
        query = request.args.to_dict()
        if query.get(COMPANY_QUERY_PARAM):
            errors = check_identifier(query[COMPANY_QUERY_PARAM], COMPANY_QUERY_PARAM)
            if errors:
                raise ValidationFailed(errors, description=errors[0])
        if user.company_id is None:
            if current_app.config.get('TENANT_STRICT_QUERY_SCOPE', True):
                raise Forbidden(ERROR_MESSAGES['COMPANY_REQUIRED'])
            logger.warning('User %s (%s) has no company associated; listing unscoped', user.id, user.role)
        else:
            requested = query.get(COMPANY_QUERY_PARAM)
            if not requested:
                query[COMPANY_QUERY_PARAM] = str(user.company_id)
            elif not same_company(requested, user.company_id) and user.role != ROLE_ADMIN:
                raise Forbidden(ERROR_MESSAGES['COMPANY_ACCESS_DENIED'])
        g.query = query
        scope = query.get(COMPANY_QUERY_PARAM)
        g.company_scope = int(scope) if scope else None
        return fn(*args, **kwargs)
    return wrapper


def _target_user_id(kwargs) -> Optional[Any]:
    if kwargs.get('user_id') is not None:
        return kwargs['user_id']
    body = request.get_json(silent=True)
    if isinstance(body, dict) and body.get('userId'):
        return body['userId']
    return request.args.get('userId') or None


def verify_user_company_access(fn=None, *, store=None):
    """Peer guard for endpoints naming a second user (route ``user_id``, body or query ``userId``)."""
    def outer(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = current_principal()
            target_id = _target_user_id(kwargs)
            if target_id is None or user.role == ROLE_ADMIN:
                return view(*args, **kwargs)
            try:
                target = (store or user_store()).get_user(target_id)
                if target is None:
                    raise NotFound(ERROR_MESSAGES['USER_NOT_FOUND'])
                if not same_company(target.company_id, user.company_id):
                    raise Forbidden(ERROR_MESSAGES['COMPANY_ACCESS_DENIED'])
            except HTTPException:
                raise
            except Exception:
                logger.exception('User company access check failed')
                raise InternalError('Error verifying user company access')
            g.target_user = target
            return view(*args, **kwargs)
        return wrapper
    if fn is not None:
        return outer(fn)
    return outer


__all__ = ['enforce_company_access', 'scope_to_company', 'verify_user_company_access', 'same_company', 'COMPANY_QUERY_PARAM']
