from functools import wraps
import logging
from flask import current_app, g
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from flask_jwt_extended.exceptions import JWTExtendedException, NoAuthorizationError
from jwt import PyJWTError
from hrms.constants.domain import ERROR_MESSAGES
from hrms.constants.permissions import ROLE_ADMIN
from hrms.errors import Unauthenticated, Forbidden, InternalError
from hrms.services.policy import check_module_access

logger = logging.getLogger(__name__)


def role_store():
    return current_app.extensions['hrms.role_store']


def user_store():
    return current_app.extensions['hrms.user_store']


def current_principal():
    """The authenticated user for this request; 401 when no gate has resolved one."""
    user = g.get('current_user')
    if user is None:
        raise Unauthenticated(ERROR_MESSAGES['UNAUTHORIZED'])
    return user


def authenticate(store=None):
    """Verify the bearer token and attach the resolved user to ``g.current_user``.

    Usable directly as a blueprint ``before_request`` hook.
    """
    try:
        try:
            verify_jwt_in_request()
        except NoAuthorizationError:
            raise Unauthenticated(ERROR_MESSAGES['UNAUTHORIZED'])
        except (JWTExtendedException, PyJWTError):
            raise Unauthenticated(ERROR_MESSAGES['TOKEN_FAILED'])
        user = (store or user_store()).get_user(get_jwt_identity())
        if user is None:
            raise Unauthenticated(ERROR_MESSAGES['USER_NOT_FOUND'])
    except Unauthenticated:
        raise
    except Exception:
        logger.exception('Authentication lookup failed')
        raise InternalError(ERROR_MESSAGES['AUTH_SERVER_ERROR'])
    g.current_user = user
    return None


def protect(fn=None, *, store=None):
    """Require a valid bearer token. Works as ``@protect`` or ``@protect(store=...)``."""
    def outer(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            authenticate(store)
            return view(*args, **kwargs)
        return wrapper
    if fn is not None:
        return outer(fn)
    return outer


def authorize(*roles: str):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = current_principal()
            if user.role not in roles:
                raise Forbidden(f'User role {user.role} is not authorized to access this route')
            return fn(*args, **kwargs)
        return wrapper
    return outer


def check_permission(module: str, action: str = 'view', *, store=None, fail_open=None):
    """Module/action gate backed by the role permission matrix.

    Admin always passes. Lookup failures are logged and, unless the app (or this gate) is
    configured fail-closed, let the request through.
    """
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = current_principal()
            if user.role != ROLE_ADMIN:
                try:
                    denial = check_module_access(store or role_store(), user.role, module, action)
                except Exception as e:
                    allow = fail_open if fail_open is not None else current_app.config.get('PERMISSION_FAIL_OPEN', True)
                    logger.warning('Permission check error for %s/%s (role=%s): %s', module, action, user.role, e)
                    if not allow:
                        raise InternalError(ERROR_MESSAGES['PERMISSION_CHECK_FAILED'])
                    denial = None
                if denial:
                    raise Forbidden(denial)
            return fn(*args, **kwargs)
        return wrapper
    return outer


__all__ = ['authenticate', 'protect', 'authorize', 'check_permission', 'current_principal', 'role_store', 'user_store']
