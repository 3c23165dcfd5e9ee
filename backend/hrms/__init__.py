from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from datetime import timedelta
from typing import Optional, Dict, Any
import logging
import os

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def create_app(config: Optional[Dict[str, Any]] = None, role_store=None, user_store=None):
    global db_engine, SessionLocal
    app = Flask(__name__)

    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['DATABASE_URL'] = os.getenv('DATABASE_URL', 'sqlite:///dev.db')
    app.config['JWT_ACCESS_TOKEN_EXPIRES_HOURS'] = int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES_HOURS', '24'))
    # Authorization policy switches
    app.config['PERMISSION_FAIL_OPEN'] = _env_flag('PERMISSION_FAIL_OPEN', True)
    app.config['TENANT_STRICT_RESOURCE_SCOPE'] = _env_flag('TENANT_STRICT_RESOURCE_SCOPE', False)
    app.config['TENANT_STRICT_QUERY_SCOPE'] = _env_flag('TENANT_STRICT_QUERY_SCOPE', True)
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')

    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    app.config['JWT_ACCESS_TOKEN_EXPIRES'] = timedelta(hours=app.config['JWT_ACCESS_TOKEN_EXPIRES_HOURS'])
    app.logger.setLevel(getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO))

    # Database
    db_url = app.config['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        db_engine = create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_engine = create_engine(db_url, echo=False, future=True)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    jwt.init_app(app)
    _register_jwt_handlers()

    # Stores consulted by the authorization gates unless a gate is given its own
    from .services.stores import SqlRoleStore, SqlUserStore
    app.extensions['hrms.role_store'] = role_store or SqlRoleStore(get_db)
    app.extensions['hrms.user_store'] = user_store or SqlUserStore(get_db)

    from .routes.setup import setup_bp
    from .routes.auth import auth_bp
    from .routes.settings import settings_bp
    from .routes.leaves import leaves_bp
    from .routes.expenses import expenses_bp
    from .routes.tasks import tasks_bp
    from .routes.attendance import attendance_bp
    from .routes.policies import policies_bp
    from .routes.users import users_bp
    app.register_blueprint(setup_bp, url_prefix='/api/setup')
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(settings_bp, url_prefix='/api/settings')
    app.register_blueprint(leaves_bp, url_prefix='/api/leaves')
    app.register_blueprint(expenses_bp, url_prefix='/api/expenses')
    app.register_blueprint(tasks_bp, url_prefix='/api/tasks')
    app.register_blueprint(attendance_bp, url_prefix='/api/attendance')
    app.register_blueprint(policies_bp, url_prefix='/api/policies')
    app.register_blueprint(users_bp, url_prefix='/api/users')

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    # Unified error handler producing the {success, message, errors?} shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            payload = {'success': False, 'message': e.description or e.name}
            errors = getattr(e, 'errors', None)
            if errors:
                payload['errors'] = list(errors)
            return payload, e.code
        app.logger.exception('Unhandled exception')
        return {'success': False, 'message': 'Server error occurred'}, 500

    return app


def _register_jwt_handlers():
    """Render flask-jwt-extended rejections in the API error shape."""

    @jwt.unauthorized_loader
    def _missing_token(reason):
        return {'success': False, 'message': 'Not authorized to access this route'}, 401

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        return {'success': False, 'message': 'Not authorized, token failed'}, 401

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return {'success': False, 'message': 'Not authorized, token failed'}, 401


def get_db():
    return SessionLocal()
