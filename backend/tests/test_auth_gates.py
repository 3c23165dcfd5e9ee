from hrms.models.authz import User
from tests.test_utils_seed import build_app, ensure_company, ensure_user, auth_headers


class BrokenUserStore:
    def get_user(self, user_id):
        raise RuntimeError('user store offline')


def test_missing_bearer_header_is_401(client):
    resp = client.get('/api/leaves')
    assert resp.status_code == 401
    assert resp.get_json() == {'success': False, 'message': 'Not authorized to access this route'}


def test_non_bearer_header_is_401(client):
    resp = client.get('/api/auth/me', headers={'Authorization': 'Basic abc'})
    assert resp.status_code == 401
    assert resp.get_json()['message'] == 'Not authorized to access this route'


def test_garbage_token_is_401_token_failed(client):
    resp = client.get('/api/leaves', headers={'Authorization': 'Bearer not-a-jwt'})
    assert resp.status_code == 401
    assert resp.get_json()['message'] == 'Not authorized, token failed'


def test_token_signed_with_other_secret_fails():
    other = build_app({'JWT_SECRET_KEY': 'a-completely-different-signing-secret'})
    with other.app_context():
        ghost = ensure_user('ghost@example.com')
        headers = auth_headers(other, ghost)
    resp = other.test_client().get('/api/auth/me', headers=headers)
    assert resp.status_code == 200
    # Same token against an app with another secret
    foreign = build_app()
    resp = foreign.test_client().get('/api/auth/me', headers=headers)
    assert resp.status_code == 401
    assert resp.get_json()['message'] == 'Not authorized, token failed'


def test_expired_token_is_401(client, app_instance):
    from datetime import timedelta
    from flask_jwt_extended import create_access_token
    user = ensure_user('expired@example.com')
    with app_instance.app_context():
        token = create_access_token(identity=str(user.id), expires_delta=timedelta(seconds=-5))
    resp = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert resp.status_code == 401
    assert resp.get_json()['message'] == 'Not authorized, token failed'


def test_token_for_unknown_user_is_401(client, app_instance):
    headers = auth_headers(app_instance, User(id=9999))
    resp = client.get('/api/auth/me', headers=headers)
    assert resp.status_code == 401
    assert resp.get_json()['message'] == 'User not found'


def test_user_store_failure_is_500():
    app = build_app(user_store=BrokenUserStore())
    user = ensure_user('someone@example.com')
    resp = app.test_client().get('/api/auth/me', headers=auth_headers(app, user))
    assert resp.status_code == 500
    assert resp.get_json() == {'success': False, 'message': 'Server error in authentication'}


def test_valid_token_reaches_handler(client, app_instance):
    acme = ensure_company('Acme')
    user = ensure_user('me@example.com', role='hr', company=acme)
    resp = client.get('/api/auth/me', headers=auth_headers(app_instance, user))
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['success'] is True
    assert body['data']['email'] == 'me@example.com'
    assert body['data']['companyId'] == acme.id
