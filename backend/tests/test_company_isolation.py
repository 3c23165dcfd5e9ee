from hrms import get_db
from hrms.models.authz import User
from hrms.models.policy import CompanyPolicy
from tests.test_utils_seed import (
    build_app, ensure_company, ensure_user, auth_headers, next_monday, create_leave,
)

CROSS_COMPANY = 'Access denied: Cross-company data access not allowed'
NO_COMPANY = 'User must be associated with a company'


def _two_companies():
    return ensure_company('Acme'), ensure_company('Globex')


# --- per-resource guard ---

def test_cross_company_resource_is_403(client, app_instance):
    acme, globex = _two_companies()
    hr_a = ensure_user('hr_a@example.com', role='hr', company=acme)
    emp_b = ensure_user('emp_b@example.com', company=globex)
    leave = create_leave(emp_b, next_monday())
    resp = client.get(f'/api/leaves/{leave.id}', headers=auth_headers(app_instance, hr_a))
    assert resp.status_code == 403
    assert resp.get_json()['message'] == CROSS_COMPANY


def test_same_company_resource_passes(client, app_instance):
    acme, _ = _two_companies()
    hr_a = ensure_user('hr_a@example.com', role='hr', company=acme)
    emp_a = ensure_user('emp_a@example.com', company=acme)
    leave = create_leave(emp_a, next_monday())
    resp = client.get(f'/api/leaves/{leave.id}', headers=auth_headers(app_instance, hr_a))
    assert resp.status_code == 200
    assert resp.get_json()['data']['id'] == leave.id


def test_resource_without_company_is_shared(client, app_instance):
    acme, _ = _two_companies()
    hr_a = ensure_user('hr_a@example.com', role='hr', company=acme)
    legacy = ensure_user('legacy@example.com')
    leave = create_leave(legacy, next_monday(), company_id=None)
    resp = client.get(f'/api/leaves/{leave.id}', headers=auth_headers(app_instance, hr_a))
    assert resp.status_code == 200


def test_missing_resource_is_404(client, app_instance):
    acme, _ = _two_companies()
    hr_a = ensure_user('hr_a@example.com', role='hr', company=acme)
    resp = client.get('/api/leaves/4242', headers=auth_headers(app_instance, hr_a))
    assert resp.status_code == 404
    assert resp.get_json()['message'] == 'Resource not found'


def test_malformed_identifier_is_400(client, app_instance):
    acme, _ = _two_companies()
    hr_a = ensure_user('hr_a@example.com', role='hr', company=acme)
    resp = client.get('/api/leaves/not-an-id', headers=auth_headers(app_instance, hr_a))
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Invalid leave_id'


def test_admin_bypasses_resource_guard(client, app_instance):
    acme, globex = _two_companies()
    admin = ensure_user('admin@example.com', role='admin', company=acme)
    emp_b = ensure_user('emp_b@example.com', company=globex)
    leave = create_leave(emp_b, next_monday())
    resp = client.get(f'/api/leaves/{leave.id}', headers=auth_headers(app_instance, admin))
    assert resp.status_code == 200


def test_caller_without_company_passes_resource_guard(client, app_instance):
    _, globex = _two_companies()
    floating_hr = ensure_user('floating@example.com', role='hr')
    emp_b = ensure_user('emp_b@example.com', company=globex)
    leave = create_leave(emp_b, next_monday())
    resp = client.get(f'/api/leaves/{leave.id}', headers=auth_headers(app_instance, floating_hr))
    assert resp.status_code == 200


def test_strict_resource_scope_rejects_caller_without_company():
    app = build_app({'TENANT_STRICT_RESOURCE_SCOPE': True})
    globex = ensure_company('Globex')
    floating_hr = ensure_user('floating@example.com', role='hr')
    emp_b = ensure_user('emp_b@example.com', company=globex)
    leave = create_leave(emp_b, next_monday())
    resp = app.test_client().get(f'/api/leaves/{leave.id}', headers=auth_headers(app, floating_hr))
    assert resp.status_code == 403
    assert resp.get_json()['message'] == NO_COMPANY


def test_cross_company_policy_is_403_shared_policy_passes(client, app_instance):
    acme, globex = _two_companies()
    emp_a = ensure_user('emp_a@example.com', company=acme)
    session = get_db()
    foreign = CompanyPolicy(company_id=globex.id, title='Globex handbook', content='...')
    shared = CompanyPolicy(company_id=None, title='Code of conduct', content='...')
    session.add_all([foreign, shared]); session.commit()
    headers = auth_headers(app_instance, emp_a)
    assert client.get(f'/api/policies/{foreign.id}', headers=headers).status_code == 403
    assert client.get(f'/api/policies/{shared.id}', headers=headers).status_code == 200
    listed = client.get('/api/policies', headers=headers).get_json()['data']
    assert [p['title'] for p in listed] == ['Code of conduct']


# --- query-scoping guard ---

def test_listing_without_company_is_403(client, app_instance):
    floating = ensure_user('floating@example.com')
    resp = client.get('/api/leaves', headers=auth_headers(app_instance, floating))
    assert resp.status_code == 403
    assert resp.get_json()['message'] == NO_COMPANY


def test_listing_applies_to_admins_without_company(client, app_instance):
    platform_admin = ensure_user('root@example.com', role='admin')
    resp = client.get('/api/leaves', headers=auth_headers(app_instance, platform_admin))
    assert resp.status_code == 403


def test_relaxed_query_scope_lists_unscoped():
    app = build_app({'TENANT_STRICT_QUERY_SCOPE': False})
    acme, globex = _two_companies()
    floating_hr = ensure_user('floating@example.com', role='hr')
    create_leave(ensure_user('a@example.com', company=acme), next_monday())
    create_leave(ensure_user('b@example.com', company=globex), next_monday())
    resp = app.test_client().get('/api/leaves', headers=auth_headers(app, floating_hr))
    assert resp.status_code == 200
    assert resp.get_json()['pagination']['totalItems'] == 2


def test_listing_is_scoped_to_callers_company(client, app_instance):
    acme, globex = _two_companies()
    hr_a = ensure_user('hr_a@example.com', role='hr', company=acme)
    mine = create_leave(ensure_user('a@example.com', company=acme), next_monday())
    create_leave(ensure_user('b@example.com', company=globex), next_monday())
    body = client.get('/api/leaves', headers=auth_headers(app_instance, hr_a)).get_json()
    assert [row['id'] for row in body['data']] == [mine.id]


def test_explicit_foreign_company_id_is_403_for_non_admin(client, app_instance):
    acme, globex = _two_companies()
    hr_a = ensure_user('hr_a@example.com', role='hr', company=acme)
    resp = client.get(f'/api/leaves?companyId={globex.id}', headers=auth_headers(app_instance, hr_a))
    assert resp.status_code == 403
    assert resp.get_json()['message'] == CROSS_COMPANY


def test_admin_may_query_another_company(client, app_instance):
    acme, globex = _two_companies()
    admin = ensure_user('admin@example.com', role='admin', company=acme)
    theirs = create_leave(ensure_user('b@example.com', company=globex), next_monday())
    body = client.get(f'/api/leaves?companyId={globex.id}', headers=auth_headers(app_instance, admin)).get_json()
    assert [row['id'] for row in body['data']] == [theirs.id]


# --- peer-principal guard ---

def test_peer_in_other_company_is_403(client, app_instance):
    acme, globex = _two_companies()
    hr_a = ensure_user('hr_a@example.com', role='hr', company=acme)
    emp_b = ensure_user('emp_b@example.com', company=globex)
    resp = client.get(f'/api/users/{emp_b.id}', headers=auth_headers(app_instance, hr_a))
    assert resp.status_code == 403
    assert resp.get_json()['message'] == CROSS_COMPANY


def test_peer_in_same_company_passes(client, app_instance):
    acme, _ = _two_companies()
    hr_a = ensure_user('hr_a@example.com', role='hr', company=acme)
    emp_a = ensure_user('emp_a@example.com', company=acme)
    resp = client.get(f'/api/users/{emp_a.id}', headers=auth_headers(app_instance, hr_a))
    assert resp.status_code == 200
    assert resp.get_json()['data']['email'] == 'emp_a@example.com'


def test_unknown_peer_is_404(client, app_instance):
    acme, _ = _two_companies()
    hr_a = ensure_user('hr_a@example.com', role='hr', company=acme)
    resp = client.get('/api/users/777', headers=auth_headers(app_instance, hr_a))
    assert resp.status_code == 404
    assert resp.get_json()['message'] == 'User not found'


def test_admin_bypasses_peer_guard(client, app_instance):
    acme, globex = _two_companies()
    admin = ensure_user('admin@example.com', role='admin', company=acme)
    emp_b = ensure_user('emp_b@example.com', company=globex)
    resp = client.get(f'/api/users/{emp_b.id}', headers=auth_headers(app_instance, admin))
    assert resp.status_code == 200


def test_peer_from_query_parameter_is_guarded(client, app_instance):
    acme, globex = _two_companies()
    hr_a = ensure_user('hr_a@example.com', role='hr', company=acme)
    emp_b = ensure_user('emp_b@example.com', company=globex)
    resp = client.get(f'/api/attendance?userId={emp_b.id}', headers=auth_headers(app_instance, hr_a))
    assert resp.status_code == 403
    assert resp.get_json()['message'] == CROSS_COMPANY


def test_peer_store_failure_is_500():
    class FlakyUserStore:
        """Resolves the caller, fails on any other lookup."""
        def __init__(self):
            self.caller_id = None

        def get_user(self, user_id):
            if str(user_id) == str(self.caller_id):
                return get_db().get(User, int(user_id))
            raise RuntimeError('directory offline')

    store = FlakyUserStore()
    app = build_app(user_store=store)
    acme = ensure_company('Acme')
    hr_a = ensure_user('hr_a@example.com', role='hr', company=acme)
    store.caller_id = hr_a.id
    resp = app.test_client().get('/api/users/55', headers=auth_headers(app, hr_a))
    assert resp.status_code == 500
    assert resp.get_json()['message'] == 'Error verifying user company access'


def test_malformed_company_filter_is_400(client, app_instance):
    acme, _ = _two_companies()
    admin = ensure_user('admin@example.com', role='admin', company=acme)
    hr_a = ensure_user('hr_a@example.com', role='hr', company=acme)
    for path in ('/api/leaves', '/api/expenses', '/api/tasks', '/api/attendance', '/api/policies', '/api/users'):
        resp = client.get(f'{path}?companyId=abc', headers=auth_headers(app_instance, admin))
        assert resp.status_code == 400, path
        assert resp.get_json()['message'] == 'Invalid companyId'
    zero = client.get('/api/leaves?companyId=0', headers=auth_headers(app_instance, hr_a))
    assert zero.status_code == 400
