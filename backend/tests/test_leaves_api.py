from datetime import date, timedelta
from hrms import get_db
from hrms.models.authz import User
from tests.test_utils_seed import ensure_company, ensure_user, auth_headers, next_monday, create_leave


def _leave_body(start, end=None, **overrides):
    body = {'leaveType': 'paid', 'startDate': start.isoformat(), 'endDate': (end or start).isoformat(), 'reason': 'Family trip'}
    body.update(overrides)
    return body


def _half_day_body(day, session='morning'):
    return {'leaveType': 'sick', 'date': day.isoformat(), 'session': session, 'reason': 'Clinic visit'}


def _reload(model, pk):
    session = get_db()
    session.expire_all()
    return session.get(model, pk)


def _setup(app):
    acme = ensure_company('Acme')
    emp = ensure_user('emp@example.com', company=acme)
    hr = ensure_user('hr@example.com', role='hr', company=acme)
    return acme, emp, hr


def test_create_leave_counts_working_days(client, app_instance):
    _, emp, _ = _setup(app_instance)
    monday = next_monday()
    # Monday through the following Monday: five weekdays + one
    resp = client.post('/api/leaves', json=_leave_body(monday, monday + timedelta(days=7)), headers=auth_headers(app_instance, emp))
    assert resp.status_code == 201, resp.get_json()
    body = resp.get_json()
    assert body['message'] == 'Leave request submitted successfully'
    assert body['data']['days'] == 6
    assert body['data']['status'] == 'pending'
    assert body['data']['companyId'] == emp.company_id


def test_weekend_only_leave_rejected(client, app_instance):
    _, emp, _ = _setup(app_instance)
    saturday = next_monday() + timedelta(days=5)
    resp = client.post('/api/leaves', json=_leave_body(saturday, saturday + timedelta(days=1)), headers=auth_headers(app_instance, emp))
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Leave must be at least 1 working day'


def test_overlapping_leave_rejected(client, app_instance):
    _, emp, _ = _setup(app_instance)
    monday = next_monday()
    create_leave(emp, monday, monday + timedelta(days=2))
    resp = client.post('/api/leaves', json=_leave_body(monday + timedelta(days=2), monday + timedelta(days=3)),
                       headers=auth_headers(app_instance, emp))
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Leave dates overlap with existing leave request'


def test_rejected_leave_does_not_block_new_request(client, app_instance):
    _, emp, _ = _setup(app_instance)
    monday = next_monday()
    create_leave(emp, monday, status='rejected')
    resp = client.post('/api/leaves', json=_leave_body(monday), headers=auth_headers(app_instance, emp))
    assert resp.status_code == 201


def test_half_day_conflicts(client, app_instance):
    _, emp, _ = _setup(app_instance)
    headers = auth_headers(app_instance, emp)
    monday, tuesday = next_monday(), next_monday() + timedelta(days=1)
    create_leave(emp, monday)
    full = client.post('/api/leaves/half-day', json=_half_day_body(monday), headers=headers)
    assert full.status_code == 400
    assert full.get_json()['message'] == 'A full-day leave already exists on this date'

    first = client.post('/api/leaves/half-day', json=_half_day_body(tuesday, 'morning'), headers=headers)
    assert first.status_code == 201
    assert first.get_json()['data']['days'] == 0.5
    assert first.get_json()['data']['isHalfDay'] is True
    again = client.post('/api/leaves/half-day', json=_half_day_body(tuesday, 'morning'), headers=headers)
    assert again.status_code == 400
    assert again.get_json()['message'] == 'A half-day leave already exists for this date and session'
    other = client.post('/api/leaves/half-day', json=_half_day_body(tuesday, 'afternoon'), headers=headers)
    assert other.status_code == 201


def test_approve_then_cancel_lifecycle(client, app_instance):
    _, emp, hr = _setup(app_instance)
    leave = create_leave(emp, next_monday())
    hr_headers = auth_headers(app_instance, hr)
    ok = client.put(f'/api/leaves/{leave.id}/approve', json={'reviewNote': 'Enjoy'}, headers=hr_headers)
    assert ok.status_code == 200, ok.get_json()
    assert ok.get_json()['data']['status'] == 'approved'
    assert ok.get_json()['data']['reviewedBy'] == hr.id

    twice = client.put(f'/api/leaves/{leave.id}/approve', json={}, headers=hr_headers)
    assert twice.status_code == 400
    assert twice.get_json()['message'] == 'Invalid status transition'

    cancel = client.put(f'/api/leaves/{leave.id}/cancel', headers=auth_headers(app_instance, emp))
    assert cancel.status_code == 200
    assert cancel.get_json()['message'] == 'Leave cancelled successfully'
    again = client.put(f'/api/leaves/{leave.id}/cancel', headers=auth_headers(app_instance, emp))
    assert again.status_code == 400
    assert again.get_json()['message'] == 'Cannot cancel this leave request'


def test_reject_requires_note(client, app_instance):
    _, emp, hr = _setup(app_instance)
    leave = create_leave(emp, next_monday())
    hr_headers = auth_headers(app_instance, hr)
    missing = client.put(f'/api/leaves/{leave.id}/reject', json={}, headers=hr_headers)
    assert missing.status_code == 400
    assert missing.get_json()['message'] == 'Review note is required when rejecting leave'
    ok = client.put(f'/api/leaves/{leave.id}/reject', json={'reviewNote': 'Peak season'}, headers=hr_headers)
    assert ok.status_code == 200
    assert ok.get_json()['data']['status'] == 'rejected'
    assert ok.get_json()['data']['reviewNote'] == 'Peak season'


def test_employee_cannot_review(client, app_instance):
    acme, emp, _ = _setup(app_instance)
    peer = ensure_user('peer@example.com', company=acme)
    leave = create_leave(peer, next_monday())
    resp = client.put(f'/api/leaves/{leave.id}/approve', json={}, headers=auth_headers(app_instance, emp))
    assert resp.status_code == 403
    assert resp.get_json()['message'] == 'User role employee is not authorized to access this route'


def test_hr_request_needs_admin_review(client, app_instance):
    acme, _, hr = _setup(app_instance)
    other_hr = ensure_user('hr2@example.com', role='hr', company=acme)
    admin = ensure_user('admin@example.com', role='admin', company=acme)
    leave = create_leave(hr, next_monday())
    denied = client.put(f'/api/leaves/{leave.id}/approve', json={}, headers=auth_headers(app_instance, other_hr))
    assert denied.status_code == 403
    assert denied.get_json()['message'] == 'Only admin can approve HR leave requests'
    denied = client.put(f'/api/leaves/{leave.id}/reject', json={'reviewNote': 'no'}, headers=auth_headers(app_instance, other_hr))
    assert denied.get_json()['message'] == 'Only admin can reject HR leave requests'
    ok = client.put(f'/api/leaves/{leave.id}/approve', json={}, headers=auth_headers(app_instance, admin))
    assert ok.status_code == 200


def test_approving_current_leave_marks_user_on_leave(client, app_instance):
    _, emp, hr = _setup(app_instance)
    leave = create_leave(emp, date.today())
    resp = client.put(f'/api/leaves/{leave.id}/approve', json={}, headers=auth_headers(app_instance, hr))
    assert resp.status_code == 200
    assert _reload(User, emp.id).status == 'on-leave'
    cancel = client.put(f'/api/leaves/{leave.id}/cancel', headers=auth_headers(app_instance, hr))
    assert cancel.status_code == 200
    assert _reload(User, emp.id).status == 'active'


def test_future_approval_keeps_user_active(client, app_instance):
    _, emp, hr = _setup(app_instance)
    leave = create_leave(emp, next_monday(1))
    client.put(f'/api/leaves/{leave.id}/approve', json={}, headers=auth_headers(app_instance, hr))
    assert _reload(User, emp.id).status == 'active'


def test_cancel_by_other_employee_denied(client, app_instance):
    acme, emp, _ = _setup(app_instance)
    peer = ensure_user('peer@example.com', company=acme)
    leave = create_leave(peer, next_monday())
    resp = client.put(f'/api/leaves/{leave.id}/cancel', headers=auth_headers(app_instance, emp))
    assert resp.status_code == 403
    assert resp.get_json()['message'] == 'Access denied'


def test_employee_views_only_own_leave(client, app_instance):
    acme, emp, hr = _setup(app_instance)
    peer = ensure_user('peer@example.com', company=acme)
    mine = create_leave(emp, next_monday())
    theirs = create_leave(peer, next_monday())
    headers = auth_headers(app_instance, emp)
    assert client.get(f'/api/leaves/{mine.id}', headers=headers).status_code == 200
    denied = client.get(f'/api/leaves/{theirs.id}', headers=headers)
    assert denied.status_code == 403
    assert denied.get_json()['message'] == 'Access denied'
    assert client.get(f'/api/leaves/{theirs.id}', headers=auth_headers(app_instance, hr)).status_code == 200

    listing = client.get('/api/leaves', headers=headers).get_json()
    assert [row['id'] for row in listing['data']] == [mine.id]
    hr_listing = client.get(f'/api/leaves?userId={peer.id}', headers=auth_headers(app_instance, hr)).get_json()
    assert [row['id'] for row in hr_listing['data']] == [theirs.id]


def test_list_filters_by_status(client, app_instance):
    _, emp, hr = _setup(app_instance)
    create_leave(emp, next_monday(), status='approved')
    pending = create_leave(emp, next_monday(1))
    body = client.get('/api/leaves?status=pending', headers=auth_headers(app_instance, hr)).get_json()
    assert [row['id'] for row in body['data']] == [pending.id]


def test_pagination_meta(client, app_instance):
    _, emp, _ = _setup(app_instance)
    for week in range(3):
        create_leave(emp, next_monday(week))
    headers = auth_headers(app_instance, emp)
    first = client.get('/api/leaves?limit=2', headers=headers).get_json()
    assert first['count'] == 2
    assert first['pagination'] == {
        'currentPage': 1, 'totalPages': 2, 'totalItems': 3, 'itemsPerPage': 2,
        'hasNextPage': True, 'hasPrevPage': False,
    }
    second = client.get('/api/leaves?limit=2&page=2', headers=headers).get_json()
    assert second['count'] == 1
    assert second['pagination']['hasNextPage'] is False
    assert second['pagination']['hasPrevPage'] is True
    capped = client.get('/api/leaves?limit=500', headers=headers).get_json()
    assert capped['pagination']['itemsPerPage'] == 100
    bad = client.get('/api/leaves?limit=abc', headers=headers)
    assert bad.status_code == 400
    assert bad.get_json()['message'] == 'page/limit must be int'


def test_sorting(client, app_instance):
    _, emp, _ = _setup(app_instance)
    later = create_leave(emp, next_monday(2))
    sooner = create_leave(emp, next_monday())
    headers = auth_headers(app_instance, emp)
    asc = client.get('/api/leaves?sort=startDate', headers=headers).get_json()
    assert [row['id'] for row in asc['data']] == [sooner.id, later.id]
    desc = client.get('/api/leaves?sort=-startDate', headers=headers).get_json()
    assert [row['id'] for row in desc['data']] == [later.id, sooner.id]
    # default ordering is newest record first
    default = client.get('/api/leaves', headers=headers).get_json()
    assert [row['id'] for row in default['data']] == [sooner.id, later.id]
    bad = client.get('/api/leaves?sort=salary', headers=headers)
    assert bad.status_code == 400
    assert bad.get_json()['message'] == 'Invalid sort field salary'


def test_date_range_filter_and_validation(client, app_instance):
    _, emp, _ = _setup(app_instance)
    first = create_leave(emp, next_monday())
    create_leave(emp, next_monday(3))
    headers = auth_headers(app_instance, emp)
    start, end = next_monday(), next_monday() + timedelta(days=4)
    body = client.get(f'/api/leaves?startDate={start.isoformat()}&endDate={end.isoformat()}', headers=headers).get_json()
    assert [row['id'] for row in body['data']] == [first.id]
    bad = client.get(f'/api/leaves?startDate={end.isoformat()}&endDate={start.isoformat()}', headers=headers)
    assert bad.status_code == 400
    assert bad.get_json()['errors'] == ['Start date must be before end date']
