from models import db, Admin


def admin_login(client, email, password):
    return client.post('/admin/login', json={'email': email, 'password': password})


def register_admin(client, n, admin_role='super_admin'):
    return client.post('/admin/register', json={
        'username': f'Admin {n}',
        'email': f'admin{n}@mybidhaa.test',
        'password': 'adminpass1',
        'admin_role': admin_role,
    })


def _set_cookie_headers(resp):
    return [h for h in resp.headers.getlist('Set-Cookie') if h.startswith('adminToken=')]


def test_admin_login_sets_http_only_strict_cookie(client, make_admin):
    make_admin(email='root@mybidhaa.test')
    resp = admin_login(client, 'root@mybidhaa.test', 'adminpass1')
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['admin']['admin_role'] == 'super_admin'
    cookie = _set_cookie_headers(resp)[0]
    assert 'HttpOnly' in cookie
    assert 'SameSite=Strict' in cookie
    assert 'Max-Age=86400' in cookie
    assert 'Secure' not in cookie


def test_admin_login_rejects_storefront_account(client, make_user):
    make_user(email='student@example.com')
    resp = admin_login(client, 'student@example.com', 'secret123')
    assert resp.status_code == 401


def test_verify_auth_and_profile(client, make_admin):
    make_admin(email='root@mybidhaa.test', username='Root')
    admin_login(client, 'root@mybidhaa.test', 'adminpass1')
    resp = client.get('/admin/verify-auth')
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['authenticated'] is True
    assert body['admin'] == {'username': 'Root', 'email': 'root@mybidhaa.test', 'role': 'super_admin'}

    profile = client.get('/admin/profile')
    assert profile.status_code == 200
    assert profile.get_json()['admin']['admin_role'] == 'super_admin'


def test_verify_auth_without_cookie(client):
    resp = client.get('/admin/verify-auth')
    assert resp.status_code == 401
    assert resp.get_json()['message'] == 'Access denied. Please login.'


def test_invalid_cookie_rejected_and_cleared(client):
    client.set_cookie('adminToken', 'not-a-jwt')
    resp = client.get('/admin/verify-auth')
    assert resp.status_code == 401
    assert resp.get_json()['message'] == 'Invalid token'
    cleared = _set_cookie_headers(resp)
    assert cleared and 'Max-Age=0' in cleared[0]


def test_user_token_not_accepted_as_admin_cookie(client, make_user):
    _, token = make_user()
    client.set_cookie('adminToken', token)
    assert client.get('/admin/verify-auth').status_code == 401


def test_vanished_admin_rejected(client, app, make_admin):
    admin = make_admin(email='gone@mybidhaa.test')
    admin_login(client, 'gone@mybidhaa.test', 'adminpass1')
    with app.app_context():
        db.session.delete(db.session.get(Admin, admin.id))
        db.session.commit()
    resp = client.get('/admin/verify-auth')
    assert resp.status_code == 401
    assert resp.get_json()['message'] == 'Invalid admin account'


def test_logout_clears_cookie(client, make_admin):
    make_admin(email='root@mybidhaa.test')
    admin_login(client, 'root@mybidhaa.test', 'adminpass1')
    resp = client.post('/admin/logout')
    assert resp.status_code == 200
    assert 'Max-Age=0' in _set_cookie_headers(resp)[0]
    assert client.get('/admin/verify-auth').status_code == 401


def test_super_admin_cap(client, app, make_admin):
    make_admin(email='root@mybidhaa.test')
    admin_login(client, 'root@mybidhaa.test', 'adminpass1')

    second = register_admin(client, 2)
    assert second.status_code == 201
    assert second.get_json()['admin']['created_by'] == 'Admin'
    assert register_admin(client, 3).status_code == 201

    fourth = register_admin(client, 4)
    assert fourth.status_code == 400
    assert fourth.get_json()['message'] == 'Maximum number of super admins (3) has been reached'
    with app.app_context():
        assert Admin.query.filter_by(admin_role='super_admin').count() == 3


def test_cap_does_not_apply_to_other_roles(client, make_admin):
    make_admin(email='root@mybidhaa.test')
    make_admin(email='root2@mybidhaa.test')
    make_admin(email='root3@mybidhaa.test')
    admin_login(client, 'root@mybidhaa.test', 'adminpass1')
    assert register_admin(client, 9, admin_role='sales').status_code == 201


def test_only_super_admin_may_register(client, make_admin):
    make_admin(admin_role='manager', email='mgr@mybidhaa.test')
    admin_login(client, 'mgr@mybidhaa.test', 'adminpass1')
    resp = register_admin(client, 5, admin_role='support')
    assert resp.status_code == 403
    assert resp.get_json()['message'] == 'Only super admins can register new admins'


def test_register_rejects_unknown_admin_role(client, make_admin):
    make_admin(email='root@mybidhaa.test')
    admin_login(client, 'root@mybidhaa.test', 'adminpass1')
    resp = register_admin(client, 6, admin_role='janitor')
    assert resp.status_code == 400
    assert resp.get_json()['message'].startswith('Invalid admin role')


def test_profile_update_requires_current_password(client, make_admin):
    make_admin(email='root@mybidhaa.test')
    admin_login(client, 'root@mybidhaa.test', 'adminpass1')
    resp = client.put('/admin/profile', json={'new_password': 'brandnew1', 'current_password': 'wrong'})
    assert resp.status_code == 401
    assert resp.get_json()['message'] == 'Current password is incorrect'


def test_profile_update_changes_fields_and_password(client, make_admin):
    make_admin(email='root@mybidhaa.test')
    admin_login(client, 'root@mybidhaa.test', 'adminpass1')
    resp = client.put('/admin/profile', json={
        'username': 'Renamed',
        'phone_number': '0712345678',
        'current_password': 'adminpass1',
        'new_password': 'brandnew1',
    })
    assert resp.status_code == 200
    assert resp.get_json()['updates'] == ['username', 'phone_number']
    client.post('/admin/logout')
    assert admin_login(client, 'root@mybidhaa.test', 'brandnew1').status_code == 200


def test_profile_update_duplicate_email(client, make_admin):
    make_admin(email='root@mybidhaa.test')
    make_admin(admin_role='sales', email='sales@mybidhaa.test')
    admin_login(client, 'root@mybidhaa.test', 'adminpass1')
    resp = client.put('/admin/profile', json={'email': 'sales@mybidhaa.test'})
    assert resp.status_code == 409
