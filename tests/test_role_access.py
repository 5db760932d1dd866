import pytest
from models import db, User


@pytest.fixture
def tokens(make_user):
    return {
        role: make_user(role=role)[1]
        for role in ('student', 'tutor', 'shopper', 'school', 'parent_student')
    }


@pytest.mark.parametrize('role,label', [
    ('tutor', 'Tutor'),
    ('student', 'Student'),
    ('shopper', 'Shopper'),
    ('school', 'School'),
])
def test_role_gates(client, tokens, role, label):
    own = {'Authorization': f'Bearer {tokens[role]}'}
    resp = client.get(f'/__role/{role}', headers=own)
    assert resp.status_code == 200
    assert resp.get_json()['data']['role'] == role

    other = 'parent_student'
    resp = client.get(f'/__role/{role}', headers={'Authorization': f'Bearer {tokens[other]}'})
    assert resp.status_code == 403
    assert resp.get_json()['message'] == f'Access denied. {label} only.'


def test_missing_token_asks_for_signup(client):
    resp = client.get('/__role/tutor')
    assert resp.status_code == 401
    data = resp.get_json()
    assert data['action'] == 'SIGNUP_REQUIRED'
    assert data['message'] == 'Please sign up or log in to continue'


def test_vanished_user_asks_for_signup(client, app, make_user):
    user, token = make_user(role='tutor')
    db.session.delete(db.session.get(User, user.id))
    db.session.commit()
    resp = client.get('/__role/tutor', headers={'Authorization': f'Bearer {token}'})
    assert resp.status_code == 401
    assert resp.get_json()['action'] == 'SIGNUP_REQUIRED'


def test_admin_token_not_accepted_as_bearer(client, make_admin):
    from bidhaa.utils import create_admin_token
    admin = make_admin()
    token = create_admin_token(admin.id, admin.admin_role)
    resp = client.get('/user/me', headers={'Authorization': f'Bearer {token}'})
    assert resp.status_code == 401
    assert resp.get_json()['action'] == 'LOGIN_REQUIRED'
