import datetime as dt

import pytest
from django.core import mail
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from clinic.models import User
from clinic.services.accounts import hash_token

from .conftest import PASSWORD

pytestmark = pytest.mark.django_db


def register(client, **kw):
    payload = {'name': 'Ada Admin', 'email': 'Ada@Example.com', 'password': PASSWORD, 'role': 'admin'}
    payload.update(kw)
    return client.post(reverse('auth-register'), payload, format='json')


def login(client, email, password=PASSWORD):
    return client.post(reverse('auth-login'), {'email': email, 'password': password}, format='json')


def test_register_login_then_empty_patient_list():
    client = APIClient()
    r = register(client)
    assert r.status_code == 201
    body = r.json()
    assert body['success'] is True
    assert body['data']['user']['email'] == 'ada@example.com'
    assert body['data']['user']['role'] == 'admin'
    assert 'password' not in body['data']['user']

    r = login(client, 'ada@example.com')
    assert r.status_code == 200
    token = r.json()['data']['token']

    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    r = client.get(reverse('patients'))
    assert r.status_code == 200
    assert r.json() == {
        'success': True,
        'data': {'patients': []},
        'pagination': {'page': 1, 'limit': 10, 'total': 0, 'pages': 0},
    }


def test_register_defaults_to_patient_role_and_rejects_duplicate_email():
    client = APIClient()
    r = register(client, role=None, email='pat@example.com')
    # an explicit null role is not a valid choice
    assert r.status_code == 400
    r = client.post(reverse('auth-register'),
                    {'name': 'Pat', 'email': 'pat@example.com', 'password': PASSWORD}, format='json')
    assert r.status_code == 201
    assert r.json()['data']['user']['role'] == 'patient'

    r = client.post(reverse('auth-register'),
                    {'name': 'Pat', 'email': 'PAT@example.com', 'password': PASSWORD}, format='json')
    assert r.status_code == 400
    assert r.json() == {'success': False, 'error': 'email: User already exists with this email'}
    assert User.objects.filter(email='pat@example.com').count() == 1


def test_login_rejects_bad_password(make_user):
    u = make_user()
    r = login(APIClient(), u.email, 'wrong-password')
    assert r.status_code == 401
    assert r.json() == {'success': False, 'error': 'Invalid credentials'}


def test_login_rejects_inactive_user(make_user):
    u = make_user(is_active=False)
    r = login(APIClient(), u.email)
    assert r.status_code == 401


def test_missing_and_invalid_tokens_are_401():
    client = APIClient()
    r = client.get(reverse('auth-me'))
    assert r.status_code == 401
    assert r.json() == {'success': False, 'error': 'Not authorized to access this route'}

    client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
    r = client.get(reverse('auth-me'))
    assert r.status_code == 401
    assert r.json()['success'] is False


def test_token_for_deleted_or_inactive_user_is_rejected(make_user):
    u = make_user()
    client = APIClient()
    token = login(client, u.email).json()['data']['token']
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    assert client.get(reverse('auth-me')).status_code == 200

    u.is_active = False
    u.save()
    assert client.get(reverse('auth-me')).status_code == 401


def test_me_returns_current_user(make_user):
    u = make_user(User.Role.RECEPTION)
    client = APIClient()
    client.force_authenticate(user=u)
    r = client.get(reverse('auth-me'))
    assert r.status_code == 200
    data = r.json()['data']['user']
    assert data['_id'] == str(u.pk)
    assert data['role'] == 'reception'
    assert set(data) == {'_id', 'name', 'email', 'role', 'createdAt', 'updatedAt'}


def test_refresh_issues_new_access_token(make_user):
    u = make_user()
    client = APIClient()
    refresh = login(client, u.email).json()['data']['refreshToken']
    r = client.post(reverse('auth-refresh'), {'refresh': refresh}, format='json')
    assert r.status_code == 200
    assert r.json()['data']['token']

    r = client.post(reverse('auth-refresh'), {'refresh': 'garbage'}, format='json')
    assert r.status_code == 401


def test_logout_blacklists_refresh_token(make_user):
    u = make_user()
    client = APIClient()
    data = login(client, u.email).json()['data']
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {data['token']}")
    r = client.post(reverse('auth-logout'), {'refresh': data['refreshToken']}, format='json')
    assert r.status_code == 200
    assert r.json()['message'] == 'Logged out successfully'

    r = APIClient().post(reverse('auth-refresh'), {'refresh': data['refreshToken']}, format='json')
    assert r.status_code == 401


def test_profile_update_changes_name_and_password(make_user):
    u = make_user()
    client = APIClient()
    client.force_authenticate(user=u)
    r = client.put(reverse('auth-profile'), {'name': 'New Name'}, format='json')
    assert r.status_code == 200
    assert r.json()['data']['user']['name'] == 'New Name'

    r = client.put(reverse('auth-profile'), {'newPassword': 'An0ther!Pass'}, format='json')
    assert r.status_code == 400
    r = client.put(reverse('auth-profile'),
                   {'currentPassword': 'nope', 'newPassword': 'An0ther!Pass'}, format='json')
    assert r.status_code == 400
    assert r.json()['error'] == 'currentPassword: Current password is incorrect'

    r = client.put(reverse('auth-profile'),
                   {'currentPassword': PASSWORD, 'newPassword': 'An0ther!Pass'}, format='json')
    assert r.status_code == 200
    assert r.json()['data']['token']
    u.refresh_from_db()
    assert u.check_password('An0ther!Pass')


def test_forgot_and_reset_password(make_user):
    u = make_user()
    client = APIClient()
    r = client.post(reverse('auth-forgot-password'), {'email': u.email}, format='json')
    assert r.status_code == 200
    assert len(mail.outbox) == 1
    raw = mail.outbox[0].body.split('Reset token: ')[1].split()[0]

    u.refresh_from_db()
    assert u.reset_password_token == hash_token(raw)
    assert u.reset_password_token != raw

    r = client.put(reverse('auth-reset-password', args=[raw]), {'password': 'Fr3sh!Pass'}, format='json')
    assert r.status_code == 200
    assert r.json()['data']['token']
    u.refresh_from_db()
    assert u.check_password('Fr3sh!Pass')
    assert u.reset_password_token is None

    # single use
    r = client.put(reverse('auth-reset-password', args=[raw]), {'password': 'Fr3sh!Pass2'}, format='json')
    assert r.status_code == 400


def test_forgot_password_unknown_email_is_404():
    r = APIClient().post(reverse('auth-forgot-password'), {'email': 'nobody@example.com'}, format='json')
    assert r.status_code == 404
    assert r.json()['error'] == 'There is no user with that email'


def test_expired_reset_token_is_rejected(make_user):
    u = make_user()
    u.reset_password_token = hash_token('abc123')
    u.reset_password_expire = timezone.now() - dt.timedelta(minutes=1)
    u.save()
    r = APIClient().put(reverse('auth-reset-password', args=['abc123']), {'password': 'Fr3sh!Pass'}, format='json')
    assert r.status_code == 400
    assert r.json()['error'] == 'Invalid or expired reset token'
