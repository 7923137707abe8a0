import pytest

from portal.models import AuditEvent
from portal.permissions import UserType

pytestmark = pytest.mark.django_db

PASSWORD = 'P@ssw0rd-123'


def test_login_page_renders_form(client):
    r = client.get('/login', {'next': '/referrals'})
    assert r.status_code == 200
    assert b'name="next" value="/referrals"' in r.content


def test_login_redirects_to_next(client, make_user, phu):
    make_user('phu1', UserType.PHU_STAFF, phu)
    r = client.post('/login', {'username': 'phu1', 'password': PASSWORD, 'next': '/referrals'})
    assert r.status_code == 302
    assert r['Location'] == '/referrals'
    assert client.get('/referrals').status_code == 200
    assert AuditEvent.objects.filter(action='login', detail__via='session').exists()


def test_login_ignores_offsite_next(client, make_user):
    make_user('nat1', UserType.NATIONAL_USER)
    r = client.post('/login', {'username': 'nat1', 'password': PASSWORD, 'next': 'https://evil.example/'})
    assert r['Location'] == '/national-dashboard'


def test_login_rejects_account_without_role(client, make_user):
    make_user('norole', '')
    r = client.post('/login', {'username': 'norole', 'password': PASSWORD})
    assert r.status_code == 200
    assert b'no dashboard role' in r.content


def test_login_rejects_bad_password(client, make_user):
    make_user('phu1')
    r = client.post('/login', {'username': 'phu1', 'password': 'nope'})
    assert r.status_code == 200
    assert '_auth_user_id' not in client.session


def test_signed_in_user_visiting_login_is_sent_on(client, make_user):
    client.force_login(make_user('admin1', UserType.SYSTEM_ADMIN))
    r = client.get('/login')
    assert r.status_code == 302
    assert r['Location'] == '/'


def test_logout_ends_session(client, make_user):
    client.force_login(make_user('admin1', UserType.SYSTEM_ADMIN))
    r = client.post('/logout')
    assert r.status_code == 302
    assert r['Location'] == '/login'
    assert client.get('/admin/settings').status_code == 302


def test_shell_shows_role_navigation(client, make_user):
    client.force_login(make_user('admin1', UserType.SYSTEM_ADMIN))
    r = client.get('/admin/settings')
    assert r.status_code == 200
    assert b'href="/admin/users"' in r.content
    assert b'data-role="SYSTEM_ADMIN"' in r.content
