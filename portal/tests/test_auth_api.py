import pytest
from django.urls import reverse

from portal.models import AuditEvent
from portal.permissions import PermissionKey, UserType

pytestmark = pytest.mark.django_db

# matches the password the make_user fixture sets
PASSWORD = 'P@ssw0rd-123'


def login(client, username, password=PASSWORD):
    return client.post(reverse('api-login'), {'username': username, 'password': password}, format='json')


def bearer(client, token):
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return client


def test_login_returns_tokens_permissions_and_landing_page(api_client, make_user, hospital):
    make_user('desk1', UserType.HOSPITAL_DESK, hospital)
    r = login(api_client, 'desk1')
    assert r.status_code == 200
    assert r.data['accessToken'] and r.data['refreshToken']
    assert r.data['user']['userType'] == 'HOSPITAL_DESK'
    assert r.data['user']['facility']['code'] == 'HOS-001'
    assert PermissionKey.REFERRALS_ACCEPT_REJECT.value in r.data['permissions']
    assert PermissionKey.ADMIN_USERS.value not in r.data['permissions']
    assert r.data['landingPage'] == '/'


def test_role_cannot_be_escalated_through_login_payload(api_client, make_user):
    u = make_user('phu1', UserType.PHU_STAFF)
    r = api_client.post(reverse('api-login'),
                        {'username': 'phu1', 'password': PASSWORD, 'userType': 'SYSTEM_ADMIN'}, format='json')
    assert r.status_code == 200
    assert r.data['user']['userType'] == 'PHU_STAFF'
    u.refresh_from_db()
    assert u.user_type == UserType.PHU_STAFF


def test_national_user_lands_on_national_dashboard(api_client, make_user):
    make_user('nat1', UserType.NATIONAL_USER)
    r = login(api_client, 'nat1')
    assert r.data['landingPage'] == '/national-dashboard'


def test_bad_credentials_are_rejected_and_audited(api_client, make_user):
    make_user('phu1')
    r = login(api_client, 'phu1', 'wrong')
    assert r.status_code == 400
    assert r.data['ok'] is False
    event = AuditEvent.objects.get(action='login')
    assert event.user is None
    assert event.detail['result'] == 'fail'


def test_account_without_role_cannot_log_in(api_client, make_user):
    make_user('norole', '')
    r = login(api_client, 'norole')
    assert r.status_code == 403


def test_missing_fields_use_error_envelope(api_client):
    r = api_client.post(reverse('api-login'), {'username': 'x'}, format='json')
    assert r.status_code == 400
    assert r.data['ok'] is False
    assert 'error' in r.data


def test_refresh_rotates_and_old_token_is_rejected(api_client, make_user):
    make_user('phu1')
    refresh = login(api_client, 'phu1').data['refreshToken']
    r = api_client.post(reverse('api-refresh'), {'refreshToken': refresh}, format='json')
    assert r.status_code == 200
    assert r.data['accessToken']
    assert r.data['refreshToken'] != refresh
    again = api_client.post(reverse('api-refresh'), {'refresh': refresh}, format='json')
    assert again.status_code == 401


def test_refresh_with_garbage_token(api_client):
    r = api_client.post(reverse('api-refresh'), {'refreshToken': 'not-a-token'}, format='json')
    assert r.status_code == 401
    assert r.data['ok'] is False


def test_logout_blacklists_refresh_token(api_client, make_user):
    make_user('phu1')
    data = login(api_client, 'phu1').data
    bearer(api_client, data['accessToken'])
    r = api_client.post(reverse('api-logout'), {'refreshToken': data['refreshToken']}, format='json')
    assert r.status_code == 200
    assert r.data['blacklisted'] == 1
    r = api_client.post(reverse('api-refresh'), {'refreshToken': data['refreshToken']}, format='json')
    assert r.status_code == 401


def test_logout_without_token_blacklists_everything(api_client, make_user):
    make_user('phu1')
    login(api_client, 'phu1')
    data = login(api_client, 'phu1').data
    bearer(api_client, data['accessToken'])
    r = api_client.post(reverse('api-logout'), {}, format='json')
    assert r.status_code == 200
    assert r.data['blacklisted'] == 2


def test_session_for_anonymous(api_client):
    r = api_client.get(reverse('api-session'), {'path': '/referrals'})
    assert r.status_code == 200
    assert r.data['isAuthenticated'] is False
    assert r.data['user'] is None
    assert r.data['permissions'] == []
    assert r.data['navigation'] == []
    assert r.data['guard'] == {'path': '/referrals', 'state': 'UNAUTHENTICATED', 'redirectTo': '/login'}


def test_session_guard_for_national_user(api_client, make_user):
    make_user('nat1', UserType.NATIONAL_USER)
    bearer(api_client, login(api_client, 'nat1').data['accessToken'])
    r = api_client.get(reverse('api-session'), {'path': '/referrals/'})
    assert r.data['isAuthenticated'] is True
    assert r.data['guard'] == {'path': '/referrals', 'state': 'UNAUTHORIZED', 'redirectTo': '/national-dashboard'}


def test_session_without_path_has_no_guard(client_for, make_user):
    r = client_for(make_user('admin1', UserType.SYSTEM_ADMIN)).get(reverse('api-session'))
    assert 'guard' not in r.data
    assert sorted(r.data['permissions']) == sorted(k.value for k in PermissionKey)


def test_access_check(client_for, make_user):
    phu = client_for(make_user('phu1', UserType.PHU_STAFF))
    r = phu.get(reverse('api-access-check'), {'path': '/referrals/new'})
    assert r.status_code == 200
    assert r.data['route'] == '/referrals/new'
    assert r.data['permission'] == 'REFERRALS_CREATE'
    assert r.data['allowed'] is True

    specialist = client_for(make_user('spec1', UserType.SPECIALIST))
    r = specialist.get(reverse('api-access-check'), {'path': '/referrals/new'})
    assert r.data['allowed'] is False


def test_access_check_unmapped_path(client_for, make_user):
    r = client_for(make_user('phu1')).get(reverse('api-access-check'), {'path': '/some/unmapped/path'})
    assert r.data['route'] is None
    assert r.data['permission'] is None
    assert r.data['allowed'] is True


def test_access_check_requires_path_and_auth(api_client, client_for, make_user):
    assert api_client.get(reverse('api-access-check'), {'path': '/'}).status_code == 401
    assert client_for(make_user('phu1')).get(reverse('api-access-check')).status_code == 400


def test_account_with_retired_role_cannot_log_in(api_client, make_user):
    make_user('stale1', 'RETIRED_ROLE')
    r = login(api_client, 'stale1')
    assert r.status_code == 403
    assert AuditEvent.objects.get(action='login').detail['result'] == 'no_role'
