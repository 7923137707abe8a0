import pytest
from rest_framework.test import APIRequestFactory

from portal.permissions import (
    ALL_ROLES,
    PERMISSIONS,
    PermissionKey,
    UserType,
    get_role_permissions,
    has_any_permission,
    has_permission,
    permission_required,
    user_role,
)


def test_table_covers_every_key_with_at_least_one_role():
    assert set(PERMISSIONS) == set(PermissionKey)
    for key, roles in PERMISSIONS.items():
        assert roles, f'{key} has no roles'
        assert roles <= ALL_ROLES


def test_table_is_read_only():
    with pytest.raises(TypeError):
        PERMISSIONS[PermissionKey.DASHBOARD] = frozenset()  # type: ignore[index]


@pytest.mark.parametrize('key', list(PermissionKey))
@pytest.mark.parametrize('role', list(UserType))
def test_has_permission_matches_table_membership(role, key):
    assert has_permission(role, key) == (role in PERMISSIONS[key])


@pytest.mark.parametrize('key', list(PermissionKey))
@pytest.mark.parametrize('role', [None, ''])
def test_absent_role_has_no_permission(role, key):
    assert has_permission(role, key) is False


def test_plain_strings_are_accepted():
    assert has_permission('SYSTEM_ADMIN', 'ADMIN_USERS')
    assert not has_permission('PHU_STAFF', 'ADMIN_USERS')


def test_unknown_role_is_denied():
    assert not has_permission('JANITOR', PermissionKey.PROFILE)


def test_unknown_key_raises():
    with pytest.raises(ValueError):
        has_permission(UserType.SYSTEM_ADMIN, 'LAUNCH_MISSILES')


def test_system_admin_holds_every_permission():
    assert get_role_permissions(UserType.SYSTEM_ADMIN) == frozenset(PermissionKey)


def test_national_user_is_limited_to_oversight():
    assert get_role_permissions(UserType.NATIONAL_USER) == {
        PermissionKey.FACILITIES_VIEW,
        PermissionKey.READINESS_VIEW,
        PermissionKey.ANALYTICS,
        PermissionKey.REPORTS,
        PermissionKey.PROFILE,
        PermissionKey.SETTINGS,
    }


def test_get_role_permissions_for_absent_role():
    assert get_role_permissions(None) == frozenset()


def test_has_any_permission():
    keys = [PermissionKey.CALL_CENTRE, PermissionKey.REFERRALS_CREATE]
    assert has_any_permission(UserType.PHU_STAFF, keys)
    assert not has_any_permission(UserType.SPECIALIST, keys)
    assert not has_any_permission(UserType.SYSTEM_ADMIN, [])
    assert not has_any_permission(None, keys)


class _User:
    def __init__(self, user_type, is_authenticated=True):
        self.user_type = user_type
        self.is_authenticated = is_authenticated


def test_user_role():
    assert user_role(_User(UserType.SPECIALIST)) == UserType.SPECIALIST
    assert user_role(_User(UserType.SPECIALIST, is_authenticated=False)) is None
    assert user_role(_User('')) is None
    assert user_role(_User('RETIRED_ROLE')) is None
    assert user_role(None) is None


def test_permission_required_builds_drf_permission():
    perm = permission_required(PermissionKey.CALL_CENTRE)()
    request = APIRequestFactory().get('/api/anything')
    request.user = _User(UserType.AMBULANCE_DISPATCH)
    assert perm.has_permission(request, None)
    request.user = _User(UserType.PHU_STAFF)
    assert not perm.has_permission(request, None)


def test_permission_required_rejects_bad_keys():
    with pytest.raises(ValueError):
        permission_required()
    with pytest.raises(ValueError):
        permission_required('NOT_A_KEY')
