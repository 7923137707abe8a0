"""
Role based permissions for the referral dashboard.

Roles:
- PHU_STAFF: basic referral operations (PHU level)
- HOSPITAL_DESK: accept/reject referrals, coordinate admissions (facility level)
- REFERRAL_COORDINATOR: manage referrals, update readiness, track outcomes
- SPECIALIST: specialist consultations
- DISTRICT_HEALTH: district analytics, facility monitoring
- NATIONAL_USER: national dashboards and policy oversight only
- SYSTEM_ADMIN: user management, system configuration (full access)
- AMBULANCE_DISPATCH: triage calls, dispatch ambulances (call centre)

The table below is fixed business policy. It is loaded once at import time,
never mutated, and validated at startup by :mod:`portal.checks`.
"""
from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from django.db import models
from rest_framework.permissions import BasePermission


class UserType(models.TextChoices):
    PHU_STAFF = 'PHU_STAFF', 'PHU Staff'
    HOSPITAL_DESK = 'HOSPITAL_DESK', 'Hospital Desk'
    REFERRAL_COORDINATOR = 'REFERRAL_COORDINATOR', 'Referral Coordinator'
    SPECIALIST = 'SPECIALIST', 'Specialist'
    DISTRICT_HEALTH = 'DISTRICT_HEALTH', 'District Health Officer'
    NATIONAL_USER = 'NATIONAL_USER', 'National User'
    SYSTEM_ADMIN = 'SYSTEM_ADMIN', 'System Administrator'
    AMBULANCE_DISPATCH = 'AMBULANCE_DISPATCH', 'Ambulance Dispatch'


class PermissionKey(str, enum.Enum):
    DASHBOARD = 'DASHBOARD'
    REFERRALS_VIEW = 'REFERRALS_VIEW'
    REFERRALS_CREATE = 'REFERRALS_CREATE'
    REFERRALS_ACCEPT_REJECT = 'REFERRALS_ACCEPT_REJECT'
    PATIENTS_VIEW = 'PATIENTS_VIEW'
    PATIENTS_CREATE = 'PATIENTS_CREATE'
    FACILITIES_VIEW = 'FACILITIES_VIEW'
    READINESS_VIEW = 'READINESS_VIEW'
    READINESS_UPDATE = 'READINESS_UPDATE'
    COUNTER_REFERRALS = 'COUNTER_REFERRALS'
    TRIAGE = 'TRIAGE'
    CALL_CENTRE = 'CALL_CENTRE'
    AMBULANCES = 'AMBULANCES'
    ANALYTICS = 'ANALYTICS'
    REPORTS = 'REPORTS'
    ADMIN_USERS = 'ADMIN_USERS'
    ADMIN_FACILITIES = 'ADMIN_FACILITIES'
    ADMIN_SETTINGS = 'ADMIN_SETTINGS'
    PROFILE = 'PROFILE'
    SETTINGS = 'SETTINGS'

    def __str__(self) -> str:
        return self.value


_U = UserType
ALL_ROLES = frozenset(UserType)
_KNOWN_ROLES = frozenset(UserType.values)

PERMISSIONS: Mapping[PermissionKey, frozenset] = MappingProxyType({
    # Dashboard access (national users land on the national dashboard instead)
    PermissionKey.DASHBOARD: ALL_ROLES - {_U.NATIONAL_USER},

    # Referral management
    PermissionKey.REFERRALS_VIEW: frozenset({
        _U.PHU_STAFF, _U.HOSPITAL_DESK, _U.REFERRAL_COORDINATOR, _U.SPECIALIST,
        _U.DISTRICT_HEALTH, _U.SYSTEM_ADMIN, _U.AMBULANCE_DISPATCH,
    }),
    PermissionKey.REFERRALS_CREATE: frozenset({
        _U.PHU_STAFF, _U.HOSPITAL_DESK, _U.REFERRAL_COORDINATOR, _U.AMBULANCE_DISPATCH, _U.SYSTEM_ADMIN,
    }),
    PermissionKey.REFERRALS_ACCEPT_REJECT: frozenset({
        _U.HOSPITAL_DESK, _U.REFERRAL_COORDINATOR, _U.SYSTEM_ADMIN, _U.AMBULANCE_DISPATCH,
    }),

    # Patient management
    PermissionKey.PATIENTS_VIEW: frozenset({
        _U.PHU_STAFF, _U.HOSPITAL_DESK, _U.REFERRAL_COORDINATOR, _U.SPECIALIST,
        _U.DISTRICT_HEALTH, _U.SYSTEM_ADMIN,
    }),
    PermissionKey.PATIENTS_CREATE: frozenset({
        _U.PHU_STAFF, _U.HOSPITAL_DESK, _U.REFERRAL_COORDINATOR, _U.AMBULANCE_DISPATCH, _U.SYSTEM_ADMIN,
    }),

    # Facilities
    PermissionKey.FACILITIES_VIEW: ALL_ROLES,

    # Readiness: facility level users plus dispatch for the multi-facility view
    PermissionKey.READINESS_VIEW: frozenset({
        _U.HOSPITAL_DESK, _U.REFERRAL_COORDINATOR, _U.AMBULANCE_DISPATCH,
        _U.DISTRICT_HEALTH, _U.NATIONAL_USER, _U.SYSTEM_ADMIN,
    }),
    PermissionKey.READINESS_UPDATE: frozenset({
        _U.HOSPITAL_DESK, _U.REFERRAL_COORDINATOR, _U.SYSTEM_ADMIN,
    }),

    PermissionKey.COUNTER_REFERRALS: frozenset({
        _U.PHU_STAFF, _U.HOSPITAL_DESK, _U.REFERRAL_COORDINATOR, _U.SYSTEM_ADMIN,
    }),
    PermissionKey.TRIAGE: frozenset({
        _U.HOSPITAL_DESK, _U.REFERRAL_COORDINATOR, _U.AMBULANCE_DISPATCH, _U.SYSTEM_ADMIN,
    }),

    # Emergency coordinators only
    PermissionKey.CALL_CENTRE: frozenset({_U.AMBULANCE_DISPATCH, _U.SYSTEM_ADMIN}),
    PermissionKey.AMBULANCES: frozenset({_U.AMBULANCE_DISPATCH, _U.SYSTEM_ADMIN}),

    # District and above
    PermissionKey.ANALYTICS: frozenset({_U.DISTRICT_HEALTH, _U.NATIONAL_USER, _U.SYSTEM_ADMIN}),
    PermissionKey.REPORTS: frozenset({_U.DISTRICT_HEALTH, _U.NATIONAL_USER, _U.SYSTEM_ADMIN}),

    # System admin only
    PermissionKey.ADMIN_USERS: frozenset({_U.SYSTEM_ADMIN}),
    PermissionKey.ADMIN_FACILITIES: frozenset({_U.SYSTEM_ADMIN}),
    PermissionKey.ADMIN_SETTINGS: frozenset({_U.SYSTEM_ADMIN}),

    # All users
    PermissionKey.PROFILE: ALL_ROLES,
    PermissionKey.SETTINGS: ALL_ROLES,
})


def has_permission(role: Optional[str], key: PermissionKey | str) -> bool:
    """Return True if ``role`` is allowed ``key``.

    An absent role is never allowed. An unknown key is a programming error
    and raises ``ValueError`` rather than quietly denying.
    """
    allowed = PERMISSIONS[PermissionKey(key)]
    if not role:
        return False
    return role in allowed


def has_any_permission(role: Optional[str], keys: Iterable[PermissionKey | str]) -> bool:
    """Return True if ``role`` holds at least one of ``keys``."""
    keys = list(keys)
    if not role or not keys:
        return False
    return any(has_permission(role, k) for k in keys)


def get_role_permissions(role: Optional[str]) -> frozenset[PermissionKey]:
    """All permission keys granted to ``role`` (empty for an absent role)."""
    if not role:
        return frozenset()
    return frozenset(key for key, roles in PERMISSIONS.items() if role in roles)


# ---------------------------------------------------------------------
# DRF permission classes
# ---------------------------------------------------------------------
def user_role(user) -> Optional[str]:
    """Role of an authenticated user, or None.

    A stored role that is no longer a ``UserType`` counts as no role.
    """
    if not (user and getattr(user, 'is_authenticated', False)):
        return None
    role = getattr(user, 'user_type', None)
    return role if role in _KNOWN_ROLES else None


def permission_required(*keys: PermissionKey) -> type[BasePermission]:
    """Build a DRF permission class granting access on any of ``keys``.

    Usage::

        @permission_classes([IsAuthenticated, permission_required(PermissionKey.REFERRALS_VIEW)])
    """
    # Resolve eagerly so a typo fails at import time, not per request
    required = tuple(PermissionKey(k) for k in keys)
    if not required:
        raise ValueError('permission_required() needs at least one permission key')

    class HasPermission(BasePermission):
        message = 'Your role does not allow this action.'

        def has_permission(self, request, view) -> bool:  # type: ignore[override]
            return has_any_permission(user_role(getattr(request, 'user', None)), required)

    HasPermission.__name__ = 'HasPermission_' + '_'.join(k.value for k in required)
    HasPermission.__qualname__ = HasPermission.__name__
    return HasPermission
