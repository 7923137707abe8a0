"""
Route to permission mapping for the dashboard pages.

A request path is governed by the longest registered entry that either
equals the path or is followed in the path by ``/``. That lets
``/referrals/<id>`` inherit the ``/referrals`` permission while
``/referrals/new`` keeps its own. ``/`` only ever governs the root.

Paths with no governing entry are allowed for everyone. This is the
catch-all policy for public and auxiliary pages (``/national-dashboard``,
``/district-dashboard``, ...), which also means a sensitive page that is
never registered here is left open.
"""
from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, Optional

from .permissions import PermissionKey, has_permission

ROUTE_PERMISSIONS: Mapping[str, PermissionKey] = MappingProxyType({
    '/': PermissionKey.DASHBOARD,
    '/referrals': PermissionKey.REFERRALS_VIEW,
    '/referrals/new': PermissionKey.REFERRALS_CREATE,
    '/patients': PermissionKey.PATIENTS_VIEW,
    '/patients/new': PermissionKey.PATIENTS_CREATE,
    '/facilities': PermissionKey.FACILITIES_VIEW,
    '/readiness': PermissionKey.READINESS_VIEW,
    '/readiness/update': PermissionKey.READINESS_UPDATE,
    '/counter-referrals': PermissionKey.COUNTER_REFERRALS,
    '/triage': PermissionKey.TRIAGE,
    '/call-centre': PermissionKey.CALL_CENTRE,
    '/ambulances': PermissionKey.AMBULANCES,
    '/analytics': PermissionKey.ANALYTICS,
    '/reports': PermissionKey.REPORTS,
    '/admin/users': PermissionKey.ADMIN_USERS,
    '/admin/facilities': PermissionKey.ADMIN_FACILITIES,
    '/admin/settings': PermissionKey.ADMIN_SETTINGS,
    '/profile': PermissionKey.PROFILE,
    '/settings': PermissionKey.SETTINGS,
})

_SLASHES = re.compile(r'/{2,}')


def normalize_path(path: Optional[str]) -> str:
    """Canonical form of a request path.

    Query string and fragment are dropped, repeated slashes collapsed and
    the trailing slash removed, except for the root which stays ``/``.
    """
    path = (path or '').split('?', 1)[0].split('#', 1)[0].strip()
    path = _SLASHES.sub('/', '/' + path)
    if len(path) > 1:
        path = path.rstrip('/') or '/'
    return path


def resolve_route(path: str, routes: Mapping[str, PermissionKey] = ROUTE_PERMISSIONS) -> Optional[str]:
    """Return the registered entry governing ``path``, or None."""
    path = normalize_path(path)
    best: Optional[str] = None
    for route in routes:
        if path == route or path.startswith(route + '/'):
            if best is None or len(route) > len(best):
                best = route
    return best


def required_permission(path: str, routes: Mapping[str, PermissionKey] = ROUTE_PERMISSIONS) -> Optional[PermissionKey]:
    route = resolve_route(path, routes)
    return routes[route] if route is not None else None


def can_access_route(role: Optional[str], path: str,
                     routes: Mapping[str, PermissionKey] = ROUTE_PERMISSIONS) -> bool:
    """Can ``role`` open the page at ``path``?

    Unmapped paths are allowed (see module docstring); mapped paths
    defer to :func:`portal.permissions.has_permission`.
    """
    key = required_permission(path, routes)
    if key is None:
        return True
    return has_permission(role, key)
