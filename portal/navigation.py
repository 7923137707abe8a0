"""
Sidebar navigation, filtered by the signed-in role.
"""
from __future__ import annotations

from typing import NamedTuple, Optional

from .permissions import PermissionKey, has_permission
from .routes import normalize_path


class NavItem(NamedTuple):
    label: str
    href: str
    permission: Optional[PermissionKey] = None


NAV_SECTIONS: tuple[tuple[str, tuple[NavItem, ...]], ...] = (
    ('Overview', (
        NavItem('Dashboard', '/', PermissionKey.DASHBOARD),
        NavItem('Referrals', '/referrals', PermissionKey.REFERRALS_VIEW),
        NavItem('Patients', '/patients', PermissionKey.PATIENTS_VIEW),
        NavItem('Facilities', '/facilities', PermissionKey.FACILITIES_VIEW),
    )),
    ('Operations', (
        NavItem('Readiness', '/readiness', PermissionKey.READINESS_VIEW),
        NavItem('Counter-Referrals', '/counter-referrals', PermissionKey.COUNTER_REFERRALS),
        NavItem('Triage', '/triage', PermissionKey.TRIAGE),
    )),
    ('Emergency', (
        NavItem('Call Centre', '/call-centre', PermissionKey.CALL_CENTRE),
        NavItem('Ambulances', '/ambulances', PermissionKey.AMBULANCES),
    )),
    ('Analytics', (
        NavItem('Dashboard', '/analytics', PermissionKey.ANALYTICS),
        NavItem('Reports', '/reports', PermissionKey.REPORTS),
    )),
    ('Administration', (
        NavItem('Users', '/admin/users', PermissionKey.ADMIN_USERS),
        NavItem('Facilities', '/admin/facilities', PermissionKey.ADMIN_FACILITIES),
        NavItem('Settings', '/admin/settings', PermissionKey.ADMIN_SETTINGS),
    )),
)


def _is_active(href: str, path: Optional[str]) -> bool:
    if path is None:
        return False
    path = normalize_path(path)
    return path == href or (href != '/' and path.startswith(href + '/'))


def build_navigation(role: Optional[str], current_path: Optional[str] = None) -> list[dict]:
    """Sections visible to ``role``; sections left empty are dropped."""
    sections = []
    for title, items in NAV_SECTIONS:
        visible = [
            {'label': item.label, 'href': item.href, 'active': _is_active(item.href, current_path)}
            for item in items
            if item.permission is None or has_permission(role, item.permission)
        ]
        if visible:
            sections.append({'title': title, 'items': visible})
    return sections
