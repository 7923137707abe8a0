"""
Startup validation of the access-control tables.

A broken table (a capability nobody can reach, a route pointing at a
permission that doesn't exist, a landing page its own role cannot open)
must stop the process before it serves a request.
"""
from __future__ import annotations

import logging
from typing import Mapping

from .exceptions import ConfigurationError
from .guard import DEFAULT_LANDING_PATH, ROLE_LANDING_PAGES
from .permissions import PERMISSIONS, PermissionKey, UserType
from .routes import ROUTE_PERMISSIONS, normalize_path, resolve_route

logger = logging.getLogger(__name__)


def _allowed(permissions: Mapping, routes: Mapping, role: str, path: str) -> bool:
    route = resolve_route(path, routes)
    if route is None:
        return True
    return role in permissions[routes[route]]


def validate_access_config(
    permissions: Mapping = PERMISSIONS,
    routes: Mapping = ROUTE_PERMISSIONS,
    landing_pages: Mapping = ROLE_LANDING_PAGES,
    default_landing: str = DEFAULT_LANDING_PATH,
) -> None:
    """Raise :class:`ConfigurationError` listing every problem found."""
    errors: list[str] = []
    known_roles = set(UserType.values)

    for key in PermissionKey:
        if key not in permissions:
            errors.append(f'permission {key} is missing from the permission table')
    for key, roles in permissions.items():
        if not roles:
            errors.append(f'permission {key} maps to an empty role set')
        unknown = {str(r) for r in roles} - known_roles
        if unknown:
            errors.append(f'permission {key} names unknown roles: {sorted(unknown)}')

    for route, key in routes.items():
        if normalize_path(route) != route:
            errors.append(f'route {route!r} is not a normalized path')
        if key not in permissions:
            errors.append(f'route {route!r} requires {key}, which is not in the permission table')

    if errors:
        # The redirect checks below index the tables and would fail noisily
        raise ConfigurationError('; '.join(errors))

    for role, page in landing_pages.items():
        if role not in known_roles:
            errors.append(f'landing page configured for unknown role {role!r}')
        elif not _allowed(permissions, routes, role, page):
            errors.append(f'role {role} cannot open its own landing page {page!r}')
    for role in known_roles - set(landing_pages):
        if not _allowed(permissions, routes, role, default_landing):
            errors.append(f'role {role} cannot open the default landing page {default_landing!r}')

    if errors:
        raise ConfigurationError('; '.join(errors))
    logger.debug('access config ok: %d permissions, %d routes', len(permissions), len(routes))
