"""
Page guard decisions.

The guard turns the current session and requested path into one of four
states. It is evaluated from scratch on every call; nothing is remembered
between evaluations, so a newer path or session simply replaces whatever
an earlier decision asked for.

Missing authentication and missing authorization are ordinary outcomes
here, resolved by a redirect, and never raised as exceptions.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from .permissions import UserType, user_role
from .routes import can_access_route, normalize_path

LOGIN_PATH = '/login'
DEFAULT_LANDING_PATH = '/'

# Roles confined to a single destination
ROLE_LANDING_PAGES: Mapping[str, str] = MappingProxyType({
    UserType.NATIONAL_USER: '/national-dashboard',
})


class GuardState(str, enum.Enum):
    LOADING = 'LOADING'
    UNAUTHENTICATED = 'UNAUTHENTICATED'
    UNAUTHORIZED = 'UNAUTHORIZED'
    AUTHORIZED = 'AUTHORIZED'


@dataclass(frozen=True)
class Session:
    """What the guard needs to know about the signed-in user.

    The session is owned by the authentication layer; the guard only reads
    it. ``is_loading`` is true while that layer is still resolving who the
    user is.
    """
    role: Optional[str] = None
    is_loading: bool = False

    @property
    def is_authenticated(self) -> bool:
        return bool(self.role)

    @classmethod
    def from_user(cls, user, is_loading: bool = False) -> 'Session':
        return cls(role=user_role(user), is_loading=is_loading)


@dataclass(frozen=True)
class GuardDecision:
    state: GuardState
    redirect_to: Optional[str] = None

    @property
    def should_render(self) -> bool:
        return self.state is GuardState.AUTHORIZED


def landing_page_for(role: Optional[str]) -> str:
    """Where a role goes when it is turned away from a page."""
    if role and role in ROLE_LANDING_PAGES:
        return ROLE_LANDING_PAGES[role]
    return DEFAULT_LANDING_PATH


def evaluate_guard(session: Session, path: str, login_path: str = LOGIN_PATH) -> GuardDecision:
    if session.is_loading:
        return GuardDecision(GuardState.LOADING)
    if not session.is_authenticated:
        return GuardDecision(GuardState.UNAUTHENTICATED, redirect_to=login_path)
    if not can_access_route(session.role, normalize_path(path)):
        return GuardDecision(GuardState.UNAUTHORIZED, redirect_to=landing_page_for(session.role))
    return GuardDecision(GuardState.AUTHORIZED)
