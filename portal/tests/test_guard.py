import pytest

from portal.guard import (
    DEFAULT_LANDING_PATH,
    LOGIN_PATH,
    ROLE_LANDING_PAGES,
    GuardDecision,
    GuardState,
    Session,
    evaluate_guard,
    landing_page_for,
)
from portal.permissions import UserType


@pytest.mark.parametrize('role', list(UserType) + [None])
@pytest.mark.parametrize('path', ['/', '/referrals', '/admin/users', '/unmapped'])
def test_loading_wins_over_everything(role, path):
    decision = evaluate_guard(Session(role=role, is_loading=True), path)
    assert decision == GuardDecision(GuardState.LOADING)
    assert decision.redirect_to is None
    assert not decision.should_render


def test_anonymous_is_sent_to_login():
    decision = evaluate_guard(Session(role=None), '/referrals')
    assert decision.state is GuardState.UNAUTHENTICATED
    assert decision.redirect_to == LOGIN_PATH


def test_anonymous_is_sent_to_login_even_for_unmapped_paths():
    decision = evaluate_guard(Session(), '/some/unmapped/path')
    assert decision.state is GuardState.UNAUTHENTICATED


def test_custom_login_path():
    decision = evaluate_guard(Session(), '/referrals', login_path='/auth/sign-in')
    assert decision.redirect_to == '/auth/sign-in'


def test_national_user_goes_to_its_only_page():
    decision = evaluate_guard(Session(role=UserType.NATIONAL_USER), '/referrals')
    assert decision.state is GuardState.UNAUTHORIZED
    assert decision.redirect_to == ROLE_LANDING_PAGES[UserType.NATIONAL_USER] == '/national-dashboard'


def test_national_user_can_open_its_landing_page():
    decision = evaluate_guard(Session(role=UserType.NATIONAL_USER), '/national-dashboard')
    assert decision.state is GuardState.AUTHORIZED
    assert decision.should_render


def test_system_admin_opens_admin_settings():
    decision = evaluate_guard(Session(role=UserType.SYSTEM_ADMIN), '/admin/settings')
    assert decision.state is GuardState.AUTHORIZED
    assert decision.redirect_to is None


def test_phu_staff_cannot_open_admin_users():
    decision = evaluate_guard(Session(role=UserType.PHU_STAFF), '/admin/users')
    assert decision.state is GuardState.UNAUTHORIZED
    assert decision.redirect_to == DEFAULT_LANDING_PATH


def test_reevaluation_depends_only_on_inputs():
    session = Session(role=UserType.PHU_STAFF)
    first = evaluate_guard(session, '/admin/users')
    assert evaluate_guard(session, '/referrals').state is GuardState.AUTHORIZED
    assert evaluate_guard(session, '/admin/users') == first
    # session resolved after loading
    assert evaluate_guard(Session(is_loading=True), '/referrals').state is GuardState.LOADING
    assert evaluate_guard(Session(role=UserType.SPECIALIST), '/referrals').state is GuardState.AUTHORIZED


def test_landing_page_for():
    assert landing_page_for(UserType.NATIONAL_USER) == '/national-dashboard'
    assert landing_page_for(UserType.HOSPITAL_DESK) == DEFAULT_LANDING_PATH
    assert landing_page_for(None) == DEFAULT_LANDING_PATH


class _User:
    is_authenticated = True
    user_type = UserType.SPECIALIST


def test_session_from_user():
    assert Session.from_user(_User()) == Session(role=UserType.SPECIALIST)
    assert Session.from_user(None).is_authenticated is False
    assert Session.from_user(_User(), is_loading=True).is_loading


class _RetiredRoleUser:
    is_authenticated = True
    user_type = 'RETIRED_ROLE'


def test_session_from_user_with_retired_role_is_unauthenticated():
    session = Session.from_user(_RetiredRoleUser())
    assert session.is_authenticated is False
    assert evaluate_guard(session, '/').redirect_to == LOGIN_PATH
