"""
Server-rendered pages: sign in, sign out and the dashboard shell.

Every dashboard path is served by :func:`shell`; by the time a request
reaches it :class:`portal.middleware.RouteGuardMiddleware` has already
decided the user may see the page.
"""
import logging

from django.conf import settings
from django.contrib.auth import login, logout
from django.contrib.auth.forms import AuthenticationForm
from django.core.exceptions import ValidationError
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_http_methods

from portal.guard import landing_page_for
from portal.navigation import build_navigation
from portal.permissions import user_role
from portal.routes import normalize_path, required_permission
from portal.services.audit import log_action

logger = logging.getLogger(__name__)


class DashboardAuthenticationForm(AuthenticationForm):
    error_messages = {
        **AuthenticationForm.error_messages,
        'no_role': 'This account has no dashboard role assigned.',
    }

    def confirm_login_allowed(self, user):
        super().confirm_login_allowed(user)
        if not user_role(user):
            raise ValidationError(self.error_messages['no_role'], code='no_role')


def _safe_next(request, role):
    target = request.POST.get('next') or request.GET.get('next')
    if target and url_has_allowed_host_and_scheme(
            target, allowed_hosts={request.get_host()}, require_https=request.is_secure()):
        return target
    return landing_page_for(role)


@require_http_methods(['GET', 'POST'])
def login_page(request):
    if request.method == 'POST':
        form = DashboardAuthenticationForm(request, data=request.POST)
        if form.is_valid():
            user = form.get_user()
            login(request, user)
            log_action(user=user, action='login', object_type='user', object_id=user.id,
                       detail={'result': 'ok', 'via': 'session'})
            return redirect(_safe_next(request, user_role(user)))
        logger.info('failed page login for %s', request.POST.get('username', ''))
    else:
        if user_role(request.user):
            return redirect(_safe_next(request, user_role(request.user)))
        form = DashboardAuthenticationForm(request)
    return render(request, 'portal/login.html', {
        'form': form,
        'next': request.POST.get('next') or request.GET.get('next', ''),
    })


@require_http_methods(['GET', 'POST'])
def logout_page(request):
    if request.user.is_authenticated:
        log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
                   detail={'via': 'session'})
    logout(request)
    return redirect(getattr(settings, 'RMS_LOGIN_PATH', settings.LOGIN_URL))


def shell(request, path=''):
    role = user_role(request.user)
    current = normalize_path(request.path)
    key = required_permission(current)
    return render(request, 'portal/shell.html', {
        'role': role,
        'path': current,
        'permission': key.value if key else None,
        'navigation': build_navigation(role, current),
    })
