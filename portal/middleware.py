import logging

from django.conf import settings
from django.contrib.auth.views import redirect_to_login
from django.http import HttpResponseRedirect
from django.shortcuts import render

from .guard import GuardState, Session, evaluate_guard

logger = logging.getLogger('portal.guard')


class RouteGuardMiddleware:
    """Apply the page guard to every dashboard request.

    API, static and auth endpoints are listed in
    ``settings.RMS_GUARD_EXEMPT_PREFIXES`` and pass straight through; the
    API enforces the same permission table through DRF permission classes.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.login_path = getattr(settings, 'RMS_LOGIN_PATH', settings.LOGIN_URL)
        self.exempt_prefixes = tuple(getattr(settings, 'RMS_GUARD_EXEMPT_PREFIXES', ()))

    def is_exempt(self, path: str) -> bool:
        for prefix in self.exempt_prefixes:
            if prefix.endswith('/'):
                if path.startswith(prefix):
                    return True
            elif path == prefix or path.startswith(prefix + '/'):
                return True
        return False

    def get_session(self, request) -> Session:
        # Authentication has already run by the time a server request gets here
        return Session.from_user(getattr(request, 'user', None))

    def __call__(self, request):
        path = request.path or '/'
        if self.is_exempt(path):
            return self.get_response(request)

        session = self.get_session(request)
        decision = evaluate_guard(session, path, login_path=self.login_path)

        if decision.state is GuardState.LOADING:
            return render(request, 'portal/loading.html', status=200)
        if decision.state is GuardState.UNAUTHENTICATED:
            logger.info('guard: anonymous request for %s, redirecting to login', path)
            return redirect_to_login(request.get_full_path(), decision.redirect_to)
        if decision.state is GuardState.UNAUTHORIZED:
            logger.info('guard: role %s may not open %s, redirecting to %s',
                        session.role, path, decision.redirect_to)
            return HttpResponseRedirect(decision.redirect_to)
        return self.get_response(request)
