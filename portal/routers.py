"""
URL mappings for the portal.

JSON endpoints live under ``/api/`` without trailing slashes. Every other
path falls through to the dashboard shell, which the route guard
middleware has already authorized.
"""
from django.urls import include, path, re_path

from .auth_views import access_check_view, jwt_logout_view, jwt_refresh_view, login_view, session_view
from .views import errors, health, notifications, pages, referrals

urlpatterns = [
    # Ops
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),

    # Auth & access
    path('api/auth/login', login_view, name='api-login'),
    path('api/auth/refresh', jwt_refresh_view, name='api-refresh'),
    path('api/auth/logout', jwt_logout_view, name='api-logout'),
    path('api/auth/session', session_view, name='api-session'),
    path('api/access/check', access_check_view, name='api-access-check'),

    # Referrals
    path('api/referrals', referrals.referrals, name='api-referrals'),
    path('api/referrals/<uuid:pk>', referrals.referral_detail, name='api-referral-detail'),
    path('api/referrals/<uuid:pk>/status', referrals.referral_status, name='api-referral-status'),

    # Notifications
    path('api/notifications', notifications.list_notifications, name='api-notifications'),
    path('api/notifications/subscribe', notifications.subscription, name='api-notifications-subscribe'),
    path('api/notifications/unread-count', notifications.unread_count, name='api-notifications-unread'),
    path('api/notifications/read-all', notifications.mark_all_read, name='api-notifications-read-all'),
    path('api/notifications/<uuid:pk>/read', notifications.mark_read, name='api-notification-read'),

    # Anything else under /api/
    re_path(r'^api/(?P<path>.*)$', errors.api_not_found, name='api-not-found'),

    # Pages
    path('login', pages.login_page, name='login-page'),
    path('logout', pages.logout_page, name='logout-page'),
    re_path(r'^(?P<path>.*)$', pages.shell, name='shell'),
]
