"""
Authentication and session bootstrap views.

The dashboard client logs in here and receives a JWT pair, then calls
the session endpoint to learn its role, permissions, navigation and
where the guard would send it for a given path.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from portal.guard import Session, evaluate_guard, landing_page_for
from portal.navigation import build_navigation
from portal.permissions import get_role_permissions, user_role
from portal.routes import can_access_route, normalize_path, required_permission, resolve_route
from portal.serializers.auth import LoginSerializer, LogoutSerializer
from portal.services.audit import log_action

from .models import User

logger = logging.getLogger(__name__)


def serialize_user(user: User) -> dict:
    facility = user.facility
    return {
        'id': user.id,
        'username': user.username,
        'name': user.get_full_name() or user.username,
        'email': user.email,
        'userType': user.user_type or None,
        'facility': {'id': facility.id, 'name': facility.name, 'code': facility.code} if facility else None,
    }


def _sorted_permissions(role) -> list[str]:
    return sorted(k.value for k in get_role_permissions(role))


# ---------------------------------------------------------------------
# Username/password login
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']
    password = s.validated_data['password']

    user = authenticate(request, username=username, password=password)
    ip = request.META.get('REMOTE_ADDR')
    if not user:
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'username': username, 'ip': ip})
        logger.info('failed login for %s from %s', username, ip)
        return Response({'ok': False, 'detail': 'Invalid username or password'}, status=400)

    role = user_role(user)
    if not role:
        # No role means nothing in the dashboard is reachable
        log_action(user=user, action='login', object_type='user', object_id=user.id,
                   detail={'result': 'no_role', 'ip': ip})
        return Response({'ok': False, 'detail': 'Account has no role assigned'}, status=403)

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': ip})
    refresh = RefreshToken.for_user(user)

    return Response({
        'ok': True,
        'accessToken': str(refresh.access_token),
        'refreshToken': str(refresh),
        'user': serialize_user(user),
        'permissions': _sorted_permissions(role),
        'landingPage': landing_page_for(role),
    }, status=200)

# ScopedRateThrottle reads throttle_scope off the wrapped APIView class
login_view.cls.throttle_scope = 'login'


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from a refresh token."""
    refresh = request.data.get('refreshToken') or request.data.get('refresh')
    serializer = TokenRefreshSerializer(data={'refresh': refresh})
    try:
        serializer.is_valid(raise_exception=True)
    except TokenError as e:
        return Response({'ok': False, 'detail': str(e)}, status=401)
    payload = {'ok': True, 'accessToken': serializer.validated_data['access']}
    if 'refresh' in serializer.validated_data:
        payload['refreshToken'] = serializer.validated_data['refresh']
    return Response(payload, status=200)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist the given refresh token, or all of the user's tokens."""
    s = LogoutSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    refresh = s.validated_data.get('refreshToken')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
            count = 1
        except TokenError as e:
            return Response({'ok': False, 'detail': str(e)}, status=400)
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
               detail={'blacklisted': count})
    return Response({'ok': True, 'blacklisted': count})


# ---------------------------------------------------------------------
# Session bootstrap & access checks
# ---------------------------------------------------------------------
@api_view(['GET'])
@permission_classes([AllowAny])
def session_view(request):
    """Everything the dashboard needs to start rendering.

    With ``?path=`` the response also carries the guard decision for that
    page, so the client can redirect exactly like the server would.
    """
    user = request.user
    session = Session.from_user(user)
    role = session.role
    payload: dict[str, object] = {
        'ok': True,
        'isAuthenticated': session.is_authenticated,
        'user': serialize_user(user) if session.is_authenticated else None,
        'permissions': _sorted_permissions(role),
        'navigation': build_navigation(role, request.query_params.get('path')),
        'landingPage': landing_page_for(role),
    }
    path = request.query_params.get('path')
    if path is not None:
        decision = evaluate_guard(session, path)
        payload['guard'] = {
            'path': normalize_path(path),
            'state': decision.state.value,
            'redirectTo': decision.redirect_to,
        }
    return Response(payload)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def access_check_view(request):
    """Can the current user open ``?path=``?"""
    path = request.query_params.get('path')
    if not path:
        return Response({'ok': False, 'detail': 'path is required'}, status=400)
    role = user_role(request.user)
    route = resolve_route(path)
    key = required_permission(path)
    return Response({
        'ok': True,
        'path': normalize_path(path),
        'route': route,
        'permission': key.value if key else None,
        'allowed': can_access_route(role, path),
    })
