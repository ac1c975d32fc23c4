"""
Login, logout and session endpoints.

These drive a :class:`~clinic.services.session.SessionManager` per
request: login checks the credentials *and* the requested role, logout
drops the token.  Kept apart from ``clinic.authentication`` so that DRF
can load the authentication class without importing views.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from clinic.models import User
from clinic.serializers.auth import LoginSerializer
from clinic.services.access import visible_navigation
from clinic.services.audit import client_ip, log_action
from clinic.services.session import SessionManager, session_for_user


class LoginRateThrottle(AnonRateThrottle):
    scope = 'login'


def _navigation_payload(session):
    return {section: [item.as_dict() for item in items] for section, items in visible_navigation(session).items()}


def _user_payload(user):
    return {
        'id': user.id,
        'username': user.username,
        'name': user.get_full_name() or user.username,
        'email': user.email,
        'role': user.role,
    }


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    """
    Log in with username, password and the role the user signs in as.

    The role must be the one stored on the account; asking for any other
    role fails exactly like a wrong password does.
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    manager = SessionManager()
    if not manager.login(vd['username'], vd['password'], vd['role'], request=request):
        log_action(user=None, action='login', object_type='user', object_id=None,
                   detail={'result': 'fail', 'username': vd['username'], 'role': vd['role'],
                           'ip': client_ip(request)})
        return Response({'ok': False, 'error': {
            'code': 'invalid_credentials',
            'message': 'invalid username, password or role',
        }}, status=400)

    session = manager.current
    user = User.objects.get(pk=session.user_id)
    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'role': user.role, 'ip': client_ip(request)})

    return Response({
        'ok': True,
        'token': manager.token_key,
        'role': user.role,
        'user': _user_payload(user),
        'session': session.as_dict(),
        'navigation': _navigation_payload(session),
    }, status=200)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    user = request.user
    token = getattr(request, 'auth', None)
    manager = SessionManager(token_key=getattr(token, 'key', None))
    manager.logout()
    log_action(user=user, action='logout', object_type='user', object_id=user.id,
               detail={'ip': client_ip(request)})
    return Response({'ok': True, 'session': manager.current.as_dict()})


@api_view(['GET'])
@permission_classes([AllowAny])
def session_view(request):
    """Current session; anonymous callers get ``unauthenticated``."""
    session = session_for_user(request.user)
    payload = {'ok': True, 'session': session.as_dict()}
    if session.is_authenticated:
        payload['user'] = _user_payload(request.user)
    return Response(payload)
