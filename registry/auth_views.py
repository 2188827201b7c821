"""
Authentication views.

Credential verification issues server-side session state: a DRF token
plus a simplejwt access/refresh pair.  Clients present one of them on
every request and the server validates it; nothing about the logged-in
operator is trusted from the client.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.models import update_last_login
from django.db import IntegrityError, transaction
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated, IsAdminUser
from rest_framework.response import Response

from registry.authentication import LoginRateThrottle
from registry.exceptions import AuthError, UserAlreadyExists
from registry.serializers.auth import LEGACY_ALIASES, LoginSerializer, UserCreateSerializer, with_aliases
from registry.services.audit import log_action

logger = logging.getLogger(__name__)

User = get_user_model()


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    """
    Verify username/password and open a session.
    Accepts fields:
      - username or usuario
      - password or senha
    """
    s = LoginSerializer(data=with_aliases(request.data, LEGACY_ALIASES))
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']
    password = s.validated_data['password']
    ip = request.META.get('REMOTE_ADDR')

    user = authenticate(request, username=username, password=password)
    if not user:
        logger.info('failed login for %r from %s', username, ip)
        log_action(user=None, action='login', object_type='user', object_id=None,
                   detail={'result': 'fail', 'username': username, 'ip': ip})
        raise AuthError()

    update_last_login(None, user)
    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': ip})

    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)

    payload: dict[str, object] = {
        'success': True,
        'message': 'Login realizado com sucesso',
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'data': {
            'id': user.id,
            'username': user.username,
            'full_name': user.display_name(),
            'last_login': user.last_login.isoformat() if user.last_login else None,
        },
    }
    return Response(payload, status=200)


@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from a refresh token."""
    view = TokenRefreshView.as_view()
    resp = view(request._request)
    if isinstance(resp, Response):
        data = dict(resp.data)
        if resp.status_code >= 400:
            # already rendered by the unified exception handler
            return Response(data, status=resp.status_code)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        data['success'] = True
        return Response(data, status=resp.status_code)
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist the given refresh token, or all of the caller's tokens."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
            count = 1
        except TokenError as e:
            logger.info('logout with unusable refresh token: %s', e)
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    Token.objects.filter(user=request.user).delete()
    log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
               detail={'blacklisted': count})
    return Response({'success': True, 'blacklisted': count})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminUser])
def create_user(request):
    """Create an operator account.  The password is stored salted and hashed."""
    s = UserCreateSerializer(data=with_aliases(request.data, {**LEGACY_ALIASES, 'nome_completo': 'full_name'}))
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=vd['username'],
                password=vd['password'],
                full_name=vd.get('full_name') or '',
            )
    except IntegrityError:
        raise UserAlreadyExists()
    log_action(user=request.user, action='user_create', object_type='user', object_id=user.id,
               detail={'username': user.username})
    return Response({'success': True, 'message': 'Usuário criado com sucesso',
                     'data': {'id': user.id, 'username': user.username}}, status=201)
