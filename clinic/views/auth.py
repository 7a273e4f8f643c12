"""
Authentication endpoints.

Login is by email and password only.  Access tokens are short lived;
refresh tokens rotate through simplejwt and are blacklisted on logout
and after a password change or reset.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from ..envelope import success
from ..permissions import ALL_ROLES, allow
from ..serializers.auth import (
    ForgotPasswordSerializer,
    LoginSerializer,
    LogoutSerializer,
    ProfileUpdateSerializer,
    RefreshSerializer,
    RegisterSerializer,
    ResetPasswordSerializer,
    UserSerializer,
)
from ..services import accounts

logger = logging.getLogger(__name__)


def _session(user, message, code=status.HTTP_200_OK):
    tokens = accounts.issue_tokens(user)
    return success({'user': UserSerializer(user).data, 'token': tokens['access'], 'refreshToken': tokens['refresh']},
                   message=message, status=code)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = accounts.register(s.validated_data)
    return _session(user, 'User registered successfully', status.HTTP_201_CREATED)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    user = authenticate(request, email=vd['email'], password=vd['password'])
    if not user:
        logger.info("Failed login for %s from %s", vd['email'], request.META.get('REMOTE_ADDR'))
        raise accounts.InvalidCredentials()
    return _session(user, 'Login successful')

# ScopedRateThrottle reads throttle_scope from the wrapped view class
login_view.cls.throttle_scope = "login"


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def refresh_view(request):
    s = RefreshSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    ser = TokenRefreshSerializer(data={'refresh': s.validated_data['refresh']})
    try:
        ser.is_valid(raise_exception=True)
    except TokenError as e:
        raise accounts.InvalidCredentials(str(e))
    data = {'token': ser.validated_data['access']}
    if 'refresh' in ser.validated_data:
        data['refreshToken'] = ser.validated_data['refresh']
    return success(data)


@api_view(['POST'])
@permission_classes([allow(*ALL_ROLES)])
def logout_view(request):
    s = LogoutSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    if s.validated_data['all']:
        accounts.revoke_all(request.user)
    elif s.validated_data.get('refresh'):
        try:
            token = RefreshToken(s.validated_data['refresh'])
        except TokenError as e:
            raise ValidationError({'refresh': str(e)})
        if str(token.get('user_id')) != str(request.user.pk):
            raise ValidationError({'refresh': 'Token does not belong to this user'})
        token.blacklist()
    return success({}, message='Logged out successfully')


@api_view(['GET'])
@permission_classes([allow(*ALL_ROLES)])
def me_view(request):
    return success({'user': UserSerializer(request.user).data})


@api_view(['PUT'])
@permission_classes([allow(*ALL_ROLES)])
def profile_view(request):
    user = request.user
    s = ProfileUpdateSerializer(data=request.data, context={'user': user})
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    if 'name' in vd:
        user.name = vd['name']
    if 'email' in vd:
        user.email = vd['email']
    password_changed = 'newPassword' in vd
    if password_changed:
        user.set_password(vd['newPassword'])
    user.save()
    if password_changed:
        accounts.revoke_all(user)
        return _session(user, 'Profile updated successfully')
    return success({'user': UserSerializer(user).data}, message='Profile updated successfully')


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def forgot_password_view(request):
    s = ForgotPasswordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    accounts.start_reset(s.validated_data['email'])
    return success({}, message='Password reset email sent')

forgot_password_view.cls.throttle_scope = "login"


@api_view(['PUT'])
@authentication_classes([])
@permission_classes([AllowAny])
def reset_password_view(request, token):
    s = ResetPasswordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = accounts.finish_reset(token, s.validated_data['password'])
    if user is None:
        raise ValidationError('Invalid or expired reset token')
    return _session(user, 'Password reset successful')
