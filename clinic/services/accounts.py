"""
Account lifecycle: registration, token issuance and password resets.

Access and refresh tokens are issued by simplejwt; the role is copied
into the token as a claim for clients, but every request re-reads the
live user.  Reset tokens are random, mailed in clear and stored only as
a SHA-256 digest with an expiry.
"""
from __future__ import annotations

import hashlib
import logging
import secrets
from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import APIException, NotFound
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from ..models import User
from . import notifications

logger = logging.getLogger(__name__)


class InvalidCredentials(APIException):
    status_code = 401
    default_detail = "Invalid credentials"
    default_code = "invalid_credentials"


class MailNotSent(APIException):
    status_code = 500
    default_detail = "Email could not be sent"
    default_code = "mail_not_sent"


def issue_tokens(user: User) -> dict:
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role
    return {'access': str(refresh.access_token), 'refresh': str(refresh)}


def register(data: dict) -> User:
    with transaction.atomic():
        user = User.objects.create_user(
            email=data['email'],
            password=data['password'],
            name=data['name'],
            role=data.get('role') or User.Role.PATIENT,
        )
    logger.info("Registered user %s role=%s", user.pk, user.role)
    return user


def revoke_all(user: User) -> int:
    """Blacklist every outstanding refresh token of ``user``."""
    count = 0
    for token in OutstandingToken.objects.filter(user=user):
        _, created = BlacklistedToken.objects.get_or_create(token=token)
        count += int(created)
    logger.info("Revoked %d refresh tokens of user %s", count, user.pk)
    return count


def hash_token(raw: str) -> str:
    return hashlib.sha256(raw.encode()).hexdigest()


def start_reset(email: str) -> str:
    """Mail a reset token to the account registered under ``email``.

    Returns the clear token.  The stored token is withdrawn again when
    the mail cannot be delivered.
    """
    user = User.objects.filter(email=email).first()
    if user is None:
        raise NotFound("There is no user with that email")
    raw = secrets.token_hex(20)
    user.reset_password_token = hash_token(raw)
    user.reset_password_expire = timezone.now() + timedelta(minutes=settings.RESET_TOKEN_MINUTES)
    user.save(update_fields=['reset_password_token', 'reset_password_expire', 'updated_at'])
    result = notifications.send(notifications.Notification(
        to=user.email,
        subject='Password reset token',
        body=(
            "You are receiving this email because a password reset was requested "
            f"for your account.\n\nReset token: {raw}\n\n"
            f"The token expires in {settings.RESET_TOKEN_MINUTES} minutes."
        ),
    ))
    if not result.delivered:
        user.reset_password_token = None
        user.reset_password_expire = None
        user.save(update_fields=['reset_password_token', 'reset_password_expire', 'updated_at'])
        raise MailNotSent()
    return raw


def finish_reset(raw: str, password: str) -> Optional[User]:
    """Set a new password if ``raw`` is a live reset token."""
    user = User.objects.filter(
        reset_password_token=hash_token(raw or ''),
        reset_password_expire__gt=timezone.now(),
    ).first()
    if user is None:
        return None
    user.set_password(password)
    user.reset_password_token = None
    user.reset_password_expire = None
    user.save()
    revoke_all(user)
    logger.info("Password reset completed for user %s", user.pk)
    return user
