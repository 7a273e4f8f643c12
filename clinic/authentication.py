"""
Bearer-token authentication backend.

This module defines a subclass of simplejwt's ``JWTAuthentication`` so
the project's configuration has a stable import path.  Token decoding,
signature and expiry checks are delegated to simplejwt; the subclass
adds the requirement that the resolved account is still active and
logs rejected credentials.
"""
from __future__ import annotations

import logging

from rest_framework_simplejwt import authentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken

logger = logging.getLogger(__name__)


class JWTAuthentication(authentication.JWTAuthentication):
    """Resolve ``Authorization: Bearer <token>`` into a live :class:`User`.

    Any failure (malformed token, bad signature, expiry, or an account
    that no longer exists) raises and the view is never entered.
    """

    def authenticate(self, request):
        try:
            result = super().authenticate(request)
        except (InvalidToken, AuthenticationFailed) as exc:
            logger.info("Rejected bearer token on %s %s: %s", request.method, request.path, exc.default_code)
            raise
        if result is None:
            return None
        user, token = result
        if not user.is_active:
            raise AuthenticationFailed('User is inactive', code='user_inactive')
        return user, token
