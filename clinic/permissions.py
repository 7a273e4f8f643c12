"""
Role allow-lists and record ownership checks.

Every route declares its permitted roles once through :func:`allow`.
Routes whose records belong to a patient additionally call
:func:`ensure_owner` after fetching the record; staff roles bypass that
second layer.
"""
from __future__ import annotations

import uuid
from typing import Iterable, Optional

from rest_framework.exceptions import NotAuthenticated, PermissionDenied
from rest_framework.permissions import BasePermission

from .models import Doctor, Patient, User

ADMIN = User.Role.ADMIN
DOCTOR = User.Role.DOCTOR
RECEPTION = User.Role.RECEPTION
PATIENT = User.Role.PATIENT

ALL_ROLES = (ADMIN, DOCTOR, RECEPTION, PATIENT)
# Roles that are never subject to the per-record ownership check
STAFF_ROLES = frozenset({ADMIN, DOCTOR, RECEPTION})


def authorize(user, roles: Iterable[str]) -> None:
    """Raise unless ``user`` is authenticated and holds one of ``roles``."""
    if not (user and getattr(user, 'is_authenticated', False)):
        raise NotAuthenticated('Not authorized to access this route')
    role = getattr(user, 'role', None)
    if role not in set(roles):
        raise PermissionDenied(f"User role '{role}' is not authorized to access this route")


def allow(*roles: str, **per_method: Iterable[str]) -> type[BasePermission]:
    """Build a permission class admitting ``roles``.

    Keyword arguments override the allow-list for one HTTP method, e.g.
    ``allow(ADMIN, RECEPTION, GET=(ADMIN, RECEPTION, DOCTOR))``.
    """
    default = frozenset(roles or ALL_ROLES)
    overrides = {method.upper(): frozenset(r) for method, r in per_method.items()}

    class RoleAllowed(BasePermission):
        allowed = default
        by_method = overrides

        def has_permission(self, request, view) -> bool:  # type: ignore[override]
            authorize(request.user, self.by_method.get(request.method, self.allowed))
            return True

    RoleAllowed.__name__ = 'Allow' + ''.join(r.title() for r in sorted(default))
    return RoleAllowed


def own_patient(user) -> Optional[Patient]:
    """Return the Patient record linked to ``user``, if any."""
    return Patient.objects.filter(user_id=user.pk).order_by('created_at').first()


def own_doctor(user) -> Optional[Doctor]:
    """Return the Doctor record linked to ``user``, if any."""
    return Doctor.objects.filter(user_id=user.pk).order_by('created_at').first()


def ensure_owner(user, patient_id, message: str = 'Not authorized to access this record') -> None:
    """Restrict a patient caller to records of their own Patient entry."""
    if getattr(user, 'role', None) in STAFF_ROLES:
        return
    try:
        wanted = uuid.UUID(str(patient_id))
    except (TypeError, ValueError, AttributeError):
        raise PermissionDenied(message)
    own = own_patient(user)
    if own is None or own.pk != wanted:
        raise PermissionDenied(message)
