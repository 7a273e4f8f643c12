import uuid

from django.db import transaction
from django.db.models import ProtectedError
from rest_framework.exceptions import NotFound, ValidationError

from . import analytics


def find(queryset, pk):
    """Return the row with primary key ``pk`` or ``None``.

    Values that are not UUIDs cannot name a row and are treated as missing.
    """
    try:
        key = uuid.UUID(str(pk))
    except (TypeError, ValueError, AttributeError):
        return None
    manager = getattr(queryset, 'objects', queryset)
    return manager.filter(pk=key).first()


def get_or_404(queryset, pk, label):
    obj = find(queryset, pk)
    if obj is None:
        raise NotFound(f'{label} not found')
    return obj


def require(*lookups):
    """Resolve ``(queryset, pk, label)`` triples in order.

    Stops at the first missing reference so the error names it; nothing is
    written by the caller until every reference resolved.
    """
    return [get_or_404(qs, pk, label) for qs, pk, label in lookups]


def delete(obj, label):
    """Delete ``obj``; refuse when other records still reference it."""
    try:
        with transaction.atomic():
            obj.delete()
    except ProtectedError:
        raise ValidationError(f'{label} is referenced by other records')
    analytics.invalidate()
