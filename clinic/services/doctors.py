"""Doctor records.  A doctor is always backed by a user account."""
import logging

from django.db import transaction

from ..models import Doctor, User
from . import analytics
from .lookups import get_or_404

logger = logging.getLogger(__name__)

FIELDS = ('name', 'specialization', 'phone', 'email', 'availability')


def create_doctor(data: dict) -> Doctor:
    user = get_or_404(User, data['userId'], 'User')
    with transaction.atomic():
        doctor = Doctor.objects.create(
            user=user,
            availability=data.get('availability') or [],
            **{f: data[f] for f in FIELDS if f != 'availability'},
        )
    analytics.invalidate()
    logger.info("Created doctor %s for user %s", doctor.pk, user.pk)
    return doctor


def update_doctor(doctor: Doctor, data: dict) -> Doctor:
    for field in FIELDS:
        if field in data:
            setattr(doctor, field, data[field])
    with transaction.atomic():
        doctor.save()
    logger.info("Updated doctor %s", doctor.pk)
    return doctor
