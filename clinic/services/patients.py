"""Patient records: creation, updates and lookups."""
import logging

from django.db import transaction
from rest_framework.exceptions import ValidationError

from ..models import Patient, User
from . import analytics
from .lookups import get_or_404

logger = logging.getLogger(__name__)

DUPLICATE_PHONE = 'Patient with this phone number already exists'


def _ensure_phone_free(phone, exclude_pk=None):
    qs = Patient.objects.filter(phone=phone)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise ValidationError(DUPLICATE_PHONE)


def _linked_user(user_id):
    if not user_id:
        return None
    return get_or_404(User, user_id, 'User')


def create_patient(data: dict) -> Patient:
    _ensure_phone_free(data['phone'])
    user = _linked_user(data.get('userId'))
    with transaction.atomic():
        patient = Patient.objects.create(
            name=data['name'],
            age=data['age'],
            gender=data['gender'],
            phone=data['phone'],
            address=data.get('address', ''),
            user=user,
        )
    analytics.invalidate()
    logger.info("Created patient %s", patient.pk)
    return patient


def update_patient(patient: Patient, data: dict) -> Patient:
    if 'phone' in data and data['phone'] != patient.phone:
        _ensure_phone_free(data['phone'], exclude_pk=patient.pk)
    for field in ('name', 'age', 'gender', 'phone', 'address'):
        if field in data:
            setattr(patient, field, data[field])
    if 'userId' in data:
        patient.user = _linked_user(data['userId'])
    with transaction.atomic():
        patient.save()
    analytics.invalidate()
    logger.info("Updated patient %s", patient.pk)
    return patient
