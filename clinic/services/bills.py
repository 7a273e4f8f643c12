"""Billing.  Payments themselves happen elsewhere; only their reference is kept."""
import logging

from django.db import transaction
from django.utils import timezone

from ..models import Appointment, Bill, Patient
from . import analytics
from .lookups import require

logger = logging.getLogger(__name__)

UPDATABLE = {
    'services': 'services',
    'totalAmount': 'total_amount',
    'paymentStatus': 'payment_status',
    'paymentMethod': 'payment_method',
    'paymentId': 'payment_id',
}


def create_bill(user, data: dict) -> Bill:
    lookups = [(Patient, data['patientId'], 'Patient')]
    if data.get('appointmentId'):
        lookups.append((Appointment, data['appointmentId'], 'Appointment'))
    found = require(*lookups)
    with transaction.atomic():
        bill = Bill.objects.create(
            patient=found[0],
            appointment=found[1] if len(found) > 1 else None,
            services=data.get('services') or [],
            total_amount=data['totalAmount'],
            payment_method=data.get('paymentMethod') or Bill.PaymentMethod.CASH,
            created_by=user,
        )
    analytics.invalidate()
    logger.info("Created bill %s for patient %s", bill.pk, bill.patient_id)
    return bill


def update_bill(bill: Bill, data: dict) -> Bill:
    """Merge ``data`` into ``bill``.

    Moving into ``paid`` from any other status stamps ``paid_at``; staying
    paid keeps the original stamp and leaving paid does not clear it.
    """
    was_paid = bill.payment_status == Bill.PaymentStatus.PAID
    for key, field in UPDATABLE.items():
        if key in data:
            setattr(bill, field, data[key])
    if bill.payment_status == Bill.PaymentStatus.PAID and not was_paid:
        bill.paid_at = timezone.now()
    with transaction.atomic():
        bill.save()
    analytics.invalidate()
    logger.info("Updated bill %s status=%s", bill.pk, bill.payment_status)
    return bill
