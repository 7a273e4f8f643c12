"""Appointment booking, updates and notifications."""
import logging

from django.db import transaction

from ..models import Appointment, Doctor, Patient
from ..permissions import ensure_owner
from . import analytics, notifications
from .lookups import require

logger = logging.getLogger(__name__)

UPDATABLE = ('date', 'time', 'status', 'reason', 'notes')


def book(user, data: dict) -> Appointment:
    """Create an appointment once both patient and doctor resolve.

    A patient caller may only book for their own Patient record; that is
    checked before any lookup, so foreign ids all answer 403.
    """
    ensure_owner(user, data['patientId'], 'Not authorized to book appointments for this patient')
    patient, doctor = require(
        (Patient, data['patientId'], 'Patient'),
        (Doctor, data['doctorId'], 'Doctor'),
    )
    with transaction.atomic():
        appt = Appointment.objects.create(
            patient=patient,
            doctor=doctor,
            date=data['date'],
            time=data['time'],
            reason=data.get('reason', ''),
            notes=data.get('notes', ''),
            created_by=user,
        )
    analytics.invalidate()
    logger.info("Booked appointment %s (patient=%s doctor=%s)", appt.pk, patient.pk, doctor.pk)
    return appt


def update_appointment(appt: Appointment, data: dict) -> Appointment:
    for field in UPDATABLE:
        if field in data:
            setattr(appt, field, data[field])
    with transaction.atomic():
        appt.save()
    analytics.invalidate()
    logger.info("Updated appointment %s status=%s", appt.pk, appt.status)
    return appt


def notify(appt: Appointment) -> notifications.DeliveryResult:
    """Email the appointment details to the patient's linked account."""
    recipient = appt.patient.user.email if appt.patient.user_id else None
    when = appt.date.date().isoformat()
    result = notifications.send(notifications.Notification(
        to=recipient,
        subject='Appointment scheduled',
        body=(
            f"Dear {appt.patient.name},\n\n"
            f"Your appointment with Dr. {appt.doctor.name} ({appt.doctor.specialization}) "
            f"is on {when} at {appt.time}. Status: {appt.status}.\n"
        ),
    ))
    appt.email_notification_sent = result.delivered
    appt.save(update_fields=['email_notification_sent', 'updated_at'])
    return result
