"""Medical reports written against an appointment."""
import logging

from django.db import transaction

from ..models import Appointment, Doctor, Patient, Report
from . import analytics
from .lookups import require

logger = logging.getLogger(__name__)

UPDATABLE = {'diagnosis': 'diagnosis', 'prescription': 'prescription', 'labTests': 'lab_tests', 'notes': 'notes'}


def create_report(user, data: dict) -> Report:
    appointment, patient, doctor = require(
        (Appointment, data['appointmentId'], 'Appointment'),
        (Patient, data['patientId'], 'Patient'),
        (Doctor, data['doctorId'], 'Doctor'),
    )
    with transaction.atomic():
        report = Report.objects.create(
            appointment=appointment,
            patient=patient,
            doctor=doctor,
            diagnosis=data['diagnosis'],
            prescription=data['prescription'],
            lab_tests=data.get('labTests') or [],
            notes=data.get('notes', ''),
            created_by=user,
        )
    analytics.invalidate()
    logger.info("Created report %s for appointment %s", report.pk, appointment.pk)
    return report


def update_report(report: Report, data: dict) -> Report:
    for key, field in UPDATABLE.items():
        if key in data:
            setattr(report, field, data[key])
    with transaction.atomic():
        report.save()
    logger.info("Updated report %s", report.pk)
    return report
