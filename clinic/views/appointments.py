"""
Appointment endpoints.

Doctors listing appointments see only their own; patients may book and
read appointments of their own Patient record only.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes

from ..envelope import success
from ..models import Appointment, Doctor, Patient
from ..permissions import ADMIN, ALL_ROLES, DOCTOR, PATIENT, RECEPTION, allow, ensure_owner
from ..serializers.appointment import (
    AppointmentCreateSerializer,
    AppointmentDetailSerializer,
    AppointmentListQuerySerializer,
    AppointmentSerializer,
    AppointmentUpdateSerializer,
)
from ..services import appointments as booking
from ..services import lookups
from ..services.query import Sorting, exact_filters, filter_day, paginate, scope_to_doctor

SORTING = Sorting(
    {'date': 'date', 'time': 'time', 'status': 'status', 'createdAt': 'created_at'},
    default='date',
)
RELATED = ('patient', 'doctor', 'created_by')


def _filtered(qs, query_params):
    q = AppointmentListQuerySerializer(data=query_params)
    q.is_valid(raise_exception=True)
    qs = exact_filters(qs, q.validated_data, {'status': 'status'})
    return filter_day(qs, q.validated_data.get('date'))


@api_view(['GET', 'POST'])
@permission_classes([allow(ADMIN, RECEPTION, PATIENT, GET=(ADMIN, RECEPTION, DOCTOR))])
def appointments(request):
    if request.method == 'POST':
        s = AppointmentCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        appt = booking.book(request.user, s.validated_data)
        return success({'appointment': AppointmentSerializer(appt).data},
                       message='Appointment created successfully', status=status.HTTP_201_CREATED)

    qs = scope_to_doctor(Appointment.objects.select_related(*RELATED), request.user)
    qs = _filtered(qs, request.query_params)
    rows, pagination = paginate(qs, request.query_params, SORTING)
    return success({'appointments': AppointmentSerializer(rows, many=True).data}, pagination=pagination)


@api_view(['GET'])
@permission_classes([allow(ADMIN, RECEPTION, DOCTOR)])
def doctor_appointments(request, doctor_id):
    doctor = lookups.find(Doctor, doctor_id)
    qs = Appointment.objects.select_related(*RELATED)
    qs = qs.filter(doctor=doctor) if doctor else qs.none()
    rows = list(_filtered(qs, request.query_params).order_by('date', 'time', 'pk'))
    return success({'appointments': AppointmentSerializer(rows, many=True).data}, count=len(rows))


@api_view(['GET'])
@permission_classes([allow(*ALL_ROLES)])
def patient_appointments(request, patient_id):
    ensure_owner(request.user, patient_id, 'Not authorized to view these appointments')
    patient = lookups.find(Patient, patient_id)
    qs = Appointment.objects.select_related(*RELATED)
    qs = qs.filter(patient=patient) if patient else qs.none()
    q = AppointmentListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    rows = list(exact_filters(qs, q.validated_data, {'status': 'status'}).order_by('-date', '-pk'))
    return success({'appointments': AppointmentSerializer(rows, many=True).data}, count=len(rows))


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([allow(ADMIN, RECEPTION, DOCTOR, GET=ALL_ROLES, DELETE=(ADMIN,))])
def appointment_detail(request, pk):
    appt = lookups.get_or_404(Appointment.objects.select_related(*RELATED), pk, 'Appointment')

    if request.method == 'GET':
        ensure_owner(request.user, appt.patient_id, 'Not authorized to view this appointment')
        return success({'appointment': AppointmentDetailSerializer(appt).data})

    if request.method == 'PUT':
        s = AppointmentUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        appt = booking.update_appointment(appt, s.validated_data)
        return success({'appointment': AppointmentSerializer(appt).data},
                       message='Appointment updated successfully')

    lookups.delete(appt, 'Appointment')
    return success({}, message='Appointment deleted successfully')


@api_view(['POST'])
@permission_classes([allow(ADMIN, RECEPTION)])
def notify_appointment(request, pk):
    appt = lookups.get_or_404(Appointment.objects.select_related(*RELATED, 'patient__user'), pk, 'Appointment')
    result = booking.notify(appt)
    message = 'Email notification sent successfully' if result.delivered else f'Email notification not sent: {result.detail}'
    return success({'appointment': AppointmentSerializer(appt).data}, message=message)
