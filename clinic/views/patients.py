"""
Patient endpoints.

Reception and admin staff maintain patient records; doctors may read
them.  A patient account may read only the record linked to it.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes

from ..envelope import success
from ..models import Patient
from ..permissions import ADMIN, DOCTOR, PATIENT, RECEPTION, allow, ensure_owner
from ..serializers.patient import (
    PatientBriefSerializer,
    PatientDetailSerializer,
    PatientInputSerializer,
    PatientListQuerySerializer,
    PatientSearchQuerySerializer,
    PatientSerializer,
)
from ..services import lookups
from ..services.patients import create_patient, update_patient
from ..services.query import Sorting, exact_filters, paginate, text_search

SORTING = Sorting({'createdAt': 'created_at', 'name': 'name', 'age': 'age', 'updatedAt': 'updated_at'})
SEARCH_LIMIT = 20


@api_view(['GET', 'POST'])
@permission_classes([allow(ADMIN, RECEPTION, GET=(ADMIN, RECEPTION, DOCTOR))])
def patients(request):
    if request.method == 'POST':
        s = PatientInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        patient = create_patient(s.validated_data)
        return success({'patient': PatientSerializer(patient).data},
                       message='Patient created successfully', status=status.HTTP_201_CREATED)

    q = PatientListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = Patient.objects.select_related('user')
    qs = text_search(qs, q.validated_data.get('search'), ('name', 'phone'))
    qs = exact_filters(qs, q.validated_data, {'gender': 'gender'})
    rows, pagination = paginate(qs, request.query_params, SORTING)
    return success({'patients': PatientSerializer(rows, many=True).data}, pagination=pagination)


@api_view(['GET'])
@permission_classes([allow(ADMIN, RECEPTION, DOCTOR)])
def search_patients(request):
    q = PatientSearchQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = text_search(Patient.objects.all(), q.validated_data['q'], ('name', 'phone'))
    rows = list(qs.order_by('name', 'pk')[:SEARCH_LIMIT])
    return success({'patients': PatientBriefSerializer(rows, many=True).data}, count=len(rows))


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([allow(ADMIN, RECEPTION, GET=(ADMIN, RECEPTION, DOCTOR, PATIENT), DELETE=(ADMIN,))])
def patient_detail(request, pk):
    patient = lookups.get_or_404(Patient.objects.select_related('user'), pk, 'Patient')

    if request.method == 'GET':
        ensure_owner(request.user, patient.pk, 'Not authorized to view this patient record')
        return success({'patient': PatientDetailSerializer(patient).data})

    if request.method == 'PUT':
        s = PatientInputSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        patient = update_patient(patient, s.validated_data)
        return success({'patient': PatientSerializer(patient).data}, message='Patient updated successfully')

    lookups.delete(patient, 'Patient')
    return success({}, message='Patient deleted successfully')
