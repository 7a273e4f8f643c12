from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied

from ..envelope import success
from ..models import Doctor
from ..permissions import ADMIN, ALL_ROLES, DOCTOR, allow
from ..serializers.doctor import DoctorInputSerializer, DoctorListQuerySerializer, DoctorSerializer
from ..services import lookups
from ..services.doctors import create_doctor, update_doctor
from ..services.query import Sorting, exact_filters, paginate, text_search

SORTING = Sorting(
    {'name': 'name', 'specialization': 'specialization', 'createdAt': 'created_at'},
    default='name', default_order='asc',
)


@api_view(['GET', 'POST'])
@permission_classes([allow(ADMIN, GET=ALL_ROLES)])
def doctors(request):
    if request.method == 'POST':
        s = DoctorInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        doctor = create_doctor(s.validated_data)
        return success({'doctor': DoctorSerializer(doctor).data},
                       message='Doctor created successfully', status=status.HTTP_201_CREATED)

    q = DoctorListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = Doctor.objects.select_related('user')
    qs = text_search(qs, q.validated_data.get('search'), ('name', 'specialization'))
    qs = exact_filters(qs, q.validated_data, {'specialization': 'specialization'})
    rows, pagination = paginate(qs, request.query_params, SORTING)
    return success({'doctors': DoctorSerializer(rows, many=True).data}, pagination=pagination)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([allow(ADMIN, GET=ALL_ROLES, PUT=(ADMIN, DOCTOR))])
def doctor_detail(request, pk):
    doctor = lookups.get_or_404(Doctor.objects.select_related('user'), pk, 'Doctor')

    if request.method == 'GET':
        return success({'doctor': DoctorSerializer(doctor).data})

    if request.method == 'PUT':
        # doctors may edit only their own profile
        if request.user.role == DOCTOR and doctor.user_id != request.user.pk:
            raise PermissionDenied('Not authorized to update this doctor profile')
        s = DoctorInputSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        doctor = update_doctor(doctor, s.validated_data)
        return success({'doctor': DoctorSerializer(doctor).data}, message='Doctor updated successfully')

    lookups.delete(doctor, 'Doctor')
    return success({}, message='Doctor deleted successfully')
