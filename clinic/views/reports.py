from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes

from ..envelope import success
from ..models import Patient, Report
from ..permissions import ADMIN, DOCTOR, PATIENT, allow, ensure_owner
from ..serializers.report import (
    ReportCreateSerializer,
    ReportDetailSerializer,
    ReportSerializer,
    ReportUpdateSerializer,
)
from ..services import lookups
from ..services.query import Sorting, paginate, scope_to_doctor
from ..services.reports import create_report, update_report
from .documents import document_response

SORTING = Sorting({'createdAt': 'created_at', 'updatedAt': 'updated_at'})
RELATED = ('appointment', 'patient', 'doctor', 'created_by')


@api_view(['GET', 'POST'])
@permission_classes([allow(ADMIN, DOCTOR)])
def reports(request):
    if request.method == 'POST':
        s = ReportCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        report = create_report(request.user, s.validated_data)
        return success({'report': ReportSerializer(report).data},
                       message='Report created successfully', status=status.HTTP_201_CREATED)

    qs = scope_to_doctor(Report.objects.select_related(*RELATED), request.user)
    rows, pagination = paginate(qs, request.query_params, SORTING)
    return success({'reports': ReportSerializer(rows, many=True).data}, pagination=pagination)


@api_view(['GET'])
@permission_classes([allow(ADMIN, DOCTOR, PATIENT)])
def patient_reports(request, patient_id):
    ensure_owner(request.user, patient_id, 'Not authorized to view these reports')
    patient = lookups.find(Patient, patient_id)
    qs = Report.objects.select_related(*RELATED)
    rows = list(qs.filter(patient=patient).order_by('-created_at', '-pk')) if patient else []
    return success({'reports': ReportSerializer(rows, many=True).data}, count=len(rows))


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([allow(ADMIN, DOCTOR, GET=(ADMIN, DOCTOR, PATIENT), DELETE=(ADMIN,))])
def report_detail(request, pk):
    report = lookups.get_or_404(Report.objects.select_related(*RELATED), pk, 'Report')

    if request.method == 'GET':
        ensure_owner(request.user, report.patient_id, 'Not authorized to view this report')
        return success({'report': ReportDetailSerializer(report).data})

    if request.method == 'PUT':
        s = ReportUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        report = update_report(report, s.validated_data)
        return success({'report': ReportSerializer(report).data}, message='Report updated successfully')

    lookups.delete(report, 'Report')
    return success({}, message='Report deleted successfully')


@api_view(['GET'])
@permission_classes([allow(ADMIN, DOCTOR, PATIENT)])
def report_pdf(request, pk):
    report = lookups.get_or_404(Report.objects.select_related(*RELATED), pk, 'Report')
    ensure_owner(request.user, report.patient_id, 'Not authorized to download this report')
    return document_response(report, 'report', ReportDetailSerializer(report).data)
