from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes

from ..envelope import success
from ..models import Bill, Patient
from ..permissions import ADMIN, PATIENT, RECEPTION, allow, ensure_owner
from ..serializers.bill import (
    BillCreateSerializer,
    BillDetailSerializer,
    BillListQuerySerializer,
    BillSerializer,
    BillUpdateSerializer,
)
from ..services import lookups
from ..services.bills import create_bill, update_bill
from ..services.query import Sorting, exact_filters, paginate
from .documents import document_response

SORTING = Sorting({'createdAt': 'created_at', 'totalAmount': 'total_amount', 'paidAt': 'paid_at'})
RELATED = ('patient', 'appointment', 'created_by')


@api_view(['GET', 'POST'])
@permission_classes([allow(ADMIN, RECEPTION)])
def bills(request):
    if request.method == 'POST':
        s = BillCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        bill = create_bill(request.user, s.validated_data)
        return success({'bill': BillSerializer(bill).data},
                       message='Bill created successfully', status=status.HTTP_201_CREATED)

    q = BillListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = exact_filters(Bill.objects.select_related(*RELATED), q.validated_data, {'paymentStatus': 'payment_status'})
    rows, pagination = paginate(qs, request.query_params, SORTING)
    return success({'bills': BillSerializer(rows, many=True).data}, pagination=pagination)


@api_view(['GET'])
@permission_classes([allow(ADMIN, RECEPTION, PATIENT)])
def patient_bills(request, patient_id):
    ensure_owner(request.user, patient_id, 'Not authorized to view these bills')
    patient = lookups.find(Patient, patient_id)
    qs = Bill.objects.select_related(*RELATED)
    rows = list(qs.filter(patient=patient).order_by('-created_at', '-pk')) if patient else []
    return success({'bills': BillSerializer(rows, many=True).data}, count=len(rows))


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([allow(ADMIN, RECEPTION, GET=(ADMIN, RECEPTION, PATIENT), DELETE=(ADMIN,))])
def bill_detail(request, pk):
    bill = lookups.get_or_404(Bill.objects.select_related(*RELATED), pk, 'Bill')

    if request.method == 'GET':
        ensure_owner(request.user, bill.patient_id, 'Not authorized to view this bill')
        return success({'bill': BillDetailSerializer(bill).data})

    if request.method == 'PUT':
        s = BillUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        bill = update_bill(bill, s.validated_data)
        return success({'bill': BillSerializer(bill).data}, message='Bill updated successfully')

    lookups.delete(bill, 'Bill')
    return success({}, message='Bill deleted successfully')


@api_view(['GET'])
@permission_classes([allow(ADMIN, RECEPTION, PATIENT)])
def bill_pdf(request, pk):
    bill = lookups.get_or_404(Bill.objects.select_related(*RELATED), pk, 'Bill')
    ensure_owner(request.user, bill.patient_id, 'Not authorized to download this bill')
    return document_response(bill, 'bill', BillDetailSerializer(bill).data)
