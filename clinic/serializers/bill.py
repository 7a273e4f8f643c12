from rest_framework import serializers

from ..models import Bill
from .fields import CleanCharField, DocumentSerializer, Populated


class ServiceItemSerializer(serializers.Serializer):
    name = CleanCharField(max_length=200)
    cost = serializers.FloatField(min_value=0)


class BillSerializer(DocumentSerializer):
    patientId = Populated('name', 'phone', source='patient')
    appointmentId = Populated('date', 'time', source='appointment')
    createdBy = Populated('name', 'email', source='created_by')
    totalAmount = serializers.DecimalField(source='total_amount', max_digits=12, decimal_places=2, read_only=True)
    paymentStatus = serializers.CharField(source='payment_status', read_only=True)
    paymentMethod = serializers.CharField(source='payment_method', read_only=True)
    paymentId = serializers.CharField(source='payment_id', read_only=True)
    paidAt = serializers.DateTimeField(source='paid_at', read_only=True)

    class Meta:
        model = Bill
        fields = [
            '_id', 'patientId', 'appointmentId', 'services', 'totalAmount', 'paymentStatus',
            'paymentMethod', 'paymentId', 'paidAt', 'createdBy', 'createdAt', 'updatedAt',
        ]


class BillDetailSerializer(BillSerializer):
    patientId = Populated('name', 'phone', 'address', source='patient')


class BillCreateSerializer(serializers.Serializer):
    patientId = serializers.CharField(error_messages={'required': 'Please provide patient ID'})
    appointmentId = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    services = ServiceItemSerializer(many=True, required=False)
    totalAmount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0,
        error_messages={'required': 'Please provide total amount'},
    )
    paymentMethod = serializers.ChoiceField(choices=Bill.PaymentMethod.choices, required=False)


class BillUpdateSerializer(serializers.Serializer):
    services = ServiceItemSerializer(many=True, required=False)
    totalAmount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    paymentStatus = serializers.ChoiceField(choices=Bill.PaymentStatus.choices, required=False)
    paymentMethod = serializers.ChoiceField(choices=Bill.PaymentMethod.choices, required=False)
    paymentId = CleanCharField(max_length=100, required=False, allow_blank=True)


class BillListQuerySerializer(serializers.Serializer):
    paymentStatus = serializers.CharField(required=False, allow_blank=True)
