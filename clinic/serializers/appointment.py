from rest_framework import serializers

from ..models import Appointment
from .fields import CleanCharField, DateOrDateTimeField, DocumentSerializer, Populated


class AppointmentSerializer(DocumentSerializer):
    patientId = Populated('name', 'age', 'gender', 'phone', source='patient')
    doctorId = Populated('name', 'specialization', source='doctor')
    createdBy = Populated('name', 'email', source='created_by')
    emailNotificationSent = serializers.BooleanField(source='email_notification_sent', read_only=True)

    class Meta:
        model = Appointment
        fields = [
            '_id', 'patientId', 'doctorId', 'date', 'time', 'status', 'reason', 'notes',
            'emailNotificationSent', 'createdBy', 'createdAt', 'updatedAt',
        ]


class AppointmentDetailSerializer(AppointmentSerializer):
    patientId = Populated('name', 'age', 'gender', 'phone', 'address', source='patient')
    doctorId = Populated('name', 'specialization', 'phone', 'email', source='doctor')


class AppointmentCreateSerializer(serializers.Serializer):
    patientId = serializers.CharField(error_messages={'required': 'Please provide patient ID'})
    doctorId = serializers.CharField(error_messages={'required': 'Please provide doctor ID'})
    date = DateOrDateTimeField(error_messages={'required': 'Please provide appointment date'})
    time = serializers.CharField(max_length=20, error_messages={'required': 'Please provide appointment time'})
    reason = CleanCharField(required=False, allow_blank=True)
    notes = CleanCharField(required=False, allow_blank=True)


class AppointmentUpdateSerializer(serializers.Serializer):
    date = DateOrDateTimeField(required=False)
    time = serializers.CharField(max_length=20, required=False)
    status = serializers.ChoiceField(choices=Appointment.Status.choices, required=False)
    reason = CleanCharField(required=False, allow_blank=True)
    notes = CleanCharField(required=False, allow_blank=True)


class AppointmentListQuerySerializer(serializers.Serializer):
    status = serializers.CharField(required=False, allow_blank=True)
    date = serializers.CharField(required=False, allow_blank=True)
