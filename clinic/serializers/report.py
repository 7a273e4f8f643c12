from rest_framework import serializers

from ..models import Report
from .fields import CleanCharField, DateOrDateTimeField, DocumentSerializer, Populated


class LabTestSerializer(serializers.Serializer):
    testName = CleanCharField(max_length=200)
    result = CleanCharField(required=False, allow_blank=True, default='')
    date = DateOrDateTimeField(required=False, allow_null=True)

    def validate(self, attrs):
        # stored as JSON; keep the date as an ISO string
        when = attrs.get('date')
        attrs['date'] = when.isoformat() if when else None
        return attrs


class ReportSerializer(DocumentSerializer):
    appointmentId = Populated('date', 'time', source='appointment')
    patientId = Populated('name', 'age', 'gender', 'phone', source='patient')
    doctorId = Populated('name', 'specialization', source='doctor')
    labTests = serializers.JSONField(source='lab_tests', read_only=True)

    class Meta:
        model = Report
        fields = [
            '_id', 'appointmentId', 'patientId', 'doctorId', 'diagnosis', 'prescription',
            'labTests', 'notes', 'createdAt', 'updatedAt',
        ]


class ReportDetailSerializer(ReportSerializer):
    appointmentId = Populated('date', 'time', 'status', source='appointment')
    patientId = Populated('name', 'age', 'gender', 'phone', 'address', source='patient')
    doctorId = Populated('name', 'specialization', 'phone', 'email', source='doctor')
    createdBy = Populated('name', 'email', source='created_by')

    class Meta(ReportSerializer.Meta):
        fields = ReportSerializer.Meta.fields[:-2] + ['createdBy', 'createdAt', 'updatedAt']


class ReportCreateSerializer(serializers.Serializer):
    appointmentId = serializers.CharField(error_messages={'required': 'Please provide appointment ID'})
    patientId = serializers.CharField(error_messages={'required': 'Please provide patient ID'})
    doctorId = serializers.CharField(error_messages={'required': 'Please provide doctor ID'})
    diagnosis = CleanCharField(error_messages={'required': 'Please provide diagnosis'})
    prescription = CleanCharField(error_messages={'required': 'Please provide prescription'})
    labTests = LabTestSerializer(many=True, required=False)
    notes = CleanCharField(required=False, allow_blank=True)


class ReportUpdateSerializer(serializers.Serializer):
    diagnosis = CleanCharField(required=False)
    prescription = CleanCharField(required=False)
    labTests = LabTestSerializer(many=True, required=False)
    notes = CleanCharField(required=False, allow_blank=True)
