from rest_framework import serializers

from ..models import Patient
from .fields import CleanCharField, DocumentSerializer, Populated

PHONE_ERRORS = {'invalid': 'Please provide a valid 10-digit phone number'}


class PatientSerializer(DocumentSerializer):
    userId = Populated('name', 'email', source='user')

    class Meta:
        model = Patient
        fields = ['_id', 'name', 'age', 'gender', 'phone', 'address', 'userId', 'createdAt', 'updatedAt']


class PatientDetailSerializer(PatientSerializer):
    userId = Populated('name', 'email', 'role', source='user')


class PatientBriefSerializer(DocumentSerializer):
    class Meta:
        model = Patient
        fields = ['_id', 'name', 'age', 'gender', 'phone']


class PatientInputSerializer(serializers.Serializer):
    name = CleanCharField(max_length=100)
    age = serializers.IntegerField(
        min_value=0, max_value=150,
        error_messages={'min_value': 'Age cannot be negative', 'max_value': 'Please provide a valid age'},
    )
    gender = serializers.ChoiceField(choices=Patient.Gender.choices)
    phone = serializers.RegexField(r'^[0-9]{10}$', error_messages=PHONE_ERRORS)
    address = CleanCharField(max_length=255, required=False, allow_blank=True)
    userId = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate_name(self, v):
        if not v:
            raise serializers.ValidationError('Please provide patient name')
        return v


class PatientListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, max_length=100)
    gender = serializers.ChoiceField(choices=Patient.Gender.choices, required=False, allow_blank=True)


class PatientSearchQuerySerializer(serializers.Serializer):
    q = serializers.CharField(max_length=100, error_messages={
        'required': 'Please provide search query',
        'blank': 'Please provide search query',
    })
