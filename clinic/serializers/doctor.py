from rest_framework import serializers

from ..models import Doctor
from .fields import CleanCharField, DocumentSerializer, Populated
from .patient import PHONE_ERRORS

TIME_PATTERN = r'^([01][0-9]|2[0-3]):[0-5][0-9]$'
TIME_ERRORS = {'invalid': 'Use 24-hour HH:MM'}


class AvailabilitySerializer(serializers.Serializer):
    day = serializers.ChoiceField(choices=Doctor.DAYS)
    startTime = serializers.RegexField(TIME_PATTERN, error_messages=TIME_ERRORS)
    endTime = serializers.RegexField(TIME_PATTERN, error_messages=TIME_ERRORS)

    def validate(self, attrs):
        if attrs['endTime'] <= attrs['startTime']:
            raise serializers.ValidationError('endTime must be after startTime')
        return attrs


class DoctorSerializer(DocumentSerializer):
    userId = Populated('name', 'email', source='user')

    class Meta:
        model = Doctor
        fields = ['_id', 'name', 'specialization', 'phone', 'email', 'availability', 'userId', 'createdAt', 'updatedAt']


class DoctorInputSerializer(serializers.Serializer):
    name = CleanCharField(max_length=100)
    specialization = CleanCharField(max_length=100)
    phone = serializers.RegexField(r'^[0-9]{10}$', error_messages=PHONE_ERRORS)
    email = serializers.EmailField()
    availability = AvailabilitySerializer(many=True, required=False)
    userId = serializers.CharField()

    def validate_email(self, v):
        return v.strip().lower()


class DoctorListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, max_length=100)
    specialization = serializers.CharField(required=False, allow_blank=True, max_length=100)
