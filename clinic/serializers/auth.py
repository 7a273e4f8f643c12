from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from ..models import User
from .fields import CleanCharField


class UserSerializer(serializers.ModelSerializer):
    _id = serializers.UUIDField(source='id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = User
        fields = ['_id', 'name', 'email', 'role', 'createdAt', 'updatedAt']


def _checked_password(value, user=None):
    try:
        validate_password(value, user)
    except DjangoValidationError as e:
        raise serializers.ValidationError(e.messages)
    return value


class RegisterSerializer(serializers.Serializer):
    name = CleanCharField(max_length=100, error_messages={'required': 'Please provide a name'})
    email = serializers.EmailField(error_messages={
        'required': 'Please provide an email',
        'invalid': 'Please provide a valid email',
    })
    password = serializers.CharField(write_only=True, trim_whitespace=False, min_length=6,
                                     error_messages={'required': 'Please provide a password'})
    role = serializers.ChoiceField(choices=User.Role.choices, required=False, default=User.Role.PATIENT)

    def validate_email(self, v):
        v = v.strip().lower()
        if User.objects.filter(email=v).exists():
            raise serializers.ValidationError('User already exists with this email')
        return v

    def validate_password(self, v):
        return _checked_password(v)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={'required': 'Please provide an email and password'})
    password = serializers.CharField(trim_whitespace=False,
                                     error_messages={'required': 'Please provide an email and password'})

    def validate_email(self, v):
        return v.strip().lower()


class RefreshSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)
    all = serializers.BooleanField(required=False, default=False)


class ProfileUpdateSerializer(serializers.Serializer):
    name = CleanCharField(max_length=100, required=False)
    email = serializers.EmailField(required=False)
    currentPassword = serializers.CharField(required=False, trim_whitespace=False)
    newPassword = serializers.CharField(required=False, trim_whitespace=False, min_length=6)

    def validate_email(self, v):
        v = v.strip().lower()
        user = self.context['user']
        if User.objects.filter(email=v).exclude(pk=user.pk).exists():
            raise serializers.ValidationError('User already exists with this email')
        return v

    def validate(self, attrs):
        new = attrs.get('newPassword')
        if new is None:
            return attrs
        user = self.context['user']
        current = attrs.get('currentPassword')
        if not current:
            raise serializers.ValidationError({'currentPassword': 'Please provide your current password'})
        if not user.check_password(current):
            raise serializers.ValidationError({'currentPassword': 'Current password is incorrect'})
        _checked_password(new, user)
        return attrs


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={'required': 'Please provide an email'})

    def validate_email(self, v):
        return v.strip().lower()


class ResetPasswordSerializer(serializers.Serializer):
    password = serializers.CharField(trim_whitespace=False, min_length=6,
                                     error_messages={'required': 'Please provide a new password'})

    def validate_password(self, v):
        return _checked_password(v)
