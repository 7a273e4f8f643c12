"""
Database models for the MediCore backend.

The models capture the hospital records served by the API: user
accounts, patients, doctors, appointments, medical reports and bills.
Every record is keyed by an opaque UUID.  Cross-record references are
plain foreign keys resolved at read time; ``created_by`` is an audit
back-reference and is nulled rather than cascaded when the creator
disappears.
"""
from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.db import models

phone_validator = RegexValidator(r'^[0-9]{10}$', 'Please provide a valid 10-digit phone number')


class TimestampedModel(models.Model):
    """Abstract base with a UUID key and creation/update timestamps."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class UserManager(BaseUserManager):
    """Manager for the email-keyed :class:`User`."""
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('The email must be set')
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', User.Role.ADMIN)
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """Account holder identified by email, with one of four roles.

    The password is stored only as a salted hash by Django's auth
    framework.  The reset token is stored hashed as well; the clear
    value is only ever sent to the account's email address.
    """
    class Role(models.TextChoices):
        ADMIN = 'admin', 'Admin'
        DOCTOR = 'doctor', 'Doctor'
        RECEPTION = 'reception', 'Reception'
        PATIENT = 'patient', 'Patient'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = None
    first_name = None
    last_name = None
    name = models.CharField(max_length=100)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.PATIENT, db_index=True)
    reset_password_token = models.CharField(max_length=64, blank=True, null=True, db_index=True)
    reset_password_expire = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    objects = UserManager()

    def get_full_name(self) -> str:
        return self.name

    def get_short_name(self) -> str:
        return self.name

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"


class Patient(TimestampedModel):
    class Gender(models.TextChoices):
        MALE = 'Male', 'Male'
        FEMALE = 'Female', 'Female'
        OTHER = 'Other', 'Other'

    name = models.CharField(max_length=100)
    age = models.PositiveSmallIntegerField(validators=[MinValueValidator(0), MaxValueValidator(150)])
    gender = models.CharField(max_length=10, choices=Gender.choices, db_index=True)
    phone = models.CharField(max_length=10, unique=True, validators=[phone_validator])
    address = models.CharField(max_length=255, blank=True, default='')
    # Set when the patient also holds a login
    user = models.ForeignKey(
        'User', null=True, blank=True, on_delete=models.SET_NULL, related_name='patient_records'
    )

    class Meta:
        indexes = [models.Index(fields=['name', 'phone'], name='patient_name_phone_idx')]

    def __str__(self) -> str:
        return f"{self.name} ({self.phone})"


class Doctor(TimestampedModel):
    """A practitioner.  Every doctor is backed by a user account.

    ``availability`` is a list of ``{"day", "startTime", "endTime"}``
    entries, validated by the serializer.
    """
    DAYS = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')

    name = models.CharField(max_length=100)
    specialization = models.CharField(max_length=100, db_index=True)
    phone = models.CharField(max_length=10, validators=[phone_validator])
    email = models.EmailField()
    availability = models.JSONField(default=list, blank=True)
    user = models.ForeignKey('User', on_delete=models.PROTECT, related_name='doctor_records')

    class Meta:
        indexes = [models.Index(fields=['name', 'specialization'], name='doctor_name_spec_idx')]

    def __str__(self) -> str:
        return f"Dr. {self.name} ({self.specialization})"


class Appointment(TimestampedModel):
    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        APPROVED = 'approved', 'Approved'
        CANCELLED = 'cancelled', 'Cancelled'
        COMPLETED = 'completed', 'Completed'

    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='appointments')
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='appointments')
    date = models.DateTimeField()
    time = models.CharField(max_length=20)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    reason = models.TextField(blank=True, default='')
    notes = models.TextField(blank=True, default='')
    email_notification_sent = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        'User', null=True, on_delete=models.SET_NULL, related_name='appointments_created'
    )

    class Meta:
        indexes = [
            models.Index(fields=['patient', 'doctor', 'date'], name='appt_patient_doctor_date_idx'),
            models.Index(fields=['status', 'date'], name='appt_status_date_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.patient_id} with {self.doctor_id} on {self.date:%F} {self.time}"


class Report(TimestampedModel):
    """Diagnosis and prescription written after an appointment.

    ``lab_tests`` holds ``{"testName", "result", "date"}`` entries.
    """
    appointment = models.ForeignKey(Appointment, on_delete=models.PROTECT, related_name='reports')
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='reports')
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='reports')
    diagnosis = models.TextField()
    prescription = models.TextField()
    lab_tests = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True, default='')
    created_by = models.ForeignKey(
        'User', null=True, on_delete=models.SET_NULL, related_name='reports_created'
    )

    class Meta:
        indexes = [models.Index(fields=['patient', 'doctor', 'created_at'], name='report_patient_doctor_idx')]

    def __str__(self) -> str:
        return f"Report {self.id} for {self.patient_id}"


class Bill(TimestampedModel):
    class PaymentStatus(models.TextChoices):
        PENDING = 'pending', 'Pending'
        PAID = 'paid', 'Paid'
        FAILED = 'failed', 'Failed'

    class PaymentMethod(models.TextChoices):
        CASH = 'cash', 'Cash'
        CARD = 'card', 'Card'
        UPI = 'upi', 'UPI'
        ONLINE = 'online', 'Online'

    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='bills')
    appointment = models.ForeignKey(
        Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='bills'
    )
    # List of {"name", "cost"} line items
    services = models.JSONField(default=list, blank=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    payment_status = models.CharField(
        max_length=10, choices=PaymentStatus.choices, default=PaymentStatus.PENDING, db_index=True
    )
    payment_method = models.CharField(max_length=10, choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    payment_id = models.CharField(max_length=100, blank=True, default='')
    paid_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        'User', null=True, on_delete=models.SET_NULL, related_name='bills_created'
    )

    class Meta:
        indexes = [models.Index(fields=['patient', 'payment_status'], name='bill_patient_status_idx')]

    def __str__(self) -> str:
        return f"Bill {self.id} ({self.payment_status})"
