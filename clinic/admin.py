"""
Django admin registrations for the clinic models.

Superusers can inspect and correct records at ``/admin/``; the API
remains the primary interface.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Appointment, Bill, Doctor, Patient, Report, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    ordering = ('-created_at',)
    list_display = ('email', 'name', 'role', 'is_active', 'is_staff', 'created_at')
    list_filter = ('role', 'is_active', 'is_staff')
    search_fields = ('email', 'name')
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Profile', {'fields': ('name', 'role')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Dates', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {'classes': ('wide',), 'fields': ('email', 'name', 'role', 'password1', 'password2')}),
    )


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('name', 'age', 'gender', 'phone', 'user', 'created_at')
    list_filter = ('gender',)
    search_fields = ('name', 'phone')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('name', 'specialization', 'phone', 'email', 'user')
    list_filter = ('specialization',)
    search_fields = ('name', 'email')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'date', 'time', 'status', 'email_notification_sent')
    list_filter = ('status',)
    raw_id_fields = ('patient', 'doctor', 'created_by')


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'appointment', 'created_at')
    raw_id_fields = ('appointment', 'patient', 'doctor', 'created_by')


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'total_amount', 'payment_status', 'payment_method', 'paid_at')
    list_filter = ('payment_status', 'payment_method')
    raw_id_fields = ('patient', 'appointment', 'created_by')
