"""
URL mappings for the MediCore API.

Every endpoint lives under ``/api``.  Trailing slashes are omitted, and
fixed sub-paths such as ``patients/search`` are registered before the
``<pk>`` routes they would otherwise be captured by.
"""
from django.urls import path

from .views import admin, appointments, auth, bills, doctors, health, patients, reports

urlpatterns = [
    path('api/health', health.healthz, name='health'),

    path('api/auth/register', auth.register_view, name='auth-register'),
    path('api/auth/login', auth.login_view, name='auth-login'),
    path('api/auth/refresh', auth.refresh_view, name='auth-refresh'),
    path('api/auth/logout', auth.logout_view, name='auth-logout'),
    path('api/auth/me', auth.me_view, name='auth-me'),
    path('api/auth/profile', auth.profile_view, name='auth-profile'),
    path('api/auth/forgot-password', auth.forgot_password_view, name='auth-forgot-password'),
    path('api/auth/reset-password/<str:token>', auth.reset_password_view, name='auth-reset-password'),

    path('api/patients', patients.patients, name='patients'),
    path('api/patients/search', patients.search_patients, name='patients-search'),
    path('api/patients/<str:pk>', patients.patient_detail, name='patient-detail'),

    path('api/doctors', doctors.doctors, name='doctors'),
    path('api/doctors/<str:pk>', doctors.doctor_detail, name='doctor-detail'),

    path('api/appointments', appointments.appointments, name='appointments'),
    path('api/appointments/doctor/<str:doctor_id>', appointments.doctor_appointments, name='appointments-doctor'),
    path('api/appointments/patient/<str:patient_id>', appointments.patient_appointments, name='appointments-patient'),
    path('api/appointments/<str:pk>', appointments.appointment_detail, name='appointment-detail'),
    path('api/appointments/<str:pk>/notify', appointments.notify_appointment, name='appointment-notify'),

    path('api/reports', reports.reports, name='reports'),
    path('api/reports/patient/<str:patient_id>', reports.patient_reports, name='reports-patient'),
    path('api/reports/pdf/<str:pk>', reports.report_pdf, name='report-pdf'),
    path('api/reports/<str:pk>', reports.report_detail, name='report-detail'),

    path('api/bills', bills.bills, name='bills'),
    path('api/bills/patient/<str:patient_id>', bills.patient_bills, name='bills-patient'),
    path('api/bills/pdf/<str:pk>', bills.bill_pdf, name='bill-pdf'),
    path('api/bills/<str:pk>', bills.bill_detail, name='bill-detail'),

    path('api/admin/analytics', admin.admin_analytics, name='admin-analytics'),
    path('api/admin/users', admin.admin_users, name='admin-users'),
    path('api/admin/users/<str:pk>', admin.admin_user_detail, name='admin-user-detail'),
]
