"""
URL configuration for the MediCore backend project.

The API routes live in ``clinic.routers``.  OpenAPI documentation is
exposed at ``/swagger/`` and ``/redoc/``; Prometheus metrics at
``/metrics``.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

api_info = openapi.Info(
    title="MediCore API",
    default_version='v1',
    description="Role-based hospital management backend: patients, doctors, appointments, reports and bills.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('django_prometheus.urls')),
    path('', include('clinic.routers')),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]

# Errors outside DRF views still answer with the JSON envelope
handler404 = 'clinic.exceptions.not_found_view'
handler500 = 'clinic.exceptions.server_error_view'
