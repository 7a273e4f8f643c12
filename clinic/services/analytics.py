"""
Admin dashboard figures.

Each figure is an independent count or group-by query, so the numbers are
not a single consistent snapshot.  The assembled payload is cached for
``ANALYTICS_CACHE_SECONDS`` and dropped by the mutation services.
"""
from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings
from django.core.cache import cache
from django.db.models import Count, Sum
from django.utils import timezone

from ..models import Appointment, Bill, Doctor, Patient, Report

logger = logging.getLogger(__name__)

CACHE_KEY = 'analytics:overview'
RECENT_DAYS = 7


def _grouped(qs, column, **aggregates):
    rows = qs.values(column).annotate(count=Count('pk'), **aggregates).order_by(column)
    out = []
    for row in rows:
        item = {'_id': row[column]}
        for name in aggregates:
            item[name] = float(row[name] or 0)
        item['count'] = row['count']
        out.append(item)
    return out


def compute() -> dict:
    revenue = _grouped(Bill.objects.all(), 'payment_status', total=Sum('total_amount'))
    by_status = {row['_id']: row['total'] for row in revenue}
    since = timezone.now() - timedelta(days=RECENT_DAYS)
    return {
        'overview': {
            'totalPatients': Patient.objects.count(),
            'totalDoctors': Doctor.objects.count(),
            'totalAppointments': Appointment.objects.count(),
            'totalReports': Report.objects.count(),
            'totalBills': Bill.objects.count(),
            'totalRevenue': by_status.get(Bill.PaymentStatus.PAID, 0),
            'pendingAmount': by_status.get(Bill.PaymentStatus.PENDING, 0),
            'recentAppointments': Appointment.objects.filter(created_at__gte=since).count(),
        },
        'appointmentsByStatus': _grouped(Appointment.objects.all(), 'status'),
        'revenueStats': revenue,
        'patientsByGender': _grouped(Patient.objects.all(), 'gender'),
    }


def overview() -> dict:
    """Dashboard payload, served from cache until a write invalidates it or it expires."""
    cached = cache.get(CACHE_KEY)
    if cached is not None:
        return cached
    payload = compute()
    cache.set(CACHE_KEY, payload, settings.ANALYTICS_CACHE_SECONDS)
    logger.debug("Analytics recomputed and cached for %ss", settings.ANALYTICS_CACHE_SECONDS)
    return payload


def invalidate() -> None:
    """Drop the cached payload after a write that changes the figures."""
    cache.delete(CACHE_KEY)
