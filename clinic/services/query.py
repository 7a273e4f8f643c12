"""
Collection query construction.

Turns raw query parameters (``page``, ``limit``, ``sort``, ``order``,
``search``, ``date`` and exact-match filters) into one deterministic
page of a queryset plus a pagination summary.  Role scoping is applied
to the base queryset before any filter.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Iterable, Optional

from django.conf import settings
from django.db.models import Q, QuerySet
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import serializers

from ..permissions import DOCTOR, own_doctor

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
# Keeps the row offset inside a signed 64-bit integer
MAX_PAGE = 10 ** 9


class PageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1, max_value=MAX_PAGE, default=DEFAULT_PAGE)
    limit = serializers.IntegerField(required=False, min_value=1, default=DEFAULT_LIMIT)
    sort = serializers.CharField(required=False, allow_blank=True)
    order = serializers.CharField(required=False, allow_blank=True)


@dataclass(frozen=True)
class Sorting:
    """Sortable API fields of one collection and its default ordering."""
    fields: dict = field(default_factory=dict)
    default: str = 'createdAt'
    default_order: str = 'desc'

    def ordering(self, sort: Optional[str] = None, order: Optional[str] = None) -> list[str]:
        # Unknown sort fields and order values fall back to the defaults
        column = self.fields.get(sort or '', self.fields[self.default])
        direction = order if order in ('asc', 'desc') else self.default_order
        prefix = '-' if direction == 'desc' else ''
        return [f'{prefix}{column}', f'{prefix}pk']


def page_window(query_params) -> tuple[int, int, dict]:
    q = PageQuerySerializer(data=query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    limit = min(vd['limit'], settings.MAX_PAGE_LIMIT)
    return vd['page'], limit, vd


def paginate(queryset: QuerySet, query_params, sorting: Sorting):
    """Return ``(rows, pagination)`` for the requested page.

    ``total`` is counted over the whole filtered queryset, independent of
    the page window.
    """
    page, limit, vd = page_window(query_params)
    ordered = queryset.order_by(*sorting.ordering(vd.get('sort'), vd.get('order')))
    total = queryset.count()
    offset = (page - 1) * limit
    rows = list(ordered[offset:offset + limit])
    return rows, {
        'page': page,
        'limit': limit,
        'total': total,
        'pages': math.ceil(total / limit),
    }


def text_search(queryset: QuerySet, term: Optional[str], fields: Iterable[str]) -> QuerySet:
    """Case-insensitive substring match of ``term`` against any of ``fields``."""
    term = (term or '').strip()
    if not term:
        return queryset
    cond = Q()
    for name in fields:
        cond |= Q(**{f'{name}__icontains': term})
    return queryset.filter(cond)


def exact_filters(queryset: QuerySet, query_params, mapping: dict) -> QuerySet:
    """Apply equality filters for each present, non-empty parameter."""
    for param, column in mapping.items():
        value = query_params.get(param)
        if value not in (None, ''):
            queryset = queryset.filter(**{column: value})
    return queryset


def day_range(raw: str) -> tuple[datetime, datetime]:
    """Map a ``date`` parameter to an inclusive datetime range.

    A bare date covers its whole calendar day in the server time zone; a
    date-time covers that instant through the end of its day.
    """
    raw = (raw or '').strip()
    try:
        day = parse_date(raw)
        start = None
        if day is None:
            start = parse_datetime(raw)
    except ValueError:
        day = start = None
    if day is None and start is None:
        raise serializers.ValidationError({'date': 'Invalid date, expected YYYY-MM-DD'})
    tz = timezone.get_current_timezone()
    if start is None:
        start = timezone.make_aware(datetime.combine(day, time.min), tz)
    elif timezone.is_naive(start):
        start = timezone.make_aware(start, tz)
    local_day = timezone.localtime(start, tz).date()
    end = timezone.make_aware(datetime.combine(local_day, time.max), tz)
    return start, end


def filter_day(queryset: QuerySet, raw: Optional[str], column: str = 'date') -> QuerySet:
    if not raw:
        return queryset
    start, end = day_range(raw)
    return queryset.filter(**{f'{column}__gte': start, f'{column}__lte': end})


def scope_to_doctor(queryset: QuerySet, user) -> QuerySet:
    """Restrict a doctor caller to rows of their own Doctor record.

    Without a linked Doctor record the result is empty.  Other roles pass
    through unchanged.
    """
    if getattr(user, 'role', None) != DOCTOR:
        return queryset
    doctor = own_doctor(user)
    if doctor is None:
        return queryset.none()
    return queryset.filter(doctor=doctor)
