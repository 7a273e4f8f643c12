"""
Shared serializer fields.

``Populated`` renders a foreign key as a small subset of the referenced
record (the read-time join), ``CleanCharField`` strips markup from free
text with bleach, and ``DateOrDateTimeField`` accepts bare dates.
"""
from __future__ import annotations

import uuid
from datetime import date, datetime, time

import bleach
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import serializers

_datetime_field = serializers.DateTimeField()


def clean_text(value: str) -> str:
    return bleach.clean((value or '').strip(), tags=set(), strip=True)


class CleanCharField(serializers.CharField):
    def to_internal_value(self, data):
        return clean_text(super().to_internal_value(data))


class DateOrDateTimeField(serializers.DateTimeField):
    """DateTimeField that also accepts ``YYYY-MM-DD`` (midnight, local time)."""

    def to_internal_value(self, value):
        if isinstance(value, str):
            try:
                day = parse_date(value.strip())
            except ValueError:
                day = None
            if day is not None:
                return timezone.make_aware(datetime.combine(day, time.min))
        return super().to_internal_value(value)


class Populated(serializers.Field):
    """Expand a foreign key into ``{"_id", <fields>...}``."""

    def __init__(self, *fields: str, **kwargs):
        self.expand = fields
        kwargs['read_only'] = True
        super().__init__(**kwargs)

    def to_representation(self, value):
        data = {'_id': str(value.pk)}
        for name in self.expand:
            data[name] = _plain(getattr(value, name, None))
        return data


def _plain(value):
    if isinstance(value, datetime):
        return _datetime_field.to_representation(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


class DocumentSerializer(serializers.ModelSerializer):
    """ModelSerializer exposing the key as ``_id`` and camelCase timestamps."""
    _id = serializers.UUIDField(source='id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
