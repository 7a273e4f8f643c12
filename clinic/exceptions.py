"""
Unified error envelope.

Every failure leaves the API as ``{"success": false, "error": "..."}``.
Known exception types map to 400/401/403/404; anything unclassified,
including integrity errors other than uniqueness violations, is logged
with its traceback and answered with a generic 500 message.
"""
import logging

from django.db import IntegrityError
from django.db.models import ProtectedError
from django.http import JsonResponse
from rest_framework import exceptions, status
from rest_framework.views import exception_handler as drf_exception_handler

from .envelope import failure

logger = logging.getLogger(__name__)

SERVER_ERROR = 'Server Error'


def _first_message(detail, prefix=''):
    """Flatten a DRF error detail into one human readable message."""
    if isinstance(detail, dict):
        if 'detail' in detail and not isinstance(detail['detail'], (dict, list)):
            return str(detail['detail'])
        for field, value in detail.items():
            if field == 'non_field_errors':
                return _first_message(value, prefix)
            label = f"{prefix}{field}" if not prefix else f"{prefix}.{field}"
            return _first_message(value, label)
        return ''
    if isinstance(detail, list):
        for item in detail:
            if item:
                return _first_message(item, prefix)
        return ''
    return f"{prefix}: {detail}" if prefix else str(detail)


def is_unique_violation(exc) -> bool:
    # sqlite: "UNIQUE constraint failed", mysql: "Duplicate entry",
    # postgresql: "duplicate key value violates unique constraint"
    message = str(exc).lower()
    return 'unique' in message or 'duplicate' in message


def api_exception_handler(exc, context):
    if isinstance(exc, IntegrityError) and is_unique_violation(exc):
        return failure('Duplicate field value entered', status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, ProtectedError):
        logger.info("Blocked delete of a referenced record: %s", exc.args[0] if exc.args else exc)
        return failure('Cannot delete: record is referenced by other records', status.HTTP_400_BAD_REQUEST)

    resp = drf_exception_handler(exc, context)
    if resp is None:
        request = context.get('request')
        logger.exception("Unhandled error on %s %s", getattr(request, 'method', '-'), getattr(request, 'path', '-'), exc_info=exc)
        return failure(SERVER_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        message = _first_message(resp.data) or 'Not authorized to access this route'
    else:
        message = _first_message(resp.data)
    out = failure(message, resp.status_code)
    # keep WWW-Authenticate / Retry-After set by DRF
    for header in ('WWW-Authenticate', 'Retry-After', 'Allow'):
        if header in resp:
            out[header] = resp[header]
    return out


def not_found_view(request, exception=None):
    return JsonResponse({'success': False, 'error': 'Route not found'}, status=404)


def server_error_view(request):
    return JsonResponse({'success': False, 'error': SERVER_ERROR}, status=500)
