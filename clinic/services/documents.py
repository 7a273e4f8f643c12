"""
Printable documents for reports and bills.

Rendering is delegated to the callable named by ``DOCUMENT_RENDERER``
(a dotted path taking the record and returning PDF bytes).  With no
renderer configured :func:`renderer` returns ``None`` and the API falls
back to its JSON placeholder.
"""
import logging

from django.conf import settings
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

PLACEHOLDER_MESSAGE = 'PDF generation is not configured on this server'


def renderer():
    path = getattr(settings, 'DOCUMENT_RENDERER', '') or ''
    if not path:
        return None
    return import_string(path)


def generate(record) -> bytes:
    render = renderer()
    if render is None:
        raise RuntimeError('No DOCUMENT_RENDERER configured')
    content = render(record)
    logger.info("Rendered %s %s (%d bytes)", type(record).__name__, record.pk, len(content))
    return content


def filename(record) -> str:
    return f"{type(record).__name__.lower()}-{record.pk}.pdf"
