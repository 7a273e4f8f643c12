from django.http import HttpResponse

from ..envelope import success
from ..services import documents


def document_response(record, key, data):
    """PDF download when a renderer is configured, JSON placeholder otherwise."""
    if documents.renderer() is None:
        return success({key: data}, message=documents.PLACEHOLDER_MESSAGE)
    resp = HttpResponse(documents.generate(record), content_type='application/pdf')
    resp['Content-Disposition'] = f'attachment; filename="{documents.filename(record)}"'
    return resp
