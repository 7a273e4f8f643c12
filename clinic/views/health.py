from django.conf import settings
from django.db import DatabaseError, connections
from django.utils import timezone
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def healthz(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        db_ok = bool(row and row[0] == 1)
    except DatabaseError:
        db_ok = False
    return Response({
        'success': db_ok,
        'message': 'MediCore Server is running',
        'timestamp': timezone.now().isoformat(),
        'environment': settings.ENV,
        'db': db_ok,
    }, status=200 if db_ok else 503)
