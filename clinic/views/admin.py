from rest_framework.decorators import api_view, permission_classes

from ..envelope import success
from ..models import User
from ..permissions import ADMIN, allow
from ..serializers.auth import UserSerializer
from ..services import analytics, lookups
from ..services.query import Sorting, exact_filters, paginate

SORTING = Sorting({'createdAt': 'created_at', 'name': 'name', 'email': 'email'})


@api_view(['GET'])
@permission_classes([allow(ADMIN)])
def admin_analytics(request):
    return success(analytics.overview())


@api_view(['GET'])
@permission_classes([allow(ADMIN)])
def admin_users(request):
    qs = exact_filters(User.objects.all(), request.query_params, {'role': 'role'})
    rows, pagination = paginate(qs, request.query_params, SORTING)
    return success({'users': UserSerializer(rows, many=True).data}, pagination=pagination)


@api_view(['GET'])
@permission_classes([allow(ADMIN)])
def admin_user_detail(request, pk):
    user = lookups.get_or_404(User, pk, 'User')
    return success({'user': UserSerializer(user).data})
