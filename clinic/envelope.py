"""
Response envelope shared by every endpoint.

Success: ``{"success": true, "data": {...}, "message"?, "pagination"?, "count"?}``
Failure: ``{"success": false, "error": "..."}``
"""
from rest_framework import status as http_status
from rest_framework.response import Response


def success(data=None, *, message=None, pagination=None, count=None, status=http_status.HTTP_200_OK):
    payload = {'success': True}
    if message:
        payload['message'] = message
    payload['data'] = data if data is not None else {}
    if pagination is not None:
        payload['pagination'] = pagination
    if count is not None:
        payload['count'] = count
    return Response(payload, status=status)


def failure(error, status):
    return Response({'success': False, 'error': error}, status=status)
