"""
Response envelope shared by every endpoint: {success, data, message}.
"""
from rest_framework import status as http_status
from rest_framework.response import Response


def envelope(data=None, message=None, status=http_status.HTTP_200_OK, success=True):
    """
    Wrap a payload in the standard envelope.

    Example:
        >>> envelope(serializer.data, 'Location created', status=201)
    """
    return Response({'success': success, 'data': data, 'message': message}, status=status)
