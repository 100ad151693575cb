"""
Error taxonomy and the response envelope exception handler.

Every error response uses the same envelope as successful ones:
    {"success": false, "data": null, "message": "..."}

- NotFound (404): entity id does not resolve
- PermissionDenied (403): visibility, note level or privilege gate denial
- InvalidVisibilityRequest / ValidationError (400): malformed write request
- Anything else: logged and returned as an opaque 500
"""
import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class InvalidVisibilityRequest(exceptions.APIException):
    """A write is missing required scope (e.g. a Party note without an active campaign)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid visibility request.'
    default_code = 'invalid_visibility_request'


class VisibilityDenied(exceptions.PermissionDenied):
    """The entity or note exists but is not visible in the current context."""
    default_detail = 'Not visible in this context.'
    default_code = 'visibility_denied'


def _flatten_detail(detail):
    """Collapse DRF error detail (str / list / dict) into one readable message."""
    if isinstance(detail, dict):
        parts = []
        for field, value in detail.items():
            message = _flatten_detail(value)
            if field in ('detail', 'non_field_errors'):
                parts.append(message)
            else:
                parts.append(f"{field}: {message}")
        return '; '.join(parts)
    if isinstance(detail, (list, tuple)):
        return ' '.join(_flatten_detail(item) for item in detail)
    return str(detail)


def envelope_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER producing the {success, data, message} envelope.

    Validation errors keep their field breakdown under "errors".
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(
            f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {exc}",
            exc_info=True
        )
        return Response(
            {'success': False, 'data': None, 'message': 'Internal server error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    message = _flatten_detail(response.data)

    payload = {'success': False, 'data': None, 'message': message}
    if isinstance(exc, exceptions.ValidationError):
        payload['errors'] = response.data

    response.data = payload
    return response
