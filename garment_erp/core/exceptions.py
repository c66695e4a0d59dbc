"""Error types and the DRF exception handler that renders the error envelope"""
import logging

from django.conf import settings
from django.db.models import ProtectedError, RestrictedError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class InvalidStateTransition(APIException):
    """Operation not allowed in the record's current lifecycle state"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'This operation is not allowed in the current state.'
    default_code = 'invalid_state'


class RecordInUse(APIException):
    """Delete refused because other records still point at this one"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'This record is referenced by other records and cannot be deleted.'
    default_code = 'record_in_use'


def _first_message(detail):
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
    if isinstance(detail, (list, tuple)):
        for value in detail:
            return _first_message(value)
    return str(detail) if detail is not None else None


def api_exception_handler(exc, context):
    """
    Render every error as ``{success: false, message, errors?}``.

    Exceptions DRF does not know about are logged with their traceback and
    turned into a generic 500; the exception text is only exposed with DEBUG.
    """
    if isinstance(exc, (ProtectedError, RestrictedError)):
        exc = RecordInUse()
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {exc}")
        body = {'success': False, 'message': 'Internal server error'}
        if settings.DEBUG:
            body['error'] = str(exc)
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        errors = response.data
        if isinstance(errors, list):
            errors = {'non_field_errors': errors}
        response.data = {
            'success': False,
            'message': _first_message(errors) or 'Validation failed',
            'errors': errors,
        }
    else:
        detail = response.data.get('detail') if isinstance(response.data, dict) else response.data
        response.data = {
            'success': False,
            'message': str(detail) if detail else 'Request failed',
        }

    if response.status_code >= 500:
        logger.error(f"Server error: {exc}")
    return response
