"""
API error types and the project-wide DRF exception handler.

Every error leaves the API as {"error": "<message>"}; validation errors also
name the offending field.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class AlreadyExists(exceptions.APIException):
    """Raised when a create/update would duplicate an existing record."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Resource already exists'
    default_code = 'already_exists'


class DeleteConflict(exceptions.APIException):
    """Raised when a record is still referenced and cannot be deleted."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Resource is in use and cannot be deleted'
    default_code = 'delete_conflict'


def first_error(detail, field=None):
    """
    Walk DRF error detail (dict/list/str) and return the first
    (field, message) pair found.
    """
    if isinstance(detail, dict):
        for key, value in detail.items():
            name = None if key in ('non_field_errors', 'detail') else key
            if field and name:
                name = f'{field}.{name}'
            return first_error(value, name or field)
        return field, ''
    if isinstance(detail, (list, tuple)):
        for index, value in enumerate(detail):
            # Nested serializers yield empty dicts for rows without errors
            if not value:
                continue
            if isinstance(value, dict) and field:
                return first_error(value, f'{field}[{index}]')
            return first_error(value, field)
        return field, ''
    return field, str(detail)


def api_exception_handler(exc, context):
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, 'message_dict'):
            exc = exceptions.ValidationError(exc.message_dict)
        else:
            exc = exceptions.ValidationError(exc.messages)

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(
            'Unhandled error in %s', view.__class__.__name__ if view else 'unknown view',
            exc_info=exc,
        )
        return Response(
            {'error': 'Something went wrong'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if isinstance(exc, exceptions.NotAuthenticated):
        response.data = {'error': 'Unauthorized'}
        return response

    field, message = first_error(response.data)
    payload = {'error': message}
    if isinstance(exc, exceptions.ValidationError) and field:
        payload['field'] = field
    response.data = payload
    return response
