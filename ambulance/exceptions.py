import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

__all__ = [
    'NotFound', 'ValidationError', 'DuplicateKey', 'Conflict',
    'InvalidTransition', 'api_exception_handler',
]


class DuplicateKey(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'A record with this key already exists.'
    default_code = 'duplicate_key'


class Conflict(APIException):
    """Accept lost: the dispatch was already taken by another ambulance.

    Reported as 404 so existing clients that treat "not found or already
    accepted" alike keep working; the error code tells the two apart.
    """
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Dispatch already accepted.'
    default_code = 'conflict'


class InvalidTransition(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Dispatch cannot move to the requested state.'
    default_code = 'invalid_transition'


def _error(code, message, status_code):
    return Response({'ok': False, 'error': {'code': code, 'message': message}}, status=status_code)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        if isinstance(exc, DatabaseError):
            logger.exception("Storage failure in %s", view.__class__.__name__ if view else 'unknown view')
            return _error('internal_error', 'Storage operation failed.', 500)
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else 'unknown view')
        return _error('internal_error', 'Internal server error.', 500)
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    code = getattr(exc, 'default_code', 'api_error')
    return _error(code, detail, resp.status_code)
