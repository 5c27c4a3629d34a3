"""
Error Taxonomy & DRF Exception Handler
=======================================
Every error leaves the API as ``{"error": "<ReasonCode>", "detail": ...}``.

- Domain errors raised by the service layers carry their own reason code.
- Authentication failures collapse to ``Unauthorized``.
- Serializer failures become ``InvalidPayload`` with the field errors.
- Any database error that escapes a service is a ``StorageError``: the
  action was not recorded and the client may retry the whole request.
"""

import logging

from django.db import DatabaseError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class DomainError(exceptions.APIException):
    """
    Base class for errors with a stable, client-facing reason code.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    reason = 'Error'
    default_detail = 'The request could not be completed.'

    def __init__(self, detail=None):
        super().__init__(detail=detail, code=self.reason)


class StorageError(DomainError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    reason = 'StorageError'
    default_detail = 'The action was not recorded. Please retry.'


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    reason = 'NotFound'
    default_detail = 'Not found.'


def exception_handler(exc, context):
    """
    Wraps DRF's handler so every error body has the same shape.
    """
    if isinstance(exc, DatabaseError):
        view = context.get('view')
        logger.error(f"Storage error in {view.__class__.__name__ if view else 'unknown view'}: {exc}")
        exc = StorageError()

    if isinstance(exc, Http404):
        exc = NotFound()

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, DomainError):
        response.data = {'error': exc.reason, 'detail': str(exc.detail)}
    elif isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        response.data = {'error': 'Unauthorized', 'detail': str(exc.detail)}
    elif isinstance(exc, exceptions.ValidationError):
        response.data = {'error': 'InvalidPayload', 'detail': exc.detail}
    elif isinstance(exc, exceptions.Throttled):
        response.data = {'error': 'Throttled', 'detail': str(exc.detail)}
    else:
        detail = response.data.get('detail', '') if isinstance(response.data, dict) else response.data
        response.data = {'error': exc.__class__.__name__, 'detail': detail}

    return response

