"""
API exceptions and the DRF exception handler.

Every error leaves the API as
``{'success': False, 'error': {'code', 'message', 'request_id'[, 'details']}}``.
"""

import logging
import traceback
from typing import Any, Dict, Optional

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class BaseAPIException(APIException):
    """Crew center API error carrying a stable upper-case ``error_code``."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Something went wrong on the crew center.'
    default_code = 'error'
    error_code = 'INTERNAL_ERROR'

    def __init__(self, detail: Optional[str] = None, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(detail=detail)
        if error_code:
            self.error_code = error_code
        self.details = details or {}


class NotFoundException(BaseAPIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'
    error_code = 'NOT_FOUND'


class ConflictException(BaseAPIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The request conflicts with existing data.'
    default_code = 'conflict'
    error_code = 'CONFLICT'


class CallsignTakenException(ConflictException):
    default_detail = 'This callsign is already taken.'
    error_code = 'CALLSIGN_TAKEN'


class ExamAttemptsExhaustedException(BaseAPIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'No attempts remaining for this exam.'
    default_code = 'attempts_exhausted'
    error_code = 'EXAM_ATTEMPTS_EXHAUSTED'


class ServiceUnavailableException(BaseAPIException):
    """Raised when a required integration (bot token, webhook) is not configured."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'This feature is not configured.'
    default_code = 'service_unavailable'
    error_code = 'SERVICE_UNAVAILABLE'


class DiscordAPIException(BaseAPIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Discord request failed.'
    default_code = 'discord_error'
    error_code = 'DISCORD_ERROR'


# =============================================================================
# HANDLER
# =============================================================================

def error_body(code: str, message: str, request_id: Optional[str], details: Any = None) -> Dict[str, Any]:
    error = {'code': code, 'message': message, 'request_id': request_id}
    if details:
        error['details'] = details
    return {'success': False, 'error': error}


def _message(detail) -> str:
    if isinstance(detail, list):
        return str(detail[0]) if detail else 'Invalid request.'
    if isinstance(detail, dict):
        if 'detail' in detail:
            return str(detail['detail'])
        return 'Invalid request.'
    return str(detail)


def custom_exception_handler(exc, context) -> Optional[Response]:
    """
    Render DRF, Django and unexpected errors in the crew center envelope.

    Serializer field errors end up under ``details``; unexpected errors are
    logged with the request id and hidden unless DEBUG is on.
    """
    request = context.get('request')
    request_id = getattr(request, 'request_id', None)

    response = exception_handler(exc, context)
    if response is not None:
        details = getattr(exc, 'details', None)
        if not details and isinstance(response.data, dict) and 'detail' not in response.data:
            details = response.data
        code = getattr(exc, 'error_code', None) or (
            'VALIDATION_ERROR' if response.status_code == status.HTTP_400_BAD_REQUEST
            else str(getattr(exc, 'default_code', 'error')).upper()
        )
        response.data = error_body(code, _message(getattr(exc, 'detail', response.data)), request_id, details)
        return response

    if isinstance(exc, DjangoValidationError):
        details = exc.message_dict if hasattr(exc, 'message_dict') else {'detail': exc.messages}
        return Response(
            error_body('VALIDATION_ERROR', 'Validation error', request_id, details),
            status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, Http404):
        return Response(
            error_body('NOT_FOUND', str(exc) or 'Not found.', request_id),
            status=status.HTTP_404_NOT_FOUND
        )

    logger.exception(
        f"Unhandled {type(exc).__name__}: {exc}",
        extra={'request_id': request_id}
    )

    body = error_body('INTERNAL_ERROR', 'Unexpected crew center error. Please try again later.', request_id)
    if settings.DEBUG:
        body['error']['message'] = str(exc)
        body['error']['traceback'] = traceback.format_exc().splitlines()
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
