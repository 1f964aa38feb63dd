"""
Maps the engine's typed errors onto HTTP responses.

    NotFoundError                                   -> 404
    CapacityExceededError, DuplicateAssignmentError -> 409
    InvalidStateTransitionError, ValidationError    -> 400
    PermissionDeniedError                           -> 403

Anything else falls through to DRF's default handler.
"""
import logging
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler
from core.exceptions import (
    BaseApplicationException, NotFoundError, CapacityExceededError, DuplicateAssignmentError,
    InvalidStateTransitionError, ValidationError, PermissionDeniedError,
)

logger = logging.getLogger(__name__)

STATUS_CODES = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (CapacityExceededError, status.HTTP_409_CONFLICT),
    (DuplicateAssignmentError, status.HTTP_409_CONFLICT),
    (InvalidStateTransitionError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
)


def status_code_for(exc: BaseApplicationException) -> int:
    for exc_type, code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def engine_exception_handler(exc, context):
    if not isinstance(exc, BaseApplicationException):
        return exception_handler(exc, context)

    code = status_code_for(exc)
    view = context.get('view')
    logger.info(
        f"{type(exc).__name__} in {view.__class__.__name__ if view else 'unknown view'}: {exc.message}",
        extra={'error_code': exc.code},
    )
    return Response(
        {'detail': exc.message, 'code': exc.code, 'details': exc.details},
        status=code,
    )
