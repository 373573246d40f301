"""
DRF exception handler translating application errors into HTTP responses.

Registered through REST_FRAMEWORK["EXCEPTION_HANDLER"]. Exceptions that are
not BaseApplicationError fall through to DRF's default handler.

Status mapping:
    ValidationError       -> 400
    ConflictError         -> 409
    PaymentDeclinedError  -> 402
    ExternalServiceError  -> 502
    other application     -> 400
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def get_status_code(exc: BaseApplicationError) -> int:
    """Return the HTTP status code for an application error."""
    # Imported lazily: payments depends on core, not the other way round
    from payments.exceptions import PaymentDeclinedError

    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, PaymentDeclinedError):
        return status.HTTP_402_PAYMENT_REQUIRED
    if isinstance(exc, ExternalServiceError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_400_BAD_REQUEST


def application_exception_handler(exc, context):
    """
    Convert BaseApplicationError into a JSON response.

    Args:
        exc: The raised exception
        context: DRF handler context (view, request, ...)

    Returns:
        Response, or None to let Django handle the exception
    """
    if not isinstance(exc, BaseApplicationError):
        return drf_exception_handler(exc, context)

    status_code = get_status_code(exc)
    view = context.get("view")
    logger.warning(
        f"Request failed with {exc.error_code}",
        extra={
            "view": type(view).__name__ if view else None,
            "error_code": exc.error_code,
            "status_code": status_code,
            "details": exc.details,
        },
    )
    return Response(exc.to_dict(), status=status_code)
