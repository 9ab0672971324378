"""
Error handling and response helpers for the directory API.

Domain errors raised by the privacy core are translated here, so views
never catch them themselves. Envelope formatting lives in renderers.py.
"""
import logging

from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status as http_status

from core.privacy import exceptions as privacy_errors
from directory_project.renderers import format_error_response

logger = logging.getLogger(__name__)

AUDIT_UNAVAILABLE_MESSAGE = "The request could not be completed right now. Please try again."

PRIVACY_ERROR_STATUS = {
    privacy_errors.PermissionDenied: http_status.HTTP_403_FORBIDDEN,
    privacy_errors.InvalidRequestState: http_status.HTTP_409_CONFLICT,
    privacy_errors.ValidationError: http_status.HTTP_400_BAD_REQUEST,
    privacy_errors.AuditWriteFailed: http_status.HTTP_503_SERVICE_UNAVAILABLE,
}


def custom_exception_handler(exc, context):
    """
    Format every error response as {"status": "error", "message", "data": null}.

    Privacy errors get their own status codes. AuditWriteFailed is logged with
    its cause and answered with a generic message that says nothing about
    the audit subsystem.
    """
    if isinstance(exc, privacy_errors.PrivacyError):
        return privacy_error_response(exc, context)

    response = exception_handler(exc, context)

    if response is not None:
        response.data = format_error_response(response.data, response.status_code)

    return response


def privacy_error_response(exc, context):
    """Build the envelope for a PrivacyError subclass."""
    status_code = http_status.HTTP_400_BAD_REQUEST
    for error_class, code in PRIVACY_ERROR_STATUS.items():
        if isinstance(exc, error_class):
            status_code = code
            break

    if isinstance(exc, privacy_errors.AuditWriteFailed):
        view = context.get('view') if context else None
        view_name = view.__class__.__name__ if view is not None else 'unknown view'
        logger.error(
            f"Sensitive read aborted, audit write failed in {view_name}: {exc}",
            exc_info=exc,
        )
        message = AUDIT_UNAVAILABLE_MESSAGE
    else:
        message = str(exc)

    return Response(
        {"status": "error", "message": message, "data": None},
        status=status_code,
    )


def success_response(data=None, message="", status_code=http_status.HTTP_200_OK):
    """
    Build a success envelope.

    Usage:
        return success_response(
            data={'request_id': request_id},
            message="Unmask request submitted",
            status_code=status.HTTP_201_CREATED
        )
    """
    return Response({
        "status": "success",
        "message": message,
        "data": data
    }, status=status_code)

