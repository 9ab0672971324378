"""
Errors raised by the privacy core.

Views do not catch these; the project exception handler maps them to
HTTP responses (403, 409, 503 and 400 respectively).
"""


class PrivacyError(Exception):
    """Base class for every privacy core error."""


class PermissionDenied(PrivacyError):
    """The caller's role or identity does not allow the operation."""


class InvalidRequestState(PrivacyError):
    """An unmask request is not in the state the operation needs."""


class AuditWriteFailed(PrivacyError):
    """The access log could not be written; the triggering read is aborted."""


class ValidationError(PrivacyError):
    """Malformed input: empty justification, unknown field, bad TTL."""
