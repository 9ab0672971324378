from enum import Enum

from django.db import models


class VisibilityLevel(models.TextChoices):
    """Closed set of visibility levels a field can carry."""
    PUBLIC = 'public', 'Public'
    INTERNAL = 'internal', 'Internal'
    RESTRICTED = 'restricted', 'Restricted'


class AccessOutcome(models.TextChoices):
    SHOW = 'SHOW', 'Show'
    MASK = 'MASK', 'Mask'
    REDACT = 'REDACT', 'Redact'


class AccessType(models.TextChoices):
    VIEW = 'view', 'View'
    EXPORT = 'export', 'Export'


class UnmaskStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    DENIED = 'denied', 'Denied'
    EXPIRED = 'expired', 'Expired'


class UnmaskDecision(models.TextChoices):
    APPROVE = 'approve', 'Approve'
    DENY = 'deny', 'Deny'


class FieldType(Enum):
    """How a field's value is masked."""
    MOBILE = 'mobile'
    EMAIL = 'email'
    IDENTIFIER = 'identifier'
    FINANCIAL = 'financial'
    DATE = 'date'
    TEXT = 'text'
