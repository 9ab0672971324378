"""
Core Base Module

Provides shared base classes, mixins, and utilities for all directory modules.

**Architecture:**
Each feature is a separate mixin that can be composed together.

Exports:
    Basic Utilities:
        - StatusChoices: Standard ACTIVE/INACTIVE status choices
        - AppendOnlyViolation: Raised on writes to write-once rows

    Individual Feature Mixins:
        - AuditMixin: Adds created_at, updated_at, created_by, updated_by
        - SoftDeleteMixin: Adds status + soft delete behavior
        - AppendOnlyMixin: Makes rows write-once

    Managers & QuerySets:
        - BaseQuerySet: Base queryset with filter_by_search_params
        - SoftDeleteQuerySet: QuerySet with the active() filter
        - SoftDeleteManager: Manager for SoftDeleteMixin models
        - AppendOnlyQuerySet: QuerySet refusing bulk update()/delete()

Usage Examples:

    # Soft delete only
    from core.base import SoftDeleteMixin
    from core.base.managers import SoftDeleteManager

    class Officer(SoftDeleteMixin, models.Model):
        full_name = models.CharField(max_length=255)
        objects = SoftDeleteManager()

    # Write-once evidence table
    from core.base import AppendOnlyMixin
    from core.base.managers import AppendOnlyQuerySet

    class FieldAccessLog(AppendOnlyMixin, models.Model):
        field_name = models.CharField(max_length=64)
        objects = models.Manager.from_queryset(AppendOnlyQuerySet)()
"""

from core.base.models import (
    StatusChoices,
    AppendOnlyViolation,
    AuditMixin,
    SoftDeleteMixin,
    AppendOnlyMixin,
)

from core.base.managers import (
    BaseQuerySet,
    SoftDeleteQuerySet,
    SoftDeleteManager,
    AppendOnlyQuerySet,
)

__all__ = [
    # Basic Utilities
    'StatusChoices',
    'AppendOnlyViolation',

    # Individual Feature Mixins
    'AuditMixin',
    'SoftDeleteMixin',
    'AppendOnlyMixin',

    # Managers & QuerySets
    'BaseQuerySet',
    'SoftDeleteQuerySet',
    'SoftDeleteManager',
    'AppendOnlyQuerySet',
]
