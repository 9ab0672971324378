"""
Core Base Managers Module

Provides custom managers and querysets for base models.

**Architecture:**
- BaseQuerySet: Generic search filtering
- SoftDeleteQuerySet: For models with status field
- AppendOnlyQuerySet: For write-once models (no bulk update/delete);
  subclass it and build the manager with Manager.from_queryset()

Exports:
    QuerySets:
        - BaseQuerySet: filter_by_search_params
        - SoftDeleteQuerySet: active()
        - AppendOnlyQuerySet: update()/delete() raise

    Managers:
        - SoftDeleteManager: For SoftDeleteMixin models

Usage:
    from core.base import SoftDeleteMixin
    from core.base.managers import SoftDeleteManager

    class Officer(SoftDeleteMixin, models.Model):
        objects = SoftDeleteManager()
"""

from django.db import models
from django.db.models import Q
from core.base.models import StatusChoices, AppendOnlyViolation


class BaseQuerySet(models.QuerySet):
    """
    Base QuerySet with common filtering methods.

    Subclasses declare `search_fields`, the columns matched by the
    `search` query parameter.
    """
    search_fields = ()

    def filter_by_search_params(self, query_params):
        """
        Apply the free-text `search` filter from query parameters.

        Args:
            query_params: QueryDict or dict with optional key:
                - search: Contains match across search_fields

        Returns:
            Filtered QuerySet
        """
        queryset = self

        search = query_params.get('search')
        if search and self.search_fields:
            condition = Q()
            for field_name in self.search_fields:
                condition |= Q(**{f'{field_name}__icontains': search})
            queryset = queryset.filter(condition)

        return queryset


class SoftDeleteQuerySet(BaseQuerySet):
    """
    QuerySet for SoftDeleteMixin models (models with status field).

    Methods:
        - active(): Return status=ACTIVE records
    """

    def active(self):
        """Return only active records (status=ACTIVE)."""
        return self.filter(status=StatusChoices.ACTIVE)


class SoftDeleteManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """
    Manager for SoftDeleteMixin models.

    Usage:
        class Officer(SoftDeleteMixin, models.Model):
            objects = SoftDeleteManager()

        Officer.objects.active()
    """
    pass


class AppendOnlyQuerySet(models.QuerySet):
    """
    QuerySet for write-once models. Reads and inserts only.
    """

    def update(self, **kwargs):
        raise AppendOnlyViolation(f"{self.model.__name__} rows cannot be updated.")

    def delete(self):
        raise AppendOnlyViolation(f"{self.model.__name__} rows cannot be deleted.")
