from django.db import models
from django.conf import settings


class StatusChoices(models.TextChoices):
    """
    Standard status choices for entities across the system.

    Use this instead of defining custom status choices in each model.
    """
    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'


class AppendOnlyViolation(Exception):
    """Raised when code tries to change or remove a write-once row."""
    pass


class AuditMixin(models.Model):
    """
    Adds audit fields to track creation and modification metadata.

    Fields:
        - created_at: Timestamp when record was created
        - updated_at: Timestamp when record was last modified
        - created_by: User who created the record (optional)
        - updated_by: User who last modified the record (optional)

    Usage:
        class Officer(AuditMixin):
            full_name = models.CharField(max_length=255)

    Note: created_by and updated_by should be set manually in services.
    """
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Timestamp when record was created"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Timestamp when record was last modified"
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(app_label)s_%(class)s_created',
        help_text="User who created this record"
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(app_label)s_%(class)s_updated',
        help_text="User who last updated this record"
    )

    class Meta:
        abstract = True


class SoftDeleteMixin(models.Model):
    """
    Mixin for models that support soft deletion.

    Instead of permanently deleting records, they are marked as inactive.
    This preserves referential integrity and audit history.

    Fields:
        - status: StatusChoices (ACTIVE/INACTIVE)

    Methods:
        - deactivate(): Marks record as inactive (soft delete)
    """
    status = models.CharField(
        max_length=10,
        choices=StatusChoices.choices,
        default=StatusChoices.ACTIVE,
        help_text="Record status. Set to INACTIVE instead of deleting."
    )

    class Meta:
        abstract = True

    def deactivate(self):
        """
        Soft delete: mark as inactive instead of removing from DB.
        """
        self.status = StatusChoices.INACTIVE
        self.save(update_fields=['status'])

    def update_fields(self, field_updates: dict):
        """
        Update several fields, validate, and save.

        Args:
            field_updates: Dict of field_name -> new_value for fields to update

        Returns:
            self (for chaining)

        Example:
            officer.update_fields({
                'phone_visibility': 'restricted',
                'nid_visibility': 'internal',
            })
        """
        for field_name, value in field_updates.items():
            setattr(self, field_name, value)
        self.full_clean()
        self.save()
        return self


class AppendOnlyMixin(models.Model):
    """
    Mixin for write-once models (access logs and similar evidence tables).

    A row can be inserted once. Saving an existing row or deleting it raises
    AppendOnlyViolation. Pair it with a manager built from AppendOnlyQuerySet
    so bulk queryset update()/delete() are refused too.

    Usage:
        class FieldAccessLog(AppendOnlyMixin):
            ...
            objects = models.Manager.from_queryset(AppendOnlyQuerySet)()
    """

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise AppendOnlyViolation(
                f"{self.__class__.__name__} rows are write-once and cannot be modified."
            )
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AppendOnlyViolation(
            f"{self.__class__.__name__} rows are write-once and cannot be deleted."
        )
