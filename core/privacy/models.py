from datetime import timedelta

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.core.exceptions import PermissionDenied
from django.db import models
from django.utils import timezone

from core.base import AppendOnlyMixin, AppendOnlyQuerySet

from .constants import AccessOutcome, AccessType, UnmaskStatus, VisibilityLevel


class SubjectQuerySetMixin:
    """Filters shared by tables keyed on a generic (subject_type, subject_id) pair."""

    def for_subject(self, subject):
        return self.filter(
            subject_type=ContentType.objects.get_for_model(subject),
            subject_id=subject.pk,
        )


class FieldAccessLogQuerySet(SubjectQuerySetMixin, AppendOnlyQuerySet):

    def newest_first(self):
        return self.order_by('-timestamp', '-id')


class FieldAccessLog(AppendOnlyMixin, models.Model):
    """
    One read of one sensitive field of one subject.

    Write-once: rows can be inserted and read, never modified or deleted.
    Raw field values are never stored here.
    """
    accessor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='field_access_logs',
        help_text="Account that read the field"
    )
    accessor_role = models.CharField(
        max_length=16,
        help_text="Role of the accessor at the time of the read"
    )

    subject_type = models.ForeignKey(ContentType, on_delete=models.PROTECT)
    subject_id = models.PositiveBigIntegerField()
    subject = GenericForeignKey('subject_type', 'subject_id')

    field_name = models.CharField(max_length=64)
    outcome = models.CharField(max_length=8, choices=AccessOutcome.choices)
    level = models.CharField(
        max_length=16,
        choices=VisibilityLevel.choices,
        default=VisibilityLevel.RESTRICTED,
        help_text="Resolved visibility level of the field at read time"
    )
    access_type = models.CharField(
        max_length=8,
        choices=AccessType.choices,
        default=AccessType.VIEW
    )

    timestamp = models.DateTimeField(default=timezone.now, db_index=True)
    request_id = models.CharField(max_length=64, blank=True, default='')
    ip = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=512, blank=True, default='')

    objects = models.Manager.from_queryset(FieldAccessLogQuerySet)()

    class Meta:
        db_table = 'field_access_logs'
        verbose_name = 'Field Access Log Entry'
        verbose_name_plural = 'Field Access Log'
        indexes = [
            models.Index(fields=['subject_type', 'subject_id', 'timestamp'], name='fal_subject_time_idx'),
            models.Index(fields=['accessor', 'timestamp'], name='fal_accessor_time_idx'),
        ]

    def __str__(self):
        return (
            f"{self.accessor_id} {self.outcome} {self.subject_type_id}:{self.subject_id}."
            f"{self.field_name} at {self.timestamp:%Y-%m-%d %H:%M:%S}"
        )


class UnmaskRequestQuerySet(SubjectQuerySetMixin, models.QuerySet):
    def active_grants(self, requester_id, subject, now):
        """Approved requests of `requester_id` on `subject` that have not yet expired."""
        return self.for_subject(subject).filter(
            requester_id=requester_id,
            status=UnmaskStatus.APPROVED,
            expires_at__gt=now,
        )

    def stale(self, now):
        """Approved requests whose window has closed but are not yet marked expired."""
        return self.filter(status=UnmaskStatus.APPROVED, expires_at__lte=now)

    def counting_towards_quota(self, requester_id, now):
        """Pending and approved requests created by `requester_id` in the last 24 hours."""
        return self.filter(
            requester_id=requester_id,
            status__in=[UnmaskStatus.PENDING, UnmaskStatus.APPROVED],
            created_at__gt=now - timedelta(days=1),
        )


class UnmaskRequest(models.Model):
    """
    Request for temporary full visibility of named restricted fields on one subject.

    Lifecycle: pending -> approved -> expired, or pending -> denied.
    Rows are never deleted.
    """
    requester = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='unmask_requests'
    )

    subject_type = models.ForeignKey(ContentType, on_delete=models.PROTECT)
    subject_id = models.PositiveBigIntegerField()
    subject = GenericForeignKey('subject_type', 'subject_id')

    fields = models.JSONField(
        default=list,
        help_text="Field names the requester wants unmasked"
    )
    justification = models.TextField()

    status = models.CharField(
        max_length=10,
        choices=UnmaskStatus.choices,
        default=UnmaskStatus.PENDING,
        db_index=True
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    decided_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='unmask_decisions'
    )
    decided_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    decision_reason = models.TextField(blank=True, default='')

    objects = UnmaskRequestQuerySet.as_manager()

    class Meta:
        db_table = 'unmask_requests'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['requester', 'subject_type', 'subject_id', 'status'], name='unmask_req_subject_idx'),
            models.Index(fields=['status', 'expires_at'], name='unmask_status_expiry_idx'),
        ]

    def __str__(self):
        return f"Unmask request #{self.pk} by {self.requester_id} ({self.status})"

    def is_active(self, now=None):
        """True while the grant is usable; expires_at == now already counts as expired."""
        now = now or timezone.now()
        return (
            self.status == UnmaskStatus.APPROVED
            and self.expires_at is not None
            and now < self.expires_at
        )

    def effective_status(self, now=None):
        """Status as callers should see it, with lapsed approvals reported as expired."""
        if self.status == UnmaskStatus.APPROVED and not self.is_active(now):
            return UnmaskStatus.EXPIRED
        return UnmaskStatus(self.status)

    def delete(self, *args, **kwargs):
        raise PermissionDenied("Unmask requests are kept permanently and cannot be deleted.")
