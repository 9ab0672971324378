"""Unmask request workflow.

States: pending -> approved -> expired, and pending -> denied.

Decisions are conditional updates guarded on status='pending', so two
approvers racing on the same request cannot both win. Expiry is lazy: a
grant is usable only while now < expires_at; sweep() rewrites lapsed
approvals to 'expired' for reporting.
"""
import logging
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.contrib.contenttypes.models import ContentType
from django.db import transaction
from django.utils import timezone

from core.user_accounts.models import Role

from .conf import privacy_setting
from .constants import UnmaskStatus, VisibilityLevel
from .dtos import GrantSet
from .evaluator import PRIVILEGED_ROLES, normalize_role
from .exceptions import InvalidRequestState, PermissionDenied, ValidationError
from .models import UnmaskRequest
from .policy import VisibilityPolicy

logger = logging.getLogger(__name__)


class UnmaskRequestWorkflow:
    """Creates, decides and expires unmask requests."""

    def __init__(self, policy=None, clock=timezone.now):
        self.policy = policy or VisibilityPolicy()
        self.clock = clock

    # ----------------------
    # Helper Methods
    # ----------------------

    def _clean_fields(self, subject, fields):
        if isinstance(fields, str) or not fields:
            raise ValidationError("At least one field must be named")

        cleaned = []
        for name in fields:
            if not isinstance(name, str) or not self.policy.is_known(name):
                raise ValidationError(f"Unknown field: {name}")
            if name not in cleaned:
                cleaned.append(name)

        restricted = [
            name for name in cleaned
            if self.policy.level_for(subject, name) == VisibilityLevel.RESTRICTED
        ]
        if not restricted:
            raise ValidationError(
                "None of the requested fields is restricted for this officer; nothing to unmask"
            )
        return cleaned

    @staticmethod
    def _check_approver(unmask_request, approver):
        if normalize_role(approver.role) not in PRIVILEGED_ROLES:
            raise PermissionDenied("Only admin or hr accounts can decide unmask requests")
        if approver.id == unmask_request.requester_id:
            raise PermissionDenied("You cannot decide your own unmask request")

    @staticmethod
    def _resolve_ttl(ttl_minutes):
        if ttl_minutes is None:
            ttl_minutes = privacy_setting('DEFAULT_UNMASK_TTL_MINUTES')
        if isinstance(ttl_minutes, bool) or not isinstance(ttl_minutes, int):
            raise ValidationError("ttl_minutes must be a whole number of minutes")

        max_ttl = privacy_setting('MAX_UNMASK_TTL_MINUTES')
        if ttl_minutes < 0 or ttl_minutes > max_ttl:
            raise ValidationError(f"ttl_minutes must be between 0 and {max_ttl}")
        return ttl_minutes

    @staticmethod
    def _state_error(request_id):
        current = UnmaskRequest.objects.filter(pk=request_id).values_list('status', flat=True).first()
        if current is None:
            return InvalidRequestState(f"Unmask request {request_id} does not exist")
        return InvalidRequestState(
            f"Unmask request {request_id} is already {current} and can no longer be decided"
        )

    # ----------------------
    # Lifecycle
    # ----------------------

    @transaction.atomic
    def create(self, requester, subject, fields, justification) -> UnmaskRequest:
        """Open a pending request.

        Args:
            requester: CallerContext of the account asking
            subject: the record whose fields should be unmasked
            fields: iterable of field names
            justification: free-text reason, required

        Raises:
            PermissionDenied: viewer role, or daily quota used up
            ValidationError: empty justification, unknown or non-restricted fields
        """
        if normalize_role(requester.role) == Role.VIEWER:
            raise PermissionDenied("Viewer accounts cannot request unmasking")

        justification = (justification or '').strip()
        if not justification:
            raise ValidationError("A justification is required")

        cleaned_fields = self._clean_fields(subject, list(fields) if fields else [])

        # quota check and insert are serialized per requester by the row lock
        get_user_model().objects.select_for_update().filter(pk=requester.id).first()

        now = self.clock()
        quota = privacy_setting('UNMASK_MAX_REQUESTS_PER_DAY')
        used = UnmaskRequest.objects.counting_towards_quota(requester.id, now).count()
        if used >= quota:
            raise PermissionDenied(
                f"Daily limit of {quota} open unmask requests reached; try again later"
            )

        unmask_request = UnmaskRequest.objects.create(
            requester_id=requester.id,
            subject_type=ContentType.objects.get_for_model(subject),
            subject_id=subject.pk,
            fields=cleaned_fields,
            justification=justification,
            status=UnmaskStatus.PENDING,
            created_at=now,
        )
        logger.info(
            f"Unmask request {unmask_request.pk} opened by {requester.id} for "
            f"{subject._meta.label_lower}:{subject.pk} fields={cleaned_fields}"
        )
        return unmask_request

    def approve(self, unmask_request, approver, ttl_minutes=None) -> UnmaskRequest:
        """Approve a pending request for `ttl_minutes` (default from settings).

        Raises:
            PermissionDenied: approver is not admin/hr, or is the requester
            ValidationError: ttl outside 0..MAX_UNMASK_TTL_MINUTES
            InvalidRequestState: the request is no longer pending
        """
        self._check_approver(unmask_request, approver)
        ttl_minutes = self._resolve_ttl(ttl_minutes)

        now = self.clock()
        expires_at = now + timedelta(minutes=ttl_minutes)
        updated = UnmaskRequest.objects.filter(
            pk=unmask_request.pk,
            status=UnmaskStatus.PENDING,
        ).update(
            status=UnmaskStatus.APPROVED,
            decided_by_id=approver.id,
            decided_at=now,
            expires_at=expires_at,
        )
        if updated == 0:
            raise self._state_error(unmask_request.pk)

        logger.info(
            f"Unmask request {unmask_request.pk} approved by {approver.id} "
            f"for {ttl_minutes} minutes (until {expires_at.isoformat()})"
        )
        unmask_request.refresh_from_db()
        return unmask_request

    def deny(self, unmask_request, approver, reason='') -> UnmaskRequest:
        """Deny a pending request. Terminal.

        Raises:
            PermissionDenied: approver is not admin/hr, or is the requester
            InvalidRequestState: the request is no longer pending
        """
        self._check_approver(unmask_request, approver)

        now = self.clock()
        updated = UnmaskRequest.objects.filter(
            pk=unmask_request.pk,
            status=UnmaskStatus.PENDING,
        ).update(
            status=UnmaskStatus.DENIED,
            decided_by_id=approver.id,
            decided_at=now,
            decision_reason=(reason or '').strip(),
        )
        if updated == 0:
            raise self._state_error(unmask_request.pk)

        logger.info(f"Unmask request {unmask_request.pk} denied by {approver.id}")
        unmask_request.refresh_from_db()
        return unmask_request

    def expire(self, unmask_request) -> bool:
        """Mark one approved request expired if its window has closed.

        Returns:
            True when the row was rewritten
        """
        updated = UnmaskRequest.objects.stale(self.clock()).filter(pk=unmask_request.pk).update(
            status=UnmaskStatus.EXPIRED
        )
        if updated:
            unmask_request.refresh_from_db()
        return bool(updated)

    def sweep(self) -> int:
        """Rewrite every lapsed approval to expired. Returns how many rows changed."""
        count = UnmaskRequest.objects.stale(self.clock()).update(status=UnmaskStatus.EXPIRED)
        if count:
            logger.info(f"Expired {count} lapsed unmask request(s)")
        return count

    # ----------------------
    # Grants
    # ----------------------

    def active_grants(self, caller_id, subject) -> GrantSet:
        """Fields of `subject` currently unlocked for `caller_id`."""
        granted = set()
        for field_names in UnmaskRequest.objects.active_grants(
            caller_id, subject, self.clock()
        ).values_list('fields', flat=True):
            granted.update(field_names or [])
        return GrantSet.for_subject(subject.pk, granted)
