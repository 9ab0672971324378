"""
FieldSecurityService: the four operations consumers call.

    evaluate_and_render  decide, mask and audit every field of a subject
    render_summary       same decisions for list rows, restricted fields dropped
    request_unmask       open an unmask request
    decide_unmask        approve or deny one
    get_audit_trail      recent access log entries for a subject (admin/hr)

Collaborators are passed in; nothing is shared at module level, so tests
can build a service around an InMemoryAuditStore or a fixed clock.
"""
import logging
from datetime import date, datetime
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from .audit import AuditLogger
from .conf import privacy_setting
from .constants import AccessOutcome, AccessType, UnmaskDecision, VisibilityLevel
from .dtos import NO_GRANTS, RequestMeta
from .evaluator import PRIVILEGED_ROLES, PermissionEvaluator, normalize_role
from .exceptions import InvalidRequestState, PermissionDenied, ValidationError
from .masking import Masker
from .models import UnmaskRequest
from .policy import VisibilityPolicy
from .unmask import UnmaskRequestWorkflow

logger = logging.getLogger(__name__)


class RenderedRecord(dict):
    """
    A subject rendered for one caller: field -> value, with REDACTED
    fields absent. The per-field decisions ride along as an attribute.
    """

    def __init__(self, values, decisions):
        super().__init__(values)
        self.decisions = decisions

    @property
    def masked_fields(self):
        return [d.field for d in self.decisions if d.outcome == AccessOutcome.MASK]

    @property
    def redacted_fields(self):
        return [d.field for d in self.decisions if d.outcome == AccessOutcome.REDACT]


def plain_value(value):
    """Convert model values to JSON/xlsx friendly scalars."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


class FieldSecurityService:
    def __init__(self, policy=None, evaluator=None, masker=None, audit_logger=None,
                 workflow=None, clock=timezone.now):
        self.policy = policy or VisibilityPolicy()
        self.evaluator = evaluator or PermissionEvaluator()
        self.masker = masker or Masker(self.policy)
        self.audit_logger = audit_logger or AuditLogger(clock=clock)
        self.workflow = workflow or UnmaskRequestWorkflow(self.policy, clock=clock)
        self.clock = clock

    # ----------------------
    # Reads
    # ----------------------

    def _value_for(self, subject, field_name, outcome):
        raw = plain_value(getattr(subject, field_name, None))
        if outcome == AccessOutcome.SHOW:
            return raw
        return self.masker.mask(field_name, raw)

    def evaluate_and_render(self, subject, caller, meta=None, access_type=AccessType.VIEW,
                            fields=None) -> RenderedRecord:
        """
        Render `subject` for `caller`.

        Every field is decided by the evaluator: SHOW keeps the raw value,
        MASK replaces it with the masked form, REDACT drops the key. Each
        field whose level resolves to restricted and whose outcome is SHOW
        or MASK is written to the access log before this returns; if any
        of those writes fails the whole render raises AuditWriteFailed.

        Args:
            subject: model instance exposing the catalogued fields as attributes
            caller: CallerContext
            meta: RequestMeta copied onto the log entries
            access_type: 'view' or 'export'
            fields: optional subset of field names to render
        """
        meta = meta or RequestMeta()
        field_names = fields or self.policy.known_fields()
        role = normalize_role(caller.role)

        with transaction.atomic():
            grants = NO_GRANTS
            if role not in PRIVILEGED_ROLES:
                grants = self.workflow.active_grants(caller.id, subject)

            values = {'id': subject.pk}
            decisions = []
            for field_name in field_names:
                level = self.policy.level_for(subject, field_name)
                decision = self.evaluator.evaluate(role, subject.pk, field_name, level, grants)
                decisions.append(decision)

                if decision.outcome == AccessOutcome.REDACT:
                    continue

                values[field_name] = self._value_for(subject, field_name, decision.outcome)

                if level == VisibilityLevel.RESTRICTED:
                    self.audit_logger.record(
                        caller.id, subject, field_name, decision.outcome, meta,
                        accessor_role=role,
                        level=level,
                        access_type=access_type,
                    )

        record = RenderedRecord(values, decisions)
        logger.debug(
            f"Rendered {subject._meta.label_lower}:{subject.pk} for caller {caller.id} ({role}, {access_type}): "
            f"{len(record.masked_fields)} masked, {len(record.redacted_fields)} redacted"
        )
        return record

    def render_summary(self, subject, caller, fields) -> RenderedRecord:
        """
        Lightweight projection for list rows. Not audited.

        Fields that resolve to restricted for this subject are dropped
        outright, whoever the caller is; the rest go through the evaluator
        and masker as in evaluate_and_render.
        """
        role = normalize_role(caller.role)
        values = {'id': subject.pk}
        decisions = []
        for field_name in fields:
            level = self.policy.level_for(subject, field_name)
            if level == VisibilityLevel.RESTRICTED:
                continue
            decision = self.evaluator.evaluate(role, subject.pk, field_name, level, NO_GRANTS)
            decisions.append(decision)
            if decision.outcome == AccessOutcome.REDACT:
                continue
            values[field_name] = self._value_for(subject, field_name, decision.outcome)
        return RenderedRecord(values, decisions)

    # ----------------------
    # Unmask workflow
    # ----------------------

    def request_unmask(self, requester, subject, fields, justification) -> int:
        """Open a pending unmask request and return its id."""
        return self.workflow.create(requester, subject, fields, justification).pk

    def decide_unmask(self, approver, request_id, decision, ttl_minutes=None, reason='') -> UnmaskRequest:
        """
        Approve or deny request `request_id`.

        Raises:
            ValidationError: unknown decision or bad ttl
            PermissionDenied: approver not admin/hr, or self-approval
            InvalidRequestState: request missing or no longer pending
        """
        if decision not in UnmaskDecision.values:
            raise ValidationError(f"decision must be one of: {', '.join(UnmaskDecision.values)}")

        try:
            unmask_request = UnmaskRequest.objects.get(pk=request_id)
        except UnmaskRequest.DoesNotExist:
            raise InvalidRequestState(f"Unmask request {request_id} does not exist")

        if decision == UnmaskDecision.APPROVE:
            return self.workflow.approve(unmask_request, approver, ttl_minutes)
        return self.workflow.deny(unmask_request, approver, reason)

    # ----------------------
    # Audit trail
    # ----------------------

    def get_audit_trail(self, caller, subject, limit=None):
        """Newest-first access log entries for `subject`. admin/hr only."""
        if normalize_role(caller.role) not in PRIVILEGED_ROLES:
            raise PermissionDenied("Only admin or hr accounts can view the audit trail")

        if limit is None:
            limit = privacy_setting('AUDIT_TRAIL_DEFAULT_LIMIT')
        try:
            limit = int(limit)
        except (TypeError, ValueError):
            raise ValidationError("limit must be a positive whole number")
        if limit < 1:
            raise ValidationError("limit must be a positive whole number")

        limit = min(limit, privacy_setting('AUDIT_TRAIL_MAX_LIMIT'))
        return self.audit_logger.recent_for_subject(subject, limit)


def get_field_security_service():
    """Service wired with the production collaborators."""
    return FieldSecurityService()
