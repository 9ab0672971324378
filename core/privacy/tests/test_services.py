"""
Tests for FieldSecurityService: rendering, auditing, unmask decisions
and the audit trail.
"""
from datetime import datetime, timezone as dt_timezone
from unittest import mock

from django.db import OperationalError
from django.test import TestCase, override_settings

from core.base.test_utils import create_user_with_role
from core.privacy.audit import AuditLogger, InMemoryAuditStore
from core.privacy.constants import AccessOutcome, VisibilityLevel
from core.privacy.dtos import CallerContext, RequestMeta
from core.privacy.exceptions import (
    AuditWriteFailed, InvalidRequestState, PermissionDenied, ValidationError,
)
from core.privacy.masking import IDENTIFIER_PLACEHOLDER
from core.privacy.models import FieldAccessLog, UnmaskRequest
from core.privacy.policy import VisibilityPolicy
from core.privacy.services import FieldSecurityService, RenderedRecord
from core.user_accounts.models import Role
from HR.officers.tests.utils import FrozenClock, create_officer

RESTRICTED_FIELDS = VisibilityPolicy().fields_at_baseline(VisibilityLevel.RESTRICTED)


class FieldSecurityServiceTestCase(TestCase):

    def setUp(self):
        self.clock = FrozenClock(datetime(2026, 5, 10, 8, 30, tzinfo=dt_timezone.utc))
        self.store = InMemoryAuditStore()
        self.service = FieldSecurityService(
            audit_logger=AuditLogger(self.store, clock=self.clock),
            clock=self.clock,
        )
        self.officer = create_officer()
        self.users = {role.value: create_user_with_role(role) for role in Role}
        self.meta = RequestMeta(request_id='req-42', ip='192.0.2.10', user_agent='tests')

    def caller(self, role):
        return CallerContext.from_user(self.users[Role(role).value])

    def render(self, role, **kwargs):
        return self.service.evaluate_and_render(self.officer, self.caller(role), self.meta, **kwargs)


class EvaluateAndRenderTest(FieldSecurityServiceTestCase):

    def test_manager_render(self):
        record = self.render(Role.MANAGER)
        self.assertIsInstance(record, RenderedRecord)
        self.assertEqual(record['id'], self.officer.pk)
        self.assertEqual(record['full_name'], self.officer.full_name)
        self.assertEqual(record['personal_mobile'], '01712345678')
        self.assertEqual(record['nid_number'], IDENTIFIER_PLACEHOLDER)
        self.assertEqual(sorted(record.masked_fields), sorted(RESTRICTED_FIELDS))
        self.assertEqual(record.redacted_fields, [])

    def test_one_entry_per_restricted_field(self):
        self.render(Role.MANAGER)
        self.assertEqual(
            sorted(entry.field_name for entry in self.store.entries), sorted(RESTRICTED_FIELDS)
        )
        entry = self.store.entries[0]
        self.assertEqual(entry.accessor_id, self.users['manager'].pk)
        self.assertEqual(entry.accessor_role, 'manager')
        self.assertEqual(entry.request_id, 'req-42')
        self.assertEqual(entry.ip, '192.0.2.10')
        self.assertEqual(entry.timestamp, self.clock())
        self.assertEqual(entry.access_type, 'view')

    def test_viewer_render_redacts_and_logs_nothing(self):
        record = self.render(Role.VIEWER)
        for field_name in RESTRICTED_FIELDS:
            self.assertNotIn(field_name, record)
        self.assertEqual(sorted(record.redacted_fields), sorted(RESTRICTED_FIELDS))
        self.assertEqual(record['personal_mobile'], '017******78')
        self.assertEqual(self.store.entries, [])

    def test_privileged_render_skips_grant_lookup(self):
        with mock.patch.object(self.service.workflow, 'active_grants') as active_grants:
            record = self.render(Role.HR)
        active_grants.assert_not_called()
        self.assertEqual(record['nid_number'], self.officer.nid_number)
        self.assertEqual({entry.outcome for entry in self.store.entries}, {'SHOW'})

    def test_internal_fields_are_not_audited(self):
        self.render(Role.MANAGER, fields=['full_name', 'official_mobile', 'nid_number'])
        self.assertEqual([entry.field_name for entry in self.store.entries], ['nid_number'])

    def test_unknown_field_is_treated_as_restricted(self):
        record = self.render(Role.VIEWER, fields=['full_name', 'notes'])
        self.assertNotIn('notes', record)

    def test_override_to_restricted_is_audited(self):
        self.officer.update_fields({'phone_visibility': VisibilityLevel.RESTRICTED})
        record = self.render(Role.USER, fields=['personal_mobile'])
        self.assertEqual(record['personal_mobile'], '017******78')
        self.assertEqual(self.store.entries[0].level, 'restricted')

    def test_audit_failure_aborts_render(self):
        class FailingStore:
            def write(self, entry):
                raise OperationalError('connection lost')

        service = FieldSecurityService(audit_logger=AuditLogger(FailingStore()))
        with self.assertLogs('core.privacy.audit', level='ERROR'):
            with self.assertRaises(AuditWriteFailed):
                service.evaluate_and_render(self.officer, self.caller(Role.MANAGER), self.meta)

    def test_database_audit_store_by_default(self):
        FieldSecurityService().evaluate_and_render(
            self.officer, self.caller(Role.ADMIN), self.meta, fields=['nid_number']
        )
        entry = FieldAccessLog.objects.get()
        self.assertEqual(entry.field_name, 'nid_number')
        self.assertEqual(entry.outcome, 'SHOW')
        self.assertEqual(entry.accessor_role, 'admin')


class UnmaskScenarioTest(FieldSecurityServiceTestCase):
    """A manager asks for a restricted mobile number and gets it for one hour."""

    def setUp(self):
        super().setUp()
        self.officer.update_fields({'phone_visibility': VisibilityLevel.RESTRICTED})

    def mobile_for_manager(self):
        return self.render(Role.MANAGER, fields=['personal_mobile'])['personal_mobile']

    def test_sixty_minute_grant(self):
        self.assertEqual(self.mobile_for_manager(), '017******78')

        request_id = self.service.request_unmask(
            self.caller(Role.MANAGER), self.officer, ['personal_mobile'], 'Urgent transfer order'
        )
        self.service.decide_unmask(self.caller(Role.HR), request_id, 'approve', ttl_minutes=60)

        self.assertEqual(self.mobile_for_manager(), '01712345678')
        self.clock.advance(minutes=59, seconds=59)
        self.assertEqual(self.mobile_for_manager(), '01712345678')
        self.clock.advance(seconds=1)
        self.assertEqual(self.mobile_for_manager(), '017******78')

        self.assertEqual(
            [entry.outcome for entry in self.store.entries],
            [AccessOutcome.MASK, AccessOutcome.SHOW, AccessOutcome.SHOW, AccessOutcome.MASK]
        )

    def test_grant_does_not_extend_to_viewer_or_other_fields(self):
        request_id = self.service.request_unmask(
            self.caller(Role.USER), self.officer, ['personal_mobile'], 'Payroll query'
        )
        self.service.decide_unmask(self.caller(Role.ADMIN), request_id, 'approve')

        record = self.render(Role.USER, fields=['personal_mobile', 'official_mobile'])
        self.assertEqual(record['personal_mobile'], '01712345678')
        self.assertEqual(record['official_mobile'], '018******32')

    def test_denied_request_keeps_field_masked(self):
        request_id = self.service.request_unmask(
            self.caller(Role.MANAGER), self.officer, ['personal_mobile'], 'Curious'
        )
        decided = self.service.decide_unmask(
            self.caller(Role.HR), request_id, 'deny', reason='No business need'
        )
        self.assertEqual(decided.status, 'denied')
        self.assertEqual(self.mobile_for_manager(), '017******78')


class DecideUnmaskTest(FieldSecurityServiceTestCase):

    def test_unknown_decision(self):
        request_id = self.service.request_unmask(
            self.caller(Role.MANAGER), self.officer, ['nid_number'], 'Reason'
        )
        with self.assertRaises(ValidationError):
            self.service.decide_unmask(self.caller(Role.HR), request_id, 'maybe')
        self.assertEqual(UnmaskRequest.objects.get(pk=request_id).status, 'pending')

    def test_missing_request_is_an_invalid_state(self):
        with self.assertRaises(InvalidRequestState):
            self.service.decide_unmask(self.caller(Role.HR), 999999, 'approve')


class RenderSummaryTest(FieldSecurityServiceTestCase):

    def test_restricted_fields_dropped_for_everyone(self):
        fields = ['full_name', 'official_mobile', 'nid_number']
        for role in (Role.ADMIN, Role.MANAGER, Role.VIEWER):
            with self.subTest(role=role):
                record = self.service.render_summary(self.officer, self.caller(role), fields)
                self.assertNotIn('nid_number', record)
                self.assertEqual(record['full_name'], self.officer.full_name)
        self.assertEqual(self.store.entries, [])


class AuditTrailTest(FieldSecurityServiceTestCase):

    def setUp(self):
        super().setUp()
        self.render(Role.MANAGER, fields=['nid_number', 'tin_number', 'passport_number'])

    def test_privileged_only(self):
        for role in (Role.MANAGER, Role.USER, Role.VIEWER):
            with self.subTest(role=role):
                with self.assertRaises(PermissionDenied):
                    self.service.get_audit_trail(self.caller(role), self.officer)

    def test_returns_newest_first(self):
        trail = self.service.get_audit_trail(self.caller(Role.HR), self.officer)
        self.assertEqual(len(trail), 3)
        self.assertEqual(trail[0].field_name, 'passport_number')

    def test_limit_validation(self):
        for limit in (0, -3, 'ten'):
            with self.subTest(limit=limit):
                with self.assertRaises(ValidationError):
                    self.service.get_audit_trail(self.caller(Role.ADMIN), self.officer, limit)

    @override_settings(PRIVACY={'AUDIT_TRAIL_MAX_LIMIT': 2})
    def test_limit_is_clamped(self):
        trail = self.service.get_audit_trail(self.caller(Role.ADMIN), self.officer, '1000')
        self.assertEqual(len(trail), 2)
