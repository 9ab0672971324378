import threading
import time
from datetime import datetime, timedelta, timezone as dt_timezone
from io import StringIO

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.core.management import call_command
from django.db import OperationalError, connection
from django.test import TestCase, TransactionTestCase, override_settings
from django.test.utils import CaptureQueriesContext

from core.base.test_utils import create_user_with_role
from core.privacy.constants import UnmaskStatus
from core.privacy.dtos import CallerContext
from core.privacy.exceptions import InvalidRequestState, PermissionDenied, ValidationError
from core.privacy.models import UnmaskRequest
from core.privacy.unmask import UnmaskRequestWorkflow
from core.user_accounts.models import Role
from HR.officers.tests.utils import FrozenClock, create_officer

START = datetime(2026, 3, 1, 9, 0, tzinfo=dt_timezone.utc)


class UnmaskWorkflowTestCase(TestCase):

    def setUp(self):
        self.clock = FrozenClock(START)
        self.workflow = UnmaskRequestWorkflow(clock=self.clock)
        self.officer = create_officer()
        self.manager_user = create_user_with_role(Role.MANAGER)
        self.hr_user = create_user_with_role(Role.HR)
        self.admin_user = create_user_with_role(Role.ADMIN)
        self.manager = CallerContext.from_user(self.manager_user)
        self.hr = CallerContext.from_user(self.hr_user)
        self.admin = CallerContext.from_user(self.admin_user)

    def open_request(self, requester=None, fields=('nid_number',)):
        return self.workflow.create(
            requester or self.manager, self.officer, list(fields), 'Service record audit'
        )


class UnmaskCreateTest(UnmaskWorkflowTestCase):

    def test_create_pending_request(self):
        unmask_request = self.open_request(fields=['nid_number', 'nid_number', 'official_mobile'])
        self.assertEqual(unmask_request.status, UnmaskStatus.PENDING)
        self.assertEqual(unmask_request.fields, ['nid_number', 'official_mobile'])
        self.assertEqual(unmask_request.created_at, START)
        self.assertEqual(unmask_request.subject, self.officer)

    def test_viewer_cannot_request(self):
        viewer = CallerContext.from_user(create_user_with_role(Role.VIEWER))
        with self.assertRaises(PermissionDenied):
            self.open_request(requester=viewer)

    def test_justification_required(self):
        with self.assertRaises(ValidationError):
            self.workflow.create(self.manager, self.officer, ['nid_number'], '   ')

    def test_fields_validated(self):
        for fields in ([], ['shoe_size'], ['full_name', 'official_email']):
            with self.subTest(fields=fields):
                with self.assertRaises(ValidationError):
                    self.workflow.create(self.manager, self.officer, fields, 'Reason')
        self.assertFalse(UnmaskRequest.objects.exists())

    @override_settings(PRIVACY={'UNMASK_MAX_REQUESTS_PER_DAY': 2})
    def test_daily_quota(self):
        self.open_request()
        self.open_request(fields=['tin_number'])
        with self.assertRaises(PermissionDenied):
            self.open_request(fields=['passport_number'])

        # a day later the earlier requests no longer count
        self.clock.advance(days=1, minutes=1)
        self.open_request(fields=['passport_number'])

    def test_requester_row_is_locked_before_quota_count(self):
        with CaptureQueriesContext(connection) as ctx:
            self.open_request()

        statements = [query['sql'] for query in ctx.captured_queries]
        lock_index = next(i for i, sql in enumerate(statements) if 'FROM "custom_users"' in sql)
        count_index = next(
            i for i, sql in enumerate(statements)
            if 'COUNT(' in sql and 'FROM "unmask_requests"' in sql
        )
        self.assertLess(lock_index, count_index)
        if connection.features.has_select_for_update:
            self.assertIn('FOR UPDATE', statements[lock_index])

    @override_settings(PRIVACY={'UNMASK_MAX_REQUESTS_PER_DAY': 1})
    def test_denied_requests_do_not_count_towards_quota(self):
        first = self.open_request()
        self.workflow.deny(first, self.hr, 'Not needed')
        self.open_request(fields=['tin_number'])


class UnmaskDecisionTest(UnmaskWorkflowTestCase):

    def test_approve_sets_expiry(self):
        unmask_request = self.workflow.approve(self.open_request(), self.hr, ttl_minutes=60)
        self.assertEqual(unmask_request.status, UnmaskStatus.APPROVED)
        self.assertEqual(unmask_request.decided_by, self.hr_user)
        self.assertEqual(unmask_request.decided_at, START)
        self.assertEqual(unmask_request.expires_at, START + timedelta(minutes=60))

    @override_settings(PRIVACY={'DEFAULT_UNMASK_TTL_MINUTES': 15})
    def test_default_ttl_from_settings(self):
        unmask_request = self.workflow.approve(self.open_request(), self.hr)
        self.assertEqual(unmask_request.expires_at, START + timedelta(minutes=15))

    def test_zero_ttl_grant_is_never_active(self):
        unmask_request = self.workflow.approve(self.open_request(), self.hr, ttl_minutes=0)
        self.assertFalse(unmask_request.is_active(self.clock()))
        self.assertEqual(unmask_request.effective_status(self.clock()), UnmaskStatus.EXPIRED)
        self.assertFalse(self.workflow.active_grants(self.manager.id, self.officer))

    def test_ttl_bounds(self):
        unmask_request = self.open_request()
        for ttl in (-1, 24 * 60 + 1, '30', 1.5, True):
            with self.subTest(ttl=ttl):
                with self.assertRaises(ValidationError):
                    self.workflow.approve(unmask_request, self.hr, ttl_minutes=ttl)
        unmask_request.refresh_from_db()
        self.assertEqual(unmask_request.status, UnmaskStatus.PENDING)

    def test_self_approval_rejected(self):
        own = self.open_request(requester=self.hr)
        with self.assertRaises(PermissionDenied):
            self.workflow.approve(own, self.hr)
        with self.assertRaises(PermissionDenied):
            self.workflow.deny(own, self.hr)
        self.workflow.approve(own, self.admin)

    def test_only_admin_or_hr_decide(self):
        other_manager = CallerContext.from_user(create_user_with_role(Role.MANAGER))
        with self.assertRaises(PermissionDenied):
            self.workflow.approve(self.open_request(), other_manager)

    def test_second_decision_is_rejected(self):
        unmask_request = self.open_request()
        stale_copy = UnmaskRequest.objects.get(pk=unmask_request.pk)

        self.workflow.approve(unmask_request, self.hr)
        with self.assertRaises(InvalidRequestState):
            self.workflow.approve(stale_copy, self.admin)
        with self.assertRaises(InvalidRequestState):
            self.workflow.deny(stale_copy, self.admin)

        unmask_request.refresh_from_db()
        self.assertEqual(unmask_request.decided_by, self.hr_user)

    def test_deny_is_terminal(self):
        unmask_request = self.workflow.deny(self.open_request(), self.hr, '  Not justified ')
        self.assertEqual(unmask_request.status, UnmaskStatus.DENIED)
        self.assertEqual(unmask_request.decision_reason, 'Not justified')
        self.assertIsNone(unmask_request.expires_at)
        with self.assertRaises(InvalidRequestState):
            self.workflow.approve(unmask_request, self.admin)


class UnmaskGrantTest(UnmaskWorkflowTestCase):

    def test_grant_covers_requested_fields_until_expiry(self):
        self.workflow.approve(self.open_request(fields=['nid_number', 'tin_number']), self.hr, 60)

        grants = self.workflow.active_grants(self.manager.id, self.officer)
        self.assertTrue(grants.covers(self.officer.pk, 'nid_number'))
        self.assertTrue(grants.covers(self.officer.pk, 'tin_number'))
        self.assertFalse(grants.covers(self.officer.pk, 'passport_number'))

        self.clock.advance(minutes=59)
        self.assertTrue(self.workflow.active_grants(self.manager.id, self.officer))

        self.clock.advance(minutes=1)
        self.assertFalse(self.workflow.active_grants(self.manager.id, self.officer))

    def test_grant_is_per_requester_and_subject(self):
        self.workflow.approve(self.open_request(), self.hr, 60)
        other_user = create_user_with_role(Role.USER)
        self.assertFalse(self.workflow.active_grants(other_user.pk, self.officer))
        self.assertFalse(self.workflow.active_grants(self.manager.id, create_officer()))

    def test_pending_and_denied_grant_nothing(self):
        self.open_request()
        self.workflow.deny(self.open_request(fields=['tin_number']), self.hr)
        self.assertFalse(self.workflow.active_grants(self.manager.id, self.officer))


class UnmaskExpiryTest(UnmaskWorkflowTestCase):

    def test_expire_only_after_window(self):
        unmask_request = self.workflow.approve(self.open_request(), self.hr, 30)
        self.assertFalse(self.workflow.expire(unmask_request))

        self.clock.advance(minutes=30)
        self.assertTrue(self.workflow.expire(unmask_request))
        self.assertEqual(unmask_request.status, UnmaskStatus.EXPIRED)

    def test_sweep(self):
        short = self.workflow.approve(self.open_request(), self.hr, 10)
        long = self.workflow.approve(self.open_request(fields=['tin_number']), self.hr, 120)
        pending = self.open_request(fields=['passport_number'])

        self.clock.advance(minutes=11)
        self.assertEqual(self.workflow.sweep(), 1)

        statuses = dict(UnmaskRequest.objects.values_list('pk', 'status'))
        self.assertEqual(statuses[short.pk], UnmaskStatus.EXPIRED)
        self.assertEqual(statuses[long.pk], UnmaskStatus.APPROVED)
        self.assertEqual(statuses[pending.pk], UnmaskStatus.PENDING)

    def test_expire_command(self):
        unmask_request = UnmaskRequestWorkflow().approve(self.open_request(), self.hr, 0)
        out = StringIO()
        call_command('expire_unmask_requests', stdout=out)
        self.assertIn('Expired 1', out.getvalue())
        unmask_request.refresh_from_db()
        self.assertEqual(unmask_request.status, UnmaskStatus.EXPIRED)

    def test_requests_cannot_be_deleted(self):
        unmask_request = self.open_request()
        with self.assertRaises(DjangoPermissionDenied):
            unmask_request.delete()
        self.assertTrue(UnmaskRequest.objects.filter(pk=unmask_request.pk).exists())


class ConcurrentDecisionTest(TransactionTestCase):
    """Two approvers deciding the same pending request from separate connections."""

    def setUp(self):
        self.officer = create_officer()
        manager = CallerContext.from_user(create_user_with_role(Role.MANAGER))
        self.approvers = [
            CallerContext.from_user(create_user_with_role(Role.HR)),
            CallerContext.from_user(create_user_with_role(Role.ADMIN)),
        ]
        self.unmask_request = UnmaskRequestWorkflow().create(
            manager, self.officer, ['nid_number'], 'Service record audit'
        )

    def decide(self, approver, barrier, outcomes):
        workflow = UnmaskRequestWorkflow()
        stale_copy = UnmaskRequest.objects.get(pk=self.unmask_request.pk)
        try:
            barrier.wait()
            for _ in range(50):
                try:
                    workflow.approve(stale_copy, approver)
                    outcomes.append('approved')
                    return
                except InvalidRequestState:
                    outcomes.append('rejected')
                    return
                except OperationalError:
                    # sqlite shared-cache table lock; retry unless this approver already won
                    if UnmaskRequest.objects.filter(
                        pk=stale_copy.pk, decided_by_id=approver.id
                    ).exists():
                        outcomes.append('approved')
                        return
                    time.sleep(0.01)
            outcomes.append('timeout')
        finally:
            connection.close()

    def test_exactly_one_approval_wins(self):
        barrier = threading.Barrier(len(self.approvers), timeout=10)
        outcomes = []
        threads = [
            threading.Thread(target=self.decide, args=(approver, barrier, outcomes))
            for approver in self.approvers
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        self.assertEqual(sorted(outcomes), ['approved', 'rejected'])
        self.unmask_request.refresh_from_db()
        self.assertEqual(self.unmask_request.status, UnmaskStatus.APPROVED)
        self.assertIn(
            self.unmask_request.decided_by_id, [approver.id for approver in self.approvers]
        )
