import io
import os
import tempfile

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from openpyxl import load_workbook

from core.base.test_utils import create_user_with_role
from core.privacy.audit import AuditLogger, InMemoryAuditStore
from core.privacy.constants import VisibilityLevel
from core.privacy.dtos import CallerContext
from core.privacy.models import FieldAccessLog
from core.privacy.services import FieldSecurityService
from core.user_accounts.models import Role
from HR.officers.dtos import OfficerVisibilityUpdateDTO
from HR.officers.models import Officer
from HR.officers.services import OfficerExportService, OfficerService
from HR.officers.services.officer_service import SUMMARY_FIELDS
from HR.officers.tests.utils import create_officer


class OfficerServiceTest(TestCase):

    def setUp(self):
        self.hr = create_user_with_role(Role.HR)
        self.officer = create_officer()
        self.store = InMemoryAuditStore()
        self.service = FieldSecurityService(audit_logger=AuditLogger(self.store))

    def test_summary_fields_exclude_restricted_baseline(self):
        self.assertIn('official_mobile', SUMMARY_FIELDS)
        self.assertIn('full_name', SUMMARY_FIELDS)
        self.assertNotIn('nid_number', SUMMARY_FIELDS)
        self.assertNotIn('basic_salary', SUMMARY_FIELDS)

    def test_list_directory_writes_no_audit(self):
        caller = CallerContext(id=self.hr.pk, role=Role.HR)
        rows = OfficerService.list_directory(caller, Officer.objects.all(), service=self.service)
        self.assertEqual(rows[0]['id'], self.officer.pk)
        self.assertEqual(self.store.entries, [])

    def test_get_detail_uses_given_service(self):
        caller = CallerContext(id=self.hr.pk, role=Role.HR)
        detail = OfficerService.get_detail(caller, self.officer, service=self.service)
        self.assertEqual(detail['officer']['nid_number'], self.officer.nid_number)
        self.assertTrue(self.store.entries)
        self.assertFalse(FieldAccessLog.objects.exists())

    def test_update_visibility(self):
        dto = OfficerVisibilityUpdateDTO(
            officer_id=self.officer.pk,
            overrides={'salary_visibility': VisibilityLevel.INTERNAL, 'dob_visibility': None}
        )
        officer = OfficerService.update_visibility(self.hr, dto)
        self.assertEqual(officer.salary_visibility, VisibilityLevel.INTERNAL)
        self.assertIsNone(officer.dob_visibility)
        self.assertEqual(officer.updated_by, self.hr)

    def test_update_visibility_rejects_unknown_level(self):
        dto = OfficerVisibilityUpdateDTO(
            officer_id=self.officer.pk,
            overrides={'nid_visibility': 'private'}
        )
        with self.assertRaises(DjangoValidationError):
            OfficerService.update_visibility(self.hr, dto)
        self.officer.refresh_from_db()
        self.assertIsNone(self.officer.nid_visibility)

    def test_dto_rejects_unknown_column(self):
        with self.assertRaises(ValueError):
            OfficerVisibilityUpdateDTO(officer_id=1, overrides={'full_name': 'public'})


class OfficerExportTest(TestCase):

    def setUp(self):
        self.manager = create_user_with_role(Role.MANAGER)
        self.user = create_user_with_role(Role.USER)
        create_officer(full_name='Alpha Officer')
        create_officer(full_name='Beta Officer', department='Health')
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def test_workbook_has_one_row_per_officer(self):
        store = InMemoryAuditStore()
        exporter = OfficerExportService(FieldSecurityService(audit_logger=AuditLogger(store)))
        caller = CallerContext(id=self.manager.pk, role=Role.MANAGER)

        wb = exporter.build_workbook(Officer.objects.all(), caller)
        ws = wb.active
        self.assertEqual(ws.max_row, 3)
        self.assertEqual(ws.max_column, len(exporter.columns()))
        self.assertTrue(store.entries)
        self.assertEqual({entry.access_type for entry in store.entries}, {'export'})

    def test_export_command(self):
        path = os.path.join(self.tmpdir.name, 'officers.xlsx')
        call_command('export_officers', '--as', self.manager.email, '--output', path,
                     '--department', 'Health', stdout=io.StringIO())

        ws = load_workbook(path).active
        self.assertEqual(ws.max_row, 2)
        self.assertEqual(ws.cell(row=2, column=2).value, 'Beta Officer')

        logs = FieldAccessLog.objects.filter(accessor=self.manager)
        self.assertTrue(logs.exists())
        self.assertTrue(all(log.request_id.startswith('export_officers-') for log in logs))

    def test_export_command_rejects_role(self):
        with self.assertRaises(CommandError):
            call_command('export_officers', '--as', self.user.email)

    def test_export_command_unknown_account(self):
        with self.assertRaises(CommandError):
            call_command('export_officers', '--as', 'nobody@directory.test')
