from types import SimpleNamespace

from django.test import SimpleTestCase

from core.privacy.constants import FieldType, VisibilityLevel
from core.privacy.policy import FIELD_CATALOG, OVERRIDE_COLUMNS, VisibilityPolicy


def subject(**overrides):
    values = {column: None for column in OVERRIDE_COLUMNS}
    values.update(overrides)
    return SimpleNamespace(pk=7, **values)


class VisibilityPolicyTest(SimpleTestCase):

    def setUp(self):
        self.policy = VisibilityPolicy()

    def test_baseline_levels(self):
        s = subject()
        self.assertEqual(self.policy.level_for(s, 'full_name'), VisibilityLevel.PUBLIC)
        self.assertEqual(self.policy.level_for(s, 'personal_mobile'), VisibilityLevel.INTERNAL)
        self.assertEqual(self.policy.level_for(s, 'nid_number'), VisibilityLevel.RESTRICTED)
        self.assertEqual(self.policy.level_for(s, 'basic_salary'), VisibilityLevel.RESTRICTED)

    def test_override_replaces_baseline_for_its_fields(self):
        s = subject(phone_visibility='restricted', nid_visibility='public')
        self.assertEqual(self.policy.level_for(s, 'personal_mobile'), VisibilityLevel.RESTRICTED)
        self.assertEqual(self.policy.level_for(s, 'official_mobile'), VisibilityLevel.RESTRICTED)
        self.assertEqual(self.policy.level_for(s, 'tin_number'), VisibilityLevel.PUBLIC)
        self.assertEqual(self.policy.level_for(s, 'personal_email'), VisibilityLevel.INTERNAL)

    def test_empty_override_falls_back_to_baseline(self):
        s = subject(email_visibility='')
        self.assertEqual(self.policy.level_for(s, 'official_email'), VisibilityLevel.INTERNAL)

    def test_unrecognised_override_is_restricted(self):
        s = subject(phone_visibility='private', dob_visibility='PUBLIC')
        with self.assertLogs('core.privacy.policy', level='WARNING'):
            self.assertEqual(self.policy.level_for(s, 'personal_mobile'), VisibilityLevel.RESTRICTED)
        self.assertEqual(self.policy.level_for(s, 'date_of_birth'), VisibilityLevel.RESTRICTED)

    def test_unknown_field_is_restricted(self):
        self.assertEqual(self.policy.level_for(subject(), 'shoe_size'), VisibilityLevel.RESTRICTED)
        self.assertFalse(self.policy.is_known('shoe_size'))
        self.assertEqual(self.policy.field_type('shoe_size'), FieldType.TEXT)

    def test_every_override_column_governs_catalogued_fields(self):
        for fields in OVERRIDE_COLUMNS.values():
            for name in fields:
                self.assertIn(name, FIELD_CATALOG)

    def test_levels_for(self):
        levels = self.policy.levels_for(subject(), ['full_name', 'nid_number'])
        self.assertEqual(levels, {
            'full_name': VisibilityLevel.PUBLIC,
            'nid_number': VisibilityLevel.RESTRICTED,
        })
        self.assertEqual(len(self.policy.levels_for(subject())), len(FIELD_CATALOG))
