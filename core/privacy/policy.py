"""
Visibility policy: which level a subject's field carries.

The baseline table below is the compiled-in default. A subject may
override the level for a group of fields through one of the override
columns (phone_visibility, email_visibility, ...). Anything the policy
cannot interpret resolves to RESTRICTED.
"""
import logging
from typing import NamedTuple

from .constants import FieldType, VisibilityLevel

logger = logging.getLogger(__name__)


class FieldSpec(NamedTuple):
    field_type: FieldType
    baseline: VisibilityLevel


_PUBLIC = VisibilityLevel.PUBLIC
_INTERNAL = VisibilityLevel.INTERNAL
_RESTRICTED = VisibilityLevel.RESTRICTED

FIELD_CATALOG = {
    # Directory identity
    'full_name': FieldSpec(FieldType.TEXT, _PUBLIC),
    'name_bangla': FieldSpec(FieldType.TEXT, _PUBLIC),
    'employee_id': FieldSpec(FieldType.TEXT, _PUBLIC),
    'designation': FieldSpec(FieldType.TEXT, _PUBLIC),
    'office': FieldSpec(FieldType.TEXT, _PUBLIC),
    'department': FieldSpec(FieldType.TEXT, _PUBLIC),
    'employment_status': FieldSpec(FieldType.TEXT, _PUBLIC),
    'joining_date': FieldSpec(FieldType.DATE, _PUBLIC),
    'photo_url': FieldSpec(FieldType.TEXT, _PUBLIC),

    # Contact
    'personal_mobile': FieldSpec(FieldType.MOBILE, _INTERNAL),
    'official_mobile': FieldSpec(FieldType.MOBILE, _INTERNAL),
    'personal_email': FieldSpec(FieldType.EMAIL, _INTERNAL),
    'official_email': FieldSpec(FieldType.EMAIL, _INTERNAL),

    # Identity documents
    'nid_number': FieldSpec(FieldType.IDENTIFIER, _RESTRICTED),
    'passport_number': FieldSpec(FieldType.IDENTIFIER, _RESTRICTED),
    'tin_number': FieldSpec(FieldType.IDENTIFIER, _RESTRICTED),

    # Personal
    'date_of_birth': FieldSpec(FieldType.DATE, _RESTRICTED),
    'father_name': FieldSpec(FieldType.TEXT, _RESTRICTED),
    'mother_name': FieldSpec(FieldType.TEXT, _RESTRICTED),
    'blood_group': FieldSpec(FieldType.TEXT, _RESTRICTED),
    'religion': FieldSpec(FieldType.TEXT, _RESTRICTED),
    'marital_status': FieldSpec(FieldType.TEXT, _RESTRICTED),
    'present_address': FieldSpec(FieldType.TEXT, _RESTRICTED),
    'permanent_address': FieldSpec(FieldType.TEXT, _RESTRICTED),
    'emergency_contact_name': FieldSpec(FieldType.TEXT, _RESTRICTED),
    'emergency_contact_phone': FieldSpec(FieldType.MOBILE, _RESTRICTED),

    # Financial
    'current_grade': FieldSpec(FieldType.FINANCIAL, _RESTRICTED),
    'basic_salary': FieldSpec(FieldType.FINANCIAL, _RESTRICTED),
    'bank_account_number': FieldSpec(FieldType.IDENTIFIER, _RESTRICTED),
}

# override column -> fields it governs
OVERRIDE_COLUMNS = {
    'phone_visibility': ('personal_mobile', 'official_mobile'),
    'email_visibility': ('personal_email', 'official_email'),
    'nid_visibility': ('nid_number', 'passport_number', 'tin_number'),
    'dob_visibility': ('date_of_birth',),
    'salary_visibility': ('basic_salary', 'current_grade'),
}

class VisibilityPolicy:
    """Resolves the visibility level of a subject's field."""

    def __init__(self, catalog=None, override_columns=None):
        self.catalog = catalog if catalog is not None else FIELD_CATALOG
        columns = override_columns if override_columns is not None else OVERRIDE_COLUMNS
        self.field_override_column = {
            field_name: column
            for column, field_names in columns.items()
            for field_name in field_names
        }

    def level_for(self, subject, field) -> VisibilityLevel:
        """
        Level of `field` on `subject`.

        Order: a valid value in the field's override column, then the
        baseline. Unknown fields and unrecognised override values
        (including the legacy 'private') resolve to RESTRICTED.
        """
        spec = self.catalog.get(field)
        if spec is None:
            return VisibilityLevel.RESTRICTED

        column = self.field_override_column.get(field)
        if column is not None:
            override = getattr(subject, column, None)
            if override not in (None, ''):
                if override in VisibilityLevel.values:
                    return VisibilityLevel(override)
                logger.warning(
                    f"Unrecognised visibility '{override}' in {column} of subject "
                    f"{getattr(subject, 'pk', None)}; treating {field} as restricted"
                )
                return VisibilityLevel.RESTRICTED

        return spec.baseline

    def levels_for(self, subject, fields=None) -> dict:
        """Level of every field (or of `fields`) on `subject`."""
        return {name: self.level_for(subject, name) for name in (fields or self.known_fields())}

    def field_type(self, field) -> FieldType:
        spec = self.catalog.get(field)
        return spec.field_type if spec is not None else FieldType.TEXT

    def is_known(self, field) -> bool:
        return field in self.catalog

    def known_fields(self):
        return list(self.catalog)

    def fields_at_baseline(self, level):
        """Fields whose compiled-in level is `level`, ignoring overrides."""
        return [name for name, spec in self.catalog.items() if spec.baseline == level]
