from django.db import models

from core.base import AuditMixin, SoftDeleteMixin
from core.base.managers import SoftDeleteManager, SoftDeleteQuerySet
from core.privacy.constants import VisibilityLevel


class EmploymentStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    ON_LEAVE = 'on_leave', 'On Leave'
    SUSPENDED = 'suspended', 'Suspended'
    RETIRED = 'retired', 'Retired'
    TERMINATED = 'terminated', 'Terminated'
    RESIGNED = 'resigned', 'Resigned'


class OfficerQuerySet(SoftDeleteQuerySet):
    search_fields = ('full_name', 'name_bangla', 'employee_id', 'designation', 'office')

    def filter_by_query_params(self, query_params):
        """Directory filters: search, department, office, designation, employment_status."""
        queryset = self.filter_by_search_params(query_params)

        for param in ('department', 'office', 'designation'):
            value = query_params.get(param)
            if value:
                queryset = queryset.filter(**{f'{param}__iexact': value})

        employment_status = query_params.get('employment_status')
        if employment_status:
            queryset = queryset.filter(employment_status=employment_status)

        return queryset


class OfficerManager(SoftDeleteManager.from_queryset(OfficerQuerySet)):
    pass


def _visibility_column(help_text):
    return models.CharField(
        max_length=16,
        choices=VisibilityLevel.choices,
        null=True,
        blank=True,
        help_text=help_text
    )


class Officer(AuditMixin, SoftDeleteMixin, models.Model):
    """
    Personnel record in the officer directory.

    Which of these fields a caller sees in full, masked or not at all is
    decided by core.privacy; views must never serialize an Officer directly.

    The *_visibility columns override the baseline level of a field group
    for this officer. NULL means "use the baseline".
    """
    # Directory identity
    full_name = models.CharField(max_length=255)
    name_bangla = models.CharField(max_length=255, blank=True, default='')
    employee_id = models.CharField(max_length=50, unique=True, null=True, blank=True)
    designation = models.CharField(max_length=150, blank=True, default='')
    office = models.CharField(max_length=150, blank=True, default='')
    department = models.CharField(max_length=150, blank=True, default='')
    employment_status = models.CharField(
        max_length=16,
        choices=EmploymentStatus.choices,
        default=EmploymentStatus.ACTIVE
    )
    joining_date = models.DateField(null=True, blank=True)
    photo_url = models.CharField(max_length=500, blank=True, default='')

    # Contact
    personal_mobile = models.CharField(max_length=20, blank=True, default='')
    official_mobile = models.CharField(max_length=20, blank=True, default='')
    personal_email = models.EmailField(blank=True, default='')
    official_email = models.EmailField(blank=True, default='')

    # Identity documents
    nid_number = models.CharField(max_length=32, unique=True, null=True, blank=True)
    passport_number = models.CharField(max_length=32, blank=True, default='')
    tin_number = models.CharField(max_length=32, blank=True, default='')

    # Personal
    date_of_birth = models.DateField(null=True, blank=True)
    father_name = models.CharField(max_length=255, blank=True, default='')
    mother_name = models.CharField(max_length=255, blank=True, default='')
    blood_group = models.CharField(max_length=8, blank=True, default='')
    religion = models.CharField(max_length=50, blank=True, default='')
    marital_status = models.CharField(max_length=20, blank=True, default='')
    present_address = models.TextField(blank=True, default='')
    permanent_address = models.TextField(blank=True, default='')
    emergency_contact_name = models.CharField(max_length=255, blank=True, default='')
    emergency_contact_phone = models.CharField(max_length=20, blank=True, default='')

    # Financial
    current_grade = models.CharField(max_length=20, blank=True, default='')
    basic_salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    bank_account_number = models.CharField(max_length=34, blank=True, default='')

    # Visibility overrides
    phone_visibility = _visibility_column("Overrides personal_mobile and official_mobile")
    email_visibility = _visibility_column("Overrides personal_email and official_email")
    nid_visibility = _visibility_column("Overrides nid_number, passport_number and tin_number")
    dob_visibility = _visibility_column("Overrides date_of_birth")
    salary_visibility = _visibility_column("Overrides basic_salary and current_grade")

    notes = models.TextField(blank=True, default='')

    objects = OfficerManager()

    class Meta:
        db_table = 'officers'
        ordering = ['full_name', 'id']
        verbose_name = 'Officer'
        verbose_name_plural = 'Officers'
        indexes = [
            models.Index(fields=['department'], name='officers_department_idx'),
            models.Index(fields=['office'], name='officers_office_idx'),
            models.Index(fields=['employment_status'], name='officers_emp_status_idx'),
        ]

    def __str__(self):
        if self.employee_id:
            return f"{self.full_name} ({self.employee_id})"
        return self.full_name
