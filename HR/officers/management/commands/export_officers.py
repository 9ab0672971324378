"""
Export the officer directory to an xlsx file, rendered as one account sees it.

Each restricted field written to the file is recorded in the access log
under that account, with access_type=export.

Usage:
    python manage.py export_officers --as hr@example.gov --output officers.xlsx
    python manage.py export_officers --as manager@example.gov --department Finance
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from core.privacy.dtos import CallerContext, RequestMeta
from core.user_accounts.models import Role
from HR.officers.services import OfficerExportService, OfficerService

EXPORT_ROLES = (Role.ADMIN, Role.HR, Role.MANAGER)


class Command(BaseCommand):
    help = 'Export officers to an Excel file with field-level masking applied'

    def add_arguments(self, parser):
        parser.add_argument(
            '--as',
            dest='email',
            required=True,
            help='Email of the account the export is rendered (and audited) for'
        )
        parser.add_argument(
            '--output',
            help='Target .xlsx path (default: officers_<timestamp>.xlsx)'
        )
        parser.add_argument('--department', help='Only officers in this department')
        parser.add_argument('--office', help='Only officers in this office')

    def handle(self, *args, **options):
        User = get_user_model()
        try:
            user = User.objects.get(email__iexact=options['email'], is_active=True)
        except User.DoesNotExist:
            raise CommandError(f"No active account with email {options['email']}")

        if user.role not in EXPORT_ROLES:
            raise CommandError(
                f"Role '{user.role}' cannot export; requires one of: {', '.join(EXPORT_ROLES)}"
            )

        filters = {
            key: options[key] for key in ('department', 'office') if options.get(key)
        }
        officers = OfficerService.directory_queryset(filters)

        output = options.get('output') or f"officers_{timezone.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
        OfficerExportService().export_to_path(
            officers,
            CallerContext.from_user(user),
            output,
            RequestMeta.for_job('export_officers'),
        )

        self.stdout.write(self.style.SUCCESS(
            f'Exported {officers.count()} officer(s) for {user.email} to {output}'
        ))
