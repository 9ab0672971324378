"""
Mark lapsed unmask approvals as expired.

Grants already stop working the moment expires_at passes; this command
only brings the stored status in line. Run it periodically (cron).

Usage:
    python manage.py expire_unmask_requests
"""
from django.core.management.base import BaseCommand

from core.privacy.unmask import UnmaskRequestWorkflow


class Command(BaseCommand):
    help = 'Mark approved unmask requests whose window has closed as expired'

    def handle(self, *args, **options):
        count = UnmaskRequestWorkflow().sweep()
        self.stdout.write(self.style.SUCCESS(f'Expired {count} unmask request(s)'))
