"""
Management command to flip past-due pending payments to overdue.
The background scheduler runs the same sweep daily; use this when the
scheduler is disabled.

Usage:
    python manage.py update_overdue_payments

Can be added to crontab:
    5 0 * * * cd /path/to/project && python manage.py update_overdue_payments
"""

from django.core.management.base import BaseCommand
from payments.services import BillingService


class Command(BaseCommand):
    help = 'Mark pending payments whose due date has passed as overdue'

    def handle(self, *args, **options):
        result = BillingService().update_overdue_payments()

        self.stdout.write(f"Matched: {result['matched']}")
        self.stdout.write(f"Updated: {result['updated']}")
        if result['failed']:
            self.stdout.write(self.style.ERROR(f"Failed:  {result['failed']}"))
        else:
            self.stdout.write(self.style.SUCCESS("Overdue sweep complete"))
