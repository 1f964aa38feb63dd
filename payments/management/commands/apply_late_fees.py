"""
Management command to attach a flat late fee to overdue payments.

Usage:
    python manage.py apply_late_fees --amount 50
    python manage.py apply_late_fees          # uses BILLING_DEFAULT_LATE_FEE
"""

from decimal import Decimal, InvalidOperation
from django.core.management.base import BaseCommand, CommandError
from core.exceptions import ValidationError
from payments.services import BillingService


class Command(BaseCommand):
    help = 'Run the overdue sweep, then add a late fee to overdue payments that have none'

    def add_arguments(self, parser):
        parser.add_argument(
            '--amount',
            type=str,
            default=None,
            help='Late fee amount (defaults to BILLING_DEFAULT_LATE_FEE)',
        )

    def handle(self, *args, **options):
        amount = options['amount']
        if amount is not None:
            try:
                amount = Decimal(amount)
            except InvalidOperation:
                raise CommandError(f"Invalid amount: {amount}")

        try:
            result = BillingService().apply_late_fees(amount)
        except ValidationError as e:
            raise CommandError(e.message)

        sweep = result['overdue_sweep']
        self.stdout.write(f"Newly overdue: {sweep['updated']} (failed: {sweep['failed']})")
        self.stdout.write(self.style.SUCCESS(
            f"Late fee of {result['late_fee_amount']} applied to {result['late_fees_applied']} payment(s)"
        ))
