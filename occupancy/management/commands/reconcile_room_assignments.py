"""
Management command to rebuild each tenant's room_number from active tenancies.

Usage:
    python manage.py reconcile_room_assignments --dry-run
    python manage.py reconcile_room_assignments
"""

from django.core.management.base import BaseCommand
from occupancy.services import OccupancyService


class Command(BaseCommand):
    help = "Repair tenant room pointers that disagree with the active tenancies"

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report mismatches without fixing them',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN MODE - No tenants will be changed\n"))

        result = OccupancyService().reconcile_tenant_pointers(dry_run=dry_run)

        for fix in result['fixed']:
            self.stdout.write(
                f"  {fix['tenant']} (#{fix['tenant_id']}): "
                f"{fix['old_room_number'] or '-'} -> {fix['new_room_number'] or '-'}"
            )

        self.stdout.write(f"\nTenants checked: {result['checked']}")
        if not result['fixed']:
            self.stdout.write(self.style.SUCCESS("All tenant room pointers are consistent"))
        elif dry_run:
            self.stdout.write(self.style.WARNING(f"{len(result['fixed'])} tenant(s) would be fixed"))
        else:
            self.stdout.write(self.style.SUCCESS(f"{len(result['fixed'])} tenant(s) fixed"))
