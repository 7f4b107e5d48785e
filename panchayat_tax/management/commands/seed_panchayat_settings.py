from django.core.management.base import BaseCommand
from decimal import Decimal

from panchayat_tax.localization import LABELS
from panchayat_tax.models import PanchayatSettings


class Command(BaseCommand):
    help = "Create the Loni Gram Panchayat settings row if it does not exist"

    def add_arguments(self, parser):
        parser.add_argument('--force', action='store_true', help='Overwrite existing settings')

    def handle(self, *args, **options):
        existing = PanchayatSettings.load()
        if existing and not options['force']:
            self.stdout.write(self.style.WARNING(
                f"Settings already exist for {existing.panchayat_name}; use --force to overwrite"
            ))
            return

        PanchayatSettings(
            panchayat_name=LABELS['panchayatName']['en'],
            district='Ghaziabad',
            state='Uttar Pradesh',
            pin_code='201102',
            late_fee=Decimal('1.50'),
        ).save()

        self.stdout.write(self.style.SUCCESS("✅ Panchayat settings seeded"))
