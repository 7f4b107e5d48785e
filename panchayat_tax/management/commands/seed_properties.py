from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from datetime import date, timedelta
from decimal import Decimal
import random

from panchayat_tax.aggregation import derive_payment_status
from panchayat_tax.calculator import RURAL, SEMI_URBAN, URBAN, calculate_comprehensive_tax
from panchayat_tax.models import Property, TaxRecord


OWNERS = [
    ("Ramesh Kumar", "Suresh Kumar"), ("Sunita Devi", "Mahesh Chand"),
    ("Mohd. Irfan", "Mohd. Salim"), ("Anita Sharma", "Rakesh Sharma"),
    ("Vijay Singh", "Baldev Singh"), ("Pooja Gupta", "Anil Gupta"),
    ("Rajendra Prasad", "Shyam Lal"), ("Kavita Yadav", "Ram Pal Yadav"),
]

STREETS = [
    "Main Bazaar, Loni", "Indrapuri, Loni", "Ashok Vihar, Loni",
    "Banthla Road, Loni", "Behta Hajipur, Loni", "Nithora Road, Loni",
]


class Command(BaseCommand):
    help = "Seed demo properties with assessed taxes for Loni Gram Panchayat"

    def add_arguments(self, parser):
        parser.add_argument('--count', type=int, default=25)
        parser.add_argument('--year', type=int, default=timezone.now().year)
        parser.add_argument('--seed', type=int, default=None, help='Random seed for repeatable data')

    @transaction.atomic
    def handle(self, *args, **options):
        rng = random.Random(options['seed'])
        year = options['year']
        created = 0

        for i in range(1, options['count'] + 1):
            property_id = f"LONI-{year}-{i:04d}"
            if Property.objects.filter(property_id=property_id).exists():
                continue

            owner, father = rng.choice(OWNERS)
            property_type = rng.choice([c for c, _ in Property.PROPERTY_TYPE_CHOICES])
            if property_type == Property.AGRICULTURAL:
                area = Decimal(rng.randint(1, 12))
            else:
                area = Decimal(rng.randint(300, 4000))

            prop = Property.objects.create(
                property_id=property_id,
                owner_name=owner,
                father_name=father,
                mobile_number=f"{rng.choice('6789')}{rng.randint(0, 999999999):09d}",
                house_no=str(rng.randint(1, 400)),
                address=rng.choice(STREETS),
                property_type=property_type,
                area=area,
            )

            calculation = calculate_comprehensive_tax(
                property_type, rng.choice([URBAN, SEMI_URBAN, RURAL]), area,
                assessment_date=date(year, 4, 1), assessment_year=year,
            )
            for line in calculation['breakdown']:
                assessed = line['amount']
                paid = rng.choice([Decimal('0'), assessed, (assessed / 2).quantize(Decimal('0.01'))])
                TaxRecord.objects.create(
                    parcel=prop,
                    tax_type=line['name'],
                    assessment_year=year,
                    base_amount=assessed,
                    assessed_amount=assessed,
                    amount_paid=paid,
                    payment_status=derive_payment_status(assessed, paid),
                    payment_date=date(year, 4, 1) + timedelta(days=rng.randint(0, 300)) if paid else None,
                    receipt_number=f"RCPT-{year}-{rng.randint(10000, 99999)}" if paid else None,
                )

            created += 1
            self.stdout.write(self.style.SUCCESS(f"✅ Property {property_id} created"))

        self.stdout.write(self.style.SUCCESS(f"🎯 Done! {created} Loni properties seeded successfully"))
