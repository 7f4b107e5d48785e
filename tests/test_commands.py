"""
Tests for the seed management commands
"""
from io import StringIO
import pytest

from django.core.management import call_command

from panchayat_tax.models import PanchayatSettings, Property, TaxRecord


@pytest.mark.django_db
class TestSeedCommands:

    def test_seed_settings_once(self):
        call_command('seed_panchayat_settings', stdout=StringIO())
        out = StringIO()

        call_command('seed_panchayat_settings', stdout=out)

        assert PanchayatSettings.objects.count() == 1
        assert 'already exist' in out.getvalue()

    def test_seed_properties(self):
        call_command('seed_properties', count=3, year=2025, seed=7, stdout=StringIO())

        assert Property.objects.count() == 3
        for tax in TaxRecord.objects.all():
            assert tax.assessment_year == 2025
            assert tax.amount_paid <= tax.assessed_amount

    def test_seed_properties_is_repeatable(self):
        call_command('seed_properties', count=2, year=2025, seed=1, stdout=StringIO())
        call_command('seed_properties', count=2, year=2025, seed=1, stdout=StringIO())

        assert Property.objects.count() == 2
