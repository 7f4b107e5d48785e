"""
Loni Panchayat Tax - Test Configuration and Fixtures
"""
from datetime import date
from decimal import Decimal
import pytest

from django.core.cache import cache
from django.core.files.storage import FileSystemStorage

from panchayat_tax.aggregation import derive_payment_status
from panchayat_tax.billing import BillingContext
from panchayat_tax.models import PanchayatSettings, Property, TaxRecord, User


@pytest.fixture(autouse=True)
def clear_cache():
    """Rate-limit counters live in the cache"""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / 'media')
    return tmp_path / 'media'


@pytest.fixture
def super_admin(db):
    return User.objects.create_user(
        username='sarpanch', email='sarpanch@loni.example.in', password='pass12345',
        role=User.ROLE_SUPER_ADMIN,
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username='secretary', email='secretary@loni.example.in', password='pass12345',
        role=User.ROLE_ADMIN,
    )


@pytest.fixture
def viewer(db):
    return User.objects.create_user(
        username='clerk', email='clerk@loni.example.in', password='pass12345',
        role=User.ROLE_VIEWER,
    )


@pytest.fixture
def panchayat(db):
    settings_row = PanchayatSettings(
        panchayat_name='Loni Gram Panchayat',
        district='Ghaziabad',
        state='Uttar Pradesh',
        pin_code='201102',
    )
    settings_row.save()
    return settings_row


@pytest.fixture
def make_property(db):
    """Create a property with (tax_type, year, assessed, paid) tax rows"""
    def _make(property_id='LONI-001', taxes=(), **fields):
        defaults = {
            'owner_name': 'Ramesh Kumar',
            'father_name': 'Suresh Kumar',
            'mobile_number': '9876543210',
            'house_no': '12',
            'address': 'Main Bazaar, Loni',
            'property_type': Property.RESIDENTIAL,
            'area': Decimal('1000'),
        }
        defaults.update(fields)
        prop = Property.objects.create(property_id=property_id, **defaults)
        for tax_type, year, assessed, paid, *rest in taxes:
            TaxRecord.objects.create(
                parcel=prop,
                tax_type=tax_type,
                assessment_year=year,
                assessed_amount=Decimal(assessed),
                amount_paid=Decimal(paid),
                payment_status=derive_payment_status(assessed, paid),
                payment_date=rest[0] if rest else None,
            )
        return prop
    return _make


@pytest.fixture
def sample_property(make_property):
    return make_property('LONI-001', taxes=[
        (TaxRecord.PROPERTY_TAX, 2025, '1200', '0'),
        (TaxRecord.WATER_TAX, 2025, '500', '0'),
        (TaxRecord.SANITATION_TAX, 2024, '300', '300', date(2024, 5, 10)),
    ])


@pytest.fixture
def bill_storage(tmp_path):
    return FileSystemStorage(location=str(tmp_path / 'bills'), base_url='/media/')


@pytest.fixture
def billing_context(bill_storage, panchayat):
    return BillingContext(storage=bill_storage, settings=panchayat, base_url='http://testserver/')
