"""
Unit Tests for the Bill Service
Tests for: authorization, not-found ordering, storage, Bill rows, payment marking, signed links
"""
from datetime import date
from pathlib import Path
from decimal import Decimal
from unittest.mock import patch
import re
import time
import pytest

from django.core.signing import BadSignature, SignatureExpired

from panchayat_tax.billing import (
    PaymentInfo,
    download_signer,
    generate_bill,
    record_payment,
    resolve_download_token,
)
from panchayat_tax.exceptions import (
    InternalError, InvalidArgument, NotFound, PermissionDenied, RateLimited, Unauthenticated,
)
from panchayat_tax.models import AuditLog, Bill, TaxRecord


BILL_ID_RE = re.compile(r'^LONI-\d{4}-[A-Z0-9]{8}$')


def stored_files(storage):
    return list(Path(storage.location).rglob('*.pdf'))


@pytest.mark.django_db
class TestGenerateBill:

    def test_generates_and_records_bill(self, billing_context, admin_user, sample_property, bill_storage):
        result = generate_bill(billing_context, admin_user, 'LONI-001', 2025,
                               ['Property Tax', 'Water Tax'], 'en')

        bill = result.bill
        assert BILL_ID_RE.match(bill.bill_id)
        assert bill.storage_path == f'bills/2025/{bill.bill_id}.pdf'
        assert bill_storage.exists(bill.storage_path)
        assert bill.total_amount == Decimal('1700')
        assert bill.amount_paid == Decimal('0')
        assert bill.status == TaxRecord.UNPAID
        assert bill.generated_by == admin_user
        assert len(bill.tax_breakdown) == 2
        assert (bill.due_date - bill.generated_at.date()).days in (29, 30, 31)
        assert result.download_url.startswith('http://testserver/bills/download/')
        assert result.as_dict() == {'success': True, 'billId': bill.bill_id, 'downloadUrl': result.download_url}
        assert AuditLog.objects.filter(action='generate', object_id=bill.bill_id).exists()

    def test_paid_bill_marks_records_paid(self, billing_context, admin_user, sample_property):
        payment = PaymentInfo(is_paid=True, payment_method='Cash', receipt_number='RCPT-77')

        result = generate_bill(billing_context, admin_user, 'LONI-001', 2025,
                               ['Property Tax', 'Water Tax'], 'bilingual', payment)

        assert result.bill.status == TaxRecord.PAID
        taxes = sample_property.taxes.filter(assessment_year=2025)
        assert all(t.payment_status == TaxRecord.PAID for t in taxes)
        assert sum(t.amount_paid for t in taxes) == Decimal('1700')
        assert {t.receipt_number for t in taxes} == {'RCPT-77'}

    def test_fully_paid_records_give_paid_bill(self, billing_context, admin_user, make_property):
        make_property('LONI-009', taxes=[
            ('Property Tax', 2025, '1200', '1200', date(2025, 5, 1)),
            ('Water Tax', 2025, '500', '500', date(2025, 5, 1)),
        ])

        bill = generate_bill(billing_context, admin_user, 'LONI-009', 2025,
                             ['Property Tax', 'Water Tax'], 'en').bill

        assert bill.total_amount == Decimal('1700')
        assert bill.amount_paid == Decimal('1700')
        assert bill.status == TaxRecord.PAID

    def test_super_admin_may_generate(self, billing_context, super_admin, sample_property):
        result = generate_bill(billing_context, super_admin, 'LONI-001', 2025, ['Property Tax'], 'hi')

        assert result.bill.language == 'hi'

    def test_unknown_property_writes_nothing(self, billing_context, admin_user, bill_storage, db):
        with pytest.raises(NotFound):
            generate_bill(billing_context, admin_user, 'LONI-404', 2025, ['Property Tax'], 'en')

        assert stored_files(bill_storage) == []
        assert not Bill.objects.exists()

    def test_no_matching_records(self, billing_context, admin_user, sample_property, bill_storage):
        with pytest.raises(NotFound):
            generate_bill(billing_context, admin_user, 'LONI-001', 2030, ['Property Tax'], 'en')

        assert stored_files(bill_storage) == []

    def test_unauthenticated(self, billing_context, sample_property):
        with pytest.raises(Unauthenticated):
            generate_bill(billing_context, None, 'LONI-001', 2025, ['Property Tax'], 'en')

    def test_viewer_denied_before_lookup(self, billing_context, viewer):
        # the property does not exist; permission is checked first
        with pytest.raises(PermissionDenied):
            generate_bill(billing_context, viewer, 'LONI-404', 2025, ['Property Tax'], 'en')

    @pytest.mark.parametrize('year, tax_types, language', [
        ('abc', ['Property Tax'], 'en'),
        (2025, [], 'en'),
        (2025, 'Property Tax', 'en'),
        (2025, ['Road Tax'], 'en'),
        (2025, [['Property Tax']], 'en'),
        (2025, {'Property Tax': 1}, 'en'),
        (2025, ['Property Tax'], 'fr'),
    ])
    def test_invalid_arguments(self, billing_context, admin_user, sample_property, year, tax_types, language):
        with pytest.raises(InvalidArgument):
            generate_bill(billing_context, admin_user, 'LONI-001', year, tax_types, language)

    def test_render_failure_is_internal(self, billing_context, admin_user, sample_property):
        with patch('panchayat_tax.billing.render_bill', side_effect=RuntimeError('disk full')):
            with pytest.raises(InternalError) as exc:
                generate_bill(billing_context, admin_user, 'LONI-001', 2025, ['Property Tax'], 'en')

        assert 'disk full' not in exc.value.message
        assert not Bill.objects.exists()

    def test_missing_settings_is_internal(self, billing_context, admin_user, sample_property):
        billing_context.settings = None

        with pytest.raises(InternalError):
            generate_bill(billing_context, admin_user, 'LONI-001', 2025, ['Property Tax'], 'en')

    def test_rate_limited(self, settings, billing_context, admin_user, sample_property):
        settings.PANCHAYAT_TAX = {'BILL_RATE_LIMIT': 1}
        generate_bill(billing_context, admin_user, 'LONI-001', 2025, ['Property Tax'], 'en')

        with pytest.raises(RateLimited):
            generate_bill(billing_context, admin_user, 'LONI-001', 2025, ['Property Tax'], 'en')


@pytest.mark.django_db
class TestDownloadLinks:

    def test_token_resolves_to_bill(self, billing_context, admin_user, sample_property):
        result = generate_bill(billing_context, admin_user, 'LONI-001', 2025, ['Property Tax'], 'en')
        token = result.download_url.rstrip('/').rsplit('/', 1)[-1]

        assert resolve_download_token(token) == result.bill

    def test_expired_after_fifteen_minutes(self, billing_context, admin_user, sample_property):
        bill = generate_bill(billing_context, admin_user, 'LONI-001', 2025, ['Property Tax'], 'en').bill
        issued = time.time() - 16 * 60
        with patch('django.core.signing.time.time', return_value=issued):
            token = download_signer().sign(bill.bill_id)

        with pytest.raises(SignatureExpired):
            resolve_download_token(token)

    def test_tampered_token(self, db):
        with pytest.raises(BadSignature):
            resolve_download_token('LONI-2025-ABCDEF12:xxxx:yyyy')


@pytest.mark.django_db
class TestRecordPayment:

    def test_partial_then_full(self, admin_user, sample_property):
        tax = sample_property.taxes.get(tax_type='Property Tax')

        record_payment(admin_user, tax, Decimal('600'), date(2025, 7, 1), 'RCPT-1')
        assert tax.payment_status == TaxRecord.PARTIAL

        record_payment(admin_user, tax, Decimal('600'), date(2025, 8, 1))
        tax.refresh_from_db()
        assert tax.payment_status == TaxRecord.PAID
        assert tax.amount_paid == Decimal('1200')
        assert tax.receipt_number == 'RCPT-1'
        assert AuditLog.objects.filter(action='payment').count() == 2

    def test_viewer_cannot_record(self, viewer, sample_property):
        tax = sample_property.taxes.first()

        with pytest.raises(PermissionDenied):
            record_payment(viewer, tax, Decimal('10'), date(2025, 7, 1))

    def test_amount_must_be_positive(self, admin_user, sample_property):
        tax = sample_property.taxes.first()

        with pytest.raises(InvalidArgument):
            record_payment(admin_user, tax, Decimal('0'), date(2025, 7, 1))
