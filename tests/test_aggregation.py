"""
Unit Tests for Tax Aggregation
Tests for: totals, collection rate, breakdowns, status derivation, pending bills
"""
from decimal import Decimal
from types import SimpleNamespace
import pytest

from panchayat_tax.aggregation import (
    breakdown_by_property_type,
    breakdown_by_tax_type,
    collection_rate,
    dashboard_summary,
    derive_payment_status,
    pending_bills,
    report_summary,
    status_counts,
    total_assessed,
    total_due,
    total_paid,
)


def record(tax_type='Property Tax', assessed='0', paid='0', status='Unpaid'):
    return SimpleNamespace(
        tax_type=tax_type,
        assessed_amount=Decimal(assessed),
        amount_paid=Decimal(paid),
        payment_status=status,
        assessment_year=2025,
        receipt_number=None,
    )


def prop(property_id, property_type='Residential', taxes=()):
    return SimpleNamespace(
        property_id=property_id,
        owner_name='Owner',
        mobile_number='',
        address='Loni',
        house_no='1',
        property_type=property_type,
        taxes=list(taxes),
    )


class TestTotals:
    """Test assessed, paid and due totals"""

    def test_due_is_assessed_minus_paid(self):
        records = [
            record(assessed='1200.10', paid='200.05'),
            record(assessed='0.20', paid='0.10'),
            record(assessed='99.99', paid='0'),
        ]

        assert total_assessed(records) == Decimal('1300.29')
        assert total_paid(records) == Decimal('200.15')
        assert total_due(records) == total_assessed(records) - total_paid(records)

    def test_overpayment_gives_negative_due(self):
        records = [record(assessed='100', paid='150', status='Paid')]

        assert total_due(records) == Decimal('-50')

    def test_empty_records(self):
        assert total_assessed([]) == 0
        assert total_paid([]) == 0
        assert total_due([]) == 0


class TestCollectionRate:
    """Test collection rate percentage"""

    def test_zero_when_nothing_assessed(self):
        assert collection_rate([]) == 0
        assert collection_rate([record(assessed='0', paid='0')]) == 0

    def test_percentage_of_assessed(self):
        records = [record(assessed='1000', paid='250'), record(assessed='1000', paid='750')]

        assert collection_rate(records) == Decimal('50')


class TestBreakdowns:
    """Test per-tax-type, per-property-type and status breakdowns"""

    def test_breakdown_by_tax_type(self):
        records = [
            record('Property Tax', '1200', '1200', 'Paid'),
            record('Property Tax', '800', '0'),
            record('Water Tax', '500', '100', 'Partial'),
        ]

        breakdown = breakdown_by_tax_type(records)

        assert list(breakdown) == ['Property Tax', 'Water Tax']
        assert breakdown['Property Tax'] == {
            'count': 2, 'total': Decimal('2000'), 'paid': Decimal('1200'), 'pending': Decimal('800'),
        }
        assert breakdown['Water Tax']['pending'] == Decimal('400')

    def test_breakdown_totals_match_overall_totals(self):
        records = [record('Property Tax', '10', '5'), record('Land Tax', '7', '7', 'Paid')]

        breakdown = breakdown_by_tax_type(records)

        assert sum(e['total'] for e in breakdown.values()) == total_assessed(records)
        assert sum(e['count'] for e in breakdown.values()) == len(records)

    def test_breakdown_by_property_type(self):
        properties = [prop('A'), prop('B', 'Commercial'), prop('C')]

        assert breakdown_by_property_type(properties) == {'Residential': 2, 'Commercial': 1}

    def test_status_counts_use_stored_status(self):
        # stored status wins even when it disagrees with the amounts
        records = [record(assessed='100', paid='100', status='Unpaid'), record(status='Unpaid')]

        assert status_counts(records) == {'Unpaid': 2}


class TestDerivePaymentStatus:
    """Test status derivation from amounts"""

    def test_fully_paid(self):
        assert derive_payment_status(Decimal('1200'), Decimal('1200')) == 'Paid'

    def test_nothing_paid(self):
        assert derive_payment_status(Decimal('1200'), Decimal('0')) == 'Unpaid'

    def test_partly_paid(self):
        assert derive_payment_status(Decimal('1200'), Decimal('600')) == 'Partial'

    def test_overpaid_is_paid(self):
        assert derive_payment_status('100', '120.50') == 'Paid'


class TestReportHelpers:
    """Test pending bills and summaries"""

    def test_pending_bills_sorted_by_total_due(self):
        properties = [
            prop('A', taxes=[record(assessed='100', paid='0')]),
            prop('B', taxes=[record(assessed='900', paid='100', status='Partial')]),
            prop('C', taxes=[record(assessed='50', paid='50', status='Paid')]),
        ]

        pending = pending_bills(properties)

        assert [p['property_id'] for p in pending] == ['B', 'A']
        assert pending[0]['total_due'] == Decimal('800')

    def test_report_summary(self):
        properties = [
            prop('A', taxes=[record(assessed='100', paid='40', status='Partial')]),
            prop('B', taxes=[record(assessed='60', paid='60', status='Paid')]),
        ]

        summary = report_summary(properties)

        assert summary['total_properties'] == 2
        assert summary['properties_with_dues'] == 1
        assert summary['total_due'] == Decimal('60')

    def test_dashboard_summary_rounds_collection_rate(self):
        properties = [prop('A', taxes=[record(assessed='3', paid='1', status='Partial')])]

        summary = dashboard_summary(properties)

        assert summary['collection_rate'] == Decimal('33.33')
        assert summary['total_tax_records'] == 1

    @pytest.mark.parametrize('records', [[], [record(assessed='0')]])
    def test_dashboard_summary_zero_rate(self, records):
        summary = dashboard_summary([prop('A', taxes=records)])

        assert summary['collection_rate'] == Decimal('0.00')
