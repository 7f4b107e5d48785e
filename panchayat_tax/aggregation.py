"""
Tax aggregation - pure reducers over in-memory tax records

Every function accepts either TaxRecord model instances or report rows from
filters.flatten_records(); all they need is assessed_amount, amount_paid,
payment_status and tax_type. Amounts are summed as Decimal so that
total_due is exactly total_assessed - total_paid.
"""

from collections import OrderedDict
from decimal import Decimal

from django.utils import timezone

from .models import TaxRecord


ZERO = Decimal('0')
HUNDRED = Decimal('100')


def to_decimal(value):
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def derive_payment_status(assessed_amount, amount_paid):
    """Paid when fully covered, Partial for anything in between, else Unpaid"""
    assessed = to_decimal(assessed_amount)
    paid = to_decimal(amount_paid)
    if paid <= ZERO:
        return TaxRecord.UNPAID
    if paid >= assessed:
        return TaxRecord.PAID
    return TaxRecord.PARTIAL


def property_taxes(prop):
    taxes = prop.taxes
    if hasattr(taxes, 'all'):
        return list(taxes.all())
    return list(taxes or [])


def all_tax_records(properties):
    records = []
    for prop in properties:
        records.extend(property_taxes(prop))
    return records


# ============================================================================
# TOTALS
# ============================================================================

def total_assessed(records):
    return sum((to_decimal(r.assessed_amount) for r in records), ZERO)


def total_paid(records):
    return sum((to_decimal(r.amount_paid) for r in records), ZERO)


def total_due(records):
    records = list(records)
    return total_assessed(records) - total_paid(records)


def collection_rate(records):
    records = list(records)
    assessed = total_assessed(records)
    if assessed == ZERO:
        return ZERO
    return total_paid(records) / assessed * HUNDRED


# ============================================================================
# BREAKDOWNS
# ============================================================================

def breakdown_by_tax_type(records):
    breakdown = OrderedDict()
    for record in records:
        entry = breakdown.setdefault(record.tax_type, {
            'count': 0,
            'total': ZERO,
            'paid': ZERO,
            'pending': ZERO,
        })
        assessed = to_decimal(record.assessed_amount)
        paid = to_decimal(record.amount_paid)
        entry['count'] += 1
        entry['total'] += assessed
        entry['paid'] += paid
        entry['pending'] += assessed - paid
    return breakdown


def breakdown_by_property_type(properties):
    counts = OrderedDict()
    for prop in properties:
        counts[prop.property_type] = counts.get(prop.property_type, 0) + 1
    return counts


def status_counts(records):
    counts = OrderedDict()
    for record in records:
        counts[record.payment_status] = counts.get(record.payment_status, 0) + 1
    return counts


# ============================================================================
# REPORT HELPERS
# ============================================================================

def pending_bills(properties):
    """Properties with outstanding dues, largest total due first"""
    pending = []
    for prop in properties:
        taxes = [t for t in property_taxes(prop)
                 if to_decimal(t.assessed_amount) - to_decimal(t.amount_paid) > ZERO]
        if not taxes:
            continue

        lines = [{
            'tax_type': t.tax_type,
            'assessed_amount': to_decimal(t.assessed_amount),
            'amount_paid': to_decimal(t.amount_paid),
            'due_amount': to_decimal(t.assessed_amount) - to_decimal(t.amount_paid),
            'assessment_year': t.assessment_year,
            'receipt_number': t.receipt_number,
        } for t in taxes]

        pending.append({
            'property_id': prop.property_id,
            'owner_name': prop.owner_name,
            'mobile_number': prop.mobile_number,
            'address': prop.address,
            'property_type': prop.property_type,
            'house_no': prop.house_no,
            'taxes': lines,
            'total_due': sum((line['due_amount'] for line in lines), ZERO),
        })

    pending.sort(key=lambda p: p['total_due'], reverse=True)
    return pending


def report_summary(properties, pending=None, generated_at=None):
    properties = list(properties)
    if pending is None:
        pending = pending_bills(properties)
    records = all_tax_records(properties)
    assessed = total_assessed(records)
    paid = total_paid(records)
    return {
        'total_properties': len(properties),
        'properties_with_dues': len(pending),
        'total_assessed': assessed,
        'total_paid': paid,
        'total_due': assessed - paid,
        'generated_at': generated_at or timezone.now(),
    }


def dashboard_summary(properties):
    """Figures for the dashboard cards and charts"""
    properties = list(properties)
    records = all_tax_records(properties)
    assessed = total_assessed(records)
    paid = total_paid(records)
    return {
        'total_properties': len(properties),
        'total_tax_records': len(records),
        'total_assessed': assessed,
        'total_paid': paid,
        'total_due': assessed - paid,
        'collection_rate': collection_rate(records).quantize(Decimal('0.01')),
        'by_tax_type': breakdown_by_tax_type(records),
        'by_property_type': breakdown_by_property_type(properties),
        'status_counts': status_counts(records),
    }
