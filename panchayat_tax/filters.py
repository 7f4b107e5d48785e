"""
Report filter - selects tax records for the dashboard and the spreadsheet export

A financial year selection "2025-26" matches a record when its assessment year
is 2025 or 2026, or when it was paid between 1 April 2025 and 31 March 2026.
A custom date range matches only records with a payment date inside the range.
The dashboard may omit the period, which then covers every record.
Property type and payment status are exact matches unless "all".
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
import re

from django.core.exceptions import ValidationError

from .aggregation import property_taxes, to_decimal


ALL = 'all'

FINANCIAL_YEAR_RE = re.compile(r'^(\d{4})-(\d{2})$')


@dataclass
class TaxReportRow:
    """One tax record joined with its property, as shown in reports"""
    property_id: str
    owner_name: str
    father_name: str
    mobile_number: str
    address: str
    property_type: str
    area: Decimal
    tax_type: str
    assessment_year: int
    base_amount: Decimal
    assessed_amount: Decimal
    amount_paid: Decimal
    payment_status: str
    payment_date: date = None
    receipt_number: str = None

    @property
    def balance_due(self):
        return self.assessed_amount - self.amount_paid


def flatten_records(properties):
    rows = []
    for prop in properties:
        for tax in property_taxes(prop):
            assessed = to_decimal(tax.assessed_amount)
            rows.append(TaxReportRow(
                property_id=prop.property_id,
                owner_name=prop.owner_name,
                father_name=prop.father_name,
                mobile_number=prop.mobile_number,
                address=prop.address,
                property_type=prop.property_type,
                area=to_decimal(prop.area),
                tax_type=tax.tax_type,
                assessment_year=tax.assessment_year,
                base_amount=to_decimal(tax.base_amount) if tax.base_amount is not None else assessed,
                assessed_amount=assessed,
                amount_paid=to_decimal(tax.amount_paid),
                payment_status=tax.payment_status,
                payment_date=tax.payment_date,
                receipt_number=tax.receipt_number,
            ))
    return rows


def parse_financial_year(value):
    """'2025-26' -> (2025, 2026)"""
    match = FINANCIAL_YEAR_RE.match((value or '').strip())
    if not match:
        raise ValidationError(f"Financial year must look like 2025-26, got {value!r}")
    start_year = int(match.group(1))
    end_short = int(match.group(2))
    end_year = (start_year // 100) * 100 + end_short
    if end_year < start_year:
        end_year += 100
    if end_year != start_year + 1:
        raise ValidationError(f"Financial year {value} must span consecutive years")
    return start_year, end_year


def financial_year_label(start_year):
    return f"{start_year}-{str(start_year + 1)[-2:]}"


def as_date(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def in_financial_year_window(day, start_year, end_year):
    return (day.year == start_year and day.month >= 4) or (day.year == end_year and day.month <= 3)


def matches_financial_year(row, financial_year):
    start_year, end_year = parse_financial_year(financial_year)
    if int(row.assessment_year) in (start_year, end_year):
        return True
    paid_on = as_date(row.payment_date)
    if paid_on is None:
        return False
    return in_financial_year_window(paid_on, start_year, end_year)


def matches_date_range(row, start_date, end_date):
    paid_on = as_date(row.payment_date)
    if paid_on is None:
        return False
    return as_date(start_date) <= paid_on <= as_date(end_date)


@dataclass
class ReportFilter:
    financial_year: str = None
    start_date: date = None
    end_date: date = None
    property_type: str = ALL
    payment_status: str = ALL
    require_period: bool = field(default=True, repr=False)

    def __post_init__(self):
        self.start_date = as_date(self.start_date)
        self.end_date = as_date(self.end_date)
        self.property_type = self.property_type or ALL
        self.payment_status = self.payment_status or ALL

        if self.financial_year:
            if self.start_date or self.end_date:
                raise ValidationError('Choose either a financial year or a date range, not both')
            parse_financial_year(self.financial_year)
        elif self.start_date and self.end_date:
            if self.start_date > self.end_date:
                raise ValidationError('Start date must be on or before end date')
        elif self.start_date or self.end_date or self.require_period:
            raise ValidationError('Select a financial year or both start and end dates')

    @classmethod
    def from_query(cls, params, require_period=True):
        try:
            return cls(
                financial_year=params.get('financial_year') or None,
                start_date=params.get('start_date') or None,
                end_date=params.get('end_date') or None,
                property_type=params.get('property_type') or ALL,
                payment_status=params.get('payment_status') or ALL,
                require_period=require_period,
            )
        except ValueError as e:
            raise ValidationError(f"Invalid date: {e}")

    @property
    def is_financial_year(self):
        return bool(self.financial_year)

    @property
    def has_period(self):
        return self.is_financial_year or self.start_date is not None

    @property
    def period_label(self):
        if self.is_financial_year:
            return self.financial_year
        if not self.has_period:
            return 'All periods'
        return f"{self.start_date.isoformat()} to {self.end_date.isoformat()}"

    def matches(self, row):
        if self.is_financial_year:
            if not matches_financial_year(row, self.financial_year):
                return False
        elif self.has_period and not matches_date_range(row, self.start_date, self.end_date):
            return False

        if self.property_type != ALL and row.property_type != self.property_type:
            return False
        if self.payment_status != ALL and row.payment_status != self.payment_status:
            return False
        return True

    def apply(self, rows):
        return [row for row in rows if self.matches(row)]
