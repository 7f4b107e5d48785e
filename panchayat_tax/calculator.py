"""
Panchayat tax calculator

Standard yearly rates for assessing a new tax record. Buildings pay per sq ft
by location class; agricultural land pays per acre. Water, sanitation and
lighting are flat yearly charges. A rebate applies when the assessment is
made on or before 31 March of the assessment year; a late fee is charged
per started month when payment comes after the due date.
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
import math

from .aggregation import to_decimal
from .formatting import today_ist
from .localization import hindi_tax_name
from .models import Property, TaxRecord


URBAN = 'urban'
SEMI_URBAN = 'semiUrban'
RURAL = 'rural'

LOCATION_CHOICES = [
    (URBAN, 'Urban Area'),
    (SEMI_URBAN, 'Semi-Urban Area'),
    (RURAL, 'Rural Area'),
]

LOCATION_LABELS = {
    URBAN: {'en': 'Urban Area', 'hi': 'शहरी क्षेत्र'},
    SEMI_URBAN: {'en': 'Semi-Urban Area', 'hi': 'अर्ध-शहरी क्षेत्र'},
    RURAL: {'en': 'Rural Area', 'hi': 'ग्रामीण क्षेत्र'},
}

IRRIGATED = 'irrigated'
UNIRRIGATED = 'unirrigated'

AGRICULTURAL_CHOICES = [
    (IRRIGATED, 'Irrigated'),
    (UNIRRIGATED, 'Unirrigated'),
]

# Per sq ft per year
BUILDING_RATES = {
    Property.RESIDENTIAL: {URBAN: Decimal('3.00'), SEMI_URBAN: Decimal('2.00'), RURAL: Decimal('1.50')},
    Property.COMMERCIAL: {URBAN: Decimal('6.00'), SEMI_URBAN: Decimal('4.50'), RURAL: Decimal('3.50')},
    Property.INDUSTRIAL: {URBAN: Decimal('8.00'), SEMI_URBAN: Decimal('6.00'), RURAL: Decimal('5.00')},
}

# Per acre per year
AGRICULTURAL_RATES = {
    IRRIGATED: Decimal('200'),
    UNIRRIGATED: Decimal('100'),
}

WATER_CHARGES = {
    Property.RESIDENTIAL: Decimal('600'),
    Property.COMMERCIAL: Decimal('1200'),
    Property.INDUSTRIAL: Decimal('2400'),
}

SANITATION_CHARGES = {
    Property.RESIDENTIAL: Decimal('300'),
    Property.COMMERCIAL: Decimal('600'),
    Property.INDUSTRIAL: Decimal('1200'),
}

LIGHTING_CHARGES = {
    Property.RESIDENTIAL: Decimal('240'),
    Property.COMMERCIAL: Decimal('480'),
    Property.INDUSTRIAL: Decimal('960'),
}

DEFAULT_LATE_FEE_PERCENTAGE = Decimal('1.5')
REBATE_PERCENTAGE = Decimal('5')
REBATE_DEADLINE = (3, 31)
LATE_FEE_CAP = Decimal('0.5')
DAYS_PER_MONTH = 30

CENTS = Decimal('0.01')


def money(value):
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def check_location(location_type):
    if location_type not in LOCATION_LABELS:
        raise ValueError(f"Unknown location type: {location_type!r}")


def calculate_property_tax(area, property_type, location_type, agricultural_type=None, settings=None):
    area = to_decimal(area)
    if area < 0:
        raise ValueError('Area cannot be negative')

    if property_type == Property.AGRICULTURAL:
        rate = AGRICULTURAL_RATES.get(agricultural_type or UNIRRIGATED)
        if rate is None:
            raise ValueError(f"Unknown agricultural type: {agricultural_type!r}")
        return money(area * rate)

    if property_type not in BUILDING_RATES:
        raise ValueError(f"Unknown property type: {property_type!r}")
    check_location(location_type)

    rate = BUILDING_RATES[property_type][location_type]
    if settings is not None and settings.property_tax_rate is not None:
        rate = to_decimal(settings.property_tax_rate)
    return money(area * rate)


def calculate_water_tax(property_type, settings=None):
    if property_type not in WATER_CHARGES:
        return Decimal('0.00')
    if settings is not None and settings.water_tax_rate is not None:
        return money(settings.water_tax_rate)
    return money(WATER_CHARGES[property_type])


def calculate_sanitation_tax(property_type):
    return money(SANITATION_CHARGES.get(property_type, 0))


def calculate_lighting_tax(property_type):
    return money(LIGHTING_CHARGES.get(property_type, 0))


def rebate_deadline(year):
    month, day = REBATE_DEADLINE
    return date(year, month, day)


def calculate_rebate(subtotal, assessment_date, assessment_year=None):
    """5% of the subtotal when assessed by 31 March of the assessment year"""
    year = assessment_year or assessment_date.year
    if assessment_date <= rebate_deadline(year):
        return money(to_decimal(subtotal) * REBATE_PERCENTAGE / 100)
    return Decimal('0.00')


def months_overdue(due_date, payment_date):
    if payment_date <= due_date:
        return 0
    return math.ceil((payment_date - due_date).days / DAYS_PER_MONTH)


def calculate_late_fee(subtotal, due_date, payment_date, late_fee_percentage=None):
    """Percentage per started 30-day month overdue, capped at half the subtotal"""
    subtotal = to_decimal(subtotal)
    months = months_overdue(due_date, payment_date)
    if not months:
        return Decimal('0.00')
    if late_fee_percentage is None:
        late_fee_percentage = DEFAULT_LATE_FEE_PERCENTAGE
    fee = subtotal * to_decimal(late_fee_percentage) / 100 * months
    return money(min(fee, subtotal * LATE_FEE_CAP))


def calculate_comprehensive_tax(property_type, location_type, area, agricultural_type=None,
                                include_water=True, include_sanitation=True, include_lighting=True,
                                assessment_date=None, assessment_year=None, settings=None,
                                due_date=None, payment_date=None):
    """
    Full assessment with rebate. When a due date is given the late fee for
    paying on payment_date (default today) is added at the settings rate.
    """
    assessment_date = assessment_date or today_ist()

    property_tax = calculate_property_tax(area, property_type, location_type, agricultural_type, settings)
    water_tax = calculate_water_tax(property_type, settings) if include_water else Decimal('0.00')
    sanitation_tax = calculate_sanitation_tax(property_type) if include_sanitation else Decimal('0.00')
    lighting_tax = calculate_lighting_tax(property_type) if include_lighting else Decimal('0.00')

    subtotal = property_tax + water_tax + sanitation_tax + lighting_tax
    rebate = calculate_rebate(subtotal, assessment_date, assessment_year)
    if due_date is not None:
        late_fee = calculate_late_fee(subtotal, due_date, payment_date or today_ist(),
                                      settings.late_fee if settings is not None else None)
    else:
        late_fee = Decimal('0.00')

    breakdown = [(TaxRecord.PROPERTY_TAX, property_tax)]
    for tax_type, amount in (
        (TaxRecord.WATER_TAX, water_tax),
        (TaxRecord.SANITATION_TAX, sanitation_tax),
        (TaxRecord.LIGHTING_TAX, lighting_tax),
    ):
        if amount > 0:
            breakdown.append((tax_type, amount))

    return {
        'property_tax': property_tax,
        'water_tax': water_tax,
        'sanitation_tax': sanitation_tax,
        'lighting_tax': lighting_tax,
        'subtotal': subtotal,
        'rebate': rebate,
        'late_fee': late_fee,
        'total_tax': subtotal - rebate + late_fee,
        'breakdown': [
            {'name': name, 'name_hi': hindi_tax_name(name), 'amount': amount}
            for name, amount in breakdown
        ],
    }


def rate_description(property_type, location_type):
    if property_type == Property.AGRICULTURAL:
        return (f"₹{AGRICULTURAL_RATES[IRRIGATED]}/acre (Irrigated), "
                f"₹{AGRICULTURAL_RATES[UNIRRIGATED]}/acre (Unirrigated)")
    check_location(location_type)
    return f"₹{BUILDING_RATES[property_type][location_type]}/sq ft per year"
