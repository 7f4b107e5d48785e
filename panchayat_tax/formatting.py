"""
Indian-locale currency and date formatting

Dates are shown in IST regardless of the server timezone.
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from zoneinfo import ZoneInfo

from django.utils import timezone

from . import conf


RUPEE = '₹'

MONTH_NAMES = (
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
)

# Excel number format with lakh/crore grouping
EXCEL_INR_FORMAT = (
    '[>=10000000]"₹"##\\,##\\,##\\,##0.00;'
    '[>=100000]"₹"##\\,##\\,##0.00;'
    '"₹"##,##0.00'
)


def group_indian(digits):
    """'1234567' -> '12,34,567'"""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ','.join(groups + [tail])


def format_amount(amount, decimals=2):
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount or 0))
    quantum = Decimal(1).scaleb(-decimals)
    value = value.quantize(quantum, rounding=ROUND_HALF_UP)

    sign = '-' if value < 0 else ''
    text = f"{abs(value):.{decimals}f}"
    if decimals:
        whole, fraction = text.split('.')
        return f"{sign}{group_indian(whole)}.{fraction}"
    return f"{sign}{group_indian(text)}"


def format_currency(amount, decimals=2):
    """format_currency(123456.5) -> '₹1,23,456.50'"""
    text = format_amount(amount, decimals)
    if text.startswith('-'):
        return f"-{RUPEE}{text[1:]}"
    return f"{RUPEE}{text}"


def to_display_date(value):
    if isinstance(value, str):
        value = parse_date_value(value)
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value, ZoneInfo(conf.get('DISPLAY_TIMEZONE')))
        return value.date()
    return value


def parse_date_value(text):
    text = text.strip()
    try:
        return datetime.fromisoformat(text.replace('Z', '+00:00'))
    except ValueError:
        return datetime.strptime(text, '%d/%m/%Y').date()


def format_date(value):
    """DD/MM/YYYY"""
    if not value:
        return 'N/A'
    d = to_display_date(value)
    return f"{d.day:02d}/{d.month:02d}/{d.year}"


def format_date_dashed(value):
    """DD-MM-YYYY, used in download filenames"""
    d = to_display_date(value)
    return f"{d.day:02d}-{d.month:02d}-{d.year}"


def format_date_long(value):
    """en-IN long form, e.g. 19 October 2026"""
    if not value:
        return 'N/A'
    d = to_display_date(value)
    return f"{d.day} {MONTH_NAMES[d.month - 1]} {d.year}"


def today_ist():
    return timezone.localtime(timezone.now(), ZoneInfo(conf.get('DISPLAY_TIMEZONE'))).date()


