from django import template

from ..formatting import format_currency, format_date, format_date_long

register = template.Library()

@register.filter(name='inr')
def inr(value):
    """₹1,23,456.50"""
    try:
        return format_currency(value)
    except (ValueError, TypeError, ArithmeticError):
        return ''

@register.filter(name='inr_whole')
def inr_whole(value):
    """₹1,23,457 for dashboard cards"""
    try:
        return format_currency(value, 0)
    except (ValueError, TypeError, ArithmeticError):
        return ''


@register.filter
def ddmmyyyy(value):
    return format_date(value)


@register.filter
def long_date(value):
    return format_date_long(value)


@register.filter(name='percent_of')
def percent_of(value, total):
    """Share of total as a percentage"""
    try:
        total = float(total)
        if total == 0:
            return 0
        return round(float(value) / total * 100, 2)
    except (ValueError, TypeError):
        return ''
