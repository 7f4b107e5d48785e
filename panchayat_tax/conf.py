"""
Application settings with defaults, overridable through settings.PANCHAYAT_TAX
"""

from django.conf import settings


DEFAULTS = {
    'BILL_ID_PREFIX': 'LONI',
    'BILL_DUE_DAYS': 30,
    'DOWNLOAD_URL_MAX_AGE': 15 * 60,
    'VERIFY_URL_TEMPLATE': 'https://loni-panchayat.example.in/bills/verify/{bill_id}/',
    'DEVANAGARI_FONT_PATH': '',
    'DEVANAGARI_BOLD_FONT_PATH': '',
    'BILL_RATE_LIMIT': 30,
    'BILL_RATE_WINDOW': 15 * 60,
    'DISPLAY_TIMEZONE': 'Asia/Kolkata',
}


def get(name):
    overrides = getattr(settings, 'PANCHAYAT_TAX', {})
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
