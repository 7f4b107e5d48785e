"""
Unit Tests for Currency and Date Formatting
"""
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal
import pytest

from panchayat_tax.formatting import (
    format_currency,
    format_date,
    format_date_dashed,
    format_date_long,
    group_indian,
)


class TestCurrency:
    """Test Indian-grouped rupee amounts"""

    def test_lakh_grouping(self):
        assert format_currency(123456.5) == '₹1,23,456.50'

    @pytest.mark.parametrize('amount, expected', [
        (0, '₹0.00'),
        (999, '₹999.00'),
        (1000, '₹1,000.00'),
        (Decimal('10000000'), '₹1,00,00,000.00'),
        ('1700', '₹1,700.00'),
        (Decimal('0.005'), '₹0.01'),
    ])
    def test_amounts(self, amount, expected):
        assert format_currency(amount) == expected

    def test_whole_rupees(self):
        assert format_currency(Decimal('123456.5'), 0) == '₹1,23,457'

    def test_negative(self):
        assert format_currency(Decimal('-1500')) == '-₹1,500.00'

    def test_none_is_zero(self):
        assert format_currency(None) == '₹0.00'

    def test_group_indian(self):
        assert group_indian('1234567') == '12,34,567'
        assert group_indian('123') == '123'


class TestDates:
    """Test DD/MM/YYYY and long date forms"""

    def test_date(self):
        assert format_date(date(2026, 3, 5)) == '05/03/2026'

    def test_missing_date(self):
        assert format_date(None) == 'N/A'

    def test_datetime_is_shown_in_ist(self):
        # 20:00 UTC is already the next day in India
        value = datetime(2026, 10, 18, 20, 0, tzinfo=dt_timezone.utc)

        assert format_date(value) == '19/10/2026'

    def test_dashed(self):
        assert format_date_dashed(date(2026, 10, 19)) == '19-10-2026'

    def test_long(self):
        assert format_date_long(date(2026, 10, 19)) == '19 October 2026'

    def test_iso_string(self):
        assert format_date('2025-04-01') == '01/04/2025'
