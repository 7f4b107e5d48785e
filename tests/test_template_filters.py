"""
Tests for the tax_filters template library
"""
from datetime import date
from decimal import Decimal

from django.template import Context, Template


def render(source, **context):
    return Template('{% load tax_filters %}' + source).render(Context(context))


class TestTaxFilters:

    def test_inr(self):
        assert render('{{ amount|inr }}', amount=Decimal('123456.5')) == '₹1,23,456.50'

    def test_inr_whole(self):
        assert render('{{ amount|inr_whole }}', amount=Decimal('2000')) == '₹2,000'

    def test_inr_bad_value(self):
        assert render('{{ amount|inr }}', amount='n/a') == ''

    def test_dates(self):
        day = date(2025, 4, 1)

        assert render('{{ day|ddmmyyyy }}', day=day) == '01/04/2025'
        assert '2025' in render('{{ day|long_date }}', day=day)

    def test_percent_of(self):
        assert render('{{ paid|percent_of:total }}', paid=300, total=1200) == '25.0'
        assert render('{{ paid|percent_of:total }}', paid=300, total=0) == '0'
