"""
Unit Tests for the PDF Bill Renderer
"""
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch
import re
import pytest

from reportlab.pdfgen.canvas import Canvas

from panchayat_tax.pdf import RIGHT_EDGE, generate_bill_id, letterhead_name, render_bill, tax_type_label


BILL_ID_RE = re.compile(r'^LONI-\d{4}-[A-Z0-9]{8}$')


@pytest.fixture
def owner():
    return SimpleNamespace(
        property_id='LONI-001',
        owner_name='Ramesh Kumar',
        father_name='',
        address='Main Bazaar, Loni',
        house_no='12',
        mobile_number='9876543210',
    )


@pytest.fixture
def letterhead():
    return SimpleNamespace(
        panchayat_name='Loni Gram Panchayat',
        address_line='Ghaziabad, Uttar Pradesh - 201102',
    )


def tax(tax_type='Property Tax', assessed='1200', paid='0'):
    return SimpleNamespace(tax_type=tax_type, assessed_amount=Decimal(assessed), amount_paid=Decimal(paid))


GENERATED_AT = datetime(2025, 6, 1, 5, 30, tzinfo=dt_timezone.utc)


class TestBillId:

    def test_format(self):
        assert BILL_ID_RE.match(generate_bill_id(2025))

    def test_unique(self):
        assert len({generate_bill_id(2025) for _ in range(50)}) == 50

    def test_prefix_from_settings(self, settings):
        settings.PANCHAYAT_TAX = {'BILL_ID_PREFIX': 'NOIDA'}

        assert generate_bill_id(2024).startswith('NOIDA-2024-')


class TestRenderBill:

    def test_renders_pdf_with_totals(self, owner, letterhead):
        rendered = render_bill(
            owner, [tax('Property Tax', '1200', '200'), tax('Water Tax', '500', '0')],
            letterhead, 'en', 'LONI-2025-ABCDEF12', GENERATED_AT, 'https://example.in/verify',
        )

        assert rendered.pdf_bytes.startswith(b'%PDF')
        assert rendered.total_assessed == Decimal('1700')
        assert rendered.total_paid == Decimal('200')
        assert rendered.total_due == Decimal('1500')
        assert rendered.page_count == 1

    def test_due_date_is_thirty_days_after_generation(self, owner, letterhead):
        rendered = render_bill(owner, [tax()], letterhead, 'en', 'LONI-2025-ABCDEF12',
                               GENERATED_AT, 'https://example.in/verify')

        assert rendered.due_date == date(2025, 7, 1)

    def test_long_table_continues_on_new_page(self, owner, letterhead):
        records = [tax('Other', '10', '0') for _ in range(80)]

        rendered = render_bill(owner, records, letterhead, 'bilingual', 'LONI-2025-ABCDEF12',
                               GENERATED_AT, 'https://example.in/verify')

        assert rendered.page_count > 1
        assert rendered.total_assessed == Decimal('800')

    def test_hindi_without_font_still_renders(self, owner, letterhead):
        rendered = render_bill(owner, [tax()], letterhead, 'hi', 'LONI-2025-ABCDEF12',
                               GENERATED_AT, 'https://example.in/verify')

        assert rendered.pdf_bytes.startswith(b'%PDF')

    def test_long_address_wraps_within_margins(self, owner, letterhead):
        owner.address = 'Ward 7, ' * 40
        drawn = []
        original = Canvas.drawString

        def record(pdf, x, y, text, *args, **kwargs):
            drawn.append((x, pdf.stringWidth(text, pdf._fontname, pdf._fontsize), text))
            return original(pdf, x, y, text, *args, **kwargs)

        with patch.object(Canvas, 'drawString', record):
            render_bill(owner, [tax()], letterhead, 'en', 'LONI-2025-ABCDEF12',
                        GENERATED_AT, 'https://example.in/verify')

        assert all(x + width <= RIGHT_EDGE + 0.5 for x, width, _ in drawn)
        address_lines = [text for x, _, text in drawn if 'Ward' in text]
        assert len(address_lines) > 1
        assert ''.join(address_lines).count('Ward') == 40

    def test_needs_records(self, owner, letterhead):
        with pytest.raises(ValueError):
            render_bill(owner, [], letterhead, 'en', 'X', GENERATED_AT, 'https://example.in')

    def test_needs_settings(self, owner):
        with pytest.raises(ValueError):
            render_bill(owner, [tax()], None, 'en', 'X', GENERATED_AT, 'https://example.in')


class TestLabels:

    def test_default_letterhead_is_localized(self, letterhead):
        assert letterhead_name(letterhead, 'hi') == 'लोनी ग्राम पंचायत'
        assert letterhead_name(letterhead, 'en') == 'Loni Gram Panchayat'

    def test_custom_letterhead_is_kept(self):
        custom = SimpleNamespace(panchayat_name='Behta Hajipur Panchayat')

        assert letterhead_name(custom, 'hi') == 'Behta Hajipur Panchayat'

    def test_tax_type_label(self):
        assert tax_type_label('Water Tax') == 'Water Tax (जल कर)'
        assert tax_type_label('Cess') == 'Cess'
