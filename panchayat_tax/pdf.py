"""
Consolidated tax bill PDF

Fixed A4 layout drawn on a reportlab canvas: letterhead, bill meta, owner
block, tax table with running totals, QR verification code and signature
block. Rows that do not fit continue on a new page under a repeated table
header.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from functools import lru_cache
from io import BytesIO
import logging
import uuid

import qrcode
from qrcode.constants import ERROR_CORRECT_H
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from . import conf
from .aggregation import to_decimal
from .formatting import format_currency, format_date, to_display_date
from .localization import EN, LABELS, hindi_tax_name, translator

logger = logging.getLogger(__name__)


PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 50
RIGHT_EDGE = 550

COL_SR = 50
COL_TAX_TYPE = 80
TAX_TYPE_WIDTH = 215
COL_ASSESSED_RIGHT = 390
COL_PAID_RIGHT = 470
COL_DUE_RIGHT = RIGHT_EDGE

ROW_HEIGHT = 15
LINE_HEIGHT = 14
QR_SIZE = 80
SIGNATURE_LEFT = 400
SIGNATURE_WIDTH = 150


@dataclass
class RenderedBill:
    pdf_bytes: bytes
    total_assessed: Decimal
    total_paid: Decimal
    total_due: Decimal
    due_date: date
    page_count: int


def generate_bill_id(year, prefix=None):
    """LONI-2025-1A2B3C4D"""
    prefix = prefix or conf.get('BILL_ID_PREFIX')
    segment = str(uuid.uuid4()).split('-')[0].upper()
    return f"{prefix}-{year}-{segment}"


def due_date_for(generated_at):
    return to_display_date(generated_at) + timedelta(days=conf.get('BILL_DUE_DAYS'))


@lru_cache(maxsize=None)
def register_fonts(regular_path, bold_path):
    """Returns (regular, bold, unicode_capable) font names"""
    if not regular_path:
        return 'Helvetica', 'Helvetica-Bold', False
    pdfmetrics.registerFont(TTFont('BillDevanagari', regular_path))
    bold_name = 'BillDevanagari'
    if bold_path:
        pdfmetrics.registerFont(TTFont('BillDevanagari-Bold', bold_path))
        bold_name = 'BillDevanagari-Bold'
    return 'BillDevanagari', bold_name, True


def qr_code_image(data):
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_H, box_size=4, border=1)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color='black', back_color='white')
    buffer = BytesIO()
    img.save(buffer)
    buffer.seek(0)
    return ImageReader(buffer)


class BillCanvas:
    """Top-down cursor over a reportlab canvas"""

    def __init__(self, buffer, regular_font, bold_font, unicode_fonts, t):
        self.pdf = canvas.Canvas(buffer, pagesize=A4)
        self.regular_font = regular_font
        self.bold_font = bold_font
        self.unicode_fonts = unicode_fonts
        self.t = t
        self.page_number = 1
        self.y = PAGE_HEIGHT - MARGIN

    def money(self, amount):
        text = format_currency(amount)
        if not self.unicode_fonts:
            # Standard Type 1 fonts have no rupee glyph
            text = text.replace('₹', 'Rs. ')
        return text

    def font(self, bold=False, size=10):
        name = self.bold_font if bold else self.regular_font
        self.pdf.setFont(name, size)
        return name

    def text(self, value, x, bold=False, size=10, align='left', width=None):
        font_name = self.font(bold, size)
        if align == 'right':
            self.pdf.drawRightString(x, self.y, value)
        elif align == 'center':
            self.pdf.drawCentredString(x + (width or 0) / 2, self.y, value)
        else:
            self.pdf.drawString(x, self.y, value)
        return font_name

    def move_down(self, amount=LINE_HEIGHT):
        self.y -= amount

    def ensure_space(self, height, on_new_page=None):
        if self.y - height >= MARGIN:
            return False
        self.new_page()
        if on_new_page:
            on_new_page()
        return True

    def new_page(self):
        self.draw_page_number()
        self.pdf.showPage()
        self.page_number += 1
        self.y = PAGE_HEIGHT - MARGIN

    def draw_page_number(self):
        self.font(size=8)
        self.pdf.drawCentredString(PAGE_WIDTH / 2, MARGIN / 2, f"{self.t('page')} {self.page_number}")

    def rule(self, offset=5):
        self.pdf.setLineWidth(0.5)
        self.pdf.line(MARGIN, self.y - offset, RIGHT_EDGE, self.y - offset)

    def finish(self):
        self.draw_page_number()
        self.pdf.save()


def letterhead_name(panchayat, language):
    default = LABELS['panchayatName']
    if panchayat.panchayat_name == default['en'] and language != EN:
        return translator(language)('panchayatName')
    return panchayat.panchayat_name


def tax_type_label(tax_type):
    hindi = hindi_tax_name(tax_type)
    return f"{tax_type} ({hindi})" if hindi else tax_type


def render_bill(prop, tax_records, panchayat, language, bill_id, generated_at, verification_url):
    """Draw the bill and return its bytes with the totals it printed"""
    tax_records = list(tax_records)
    if not tax_records:
        raise ValueError('A bill needs at least one tax record')
    if panchayat is None:
        raise ValueError('Panchayat settings are required for the letterhead')

    t = translator(language)
    regular_font, bold_font, unicode_fonts = register_fonts(
        conf.get('DEVANAGARI_FONT_PATH'), conf.get('DEVANAGARI_BOLD_FONT_PATH')
    )
    if language != EN and not unicode_fonts:
        logger.warning(f"Rendering {language} bill {bill_id} without a Devanagari font; "
                       f"set DEVANAGARI_FONT_PATH to print Hindi text")

    buffer = BytesIO()
    doc = BillCanvas(buffer, regular_font, bold_font, unicode_fonts, t)
    doc.pdf.setTitle(f"{t('taxBillTitle')} {bill_id}")
    doc.pdf.setAuthor(panchayat.panchayat_name)

    due_date = due_date_for(generated_at)

    # --- Header ---
    doc.move_down(18)
    doc.text(letterhead_name(panchayat, language), MARGIN, bold=True, size=18,
             align='center', width=RIGHT_EDGE - MARGIN)
    doc.move_down(16)
    doc.text(panchayat.address_line, MARGIN, size=10, align='center', width=RIGHT_EDGE - MARGIN)
    doc.move_down(26)
    doc.text(t('taxBillTitle'), MARGIN, bold=True, size=14, align='center', width=RIGHT_EDGE - MARGIN)
    doc.rule()
    doc.move_down(24)

    # --- Bill meta ---
    doc.text(f"{t('billNo')}: {bill_id}", MARGIN)
    doc.text(f"{t('date')}: {format_date(generated_at)}", RIGHT_EDGE, align='right')
    doc.move_down()
    doc.text(f"{t('propertyId')}: {prop.property_id}", MARGIN)
    doc.text(f"{t('dueDate')}: {format_date(due_date)}", RIGHT_EDGE, align='right')
    doc.move_down(LINE_HEIGHT * 2)

    # --- Owner details ---
    not_available = t('notAvailable')
    doc.text(t('billTo'), MARGIN, bold=True)
    doc.move_down()
    for line in (
        prop.owner_name,
        f"{t('fathersName')}: {prop.father_name or not_available}",
        f"{t('address')}: {prop.address or not_available}",
        f"{t('houseNo')}: {prop.house_no or not_available}",
        f"{t('mobile')}: {prop.mobile_number or not_available}",
    ):
        for piece in simpleSplit(line, regular_font, 10, RIGHT_EDGE - MARGIN) or ['']:
            doc.ensure_space(LINE_HEIGHT)
            doc.text(piece, MARGIN)
            doc.move_down()
    doc.move_down(10)

    # --- Tax table ---
    def table_header():
        doc.text(t('srNo'), COL_SR, bold=True)
        doc.text(t('taxType'), COL_TAX_TYPE, bold=True)
        doc.text(t('assessedAmount'), COL_ASSESSED_RIGHT, bold=True, align='right')
        doc.text(t('amountPaid'), COL_PAID_RIGHT, bold=True, align='right')
        doc.text(t('dueAmount'), COL_DUE_RIGHT, bold=True, align='right')
        doc.rule(offset=4)
        doc.move_down(ROW_HEIGHT + 2)

    doc.ensure_space(ROW_HEIGHT * 2)
    table_header()

    total_assessed = Decimal('0')
    total_paid = Decimal('0')

    for index, tax in enumerate(tax_records, 1):
        assessed = to_decimal(tax.assessed_amount)
        paid = to_decimal(tax.amount_paid)
        label_lines = simpleSplit(tax_type_label(tax.tax_type), regular_font, 10, TAX_TYPE_WIDTH) or ['']
        doc.ensure_space(ROW_HEIGHT * len(label_lines), on_new_page=table_header)

        doc.text(str(index), COL_SR)
        doc.text(doc.money(assessed), COL_ASSESSED_RIGHT, align='right')
        doc.text(doc.money(paid), COL_PAID_RIGHT, align='right')
        doc.text(doc.money(assessed - paid), COL_DUE_RIGHT, align='right')
        for line in label_lines:
            doc.text(line, COL_TAX_TYPE)
            doc.move_down(ROW_HEIGHT)

        total_assessed += assessed
        total_paid += paid

    # --- Totals ---
    total_due = total_assessed - total_paid
    doc.move_down(10)
    doc.ensure_space(ROW_HEIGHT, on_new_page=table_header)
    doc.text(t('total'), COL_TAX_TYPE, bold=True)
    doc.text(doc.money(total_assessed), COL_ASSESSED_RIGHT, bold=True, align='right')
    doc.text(doc.money(total_paid), COL_PAID_RIGHT, bold=True, align='right')
    doc.text(doc.money(total_due), COL_DUE_RIGHT, bold=True, align='right')
    doc.move_down(LINE_HEIGHT * 2)

    # --- QR code and signature ---
    doc.ensure_space(QR_SIZE + 10)
    block_top = doc.y
    doc.pdf.drawImage(qr_code_image(verification_url), MARGIN, block_top - QR_SIZE,
                      width=QR_SIZE, height=QR_SIZE)

    doc.y = block_top - 40
    doc.pdf.setLineWidth(0.5)
    doc.pdf.line(SIGNATURE_LEFT + 10, doc.y + 12, SIGNATURE_LEFT + SIGNATURE_WIDTH - 10, doc.y + 12)
    doc.text(t('signature'), SIGNATURE_LEFT, align='center', width=SIGNATURE_WIDTH)
    doc.move_down(15)
    doc.text(f"({t('secretary')})", SIGNATURE_LEFT, align='center', width=SIGNATURE_WIDTH)

    doc.finish()

    return RenderedBill(
        pdf_bytes=buffer.getvalue(),
        total_assessed=total_assessed,
        total_paid=total_paid,
        total_due=total_due,
        due_date=due_date,
        page_count=doc.page_number,
    )
