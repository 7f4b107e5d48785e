"""
Excel exports - tax report workbook and per-property statement
"""

from dataclasses import dataclass
from io import BytesIO
import logging
import re

import openpyxl
import xlsxwriter
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter
from django.utils import timezone

from .aggregation import (
    breakdown_by_tax_type, status_counts, to_decimal,
    total_assessed, total_paid,
)
from .exceptions import InternalError
from .formatting import EXCEL_INR_FORMAT, format_currency, today_ist
from .models import TaxRecord

logger = logging.getLogger(__name__)


XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

REPORT_COLUMNS = [
    ('क्र.सं. (S.No.)', 8),
    ('संपत्ति ID (Property ID)', 15),
    ('मालिक का नाम (Owner Name)', 20),
    ('पिता का नाम (Father Name)', 20),
    ('मोबाइल नंबर (Mobile)', 12),
    ('पता (Address)', 30),
    ('संपत्ति प्रकार (Property Type)', 15),
    ('क्षेत्रफल (Area)', 12),
    ('कर प्रकार (Tax Type)', 15),
    ('वित्तीय वर्ष (Financial Year)', 18),
    ('आधार राशि (Base Amount ₹)', 15),
    ('कुल राशि (Total Amount ₹)', 15),
    ('भुगतान राशि (Amount Paid ₹)', 15),
    ('शेष बकाया (Balance Due ₹)', 15),
    ('स्थिति (Status)', 12),
    ('भुगतान तिथि (Payment Date)', 18),
]

MONEY_COLUMNS = (11, 12, 13, 14)

SUMMARY_HEADERS = ['विवरण (Description)', 'मान (Value)']

SUMMARY_LABELS = {
    'period': 'रिपोर्ट अवधि (Report Period)',
    'properties': 'कुल संपत्तियां (Total Properties)',
    'records': 'कुल कर रिकॉर्ड (Total Tax Records)',
    'total_amount': 'कुल राशि (Total Amount)',
    'amount_paid': 'भुगतान राशि (Amount Paid)',
    'balance_due': 'शेष बकाया (Balance Due)',
    'status_heading': 'भुगतान स्थिति (Payment Status)',
    'paid': '  पूर्ण भुगतान (Fully Paid)',
    'partial': '  आंशिक भुगतान (Partial)',
    'unpaid': '  अवैतनिक (Unpaid)',
    'tax_type_heading': 'कर प्रकार सारांश (Tax Type Summary)',
}

TAX_TYPE_SUMMARY_HEADERS = [
    'कर प्रकार (Tax Type)', 'रिकॉर्ड (Records)', 'कुल राशि (Total ₹)',
    'भुगतान (Paid ₹)', 'बकाया (Due ₹)',
]

HEADER_FILL = PatternFill(start_color="16A34A", end_color="16A34A", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF", size=11)
BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin')
)

INVALID_SHEET_CHARS = re.compile(r'[\[\]:*?/\\]')


@dataclass
class TaxReport:
    content: bytes
    filename: str
    row_count: int


def sheet_title(text):
    return INVALID_SHEET_CHARS.sub('-', text)[:31]


def report_filename(report_filter, today=None):
    if report_filter.is_financial_year:
        today = today or today_ist()
        return f"Tax_Report_FY_{report_filter.financial_year}_{today.isoformat()}.xlsx"
    return (f"Tax_Report_{report_filter.start_date.isoformat()}"
            f"_to_{report_filter.end_date.isoformat()}.xlsx")


def style_header_row(ws, row, count):
    for col in range(1, count + 1):
        cell = ws.cell(row=row, column=col)
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
        cell.border = BORDER


# ============================================================================
# TAX REPORT WORKBOOK
# ============================================================================

def write_detail_sheet(ws, rows):
    for col, (header, width) in enumerate(REPORT_COLUMNS, 1):
        ws.cell(row=1, column=col, value=header)
        ws.column_dimensions[get_column_letter(col)].width = width
    style_header_row(ws, 1, len(REPORT_COLUMNS))
    ws.freeze_panes = 'A2'

    for row_num, record in enumerate(rows, 2):
        data = [
            row_num - 1,
            record.property_id,
            record.owner_name,
            record.father_name,
            record.mobile_number,
            record.address,
            record.property_type,
            to_decimal(record.area),
            record.tax_type,
            str(record.assessment_year),
            to_decimal(record.base_amount),
            to_decimal(record.assessed_amount),
            to_decimal(record.amount_paid),
            to_decimal(record.assessed_amount) - to_decimal(record.amount_paid),
            record.payment_status,
            record.payment_date.strftime('%d/%m/%Y') if record.payment_date else 'N/A',
        ]
        for col_num, value in enumerate(data, 1):
            cell = ws.cell(row=row_num, column=col_num, value=value)
            cell.border = BORDER
            if col_num in MONEY_COLUMNS:
                cell.number_format = EXCEL_INR_FORMAT


def summary_rows(rows, period_label):
    assessed = total_assessed(rows)
    paid = total_paid(rows)
    statuses = status_counts(rows)
    return [
        (SUMMARY_LABELS['period'], period_label),
        (SUMMARY_LABELS['properties'], len({r.property_id for r in rows})),
        (SUMMARY_LABELS['records'], len(rows)),
        ('', ''),
        (SUMMARY_LABELS['total_amount'], assessed),
        (SUMMARY_LABELS['amount_paid'], paid),
        (SUMMARY_LABELS['balance_due'], assessed - paid),
        ('', ''),
        (SUMMARY_LABELS['status_heading'], ''),
        (SUMMARY_LABELS['paid'], statuses.get(TaxRecord.PAID, 0)),
        (SUMMARY_LABELS['partial'], statuses.get(TaxRecord.PARTIAL, 0)),
        (SUMMARY_LABELS['unpaid'], statuses.get(TaxRecord.UNPAID, 0)),
    ]


def tax_type_rollup(rows):
    """Fixed order over every tax type, zero rows included"""
    breakdown = breakdown_by_tax_type(rows)
    rollup = []
    for tax_type, _ in TaxRecord.TAX_TYPE_CHOICES:
        entry = breakdown.get(tax_type)
        if entry:
            rollup.append((tax_type, entry['count'], entry['total'], entry['paid'], entry['pending']))
        else:
            rollup.append((tax_type, 0, to_decimal(0), to_decimal(0), to_decimal(0)))
    return rollup


def write_summary_sheet(ws, rows, period_label):
    for col, header in enumerate(SUMMARY_HEADERS, 1):
        ws.cell(row=1, column=col, value=header)
    style_header_row(ws, 1, len(SUMMARY_HEADERS))

    row_num = 2
    money_labels = (SUMMARY_LABELS['total_amount'], SUMMARY_LABELS['amount_paid'],
                    SUMMARY_LABELS['balance_due'])
    for label, value in summary_rows(rows, period_label):
        ws.cell(row=row_num, column=1, value=label)
        cell = ws.cell(row=row_num, column=2, value=value)
        if label in money_labels:
            cell.number_format = EXCEL_INR_FORMAT
        if label in (SUMMARY_LABELS['status_heading'], SUMMARY_LABELS['period']):
            ws.cell(row=row_num, column=1).font = Font(bold=True)
        row_num += 1

    row_num += 1
    ws.cell(row=row_num, column=1, value=SUMMARY_LABELS['tax_type_heading']).font = Font(bold=True)
    row_num += 1
    for col, header in enumerate(TAX_TYPE_SUMMARY_HEADERS, 1):
        ws.cell(row=row_num, column=col, value=header)
    style_header_row(ws, row_num, len(TAX_TYPE_SUMMARY_HEADERS))
    row_num += 1

    for tax_type, count, total, paid, due in tax_type_rollup(rows):
        values = [tax_type, count, total, paid, due]
        for col, value in enumerate(values, 1):
            cell = ws.cell(row=row_num, column=col, value=value)
            cell.border = BORDER
            if col >= 3:
                cell.number_format = EXCEL_INR_FORMAT
        row_num += 1

    ws.column_dimensions['A'].width = 38
    for col in range(2, len(TAX_TYPE_SUMMARY_HEADERS) + 1):
        ws.column_dimensions[get_column_letter(col)].width = 18


def build_tax_report(rows, period_label, data_sheet_title=None):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_title(data_sheet_title or period_label)
    write_detail_sheet(ws, rows)
    write_summary_sheet(wb.create_sheet('Summary'), rows, period_label)
    return wb


def render_tax_report(rows, report_filter, today=None):
    """Serialize the filtered rows into the downloadable report"""
    rows = list(rows)
    if report_filter.is_financial_year:
        title = f"FY {report_filter.financial_year}"
    else:
        title = report_filter.period_label

    try:
        wb = build_tax_report(rows, report_filter.period_label, title)
        output = BytesIO()
        wb.save(output)
    except Exception as e:
        logger.error(f"Failed to build tax report for {report_filter.period_label} "
                     f"({len(rows)} records): {str(e)}")
        raise InternalError('Failed to generate the Excel report. Please try again.') from e

    return TaxReport(
        content=output.getvalue(),
        filename=report_filename(report_filter, today),
        row_count=len(rows),
    )


# ============================================================================
# PROPERTY STATEMENT (all taxes of one property)
# ============================================================================

STATEMENT_HEADERS = [
    'क्र.सं. (S.No.)', 'कर प्रकार (Tax Type)', 'वित्तीय वर्ष (Financial Year)',
    'आधार राशि (Base Amount ₹)', 'स्थिति (Status)', 'कुल राशि (Total Amount ₹)',
    'भुगतान राशि (Amount Paid ₹)', 'शेष बकाया (Balance Due ₹)',
]


def render_property_statement(prop, panchayat, now=None):
    """Workbook listing every tax record of one property under an owner header"""
    taxes = list(prop.taxes.all())
    now = now or timezone.now()
    output = BytesIO()

    try:
        workbook = xlsxwriter.Workbook(output, {'in_memory': True})
        worksheet = workbook.add_worksheet('All Taxes')

        title_format = workbook.add_format({'bold': True, 'font_size': 14})
        header_format = workbook.add_format({
            'bold': True,
            'bg_color': '#16A34A',
            'font_color': 'white',
            'border': 1,
            'text_wrap': True,
        })
        money_format = workbook.add_format({'num_format': EXCEL_INR_FORMAT, 'border': 1})
        cell_format = workbook.add_format({'border': 1})
        total_format = workbook.add_format({'bold': True, 'num_format': EXCEL_INR_FORMAT, 'top': 2})

        panchayat_name = panchayat.panchayat_name if panchayat else 'लोनी पंचायत'
        worksheet.write(0, 0, panchayat_name, title_format)
        worksheet.write(1, 0, f"संपत्ति ID: {prop.property_id}")
        worksheet.write(2, 0, f"मालिक: {prop.owner_name}")
        worksheet.write(3, 0, f"पिता का नाम: {prop.father_name or 'N/A'}")
        worksheet.write(4, 0, f"मोबाइल: {prop.mobile_number or 'N/A'}")

        header_row = 6
        for col, header in enumerate(STATEMENT_HEADERS):
            worksheet.write(header_row, col, header, header_format)

        row = header_row + 1
        for index, tax in enumerate(taxes, 1):
            assessed = to_decimal(tax.assessed_amount)
            paid = to_decimal(tax.amount_paid)
            base = to_decimal(tax.base_amount) if tax.base_amount is not None else assessed
            worksheet.write(row, 0, index, cell_format)
            worksheet.write(row, 1, tax.tax_type, cell_format)
            worksheet.write(row, 2, str(tax.assessment_year), cell_format)
            worksheet.write_number(row, 3, float(base), money_format)
            worksheet.write(row, 4, tax.payment_status, cell_format)
            worksheet.write_number(row, 5, float(assessed), money_format)
            worksheet.write_number(row, 6, float(paid), money_format)
            worksheet.write_number(row, 7, float(assessed - paid), money_format)
            row += 1

        worksheet.write(row, 4, 'कुल (Total)', total_format)
        worksheet.write_number(row, 5, float(total_assessed(taxes)), total_format)
        worksheet.write_number(row, 6, float(total_paid(taxes)), total_format)
        worksheet.write_number(row, 7, float(total_assessed(taxes) - total_paid(taxes)), total_format)

        worksheet.set_column(0, 0, 10)
        worksheet.set_column(1, 2, 18)
        worksheet.set_column(3, 7, 16)
        workbook.close()
    except Exception as e:
        logger.error(f"Failed to build statement for property {prop.property_id} "
                     f"({len(taxes)} records): {str(e)}")
        raise InternalError('Failed to generate the property statement. Please try again.') from e

    filename = f"All_Taxes_{prop.property_id}_{now.strftime('%Y%m%d%H%M%S')}.xlsx"
    return TaxReport(content=output.getvalue(), filename=filename, row_count=len(taxes))


def rupee_summary(rows):
    """One-line total used in log messages and JSON previews"""
    return f"{format_currency(total_assessed(rows))} assessed, {format_currency(total_paid(rows))} paid"
