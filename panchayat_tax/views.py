"""
Loni Gram Panchayat Tax Administration - Views
JSON API for bills, properties, payments, reports and settings,
plus the spreadsheet and PDF download endpoints
"""

from django.shortcuts import get_object_or_404
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.core.files.storage import default_storage
from django.core.signing import BadSignature, SignatureExpired
from django.db import transaction
from django.db.models import Q
from django.http import FileResponse, Http404, HttpResponse, JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST
from dataclasses import asdict
from decimal import Decimal
from functools import wraps
import json
import logging

from . import permissions
from .aggregation import (
    breakdown_by_tax_type, collection_rate, dashboard_summary, pending_bills,
    report_summary, status_counts, total_assessed, total_paid,
)
from .billing import BillingContext, PaymentInfo, generate_bill, record_payment, resolve_download_token
from .calculator import calculate_comprehensive_tax, rate_description
from .excel import XLSX_CONTENT_TYPE, render_property_statement, render_tax_report, rupee_summary
from .exceptions import (
    InternalError, InvalidArgument, NotFound, PermissionDenied, TaxAdminError, Unauthenticated,
)
from .filters import ReportFilter, flatten_records
from .formatting import format_currency, format_date, format_date_dashed
from .forms import PanchayatSettingsForm, PaymentForm, PropertyForm, TaxCalculationForm, TaxRecordForm
from .models import AuditLog, Bill, PanchayatSettings, Property, TaxRecord

logger = logging.getLogger(__name__)


PREVIEW_ROWS = 50
FILTER_PARAMS = ('financial_year', 'start_date', 'end_date', 'property_type', 'payment_status')


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def get_client_ip(request):
    """Get client IP address"""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0]
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip


def request_data(request):
    """JSON body or form-encoded POST data"""
    if request.content_type == 'application/json':
        try:
            data = json.loads(request.body or b'{}')
        except ValueError:
            raise InvalidArgument('Request body is not valid JSON')
        if not isinstance(data, dict):
            raise InvalidArgument('Request body must be a JSON object')
        return data
    return request.POST


def error_response(error):
    return JsonResponse({'success': False, 'error': error.as_dict()}, status=error.status_code)


def form_error_response(form):
    return JsonResponse({
        'success': False,
        'error': {'kind': InvalidArgument.kind, 'message': 'Please correct the errors below.'},
        'errors': {name: [str(e) for e in errors] for name, errors in form.errors.items()},
    }, status=400)


def api_view(action):
    """Authenticate, authorise and translate TaxAdminError into JSON"""
    def decorator(view):
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            try:
                if not request.user.is_authenticated:
                    raise Unauthenticated()
                if not permissions.can(action, request.user):
                    raise PermissionDenied()
                return view(request, *args, **kwargs)
            except TaxAdminError as e:
                return error_response(e)
            except Http404 as e:
                return error_response(NotFound(str(e) or None))
            except ValidationError as e:
                return error_response(InvalidArgument(' '.join(e.messages)))
        return wrapper
    return decorator


def audit(request, action, obj, changes=None):
    AuditLog.objects.create(
        user=request.user,
        action=action,
        model_name=obj.__class__.__name__,
        object_id=str(getattr(obj, 'property_id', None) or obj.pk),
        object_repr=str(obj)[:200],
        changes=changes,
        ip_address=get_client_ip(request),
    )


def properties_with_taxes():
    return Property.objects.prefetch_related('taxes')


def property_to_dict(prop, include_taxes=True):
    data = {
        'property_id': prop.property_id,
        'owner_name': prop.owner_name,
        'father_name': prop.father_name,
        'mobile_number': prop.mobile_number,
        'house_no': prop.house_no,
        'address': prop.address,
        'property_type': prop.property_type,
        'area': prop.area,
    }
    if include_taxes:
        data['taxes'] = [tax_to_dict(t) for t in prop.taxes.all()]
    return data


def tax_to_dict(tax):
    return {
        'id': tax.pk,
        'tax_type': tax.tax_type,
        'assessment_year': tax.assessment_year,
        'base_amount': tax.base_amount,
        'assessed_amount': tax.assessed_amount,
        'amount_paid': tax.amount_paid,
        'due_amount': tax.due_amount,
        'payment_status': tax.payment_status,
        'payment_date': tax.payment_date,
        'receipt_number': tax.receipt_number,
        'remarks': tax.remarks,
    }


def settings_to_dict(panchayat):
    if panchayat is None:
        return None
    return {
        'panchayat_name': panchayat.panchayat_name,
        'district': panchayat.district,
        'state': panchayat.state,
        'pin_code': panchayat.pin_code,
        'property_tax_rate': panchayat.property_tax_rate,
        'water_tax_rate': panchayat.water_tax_rate,
        'late_fee': panchayat.late_fee,
        'updated_at': panchayat.updated_at,
    }


def has_filter_params(params):
    return any(params.get(name) for name in FILTER_PARAMS)


# ============================================================================
# BILLS
# ============================================================================

@require_POST
def api_generate_bill(request):
    """Generate a consolidated bill PDF and return its signed download link"""
    try:
        data = request_data(request)
        ctx = BillingContext(
            base_url=request.build_absolute_uri('/'),
            ip_address=get_client_ip(request),
        )
        result = generate_bill(
            ctx,
            request.user,
            data.get('propertyId'),
            data.get('year'),
            data.get('taxTypes'),
            data.get('language', 'en'),
            PaymentInfo.from_payload(data.get('paymentInfo')),
        )
    except TaxAdminError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error generating bill: {str(e)}")
        return error_response(InternalError())

    return JsonResponse(result.as_dict())


@require_GET
def bill_download(request, token):
    """Serve a stored bill PDF for a signed, time-limited token"""
    try:
        bill = resolve_download_token(token)
    except SignatureExpired:
        return JsonResponse({'success': False, 'error': {
            'kind': 'expired', 'message': 'This download link has expired. Please generate the bill again.'
        }}, status=410)
    except BadSignature:
        return error_response(NotFound('Download link is invalid.'))

    filename = f"Tax-Receipt-{bill.property_code}-{format_date_dashed(bill.generated_at)}.pdf"
    try:
        handle = default_storage.open(bill.storage_path, 'rb')
    except FileNotFoundError:
        logger.error(f"Bill {bill.bill_id} has no stored file at {bill.storage_path}")
        return error_response(InternalError('The bill file is no longer available.'))
    return FileResponse(handle, as_attachment=True, filename=filename, content_type='application/pdf')


@require_GET
def bill_verify(request, bill_id):
    """Public verification target of the QR code printed on each bill"""
    bill = Bill.objects.filter(bill_id=bill_id).first()
    if bill is None:
        return JsonResponse({'valid': False, 'bill_id': bill_id}, status=404)

    panchayat = PanchayatSettings.load()
    return JsonResponse({
        'valid': True,
        'bill_id': bill.bill_id,
        'panchayat': panchayat.panchayat_name if panchayat else None,
        'property_id': bill.property_code,
        'owner_name': bill.owner_name,
        'year': bill.year,
        'total_amount': format_currency(bill.total_amount),
        'amount_paid': format_currency(bill.amount_paid),
        'status': bill.status,
        'generated_on': format_date(bill.generated_at),
        'due_date': format_date(bill.due_date),
    })


@api_view(permissions.VIEW)
@require_GET
def api_bill_list(request):
    bills = Bill.objects.all()
    property_id = request.GET.get('property_id')
    if property_id:
        bills = bills.filter(property_code=property_id)
    year = request.GET.get('year')
    if year:
        bills = bills.filter(year=year)

    return JsonResponse({'bills': [{
        'bill_id': b.bill_id,
        'property_id': b.property_code,
        'owner_name': b.owner_name,
        'year': b.year,
        'total_amount': b.total_amount,
        'amount_paid': b.amount_paid,
        'status': b.status,
        'generated_at': b.generated_at,
        'due_date': b.due_date,
        'language': b.language,
    } for b in bills[:200]]})


# ============================================================================
# REPORTS & DASHBOARD
# ============================================================================

@login_required
@require_GET
def report_export(request):
    """Download the filtered tax report workbook"""
    if not permissions.can(permissions.EXPORT_REPORT, request.user):
        return error_response(PermissionDenied())
    try:
        report_filter = ReportFilter.from_query(request.GET)
    except ValidationError as e:
        return error_response(InvalidArgument(' '.join(e.messages)))

    rows = report_filter.apply(flatten_records(properties_with_taxes()))
    try:
        report = render_tax_report(rows, report_filter)
    except TaxAdminError as e:
        return error_response(e)

    logger.info(f"Tax report {report.filename} exported by {request.user.username} "
                f"with {report.row_count} records, {rupee_summary(rows)}")
    response = HttpResponse(report.content, content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename={report.filename}'
    return response


@api_view(permissions.EXPORT_REPORT)
@require_GET
def api_report_preview(request):
    report_filter = ReportFilter.from_query(request.GET)
    rows = report_filter.apply(flatten_records(properties_with_taxes()))
    assessed = total_assessed(rows)
    paid = total_paid(rows)
    return JsonResponse({
        'period': report_filter.period_label,
        'count': len(rows),
        'total_properties': len({r.property_id for r in rows}),
        'total_assessed': assessed,
        'total_paid': paid,
        'total_due': assessed - paid,
        'status_counts': status_counts(rows),
        'by_tax_type': breakdown_by_tax_type(rows),
        'rows': [dict(asdict(r), balance_due=r.balance_due) for r in rows[:PREVIEW_ROWS]],
    })


@api_view(permissions.VIEW)
@require_GET
def api_dashboard(request):
    """Dashboard cards and chart data, optionally narrowed by the report filter"""
    properties = list(properties_with_taxes())

    if has_filter_params(request.GET):
        report_filter = ReportFilter.from_query(request.GET, require_period=False)
        rows = report_filter.apply(flatten_records(properties))
        assessed = total_assessed(rows)
        paid = total_paid(rows)
        summary = {
            'period': report_filter.period_label,
            'total_properties': len({r.property_id for r in rows}),
            'total_tax_records': len(rows),
            'total_assessed': assessed,
            'total_paid': paid,
            'total_due': assessed - paid,
            'collection_rate': collection_rate(rows).quantize(Decimal('0.01')),
            'by_tax_type': breakdown_by_tax_type(rows),
            'status_counts': status_counts(rows),
        }
    else:
        summary = dashboard_summary(properties)

    summary['cards'] = {
        'total_assessed': format_currency(summary['total_assessed'], 0),
        'total_paid': format_currency(summary['total_paid'], 0),
        'total_due': format_currency(summary['total_due'], 0),
        'collection_rate': f"{summary['collection_rate']}%",
    }
    return JsonResponse(summary)


@api_view(permissions.VIEW)
@require_GET
def api_pending_bills(request):
    properties = list(properties_with_taxes())
    pending = pending_bills(properties)
    return JsonResponse({
        'summary': report_summary(properties, pending),
        'pending': pending,
    })


# ============================================================================
# PROPERTIES & TAX RECORDS
# ============================================================================

@api_view(permissions.VIEW)
@require_http_methods(["GET", "POST"])
def api_property_list(request):
    if request.method == 'POST':
        if not permissions.can(permissions.MANAGE_PROPERTIES, request.user):
            raise PermissionDenied()
        form = PropertyForm(request_data(request))
        if not form.is_valid():
            return form_error_response(form)
        with transaction.atomic():
            prop = form.save()
            audit(request, 'create', prop, {'property_id': prop.property_id})
        logger.info(f"Property {prop.property_id} registered by {request.user.username}")
        return JsonResponse({'success': True, 'property': property_to_dict(prop)}, status=201)

    properties = properties_with_taxes()
    search = request.GET.get('q', '').strip()
    if search:
        properties = properties.filter(Q(owner_name__icontains=search) | Q(property_id__icontains=search))
    property_type = request.GET.get('property_type')
    if property_type and property_type != 'all':
        properties = properties.filter(property_type=property_type)
    return JsonResponse({'properties': [property_to_dict(p) for p in properties]})


@api_view(permissions.VIEW)
@require_http_methods(["GET", "POST", "DELETE"])
def api_property_detail(request, property_id):
    prop = get_object_or_404(Property, property_id=property_id)

    if request.method == 'GET':
        return JsonResponse({'property': property_to_dict(prop)})

    if not permissions.can(permissions.MANAGE_PROPERTIES, request.user):
        raise PermissionDenied()

    if request.method == 'DELETE':
        with transaction.atomic():
            audit(request, 'delete', prop, {'tax_records': prop.taxes.count()})
            prop.delete()
        logger.info(f"Property {property_id} deleted by {request.user.username}")
        return JsonResponse({'success': True})

    form = PropertyForm(request_data(request), instance=prop)
    if not form.is_valid():
        return form_error_response(form)
    with transaction.atomic():
        prop = form.save()
        audit(request, 'update', prop, {'fields': form.changed_data})
    return JsonResponse({'success': True, 'property': property_to_dict(prop)})


@api_view(permissions.MANAGE_PROPERTIES)
@require_POST
def api_tax_create(request, property_id):
    """Assess a new tax record against a property"""
    prop = get_object_or_404(Property, property_id=property_id)
    form = TaxRecordForm(request_data(request))
    if not form.is_valid():
        return form_error_response(form)

    with transaction.atomic():
        tax = form.save(commit=False)
        tax.parcel = prop
        tax.save()
        audit(request, 'create', tax, {'tax_type': tax.tax_type, 'year': tax.assessment_year,
                                        'assessed_amount': str(tax.assessed_amount)})
    return JsonResponse({'success': True, 'tax': tax_to_dict(tax)}, status=201)


@api_view(permissions.RECORD_PAYMENT)
@require_POST
def api_record_payment(request, pk):
    tax = get_object_or_404(TaxRecord.objects.select_related('parcel'), pk=pk)
    form = PaymentForm(request_data(request))
    if not form.is_valid():
        return form_error_response(form)

    tax = record_payment(
        request.user, tax,
        form.cleaned_data['amount'],
        form.cleaned_data['payment_date'],
        form.cleaned_data['receipt_number'] or None,
        ip_address=get_client_ip(request),
    )
    return JsonResponse({'success': True, 'tax': tax_to_dict(tax)})


@login_required
@require_GET
def property_statement_export(request, property_id):
    """All tax records of one property as a workbook"""
    if not permissions.can(permissions.EXPORT_REPORT, request.user):
        return error_response(PermissionDenied())
    prop = get_object_or_404(Property, property_id=property_id)
    try:
        statement = render_property_statement(prop, PanchayatSettings.load())
    except TaxAdminError as e:
        return error_response(e)

    response = HttpResponse(statement.content, content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename={statement.filename}'
    return response


# ============================================================================
# CALCULATOR & SETTINGS
# ============================================================================

@api_view(permissions.VIEW)
@require_POST
def api_calculate_tax(request):
    data = request_data(request).copy()
    for flag in ('include_water', 'include_sanitation', 'include_lighting'):
        if flag not in data:
            data[flag] = True

    form = TaxCalculationForm(data)
    if not form.is_valid():
        return form_error_response(form)

    cleaned = form.cleaned_data
    try:
        result = calculate_comprehensive_tax(settings=PanchayatSettings.load(), **cleaned)
    except ValueError as e:
        raise InvalidArgument(str(e))
    result['rate_description'] = rate_description(cleaned['property_type'], cleaned['location_type'])
    return JsonResponse({'success': True, 'calculation': result})


@api_view(permissions.VIEW)
@require_http_methods(["GET", "POST"])
def api_settings(request):
    """Read the panchayat settings; only the super admin may change them"""
    panchayat = PanchayatSettings.load()
    if request.method == 'GET':
        return JsonResponse({'settings': settings_to_dict(panchayat)})

    if not permissions.can(permissions.UPDATE_SETTINGS, request.user):
        raise PermissionDenied('Only the super admin can change panchayat settings.')

    form = PanchayatSettingsForm(request_data(request), instance=panchayat)
    if not form.is_valid():
        return form_error_response(form)

    with transaction.atomic():
        panchayat = form.save(commit=False)
        panchayat.updated_by = request.user
        panchayat.save()
        audit(request, 'update', panchayat, {'fields': form.changed_data})
    logger.info(f"Panchayat settings updated by {request.user.username}: {', '.join(form.changed_data)}")
    return JsonResponse({'success': True, 'settings': settings_to_dict(panchayat)})
