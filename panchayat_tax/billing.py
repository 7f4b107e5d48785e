"""
Bill generation service

Fetches a property's tax records for one year, renders the consolidated PDF,
writes it to storage, issues a short-lived signed download link and records
the Bill. Optionally marks the included tax records as paid.

The storage write and the Bill row are not atomic: if saving the row fails
after the upload, the PDF is left in storage without a Bill pointing to it.
"""

from dataclasses import dataclass, field
from decimal import Decimal
import logging

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.core.signing import BadSignature, TimestampSigner
from django.db import transaction
from django.urls import reverse
from django.utils import timezone

from . import conf, permissions, ratelimit
from .aggregation import derive_payment_status
from .exceptions import (
    InternalError, InvalidArgument, NotFound, PermissionDenied, TaxAdminError, Unauthenticated,
)
from .formatting import today_ist
from .localization import LANGUAGES
from .models import AuditLog, Bill, PanchayatSettings, Property, TaxRecord
from .pdf import generate_bill_id, render_bill

logger = logging.getLogger(__name__)


DOWNLOAD_SALT = 'panchayat_tax.bill-download'
VALID_TAX_TYPES = {choice for choice, _ in TaxRecord.TAX_TYPE_CHOICES}


def download_signer():
    return TimestampSigner(salt=DOWNLOAD_SALT)


@dataclass
class BillingContext:
    """Collaborators for one bill-generation request"""
    storage: object = field(default_factory=lambda: default_storage)
    signer: TimestampSigner = field(default_factory=download_signer)
    settings: PanchayatSettings = None
    clock: object = timezone.now
    base_url: str = ''
    ip_address: str = None

    def __post_init__(self):
        if self.settings is None:
            self.settings = PanchayatSettings.load()


@dataclass
class PaymentInfo:
    is_paid: bool = False
    payment_method: str = ''
    receipt_number: str = ''

    @classmethod
    def from_payload(cls, payload):
        if not payload:
            return None
        if not isinstance(payload, dict):
            raise InvalidArgument('paymentInfo must be an object')
        return cls(
            is_paid=bool(payload.get('isPaid')),
            payment_method=str(payload.get('paymentMethod') or ''),
            receipt_number=str(payload.get('receiptNumber') or ''),
        )


@dataclass
class GeneratedBill:
    bill: Bill
    download_url: str

    def as_dict(self):
        return {'success': True, 'billId': self.bill.bill_id, 'downloadUrl': self.download_url}


# ============================================================================
# SIGNED DOWNLOAD LINKS
# ============================================================================

def download_token(signer, bill_id):
    return signer.sign(bill_id)


def download_url_for(ctx, bill_id):
    path = reverse('panchayat_tax:bill_download', args=[download_token(ctx.signer, bill_id)])
    return f"{ctx.base_url.rstrip('/')}{path}"


def resolve_download_token(token, signer=None, max_age=None):
    """Bill for a signed token; raises SignatureExpired or BadSignature"""
    signer = signer or download_signer()
    max_age = max_age if max_age is not None else conf.get('DOWNLOAD_URL_MAX_AGE')
    bill_id = signer.unsign(token, max_age=max_age)
    try:
        return Bill.objects.get(bill_id=bill_id)
    except Bill.DoesNotExist:
        raise BadSignature(f"No bill {bill_id}")


def verification_url_for(bill_id):
    return conf.get('VERIFY_URL_TEMPLATE').format(bill_id=bill_id)


# ============================================================================
# VALIDATION
# ============================================================================

def check_actor(actor):
    if actor is None or not getattr(actor, 'is_authenticated', False):
        raise Unauthenticated()
    if not permissions.can(permissions.GENERATE_BILL, actor):
        raise PermissionDenied('You must be an admin to perform this action.')


def clean_request(property_id, year, tax_types, language):
    if not isinstance(property_id, str) or not property_id.strip():
        raise InvalidArgument('propertyId is required')
    try:
        year = int(year)
    except (TypeError, ValueError):
        raise InvalidArgument(f"year must be a number, got {year!r}")
    if not isinstance(tax_types, list) or not tax_types:
        raise InvalidArgument('taxTypes must be a non-empty list')
    if not all(isinstance(t, str) for t in tax_types):
        raise InvalidArgument('taxTypes must be a list of tax type names')
    unknown = [t for t in tax_types if t not in VALID_TAX_TYPES]
    if unknown:
        raise InvalidArgument(f"Unknown tax types: {', '.join(map(str, unknown))}")
    if language not in LANGUAGES:
        raise InvalidArgument(f"language must be one of {', '.join(LANGUAGES)}")
    return property_id.strip(), year, list(tax_types), language


def breakdown_snapshot(taxes):
    return [{
        'tax_type': tax.tax_type,
        'assessment_year': tax.assessment_year,
        'assessed_amount': str(tax.assessed_amount),
        'amount_paid': str(tax.amount_paid),
        'payment_status': tax.payment_status,
        'receipt_number': tax.receipt_number,
    } for tax in taxes]


def bill_status(total_assessed, total_paid, payment_info):
    if payment_info and payment_info.is_paid:
        return TaxRecord.PAID
    return derive_payment_status(total_assessed, total_paid)


# ============================================================================
# GENERATION
# ============================================================================

def generate_bill(ctx, actor, property_id, year, tax_types, language, payment_info=None):
    """Render, store and record one consolidated bill"""
    check_actor(actor)
    ratelimit.hit('generate_bill', actor.pk)
    property_id, year, tax_types, language = clean_request(property_id, year, tax_types, language)

    logger.info(f"Generating bill for property {property_id}, year {year} by {actor.username}")

    try:
        prop = Property.objects.get(property_id=property_id)
    except Property.DoesNotExist:
        raise NotFound(f"Property with ID {property_id} not found.")

    taxes = list(prop.taxes.filter(assessment_year=year, tax_type__in=tax_types))
    if not taxes:
        raise NotFound('No applicable tax records found for the selected criteria.')
    if ctx.settings is None:
        raise InternalError('Panchayat settings have not been configured.')

    generated_at = ctx.clock()
    bill_id = generate_bill_id(year)

    try:
        rendered = render_bill(prop, taxes, ctx.settings, language, bill_id,
                               generated_at, verification_url_for(bill_id))
        storage_path = ctx.storage.save(f"bills/{year}/{bill_id}.pdf", ContentFile(rendered.pdf_bytes))
    except TaxAdminError:
        raise
    except Exception as e:
        logger.exception(f"Failed to render or store bill {bill_id} for property {property_id} "
                         f"({len(taxes)} tax records): {str(e)}")
        raise InternalError('Failed to generate the bill. Please try again.') from e

    try:
        storage_url = ctx.storage.url(storage_path)
    except NotImplementedError:
        storage_url = ''
    download_url = download_url_for(ctx, bill_id)

    try:
        with transaction.atomic():
            bill = Bill.objects.create(
                bill_id=bill_id,
                parcel=prop,
                property_code=prop.property_id,
                owner_name=prop.owner_name,
                house_no=prop.house_no,
                year=year,
                tax_breakdown=breakdown_snapshot(taxes),
                total_amount=rendered.total_assessed,
                amount_paid=rendered.total_paid,
                status=bill_status(rendered.total_assessed, rendered.total_paid, payment_info),
                generated_by=actor,
                generated_at=generated_at,
                due_date=rendered.due_date,
                storage_path=storage_path,
                storage_url=storage_url,
                download_url=download_url,
                language=language,
            )
            AuditLog.objects.create(
                user=actor,
                action='generate',
                model_name='Bill',
                object_id=bill_id,
                object_repr=str(bill),
                changes={'property_id': prop.property_id, 'year': year, 'tax_types': tax_types},
                ip_address=ctx.ip_address,
            )
            if payment_info and payment_info.is_paid:
                mark_taxes_paid(actor, taxes, payment_info, ctx.ip_address)
    except Exception as e:
        logger.exception(f"Bill {bill_id} stored at {storage_path} but could not be recorded: {str(e)}")
        raise InternalError('Failed to record the bill. Please try again.') from e

    logger.info(f"Bill {bill_id} generated for property {property_id}: "
                f"{len(taxes)} records, {rendered.page_count} page(s), status {bill.status}")
    return GeneratedBill(bill=bill, download_url=download_url)


def mark_taxes_paid(actor, taxes, payment_info, ip_address=None):
    payment_date = today_ist()
    for tax in taxes:
        tax.amount_paid = tax.assessed_amount
        tax.payment_status = TaxRecord.PAID
        tax.payment_date = payment_date
        if payment_info.receipt_number:
            tax.receipt_number = payment_info.receipt_number
        tax.save()
        AuditLog.objects.create(
            user=actor,
            action='payment',
            model_name='TaxRecord',
            object_id=str(tax.pk),
            object_repr=str(tax),
            changes={
                'amount_paid': str(tax.amount_paid),
                'payment_method': payment_info.payment_method,
                'receipt_number': payment_info.receipt_number,
            },
            ip_address=ip_address,
        )


def record_payment(actor, tax, amount, payment_date, receipt_number=None, ip_address=None):
    """Apply a counter payment to one tax record"""
    if actor is None or not getattr(actor, 'is_authenticated', False):
        raise Unauthenticated()
    if not permissions.can(permissions.RECORD_PAYMENT, actor):
        raise PermissionDenied()
    amount = Decimal(str(amount))
    if amount <= 0:
        raise InvalidArgument('Payment amount must be greater than zero')

    with transaction.atomic():
        tax.record_payment(amount, payment_date, receipt_number)
        AuditLog.objects.create(
            user=actor,
            action='payment',
            model_name='TaxRecord',
            object_id=str(tax.pk),
            object_repr=str(tax),
            changes={'amount': str(amount), 'receipt_number': receipt_number,
                     'payment_status': tax.payment_status},
            ip_address=ip_address,
        )
    logger.info(f"Payment of {amount} recorded on tax record {tax.pk} "
                f"({tax.parcel.property_id}) by {actor.username}; status {tax.payment_status}")
    return tax


