"""
Loni Gram Panchayat Tax Administration - Django Models
Properties, tax records, bills, settings and users
"""

from django.db import models
from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator, RegexValidator
from django.conf import settings as django_settings
from decimal import Decimal


# ============================================================================
# CORE MODELS - User Management
# ============================================================================

class User(AbstractUser):
    """Panchayat staff account with a single role"""
    ROLE_SUPER_ADMIN = 'super_admin'
    ROLE_ADMIN = 'admin'
    ROLE_VIEWER = 'viewer'

    ROLE_CHOICES = [
        (ROLE_SUPER_ADMIN, 'Super Admin'),
        (ROLE_ADMIN, 'Admin'),
        (ROLE_VIEWER, 'Viewer'),
    ]

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_VIEWER)
    phone_number = models.CharField(max_length=15, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'

    def __str__(self):
        return f"{self.get_full_name() or self.username} ({self.get_role_display()})"

    @property
    def is_super_admin(self):
        super_admin_email = getattr(django_settings, 'SUPER_ADMIN_EMAIL', '')
        if super_admin_email and self.email and self.email.lower() == super_admin_email.lower():
            return True
        return self.role == self.ROLE_SUPER_ADMIN


# ============================================================================
# PANCHAYAT CONFIGURATION
# ============================================================================

class PanchayatSettings(models.Model):
    """Singleton letterhead and tax-rate configuration"""
    panchayat_name = models.CharField(max_length=200)
    district = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    pin_code = models.CharField(
        max_length=6,
        validators=[RegexValidator(r'^\d{6}$', 'PIN code must be exactly 6 digits')]
    )
    property_tax_rate = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal('0'))],
        help_text='Per sq ft per year; overrides the standard building rate when set'
    )
    water_tax_rate = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal('0'))],
        help_text='Flat yearly water charge; overrides the standard charge when set'
    )
    late_fee = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('1.50'),
        validators=[MinValueValidator(Decimal('0'))],
        help_text='Late fee percentage per month overdue'
    )
    updated_by = models.ForeignKey(
        'User', on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'panchayat_settings'
        verbose_name_plural = 'panchayat settings'

    def __str__(self):
        return self.panchayat_name

    def save(self, *args, **kwargs):
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def load(cls):
        return cls.objects.filter(pk=1).first()

    @property
    def address_line(self):
        return f"{self.district}, {self.state} - {self.pin_code}"


# ============================================================================
# PROPERTY & TAX RECORDS
# ============================================================================

class Property(models.Model):
    """Registered house, shop, farm or plant within the panchayat"""
    RESIDENTIAL = 'Residential'
    COMMERCIAL = 'Commercial'
    AGRICULTURAL = 'Agricultural'
    INDUSTRIAL = 'Industrial'

    PROPERTY_TYPE_CHOICES = [
        (RESIDENTIAL, 'Residential'),
        (COMMERCIAL, 'Commercial'),
        (AGRICULTURAL, 'Agricultural'),
        (INDUSTRIAL, 'Industrial'),
    ]

    property_id = models.CharField(
        max_length=50, unique=True,
        validators=[RegexValidator(r'^[A-Z0-9_-]+$', 'Use upper-case letters, digits, "-" or "_"')]
    )
    owner_name = models.CharField(max_length=100)
    father_name = models.CharField(max_length=100, blank=True)
    mobile_number = models.CharField(
        max_length=10, blank=True,
        validators=[RegexValidator(r'^[6-9]\d{9}$', 'Phone number must be 10 digits starting with 6-9')]
    )
    house_no = models.CharField(max_length=50, blank=True)
    address = models.CharField(max_length=500)
    property_type = models.CharField(max_length=20, choices=PROPERTY_TYPE_CHOICES, default=RESIDENTIAL)
    area = models.DecimalField(
        max_digits=12, decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
        help_text='Square feet, or acres for agricultural land'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'properties'
        verbose_name_plural = 'properties'
        ordering = ['property_id']

    def __str__(self):
        return f"{self.property_id} - {self.owner_name}"


class TaxRecord(models.Model):
    """One tax assessment against a property for a calendar year"""
    PROPERTY_TAX = 'Property Tax'
    WATER_TAX = 'Water Tax'
    SANITATION_TAX = 'Sanitation Tax'
    LIGHTING_TAX = 'Lighting Tax'
    LAND_TAX = 'Land Tax'
    BUSINESS_TAX = 'Business Tax'
    OTHER = 'Other'

    TAX_TYPE_CHOICES = [
        (PROPERTY_TAX, 'Property Tax'),
        (WATER_TAX, 'Water Tax'),
        (SANITATION_TAX, 'Sanitation Tax'),
        (LIGHTING_TAX, 'Lighting Tax'),
        (LAND_TAX, 'Land Tax'),
        (BUSINESS_TAX, 'Business Tax'),
        (OTHER, 'Other'),
    ]

    PAID = 'Paid'
    UNPAID = 'Unpaid'
    PARTIAL = 'Partial'

    PAYMENT_STATUS_CHOICES = [
        (PAID, 'Paid'),
        (UNPAID, 'Unpaid'),
        (PARTIAL, 'Partial'),
    ]

    parcel = models.ForeignKey(Property, on_delete=models.CASCADE, related_name='taxes')
    tax_type = models.CharField(max_length=30, choices=TAX_TYPE_CHOICES)
    assessment_year = models.PositiveIntegerField()

    base_amount = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal('0'))]
    )
    assessed_amount = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0'))]
    )
    amount_paid = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default=UNPAID)
    payment_date = models.DateField(null=True, blank=True)
    receipt_number = models.CharField(max_length=50, null=True, blank=True)
    remarks = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tax_records'
        ordering = ['assessment_year', 'id']
        indexes = [
            models.Index(fields=['assessment_year', 'tax_type'], name='tax_records_assessm_1b0e8c_idx'),
            models.Index(fields=['payment_status'], name='tax_records_payment_5d2f4a_idx'),
        ]

    def __str__(self):
        return f"{self.parcel.property_id} - {self.tax_type} {self.assessment_year}"

    @property
    def due_amount(self):
        return self.assessed_amount - self.amount_paid

    def record_payment(self, amount, payment_date, receipt_number=None):
        """Add a payment and recalculate the stored status"""
        from .aggregation import derive_payment_status

        self.amount_paid = self.amount_paid + Decimal(amount)
        self.payment_date = payment_date
        if receipt_number:
            self.receipt_number = receipt_number
        self.payment_status = derive_payment_status(self.assessed_amount, self.amount_paid)
        self.save()


# ============================================================================
# BILLING
# ============================================================================

class Bill(models.Model):
    """Generated consolidated bill; immutable once written"""
    bill_id = models.CharField(max_length=50, unique=True)
    parcel = models.ForeignKey(Property, on_delete=models.SET_NULL, null=True, related_name='bills')
    property_code = models.CharField(max_length=50)
    owner_name = models.CharField(max_length=100)
    house_no = models.CharField(max_length=50, blank=True)
    year = models.PositiveIntegerField()

    tax_breakdown = models.JSONField(default=list)
    total_amount = models.DecimalField(max_digits=15, decimal_places=2)
    amount_paid = models.DecimalField(max_digits=15, decimal_places=2, default=0)
    status = models.CharField(max_length=10, choices=TaxRecord.PAYMENT_STATUS_CHOICES)

    generated_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True)
    generated_at = models.DateTimeField()
    due_date = models.DateField()

    storage_path = models.CharField(max_length=255)
    storage_url = models.CharField(max_length=500, blank=True)
    download_url = models.CharField(max_length=500, blank=True)
    language = models.CharField(max_length=10)

    class Meta:
        db_table = 'bills'
        ordering = ['-generated_at']
        indexes = [
            models.Index(fields=['bill_id'], name='bills_bill_id_7c3a91_idx'),
            models.Index(fields=['property_code', 'year'], name='bills_propert_e2d4b6_idx'),
        ]

    def __str__(self):
        return f"{self.bill_id} - {self.owner_name}"

    @property
    def balance(self):
        return self.total_amount - self.amount_paid


# ============================================================================
# AUDIT TRAIL
# ============================================================================

class AuditLog(models.Model):
    """System-wide audit trail"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('generate', 'Generate'),
        ('payment', 'Payment'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True)
    action = models.CharField(max_length=20, choices=ACTION_CHOICES)

    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=50)
    object_repr = models.CharField(max_length=200)

    changes = models.JSONField(null=True, blank=True)

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-timestamp']

    def __str__(self):
        return f"{self.user} - {self.action} - {self.model_name}"
