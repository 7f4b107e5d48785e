"""
Loni Gram Panchayat Tax Administration - Django Admin Configuration
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from .templatetags.tax_filters import ddmmyyyy, inr
from .models import AuditLog, Bill, PanchayatSettings, Property, TaxRecord, User


STATUS_COLORS = {
    TaxRecord.PAID: 'green',
    TaxRecord.PARTIAL: 'orange',
    TaxRecord.UNPAID: 'red',
}


def status_badge(status):
    return format_html(
        '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
        STATUS_COLORS.get(status, 'gray'),
        status
    )


# ============================================================================
# USERS & SETTINGS
# ============================================================================

@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'get_full_name', 'email', 'role', 'is_active', 'is_staff']
    list_filter = ['role', 'is_active', 'is_staff', 'is_superuser']
    search_fields = ['username', 'first_name', 'last_name', 'email', 'phone_number']
    ordering = ['-date_joined']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Panchayat Information', {
            'fields': ('role', 'phone_number')
        }),
    )


@admin.register(PanchayatSettings)
class PanchayatSettingsAdmin(admin.ModelAdmin):
    list_display = ['panchayat_name', 'district', 'state', 'pin_code', 'late_fee', 'updated_by', 'updated_at']
    readonly_fields = ['updated_by', 'updated_at']

    def has_add_permission(self, request):
        return not PanchayatSettings.objects.exists()

    def has_change_permission(self, request, obj=None):
        return getattr(request.user, 'is_super_admin', False)

    def save_model(self, request, obj, form, change):
        obj.updated_by = request.user
        super().save_model(request, obj, form, change)


# ============================================================================
# PROPERTIES & TAX RECORDS
# ============================================================================

class TaxRecordInline(admin.TabularInline):
    model = TaxRecord
    extra = 0
    fields = ['tax_type', 'assessment_year', 'assessed_amount', 'amount_paid',
              'payment_status', 'payment_date', 'receipt_number']


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ['property_id', 'owner_name', 'father_name', 'mobile_number', 'property_type', 'area', 'tax_count']
    list_filter = ['property_type']
    search_fields = ['property_id', 'owner_name', 'father_name', 'mobile_number', 'address']
    inlines = [TaxRecordInline]

    def tax_count(self, obj):
        return obj.taxes.count()
    tax_count.short_description = 'Tax Records'


@admin.register(TaxRecord)
class TaxRecordAdmin(admin.ModelAdmin):
    list_display = ['parcel', 'tax_type', 'assessment_year', 'assessed_display', 'paid_display', 'status_badge']
    list_filter = ['tax_type', 'assessment_year', 'payment_status']
    search_fields = ['parcel__property_id', 'parcel__owner_name', 'receipt_number']
    raw_id_fields = ['parcel']

    def assessed_display(self, obj):
        return inr(obj.assessed_amount)
    assessed_display.short_description = 'Assessed'

    def paid_display(self, obj):
        return inr(obj.amount_paid)
    paid_display.short_description = 'Paid'

    def status_badge(self, obj):
        return status_badge(obj.payment_status)
    status_badge.short_description = 'Status'


# ============================================================================
# BILLING & AUDIT
# ============================================================================

@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ['bill_id', 'property_code', 'owner_name', 'year', 'total_display', 'status_badge',
                    'generated_by', 'generated_at', 'due_display']
    list_filter = ['status', 'year', 'language', 'generated_at']
    search_fields = ['bill_id', 'property_code', 'owner_name']
    date_hierarchy = 'generated_at'

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def total_display(self, obj):
        return inr(obj.total_amount)
    total_display.short_description = 'Total'

    def due_display(self, obj):
        return ddmmyyyy(obj.due_date)
    due_display.short_description = 'Due Date'

    def status_badge(self, obj):
        return status_badge(obj.status)
    status_badge.short_description = 'Status'


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['user', 'action', 'model_name', 'object_repr', 'ip_address', 'timestamp']
    list_filter = ['action', 'model_name', 'timestamp']
    search_fields = ['user__username', 'model_name', 'object_id', 'object_repr']
    date_hierarchy = 'timestamp'
    readonly_fields = ['user', 'action', 'model_name', 'object_id', 'object_repr', 'changes', 'ip_address', 'timestamp']

    def has_add_permission(self, request):
        return False
