# forms.py

from django import forms
from decimal import Decimal

from .calculator import AGRICULTURAL_CHOICES, LOCATION_CHOICES, UNIRRIGATED
from .models import PanchayatSettings, Property, TaxRecord


class PropertyForm(forms.ModelForm):
    """Form for registering and updating properties"""

    class Meta:
        model = Property
        fields = [
            'property_id', 'owner_name', 'father_name', 'mobile_number',
            'house_no', 'address', 'property_type', 'area'
        ]
        widgets = {
            'property_id': forms.TextInput(attrs={
                'class': 'form-control',
                'placeholder': 'e.g., LONI-001'
            }),
            'owner_name': forms.TextInput(attrs={'class': 'form-control'}),
            'father_name': forms.TextInput(attrs={'class': 'form-control'}),
            'mobile_number': forms.TextInput(attrs={
                'class': 'form-control',
                'placeholder': '10-digit mobile number'
            }),
            'house_no': forms.TextInput(attrs={'class': 'form-control'}),
            'address': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
            'property_type': forms.Select(attrs={'class': 'form-select'}),
            'area': forms.NumberInput(attrs={
                'class': 'form-control',
                'placeholder': 'Sq ft (acres for agricultural land)'
            }),
        }

    def clean_property_id(self):
        property_id = self.cleaned_data.get('property_id')
        if property_id:
            property_id = property_id.strip().upper()
            qs = Property.objects.filter(property_id=property_id)
            if self.instance.pk:
                qs = qs.exclude(pk=self.instance.pk)
            if qs.exists():
                raise forms.ValidationError('A property with this ID already exists.')
        return property_id

    def clean_area(self):
        area = self.cleaned_data.get('area')
        if area is not None and area <= 0:
            raise forms.ValidationError('Area must be greater than 0.')
        return area


class TaxRecordForm(forms.ModelForm):
    """Form for assessing a tax against a property"""

    class Meta:
        model = TaxRecord
        fields = [
            'tax_type', 'assessment_year', 'base_amount', 'assessed_amount',
            'amount_paid', 'payment_date', 'receipt_number', 'remarks'
        ]
        widgets = {
            'tax_type': forms.Select(attrs={'class': 'form-select'}),
            'assessment_year': forms.NumberInput(attrs={'class': 'form-control', 'placeholder': 'e.g., 2025'}),
            'base_amount': forms.NumberInput(attrs={'class': 'form-control'}),
            'assessed_amount': forms.NumberInput(attrs={'class': 'form-control'}),
            'amount_paid': forms.NumberInput(attrs={'class': 'form-control'}),
            'payment_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'receipt_number': forms.TextInput(attrs={'class': 'form-control'}),
            'remarks': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
        }

    def clean_assessment_year(self):
        year = self.cleaned_data.get('assessment_year')
        if year is not None and not 1900 <= year <= 2100:
            raise forms.ValidationError('Enter a valid assessment year.')
        return year

    def clean(self):
        cleaned_data = super().clean()
        paid = cleaned_data.get('amount_paid') or Decimal('0')
        if paid > 0 and not cleaned_data.get('payment_date'):
            self.add_error('payment_date', 'Payment date is required when an amount is paid.')
        return cleaned_data

    def save(self, commit=True):
        from .aggregation import derive_payment_status

        tax = super().save(commit=False)
        tax.payment_status = derive_payment_status(tax.assessed_amount, tax.amount_paid)
        if commit:
            tax.save()
        return tax


class PaymentForm(forms.Form):
    """Counter payment against one tax record"""
    amount = forms.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0.01'),
        widget=forms.NumberInput(attrs={'class': 'form-control'})
    )
    payment_date = forms.DateField(
        widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'})
    )
    receipt_number = forms.CharField(
        max_length=50, required=False,
        widget=forms.TextInput(attrs={'class': 'form-control'})
    )


class PanchayatSettingsForm(forms.ModelForm):
    """Letterhead and tax-rate configuration"""

    class Meta:
        model = PanchayatSettings
        fields = [
            'panchayat_name', 'district', 'state', 'pin_code',
            'property_tax_rate', 'water_tax_rate', 'late_fee'
        ]
        widgets = {
            'panchayat_name': forms.TextInput(attrs={'class': 'form-control'}),
            'district': forms.TextInput(attrs={'class': 'form-control'}),
            'state': forms.TextInput(attrs={'class': 'form-control'}),
            'pin_code': forms.TextInput(attrs={'class': 'form-control', 'placeholder': '201102'}),
            'property_tax_rate': forms.NumberInput(attrs={'class': 'form-control'}),
            'water_tax_rate': forms.NumberInput(attrs={'class': 'form-control'}),
            'late_fee': forms.NumberInput(attrs={'class': 'form-control'}),
        }

    def clean_late_fee(self):
        late_fee = self.cleaned_data.get('late_fee')
        if late_fee is not None and late_fee > 100:
            raise forms.ValidationError('Late fee must be a percentage between 0 and 100.')
        return late_fee


class TaxCalculationForm(forms.Form):
    """Inputs for the standard-rate tax calculator"""
    property_type = forms.ChoiceField(choices=Property.PROPERTY_TYPE_CHOICES)
    location_type = forms.ChoiceField(choices=LOCATION_CHOICES)
    area = forms.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    agricultural_type = forms.ChoiceField(choices=AGRICULTURAL_CHOICES, required=False)
    include_water = forms.BooleanField(required=False, initial=True)
    include_sanitation = forms.BooleanField(required=False, initial=True)
    include_lighting = forms.BooleanField(required=False, initial=True)
    assessment_date = forms.DateField(required=False)
    assessment_year = forms.IntegerField(required=False, min_value=1900, max_value=2100)
    due_date = forms.DateField(required=False)
    payment_date = forms.DateField(required=False)

    def clean_agricultural_type(self):
        return self.cleaned_data.get('agricultural_type') or UNIRRIGATED
