"""
Loni Gram Panchayat Tax Administration - URL Configuration
"""

from django.urls import path
from . import views

app_name = 'panchayat_tax'

urlpatterns = [
    # Bills
    path('api/bills/', views.api_bill_list, name='bill_list'),
    path('api/bills/generate/', views.api_generate_bill, name='generate_bill'),
    path('bills/download/<str:token>/', views.bill_download, name='bill_download'),
    path('bills/verify/<str:bill_id>/', views.bill_verify, name='bill_verify'),

    # Reports & Dashboard
    path('api/dashboard/', views.api_dashboard, name='dashboard'),
    path('api/reports/preview/', views.api_report_preview, name='report_preview'),
    path('api/reports/pending/', views.api_pending_bills, name='pending_bills'),
    path('reports/export/', views.report_export, name='report_export'),

    # Properties & Tax Records
    path('api/properties/', views.api_property_list, name='property_list'),
    path('api/properties/<str:property_id>/', views.api_property_detail, name='property_detail'),
    path('api/properties/<str:property_id>/taxes/', views.api_tax_create, name='tax_create'),
    path('api/taxes/<int:pk>/payments/', views.api_record_payment, name='record_payment'),
    path('properties/<str:property_id>/statement/', views.property_statement_export, name='property_statement'),

    # Calculator & Settings
    path('api/calculate/', views.api_calculate_tax, name='calculate_tax'),
    path('api/settings/', views.api_settings, name='settings'),
]
