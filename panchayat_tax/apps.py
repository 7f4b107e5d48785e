from django.apps import AppConfig


class PanchayatTaxConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'panchayat_tax'
    verbose_name = 'Loni Gram Panchayat Tax Administration'
