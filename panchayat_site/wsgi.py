"""
WSGI config for the panchayat tax site
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'panchayat_site.settings')

application = get_wsgi_application()
