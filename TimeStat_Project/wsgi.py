"""
WSGI config for TimeStat_Project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'TimeStat_Project.settings')

application = get_wsgi_application()
