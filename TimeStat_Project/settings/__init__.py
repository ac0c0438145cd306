"""
Django settings for TimeStat_Project
Dynamically loads settings based on DJANGO_ENV environment variable
"""

import os

# Get environment from environment variable, default to production
DJANGO_ENV = os.environ.get('DJANGO_ENV', 'production').lower()

# Load appropriate settings based on environment
if DJANGO_ENV == 'test':
    from .test import *
else:  # production or default
    from .production import *
