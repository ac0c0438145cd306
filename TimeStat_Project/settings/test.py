"""
Test Django settings for TimeStat_Project - in-memory SQLite, console logging
"""

from .base import *
from core.env_loader import get_env

# Environment identification
ENVIRONMENT = 'test'
DEBUG = False

SECRET_KEY = get_env('DJANGO_SECRET_KEY', 'test-key-for-development-only-not-secure')
ALLOWED_HOSTS = ['testserver', 'localhost', '127.0.0.1']

DATABASES = {
    'default': {
        'ENGINE': get_env('TEST_DB_ENGINE', 'django.db.backends.sqlite3'),
        'NAME': get_env('TEST_DB_NAME', ':memory:'),
    }
}

# Cache configuration - nothing survives between tests
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.dummy.DummyCache',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

TIME_ZONE = 'UTC'

# Logging configuration for testing
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'level': 'WARNING',
            'class': 'logging.StreamHandler',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': True,
        },
        'timestat': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
    },
}

# Small sheets so multi-sheet exports stay cheap in tests
TIMESTAT = dict(TIMESTAT, SPREADSHEET_MAX_ROWS=12)
