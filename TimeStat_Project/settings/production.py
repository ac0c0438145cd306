"""
Production Environment Settings for TimeStat_Project
Extends base settings with production-specific configurations
"""

from .base import *
from core.env_loader import get_env, get_bool_env, get_int_env, validate_environment

# Environment identification
ENVIRONMENT = 'production'

# Missing keys are logged; the defaults below still apply
REQUIRED_ENV_KEYS = ['DJANGO_SECRET_KEY', 'DB_NAME', 'DB_USER', 'DB_PASSWORD']
MISSING_ENV_KEYS = validate_environment(REQUIRED_ENV_KEYS)

# ==============================================
# PRODUCTION DATABASE CONFIGURATION
# ==============================================

# The aggregation SQL shape follows the engine family, see TIMESTAT['SQL_DIALECT']
DATABASES = {
    'default': {
        'ENGINE': get_env('DB_ENGINE', 'django.db.backends.postgresql'),
        'NAME': get_env('DB_NAME', 'timestat'),
        'USER': get_env('DB_USER', 'timestat'),
        'PASSWORD': get_env('DB_PASSWORD', ''),
        'HOST': get_env('DB_HOST', 'localhost'),
        'PORT': get_env('DB_PORT', '5432'),
        'CONN_MAX_AGE': get_int_env('DB_CONN_MAX_AGE', 180),
        'CONN_HEALTH_CHECKS': True,
        'ATOMIC_REQUESTS': False,
    }
}

# ==============================================
# PRODUCTION SECURITY
# ==============================================

SESSION_COOKIE_SECURE = get_bool_env('SESSION_COOKIE_SECURE', True)
CSRF_COOKIE_SECURE = get_bool_env('CSRF_COOKIE_SECURE', True)
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'SAMEORIGIN'
