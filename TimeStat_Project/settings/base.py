"""
Base Django settings for TimeStat_Project.
Contains all common settings shared across environments.
"""

import os
import sys
from pathlib import Path
from django.core.management.utils import get_random_secret_key

# Load environment variables from unified .env file
from core.env_loader import get_env, get_bool_env, get_int_env, get_list_env

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Add the project root to the Python path
sys.path.insert(0, str(BASE_DIR))

# ==============================================
# LOGGING CONFIGURATION
# ==============================================

# Get logs directory from environment (server-independent)
LOG_DIR = get_env('LOGS_DIR', os.path.join(BASE_DIR, 'logs'))

# Ensure log directory exists
os.makedirs(LOG_DIR, exist_ok=True)

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'file': {
            'level': 'INFO',
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': os.path.join(LOG_DIR, 'timestat.log'),
            'maxBytes': 50 * 1024 * 1024,  # 50MB
            'backupCount': 3,
            'formatter': 'verbose',
        },
        'error_file': {
            'level': 'ERROR',
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': os.path.join(LOG_DIR, 'timestat_errors.log'),
            'maxBytes': 10 * 1024 * 1024,  # 10MB
            'backupCount': 5,
            'formatter': 'verbose',
        },
        'console': {
            'level': 'ERROR',
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['file', 'error_file'],
            'level': 'WARNING',
            'propagate': False,
        },
        'django.db.backends': {
            'handlers': ['error_file'],
            'level': 'ERROR',
            'propagate': False,
        },
        'timestat': {
            'handlers': ['file', 'error_file'],
            'level': 'INFO',
            'propagate': False,
        },
        'security': {
            'handlers': ['file', 'error_file'],
            'level': 'INFO',
            'propagate': False,
        },
    },
    'root': {
        'handlers': ['file', 'console'],
        'level': 'INFO',
    },
}

# ==============================================
# CORE DJANGO SETTINGS
# ==============================================

SECRET_KEY = get_env('DJANGO_SECRET_KEY')
if not SECRET_KEY:
    # Generate a secure secret key if not provided
    SECRET_KEY = get_random_secret_key()

DEBUG = get_bool_env('DJANGO_DEBUG', False)
ALLOWED_HOSTS = get_list_env('ALLOWED_HOSTS', default=['localhost', '127.0.0.1'])

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ==============================================
# INSTALLED APPS
# ==============================================

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Platform apps
    'core',
    'users',
    'courses',
    'groups',
    'role_management',

    # Reporting
    'timestat',
]

# ==============================================
# MIDDLEWARE CONFIGURATION
# ==============================================

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'TimeStat_Project.urls'

# ==============================================
# TEMPLATES CONFIGURATION
# ==============================================

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [
            BASE_DIR / 'templates',
        ],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'TimeStat_Project.wsgi.application'

# ==============================================
# AUTHENTICATION
# ==============================================

LOGIN_URL = '/admin/login/'

# ==============================================
# SESSION CONFIGURATION
# ==============================================

SESSION_ENGINE = 'django.contrib.sessions.backends.db'
SESSION_SERIALIZER = 'django.contrib.sessions.serializers.JSONSerializer'
SESSION_COOKIE_AGE = 86400  # 24 hours
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = 'Lax'

# ==============================================
# CACHE CONFIGURATION
# ==============================================

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'timestat-default',
        'TIMEOUT': 300,  # 5 minutes default
    }
}

# ==============================================
# INTERNATIONALIZATION
# ==============================================

LANGUAGE_CODE = 'en-us'
TIME_ZONE = get_env('TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True

# ==============================================
# STATIC FILES
# ==============================================

STATIC_URL = '/static/'
STATIC_ROOT = get_env('STATIC_ROOT', str(BASE_DIR / 'staticfiles'))

# ==============================================
# TIME-SPENT REPORTING
# ==============================================

TIMESTAT = {
    # 'auto' picks the SQL shape from the database vendor, 'join' or 'subquery' forces one
    'SQL_DIALECT': get_env('TIMESTAT_SQL_DIALECT', 'auto'),
    'DEFAULT_PERPAGE': get_int_env('TIMESTAT_DEFAULT_PERPAGE', 100),
    'MAX_USERS_PER_DROPDOWN': get_int_env('TIMESTAT_MAX_USERS_PER_DROPDOWN', 1000),
    'MAX_COURSES_PER_DROPDOWN': get_int_env('TIMESTAT_MAX_COURSES_PER_DROPDOWN', 1000),
    # Legacy .xls sheets hold 65536 rows (0-65535)
    'SPREADSHEET_MAX_ROWS': get_int_env('TIMESTAT_SPREADSHEET_MAX_ROWS', 65535),
    'FIRST_DATA_ROW': 3,
    'DATE_BUCKET_LIMIT': 365,
    'GUEST_USERNAME': get_env('TIMESTAT_GUEST_USERNAME', 'guest'),
    'USER_PROFILE_URL': get_env('TIMESTAT_USER_PROFILE_URL', '/users/{user_id}/'),
    'COURSE_URL': get_env('TIMESTAT_COURSE_URL', '/courses/{course_id}/'),
}
