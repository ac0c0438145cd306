from django.conf import settings

DEFAULTS = {
    'SQL_DIALECT': 'auto',
    'DEFAULT_PERPAGE': 100,
    'MAX_USERS_PER_DROPDOWN': 1000,
    'MAX_COURSES_PER_DROPDOWN': 1000,
    'SPREADSHEET_MAX_ROWS': 65535,
    'FIRST_DATA_ROW': 3,
    'DATE_BUCKET_LIMIT': 365,
    'GUEST_USERNAME': 'guest',
    'USER_PROFILE_URL': '/users/{user_id}/',
    'COURSE_URL': '/courses/{course_id}/',
}


def get_setting(name):
    """Read a key of the TIMESTAT settings dict, falling back to its default"""
    return getattr(settings, 'TIMESTAT', {}).get(name, DEFAULTS[name])
