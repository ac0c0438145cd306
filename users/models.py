from .models_timezone import UserTimezone, user_midnight, user_date

__all__ = ['UserTimezone', 'user_midnight', 'user_date']
