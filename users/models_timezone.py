from datetime import datetime

from django.db import models
from django.conf import settings
import pytz


def _site_timezone():
    try:
        return pytz.timezone(settings.TIME_ZONE)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


class UserTimezone(models.Model):
    """Per-user timezone used for report day boundaries and dates"""
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='timezone_preference'
    )
    timezone = models.CharField(max_length=100, default='UTC', help_text="Olson name, e.g. 'Europe/London'")
    last_updated = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = 'users'
        verbose_name = 'user timezone'

    def __str__(self):
        return f"{self.user.username}: {self.timezone}"

    def tzinfo(self):
        try:
            return pytz.timezone(self.timezone)
        except pytz.UnknownTimeZoneError:
            return pytz.UTC

    @classmethod
    def timezone_for(cls, user):
        """The user's effective timezone, the site timezone when none is stored"""
        if user is None or not getattr(user, 'pk', None):
            return _site_timezone()
        preference = cls.objects.filter(user=user).first()
        return preference.tzinfo() if preference is not None else _site_timezone()


def user_midnight(timestamp, user=None):
    """Epoch seconds of the start of the day containing timestamp, in the user's timezone"""
    user_tz = UserTimezone.timezone_for(user)
    local = datetime.fromtimestamp(int(timestamp), tz=pytz.UTC).astimezone(user_tz)
    midnight = user_tz.localize(datetime(local.year, local.month, local.day))
    return int(midnight.timestamp())


def user_date(timestamp, user=None, fmt='%A, %d %B %Y'):
    """Format an epoch timestamp as a date in the user's timezone"""
    user_tz = UserTimezone.timezone_for(user)
    return datetime.fromtimestamp(int(timestamp), tz=pytz.UTC).astimezone(user_tz).strftime(fmt)
