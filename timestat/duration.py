from .exceptions import InvalidArgument

SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60

# Unit strings as the platform has always printed them
DAYS_SUFFIX = 'days'
HOURS_SUFFIX = 'hours'
MINUTES_SUFFIX = 'minuts'
SECONDS_SUFFIX = 'seconds'


def split_duration(seconds):
    """Break a second count into (days, hours, minutes, seconds)"""
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise InvalidArgument(f"Duration must be an integer, got {seconds!r}")
    if seconds < 0:
        raise InvalidArgument(f"Duration must not be negative, got {seconds}")

    days, remainder = divmod(seconds, SECONDS_PER_DAY)
    hours, remainder = divmod(remainder, SECONDS_PER_HOUR)
    minutes, remainder = divmod(remainder, SECONDS_PER_MINUTE)
    return days, hours, minutes, remainder


def format_duration(seconds):
    """
    Human readable breakdown of a second count.

    Higher units are only printed when non-zero; the seconds part is always
    printed, so 3661 gives '1hours1minuts1seconds' and 0 gives '0seconds'.
    """
    days, hours, minutes, remainder = split_duration(seconds)
    parts = []
    if days:
        parts.append(f"{days}{DAYS_SUFFIX}")
    if hours:
        parts.append(f"{hours}{HOURS_SUFFIX}")
    if minutes:
        parts.append(f"{minutes}{MINUTES_SUFFIX}")
    parts.append(f"{remainder}{SECONDS_SUFFIX}")
    return ''.join(parts)
