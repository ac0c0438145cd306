"""
Filter model for the time-spent report.

Turns the raw GET parameters of a report request into a FilterSet: ids and
dates are parsed and clamped, the requested scope is narrowed to what the
acting user may see, and groups are expanded to member ids.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Union

from courses.models import Course
from courses.services import course_metadata
from groups.services import groups_of_user, members_of_group
from users.models import user_midnight, user_date

from .conf import get_setting
from .exceptions import InvalidFilter

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

TODAY = 'today'
SITE_ERRORS = 'site_errors'

LOG_FORMAT_HTML = 'showashtml'
LOG_FORMAT_EXCEL = 'downloadasexcel'
LOG_FORMATS = (LOG_FORMAT_HTML, LOG_FORMAT_EXCEL)

MAX_ACTION_LENGTH = 100


@dataclass(frozen=True)
class Pagination:
    """Offset/limit window; no limit means unrestricted"""
    offset: Optional[int] = None
    limit: Optional[int] = None

    @property
    def unrestricted(self):
        return self.limit is None


@dataclass(frozen=True)
class FilterSet:
    course_id: int
    all_courses: bool = False
    user_id: int = 0
    group_id: int = 0
    group_member_ids: Optional[FrozenSet[int]] = None
    date_from: int = 0
    date_to: Optional[int] = None
    module_name: str = ''
    activity_id: Union[int, str, None] = None
    action: str = ''
    pagination: Pagination = field(default_factory=Pagination)
    user_dropdown: Pagination = field(default_factory=Pagination)
    acting_user_id: int = 0
    log_format: str = LOG_FORMAT_HTML
    page: int = 0
    per_page: int = 100
    show_users: bool = False
    show_courses: bool = False
    choose_log: bool = False

    @property
    def single_user(self):
        return bool(self.user_id)

    @property
    def excludes_zero_time(self):
        """Users without logged time are hidden unless one user is requested"""
        return not self.single_user

    @property
    def date_upper(self):
        if not self.date_from:
            return None
        if self.date_to and self.date_to > self.date_from:
            return self.date_to
        return self.date_from + SECONDS_PER_DAY

    @property
    def is_export(self):
        return self.log_format == LOG_FORMAT_EXCEL


def _raw(raw_filters, name):
    value = raw_filters.get(name)
    if isinstance(value, str):
        value = value.strip()
    return value


def parse_id(value, name):
    """Non-negative integer id; empty means 0"""
    if value in (None, ''):
        return 0
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise InvalidFilter(name, value)
    if parsed < 0:
        raise InvalidFilter(name, value)
    return parsed


def parse_date(value, name, today_midnight):
    """Epoch seconds, or the 'today' sentinel resolved to today_midnight"""
    if value == TODAY:
        return today_midnight
    return parse_id(value, name)


def parse_activity(value):
    if value in (None, '', 0, '0'):
        return None
    if value == SITE_ERRORS:
        return SITE_ERRORS
    activity_id = parse_id(value, 'modid')
    return activity_id or None


def parse_module_name(value):
    if value in (None, ''):
        return ''
    value = str(value)
    if not value.isidentifier():
        raise InvalidFilter('modname', value)
    return value


def parse_action(value):
    if value in (None, ''):
        return ''
    value = str(value)
    if len(value) > MAX_ACTION_LENGTH:
        raise InvalidFilter('modaction', value, 'Action filter too long')
    return value


def parse_flag(value):
    if value in (None, ''):
        return False
    if isinstance(value, str):
        return value.lower() not in ('0', 'false', 'no', 'off')
    return bool(value)


def parse_log_format(value):
    if value in (None, ''):
        return LOG_FORMAT_HTML
    if value not in LOG_FORMATS:
        raise InvalidFilter('logformat', value)
    return value


def _clamped(parser, value, default, *args):
    """Run a parser, falling back to default on malformed input"""
    try:
        return parser(value, *args)
    except InvalidFilter as exc:
        logger.info(f"Clamping report filter to default: {exc}")
        return default


def _separate_group(course, acting_user, memo):
    """The caller's own group in a separate-groups course, 0 when ambiguous"""
    remembered = memo.get(course.pk)
    if remembered is not None:
        return remembered

    own_groups = groups_of_user(course.pk, acting_user.pk)
    if len(own_groups) == 1:
        group_id = next(iter(own_groups))
        memo.set(course.pk, group_id)
        return group_id

    logger.debug(
        f"User {acting_user.pk} belongs to {len(own_groups)} groups in course {course.pk}; "
        f"no group filter applied"
    )
    return 0


def resolve(raw_filters, course, acting_user, capabilities, memo, now=None):
    """
    Build the canonical FilterSet for a report request.

    A caller without course:viewparticipants who asks for another user, or for
    everyone, is narrowed to their own report rather than rejected.
    """
    now = int(now if now is not None else time.time())
    today_midnight = user_midnight(now, acting_user)

    user_id = _clamped(parse_id, _raw(raw_filters, 'user'), 0, 'user')
    requested_group = _clamped(parse_id, _raw(raw_filters, 'group'), 0, 'group')
    date_from = _clamped(parse_date, _raw(raw_filters, 'date'), 0, 'date', today_midnight)
    date_to = _clamped(parse_date, _raw(raw_filters, 'dateto'), 0, 'dateto',
                       today_midnight + SECONDS_PER_DAY)
    activity_id = _clamped(parse_activity, _raw(raw_filters, 'modid'), None)
    module_name = _clamped(parse_module_name, _raw(raw_filters, 'modname'), '')
    action = _clamped(parse_action, _raw(raw_filters, 'modaction'), '')
    log_format = _clamped(parse_log_format, _raw(raw_filters, 'logformat'), LOG_FORMAT_HTML)
    page = _clamped(parse_id, _raw(raw_filters, 'page'), 0, 'page')
    per_page = _clamped(parse_id, _raw(raw_filters, 'perpage'), 0, 'perpage') or get_setting('DEFAULT_PERPAGE')
    show_users = parse_flag(_raw(raw_filters, 'showusers'))
    show_courses = parse_flag(_raw(raw_filters, 'showcourses'))
    choose_log = parse_flag(_raw(raw_filters, 'chooselog'))

    if not capabilities.view_participants and user_id != acting_user.pk:
        logger.warning(
            f"User {acting_user.pk} may not view participants of course {course.pk}; "
            f"narrowing report from user {user_id or 'all'} to own records"
        )
        user_id = acting_user.pk

    if course.group_mode == Course.GROUP_MODE_NONE:
        group_id = 0
    elif course.group_mode == Course.GROUP_MODE_SEPARATE and not capabilities.access_all_groups:
        group_id = _separate_group(course, acting_user, memo)
    else:
        group_id = requested_group

    group_member_ids = None
    if user_id:
        group_id = 0
    elif group_id:
        group_member_ids = frozenset(members_of_group(group_id))

    if log_format == LOG_FORMAT_EXCEL:
        pagination = Pagination()
    else:
        pagination = Pagination(offset=page * per_page, limit=per_page)

    if show_users:
        user_dropdown = Pagination()
    else:
        user_dropdown = Pagination(offset=0, limit=get_setting('MAX_USERS_PER_DROPDOWN') + 1)

    return FilterSet(
        course_id=course.pk,
        all_courses=course.is_site,
        user_id=user_id,
        group_id=group_id,
        group_member_ids=group_member_ids,
        date_from=date_from,
        date_to=date_to or None,
        module_name=module_name,
        activity_id=activity_id,
        action=action,
        pagination=pagination,
        user_dropdown=user_dropdown,
        acting_user_id=acting_user.pk,
        log_format=log_format,
        page=page,
        per_page=per_page,
        show_users=show_users,
        show_courses=show_courses,
        choose_log=choose_log,
    )


def course_start(course, now):
    """Start of the course as epoch seconds, its creation time when unset or in the future"""
    metadata = course_metadata(course.pk)
    if not metadata.start_date or metadata.start_date > now:
        return metadata.created_date
    return metadata.start_date


def date_buckets(course, acting_user, now=None, include_all_days=True):
    """
    Day choices for the date selector, newest first.

    Walks back one day at a time from today's midnight in the acting user's
    timezone until the course start, capped at DATE_BUCKET_LIMIT days.
    """
    now = int(now if now is not None else time.time())
    limit = get_setting('DATE_BUCKET_LIMIT')
    start = course_start(course, now)

    midnight = user_midnight(now, acting_user)
    buckets = []
    if include_all_days:
        buckets.append((0, 'All days'))
    buckets.append((midnight, f"Today, {user_date(now, acting_user, '%d %B %Y')}"))

    count = 1
    moment = now
    while midnight > start and count < limit:
        moment -= SECONDS_PER_DAY
        midnight = user_midnight(moment, acting_user)
        buckets.append((midnight, user_date(moment, acting_user)))
        count += 1
    return buckets
