"""
Option lists for the report selector form
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from django.contrib.auth import get_user_model

from courses.models import Course
from courses.services import all_users, enrolled_users, enumerate_activities
from groups.services import groups_of_course

from .conf import get_setting
from .filters import LOG_FORMAT_EXCEL, LOG_FORMAT_HTML, SITE_ERRORS, date_buckets
from .renderers import user_display_name

logger = logging.getLogger(__name__)
User = get_user_model()

MAX_ACTIVITY_NAME = 55
TRUNCATED_ACTIVITY_NAME = 50

ACTIONS = [
    ('view', 'View'),
    ('add', 'Add'),
    ('update', 'Update'),
    ('delete', 'Delete'),
    ('-view', 'All changes'),
]

LOG_FORMAT_CHOICES = [
    (LOG_FORMAT_HTML, 'Display on page'),
    (LOG_FORMAT_EXCEL, 'Download in Excel format'),
]

Choices = List[Tuple[object, str]]


@dataclass
class SelectorOptions:
    courses: Choices = field(default_factory=list)
    show_courses: bool = False
    groups: Optional[Choices] = None
    users: Choices = field(default_factory=list)
    show_users: bool = False
    activities: Choices = field(default_factory=list)
    actions: Choices = field(default_factory=lambda: list(ACTIONS))
    dates: Choices = field(default_factory=list)
    log_formats: Choices = field(default_factory=lambda: list(LOG_FORMAT_CHOICES))
    selected_activity: str = ''
    self_only: bool = False

    @property
    def show_groups(self):
        return self.groups is not None


def course_choices(course, capabilities, show_courses):
    if capabilities.view_site_reports and show_courses:
        sites, courses = [], []
        for item in Course.objects.order_by('full_name', 'id'):
            if item.is_site:
                sites.append((item.pk, f"{item.get_display_name()} (Site)"))
            else:
                courses.append((item.pk, item.get_display_name()))
        return sites + courses
    label = course.get_display_name()
    if course.is_site:
        label = f"{label} (Site)"
    return [(course.pk, label)]


def group_choices(course, capabilities):
    """Groups of the course when the caller may pick one, else None"""
    if course.group_mode == Course.GROUP_MODE_VISIBLE or (
            course.group_mode == Course.GROUP_MODE_SEPARATE and capabilities.access_all_groups):
        return [(group.pk, group.name) for group in groups_of_course(course.pk)]
    return None


def activity_choices(course, capabilities):
    activities = []
    section = 0
    for activity in enumerate_activities(course):
        if activity.section_number > 0 and activity.section_number != section:
            activities.append((f"section/{activity.section_number}", f"--- {activity.section_name} ---"))
        section = activity.section_number

        name = activity.display_name
        if len(name) > MAX_ACTIVITY_NAME:
            name = name[:TRUNCATED_ACTIVITY_NAME] + "..."
        if not activity.visible:
            name = f"({name})"
        activities.append((str(activity.id), name))

    if capabilities.view_site_reports and course.is_site:
        activities.append((SITE_ERRORS, 'Site errors'))
    return activities


def build_selector(course, acting_user, filter_set, raw, capabilities, now=None):
    """Collect every dropdown of the selector form for the current request"""
    max_courses = get_setting('MAX_COURSES_PER_DROPDOWN')
    max_users = get_setting('MAX_USERS_PER_DROPDOWN')

    show_courses = filter_set.show_courses
    if not show_courses and Course.objects.count() < max_courses:
        show_courses = True

    limit = filter_set.user_dropdown.limit
    if course.is_site:
        course_users = all_users(limit)
    else:
        course_users = enrolled_users(course, filter_set.group_id, limit)

    show_users = filter_set.show_users
    if not show_users and len(course_users) < max_users:
        show_users = True

    full_names = capabilities.view_full_names
    if not capabilities.view_participants:
        users = [(acting_user.pk, user_display_name(
            acting_user.first_name, acting_user.last_name, acting_user.get_username(), full_names))]
    elif show_users:
        users = [
            (user.pk, user_display_name(user.first_name, user.last_name, user.get_username(), full_names))
            for user in course_users
        ]
        guest = User.objects.filter(username=get_setting('GUEST_USERNAME')).first()
        if guest is not None and guest.pk not in {pk for pk, _ in users}:
            users.append((guest.pk, 'Guest user'))
        users.sort(key=lambda choice: choice[1].lower())
    elif filter_set.user_id:
        selected = User.objects.filter(pk=filter_set.user_id).first()
        label = user_display_name(selected.first_name, selected.last_name, selected.get_username(),
                                  full_names) if selected else str(filter_set.user_id)
        users = [(filter_set.user_id, label)]
    else:
        users = [(0, 'All participants')]

    activities = activity_choices(course, capabilities)
    requested_activity = str(raw.get('modid') or '')
    selected_activity = ''
    if requested_activity in {value for value, _ in activities}:
        selected_activity = requested_activity

    options = SelectorOptions(
        courses=course_choices(course, capabilities, show_courses),
        show_courses=show_courses,
        groups=group_choices(course, capabilities),
        users=users,
        show_users=show_users,
        activities=activities,
        dates=date_buckets(course, acting_user, now),
        selected_activity=selected_activity,
        self_only=not capabilities.view_participants,
    )
    logger.debug(
        f"Selector for course {course.pk}: {len(options.courses)} courses, "
        f"{len(options.users)} users, {len(options.activities)} activities"
    )
    return options
