"""
Course directory lookups used by reporting
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from django.contrib.auth import get_user_model

from .models import Course, CourseModule, CourseEnrollment

logger = logging.getLogger(__name__)
User = get_user_model()


@dataclass(frozen=True)
class ActivityInfo:
    id: int
    section_number: int
    section_name: str
    display_name: str
    module_name: str
    visible: bool


@dataclass(frozen=True)
class CourseMetadata:
    start_date: int
    created_date: int
    group_mode: int
    is_site_course: bool


def enumerate_activities(course: Course) -> List[ActivityInfo]:
    """Activities of a course in section order, skipping ones without a page"""
    section_names = {section.number: section.name for section in course.sections.all()}
    activities = []
    for module in CourseModule.objects.filter(course=course, has_view=True):
        activities.append(ActivityInfo(
            id=module.id,
            section_number=module.section_number,
            section_name=section_names.get(module.section_number) or f"Topic {module.section_number}",
            display_name=module.name,
            module_name=module.module_name,
            visible=module.visible,
        ))
    return activities


def course_metadata(course_id: int) -> CourseMetadata:
    course = Course.objects.get(pk=course_id)
    return CourseMetadata(
        start_date=int(course.start_date.timestamp()) if course.start_date else 0,
        created_date=int(course.created_at.timestamp()),
        group_mode=course.group_mode,
        is_site_course=course.is_site,
    )


def enrolled_users(course: Course, group_id: int = 0, limit: Optional[int] = None):
    """Active users enrolled in the course, optionally restricted to one group"""
    users = User.objects.filter(
        course_enrollments__course=course,
        course_enrollments__is_active=True,
        is_active=True,
    )
    if group_id:
        users = users.filter(group_memberships__group_id=group_id)
    users = users.distinct().order_by('last_name', 'first_name', 'id')
    if limit is not None:
        users = users[:limit]
    return list(users)


def all_users(limit: Optional[int] = None):
    """Site-wide user list for the front-page course, most recent logins first"""
    users = User.objects.filter(is_active=True).order_by('-last_login', 'id')
    if limit is not None:
        users = users[:limit]
    return list(users)
