"""
Group membership lookups used by reporting
"""

from typing import List, Set

from .models import CourseGroup, GroupMembership


def groups_of_user(course_id: int, user_id: int) -> Set[int]:
    """Ids of the active groups of a course the user belongs to"""
    return set(
        GroupMembership.objects.filter(
            group__course_id=course_id,
            group__is_active=True,
            user_id=user_id,
        ).values_list('group_id', flat=True)
    )


def members_of_group(group_id: int) -> Set[int]:
    return set(GroupMembership.objects.filter(group_id=group_id).values_list('user_id', flat=True))


def groups_of_course(course_id: int) -> List[CourseGroup]:
    return list(CourseGroup.objects.filter(course_id=course_id, is_active=True).order_by('name'))
