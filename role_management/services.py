"""
Capability checks backed by role assignments
"""

from django.db.models import Q
from django.utils import timezone

from .models import UserRole


def has_capability(user, capability, course=None):
    """
    Check whether a user holds a capability, site-wide or in the given course.

    Superusers hold every capability; anonymous users hold none.
    """
    if user is None or not user.is_authenticated:
        return False
    if user.is_superuser:
        return True

    scope = Q(course__isnull=True)
    if course is not None:
        scope |= Q(course=course)

    assignments = UserRole.objects.filter(
        scope,
        user=user,
        role__is_active=True,
    ).filter(
        Q(valid_until__isnull=True) | Q(valid_until__gt=timezone.now())
    ).select_related('role')

    return any(assignment.role.allows(capability) for assignment in assignments)
