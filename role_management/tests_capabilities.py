"""
Tests for role capabilities and course-scoped capability checks.
"""

import datetime

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase
from django.utils import timezone

from courses.models import Course

from .models import RoleCapability, Role, UserRole
from .services import has_capability

User = get_user_model()


class HasCapabilityTestCase(TestCase):

    def setUp(self):
        self.course = Course.objects.create(short_name='PY101', full_name='Python Basics')
        self.other = Course.objects.create(short_name='JS101', full_name='JavaScript Basics')
        self.user = User.objects.create_user(username='learner', password='testpass123')
        self.instructor = Role.objects.create_with_defaults('instructor')

    def test_stock_capabilities(self):
        self.assertTrue(self.instructor.allows('course:viewparticipants'))
        self.assertFalse(self.instructor.allows('report:viewsite'))
        self.assertEqual(str(self.instructor), 'Instructor')

    def test_course_assignment_is_scoped(self):
        UserRole.objects.create(user=self.user, role=self.instructor, course=self.course)
        self.assertTrue(has_capability(self.user, 'timestat:view', self.course))
        self.assertFalse(has_capability(self.user, 'timestat:view', self.other))
        self.assertFalse(has_capability(self.user, 'timestat:view'))

    def test_site_assignment_applies_everywhere(self):
        UserRole.objects.create(user=self.user, role=self.instructor)
        self.assertTrue(has_capability(self.user, 'timestat:view', self.other))
        self.assertTrue(has_capability(self.user, 'timestat:view'))

    def test_lapsed_assignment_is_ignored(self):
        UserRole.objects.create(
            user=self.user, role=self.instructor, course=self.course,
            valid_until=timezone.now() - datetime.timedelta(days=1),
        )
        self.assertFalse(has_capability(self.user, 'timestat:view', self.course))

    def test_prevented_capability(self):
        UserRole.objects.create(user=self.user, role=self.instructor, course=self.course)
        RoleCapability.objects.filter(role=self.instructor, capability='site:viewfullnames').update(allowed=False)
        self.assertFalse(has_capability(self.user, 'site:viewfullnames', self.course))

    def test_superuser_and_anonymous(self):
        root = User.objects.create_superuser(username='root', password='testpass123')
        self.assertTrue(has_capability(root, 'report:viewsite'))
        self.assertFalse(has_capability(AnonymousUser(), 'timestat:view', self.course))
        self.assertFalse(has_capability(None, 'timestat:view'))
