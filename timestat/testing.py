"""
Log store builders shared by the time-spent test modules
"""

from django.contrib.auth import get_user_model

from core.models import StandardLog
from courses.models import Course, CourseEnrollment

from .models import TimeSpent

User = get_user_model()

# 2023-11-14 22:13:20 UTC
BASE_TIME = 1700000000


def make_user(username, first_name='', last_name='', **kwargs):
    return User.objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password='testpass123',
        first_name=first_name,
        last_name=last_name,
        **kwargs
    )


def add_log(user, course, seconds, action='viewed', module_name='quiz',
            activity_id=0, time_created=BASE_TIME):
    log = StandardLog.objects.create(
        user=user,
        course=course,
        context_instance_id=activity_id,
        module_name=module_name,
        action=action,
        time_created=time_created,
    )
    TimeSpent.objects.create(log=log, seconds_spent=seconds)
    return log


class LogStoreMixin:
    """
    Five users with positive totals and one with only zero-time entries.

    Totals in self.course: frank 600, alice 500, bob 400, erin 250, carol 100,
    dave 0.
    """

    def create_log_store(self):
        self.course = Course.objects.create(short_name='PY101', full_name='Python Basics')
        self.site = Course.objects.create(short_name='site', full_name='Learning Site', is_site=True)

        self.alice = make_user('alice', 'Alice', 'Smith')
        self.bob = make_user('bob', 'Bob', 'Jones')
        self.carol = make_user('carol', 'Carol', 'White')
        self.dave = make_user('dave', 'Dave', 'Brown')
        self.erin = make_user('erin', 'Erin', 'Green')
        self.frank = make_user('frank', 'Frank', 'Black')
        self.users = [self.alice, self.bob, self.carol, self.dave, self.erin, self.frank]
        for user in self.users:
            CourseEnrollment.objects.create(course=self.course, user=user)

        add_log(self.alice, self.course, 300, action='viewed', activity_id=11)
        add_log(self.alice, self.course, 200, action='updated', activity_id=12,
                time_created=BASE_TIME + 2 * 86400)
        add_log(self.bob, self.course, 400, action='viewed', module_name='forum', activity_id=12)
        add_log(self.carol, self.course, 100, action='deleted')
        add_log(self.dave, self.course, 0, action='viewed')
        add_log(self.erin, self.course, 250, action='user_viewed')
        add_log(self.frank, self.course, 600, action='viewed', activity_id=11)
