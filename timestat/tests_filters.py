"""
Tests for filter resolution, the session memo and date buckets.
"""

import datetime

from django.test import TestCase, override_settings
from django.utils import timezone

from courses.models import Course
from groups.models import CourseGroup, GroupMembership
from users.models import UserTimezone, user_midnight

from .capabilities import ReportCapabilities
from .filters import (
    LOG_FORMAT_EXCEL, SITE_ERRORS, Pagination, date_buckets, resolve,
)
from .testing import BASE_TIME, make_user
from .memo import SessionMemo

LEARNER = ReportCapabilities(view=True)
INSTRUCTOR = ReportCapabilities(view=True, view_participants=True, view_full_names=True)
MANAGER = ReportCapabilities.unrestricted()


class ResolveTestCase(TestCase):

    def setUp(self):
        self.course = Course.objects.create(short_name='PY101', full_name='Python Basics')
        self.learner = make_user('learner', 'Lea', 'Rner')
        self.other = make_user('other', 'Otto', 'Her')
        self.session = {}
        self.memo = SessionMemo(self.session)

    def _resolve(self, raw, capabilities=INSTRUCTOR, user=None, course=None):
        return resolve(raw, course or self.course, user or self.learner, capabilities, self.memo, now=BASE_TIME)

    def test_defaults(self):
        filter_set = self._resolve({})
        self.assertEqual(filter_set.course_id, self.course.pk)
        self.assertFalse(filter_set.all_courses)
        self.assertEqual(filter_set.user_id, 0)
        self.assertEqual(filter_set.group_id, 0)
        self.assertIsNone(filter_set.group_member_ids)
        self.assertEqual(filter_set.date_from, 0)
        self.assertIsNone(filter_set.activity_id)
        self.assertEqual(filter_set.pagination, Pagination(offset=0, limit=100))
        self.assertEqual(filter_set.acting_user_id, self.learner.pk)

    def test_learner_asking_for_another_user_is_narrowed(self):
        with self.assertLogs('timestat.filters', level='WARNING'):
            filter_set = self._resolve({'user': str(self.other.pk)}, capabilities=LEARNER)
        self.assertEqual(filter_set.user_id, self.learner.pk)

    def test_learner_asking_for_everyone_is_narrowed(self):
        filter_set = self._resolve({}, capabilities=LEARNER)
        self.assertEqual(filter_set.user_id, self.learner.pk)
        self.assertFalse(filter_set.excludes_zero_time)

    def test_instructor_may_pick_another_user(self):
        filter_set = self._resolve({'user': str(self.other.pk)})
        self.assertEqual(filter_set.user_id, self.other.pk)

    def test_malformed_values_are_clamped(self):
        with self.assertLogs('timestat.filters', level='INFO') as logs:
            filter_set = self._resolve({
                'user': 'abc', 'group': '-4', 'date': 'yesterday', 'page': 'x',
                'perpage': '0', 'logformat': 'pdf', 'modid': 'nope',
            })
        self.assertTrue(any('Clamping' in line for line in logs.output))
        self.assertEqual(filter_set.user_id, 0)
        self.assertEqual(filter_set.group_id, 0)
        self.assertEqual(filter_set.date_from, 0)
        self.assertEqual(filter_set.page, 0)
        self.assertEqual(filter_set.per_page, 100)
        self.assertEqual(filter_set.log_format, 'showashtml')
        self.assertIsNone(filter_set.activity_id)

    def test_today_resolves_to_user_midnight(self):
        UserTimezone.objects.create(user=self.learner, timezone='America/New_York')
        filter_set = self._resolve({'date': 'today'})
        self.assertEqual(filter_set.date_from, user_midnight(BASE_TIME, self.learner))
        # 2023-11-14 00:00 in New York is 05:00 UTC
        self.assertEqual(filter_set.date_from, 1699938000)

    def test_date_upper_bound(self):
        filter_set = self._resolve({'date': '1000'})
        self.assertEqual(filter_set.date_upper, 1000 + 86400)
        filter_set = self._resolve({'date': '1000', 'dateto': '5000'})
        self.assertEqual(filter_set.date_upper, 5000)
        filter_set = self._resolve({'date': '5000', 'dateto': '1000'})
        self.assertEqual(filter_set.date_upper, 5000 + 86400)

    def test_activity_and_action(self):
        filter_set = self._resolve({'modid': SITE_ERRORS, 'modaction': '-view', 'modname': 'quiz'})
        self.assertEqual(filter_set.activity_id, SITE_ERRORS)
        self.assertEqual(filter_set.action, '-view')
        self.assertEqual(filter_set.module_name, 'quiz')
        self.assertEqual(self._resolve({'modid': '42'}).activity_id, 42)

    def test_report_pagination(self):
        filter_set = self._resolve({'page': '2', 'perpage': '10'})
        self.assertEqual(filter_set.pagination, Pagination(offset=20, limit=10))

    def test_export_is_unrestricted(self):
        filter_set = self._resolve({'page': '2', 'logformat': LOG_FORMAT_EXCEL})
        self.assertTrue(filter_set.pagination.unrestricted)
        self.assertTrue(filter_set.is_export)

    @override_settings(TIMESTAT={'MAX_USERS_PER_DROPDOWN': 5})
    def test_user_dropdown_window(self):
        self.assertEqual(self._resolve({}).user_dropdown, Pagination(offset=0, limit=6))
        self.assertTrue(self._resolve({'showusers': '1'}).user_dropdown.unrestricted)

    def test_site_course_is_all_courses_view(self):
        site = Course.objects.create(short_name='site', full_name='Site', is_site=True)
        self.assertTrue(self._resolve({}, course=site).all_courses)


class GroupResolutionTestCase(TestCase):

    def setUp(self):
        self.course = Course.objects.create(
            short_name='PY101', full_name='Python Basics', group_mode=Course.GROUP_MODE_SEPARATE)
        self.learner = make_user('learner')
        self.peer = make_user('peer')
        self.red = CourseGroup.objects.create(course=self.course, name='Red')
        self.blue = CourseGroup.objects.create(course=self.course, name='Blue')
        GroupMembership.objects.create(group=self.red, user=self.learner)
        GroupMembership.objects.create(group=self.red, user=self.peer)
        self.session = {}
        self.memo = SessionMemo(self.session)

    def _resolve(self, raw, capabilities=INSTRUCTOR):
        return resolve(raw, self.course, self.learner, capabilities, self.memo, now=BASE_TIME)

    def test_separate_groups_force_own_group(self):
        filter_set = self._resolve({'group': str(self.blue.pk)})
        self.assertEqual(filter_set.group_id, self.red.pk)
        self.assertEqual(filter_set.group_member_ids, frozenset({self.learner.pk, self.peer.pk}))
        self.assertEqual(self.memo.get(self.course.pk), self.red.pk)

    def test_memoised_group_is_reused(self):
        self.memo.set(self.course.pk, self.blue.pk)
        filter_set = self._resolve({})
        self.assertEqual(filter_set.group_id, self.blue.pk)
        self.assertEqual(filter_set.group_member_ids, frozenset())

    def test_several_groups_mean_no_group_filter(self):
        GroupMembership.objects.create(group=self.blue, user=self.learner)
        filter_set = self._resolve({})
        self.assertEqual(filter_set.group_id, 0)
        self.assertIsNone(filter_set.group_member_ids)
        self.assertIsNone(self.memo.get(self.course.pk))

    def test_access_all_groups_uses_requested_group(self):
        filter_set = self._resolve({'group': str(self.blue.pk)}, capabilities=MANAGER)
        self.assertEqual(filter_set.group_id, self.blue.pk)

    def test_visible_groups_use_requested_group(self):
        self.course.group_mode = Course.GROUP_MODE_VISIBLE
        self.course.save()
        filter_set = self._resolve({'group': str(self.blue.pk)})
        self.assertEqual(filter_set.group_id, self.blue.pk)

    def test_no_group_mode_ignores_group(self):
        self.course.group_mode = Course.GROUP_MODE_NONE
        self.course.save()
        filter_set = self._resolve({'group': str(self.blue.pk)}, capabilities=MANAGER)
        self.assertEqual(filter_set.group_id, 0)

    def test_user_wins_over_group(self):
        filter_set = self._resolve({'group': str(self.blue.pk), 'user': str(self.peer.pk)}, capabilities=MANAGER)
        self.assertEqual(filter_set.user_id, self.peer.pk)
        self.assertEqual(filter_set.group_id, 0)
        self.assertIsNone(filter_set.group_member_ids)


class SessionMemoTestCase(TestCase):

    def test_last_writer_wins(self):
        session = {}
        memo = SessionMemo(session)
        self.assertIsNone(memo.get(3))
        memo.set(3, 7)
        SessionMemo(session).set(3, 9)
        self.assertEqual(memo.get(3), 9)
        self.assertEqual(session[SessionMemo.SESSION_KEY], {'3': 9})


class DateBucketsTestCase(TestCase):

    def setUp(self):
        self.user = make_user('learner')
        self.now = BASE_TIME
        self.today = user_midnight(self.now, self.user)

    def _course(self, start=None, created=None):
        return Course.objects.create(
            short_name='C', full_name='Course',
            start_date=start,
            created_at=created or datetime.datetime.fromtimestamp(self.now - 1000 * 86400, tz=datetime.timezone.utc),
        )

    def test_buckets_run_back_to_course_start(self):
        start = datetime.datetime.fromtimestamp(self.now - 3 * 86400, tz=datetime.timezone.utc)
        buckets = date_buckets(self._course(start=start), self.user, now=self.now)
        values = [value for value, _ in buckets]
        self.assertEqual(values, [
            0,
            self.today,
            self.today - 86400,
            self.today - 2 * 86400,
            self.today - 3 * 86400,
        ])
        self.assertEqual(buckets[0][1], 'All days')
        self.assertEqual(buckets[1][1], 'Today, 14 November 2023')
        self.assertEqual(buckets[2][1], 'Monday, 13 November 2023')

    def test_buckets_are_capped(self):
        buckets = date_buckets(self._course(), self.user, now=self.now, include_all_days=False)
        self.assertEqual(len(buckets), 365)
        self.assertEqual(buckets[-1][0], self.today - 364 * 86400)

    def test_future_start_falls_back_to_creation(self):
        start = datetime.datetime.fromtimestamp(self.now + 10 * 86400, tz=datetime.timezone.utc)
        created = datetime.datetime.fromtimestamp(self.now - 86400, tz=datetime.timezone.utc)
        buckets = date_buckets(self._course(start=start, created=created), self.user, now=self.now,
                               include_all_days=False)
        self.assertEqual([value for value, _ in buckets], [self.today, self.today - 86400])

    def test_default_now(self):
        buckets = date_buckets(self._course(), self.user)
        self.assertEqual(buckets[1][0], user_midnight(int(timezone.now().timestamp()), self.user))
