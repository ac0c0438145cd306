"""
Tests for the selector option builder and the selector form.
"""

from django.test import TestCase, override_settings

from courses.models import Course, CourseModule, CourseSection
from groups.models import CourseGroup
from users.models import user_midnight

from .aggregator import aggregate
from .capabilities import ReportCapabilities
from .filters import SITE_ERRORS, resolve
from .testing import BASE_TIME, LogStoreMixin, make_user
from .forms import ReportSelectorForm
from .memo import SessionMemo
from .selectors import build_selector

LEARNER = ReportCapabilities(view=True)
INSTRUCTOR = ReportCapabilities(view=True, view_participants=True, view_full_names=True)
MANAGER = ReportCapabilities.unrestricted()


class BuildSelectorTestCase(LogStoreMixin, TestCase):

    def setUp(self):
        self.create_log_store()
        self.instructor = make_user('instructor', 'Ina', 'Structor')
        CourseSection.objects.create(course=self.course, number=1, name='Getting started')
        CourseModule.objects.create(course=self.course, section_number=0, module_name='forum', name='News')
        self.quiz = CourseModule.objects.create(
            course=self.course, section_number=1, module_name='quiz', name='Q' * 60)
        self.hidden = CourseModule.objects.create(
            course=self.course, section_number=2, module_name='page', name='Notes', visible=False)
        CourseModule.objects.create(
            course=self.course, section_number=2, module_name='label', name='Label', has_view=False)

    def _build(self, capabilities=INSTRUCTOR, raw=None, course=None, user=None):
        raw = raw or {}
        course = course or self.course
        user = user or self.instructor
        filter_set = resolve(raw, course, user, capabilities, SessionMemo({}), now=BASE_TIME)
        return filter_set, build_selector(course, user, filter_set, raw, capabilities, now=BASE_TIME)

    def test_activities(self):
        _, options = self._build()
        self.assertEqual(options.activities[0][1], 'News')
        self.assertEqual(options.activities[1], ('section/1', '--- Getting started ---'))
        self.assertEqual(options.activities[2], (str(self.quiz.pk), 'Q' * 50 + '...'))
        self.assertEqual(options.activities[3], ('section/2', '--- Topic 2 ---'))
        self.assertEqual(options.activities[4], (str(self.hidden.pk), '(Notes)'))
        self.assertEqual(len(options.activities), 5)

    def test_selected_activity(self):
        _, options = self._build(raw={'modid': str(self.quiz.pk)})
        self.assertEqual(options.selected_activity, str(self.quiz.pk))
        _, options = self._build(raw={'modid': '99999'})
        self.assertEqual(options.selected_activity, '')

    def test_site_errors_only_for_site_reports_on_site_course(self):
        _, options = self._build(capabilities=MANAGER, course=self.site)
        self.assertIn((SITE_ERRORS, 'Site errors'), options.activities)
        _, options = self._build(capabilities=MANAGER)
        self.assertNotIn(SITE_ERRORS, [value for value, _ in options.activities])

    def test_users_of_course_plus_guest(self):
        guest = make_user('guest')
        _, options = self._build()
        self.assertTrue(options.show_users)
        labels = [label for _, label in options.users]
        self.assertIn('Alice Smith', labels)
        self.assertIn((guest.pk, 'Guest user'), options.users)
        self.assertEqual(labels, sorted(labels, key=str.lower))
        self.assertEqual(len(options.users), len(self.users) + 1)

    def test_learner_only_sees_themselves(self):
        _, options = self._build(capabilities=LEARNER, user=self.alice)
        self.assertEqual(options.users, [(self.alice.pk, 'Alice S.')])
        self.assertTrue(options.self_only)

    @override_settings(TIMESTAT={'MAX_USERS_PER_DROPDOWN': 3})
    def test_long_user_list_is_not_shown(self):
        _, options = self._build()
        self.assertFalse(options.show_users)
        self.assertEqual(options.users, [(0, 'All participants')])

    @override_settings(TIMESTAT={'MAX_USERS_PER_DROPDOWN': 3})
    def test_showusers_lists_everyone(self):
        _, options = self._build(raw={'showusers': '1'})
        self.assertTrue(options.show_users)
        self.assertEqual(len(options.users), len(self.users))

    def test_courses_for_site_report_viewers(self):
        _, options = self._build(capabilities=MANAGER)
        self.assertTrue(options.show_courses)
        self.assertEqual(options.courses[0], (self.site.pk, 'Learning Site (Site)'))
        self.assertIn((self.course.pk, 'Python Basics'), options.courses)

    def test_courses_without_site_reports(self):
        _, options = self._build()
        self.assertEqual(options.courses, [(self.course.pk, 'Python Basics')])

    def test_groups_only_when_selectable(self):
        CourseGroup.objects.create(course=self.course, name='Red')
        _, options = self._build()
        self.assertFalse(options.show_groups)

        self.course.group_mode = Course.GROUP_MODE_VISIBLE
        self.course.save()
        _, options = self._build()
        self.assertEqual([label for _, label in options.groups], ['Red'])

        self.course.group_mode = Course.GROUP_MODE_SEPARATE
        self.course.save()
        _, options = self._build()
        self.assertFalse(options.show_groups)
        _, options = self._build(capabilities=MANAGER)
        self.assertTrue(options.show_groups)

    def test_actions_and_formats(self):
        _, options = self._build()
        self.assertEqual([value for value, _ in options.actions], ['view', 'add', 'update', 'delete', '-view'])
        self.assertEqual([value for value, _ in options.log_formats], ['showashtml', 'downloadasexcel'])
        self.assertEqual(options.dates[0], (0, 'All days'))


class ReportSelectorFormTestCase(LogStoreMixin, TestCase):

    def setUp(self):
        self.create_log_store()

    def test_form_fields_follow_options(self):
        raw = {'user': str(self.bob.pk)}
        filter_set = resolve(raw, self.course, self.alice, INSTRUCTOR, SessionMemo({}), now=BASE_TIME)
        options = build_selector(self.course, self.alice, filter_set, raw, INSTRUCTOR, now=BASE_TIME)
        form = ReportSelectorForm(options, filter_set)
        self.assertNotIn('group', form.fields)
        self.assertEqual(form.initial['user'], self.bob.pk)
        self.assertEqual(form.fields['user'].choices[0], (0, 'All participants'))
        self.assertEqual(form.fields['modid'].choices[0], ('', 'All activities'))
        self.assertEqual(form.fields['logformat'].choices[1][0], 'downloadasexcel')

    def test_to_day_choice_includes_that_day(self):
        today = user_midnight(BASE_TIME, self.alice)
        raw = {'date': str(today - 86400)}
        filter_set = resolve(raw, self.course, self.alice, INSTRUCTOR, SessionMemo({}), now=BASE_TIME)
        options = build_selector(self.course, self.alice, filter_set, raw, INSTRUCTOR, now=BASE_TIME)
        form = ReportSelectorForm(options, filter_set)
        to_today = next(value for value, label in form.fields['dateto'].choices if label.startswith('Today'))
        self.assertEqual(to_today, today + 86400)

        raw['dateto'] = str(to_today)
        filter_set = resolve(raw, self.course, self.alice, INSTRUCTOR, SessionMemo({}), now=BASE_TIME)
        self.assertEqual(filter_set.date_upper, today + 86400)
        rows = aggregate(filter_set).rows
        # Logs at BASE_TIME fall on the chosen "To" day
        self.assertEqual(
            [(row.username, row.total_seconds_spent) for row in rows],
            [('frank', 600), ('bob', 400), ('alice', 300), ('erin', 250), ('carol', 100)],
        )
