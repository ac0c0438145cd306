"""
Tests for the report view, the block tag and the export command.
"""

import os
import tempfile
from unittest import mock

from django.core.management import call_command
from django.core.management.base import CommandError
from django.template import Context, Template
from django.test import TestCase
from django.urls import reverse

from role_management.models import Role, UserRole

from .exceptions import StorageUnavailable
from .testing import LogStoreMixin, make_user


class ReportViewTestCase(LogStoreMixin, TestCase):

    def setUp(self):
        self.create_log_store()
        self.admin = make_user('admin', 'Ada', 'Min', is_superuser=True, is_staff=True)
        self.learner_role = Role.objects.create_with_defaults('learner')
        self.url = reverse('timestat:report')

    def test_login_required(self):
        response = self.client.get(self.url, {'id': self.course.pk})
        self.assertEqual(response.status_code, 302)

    def test_forbidden_without_view_capability(self):
        self.client.force_login(self.bob)
        response = self.client.get(self.url, {'id': self.course.pk})
        self.assertEqual(response.status_code, 403)

    def test_unknown_course(self):
        self.client.force_login(self.admin)
        response = self.client.get(self.url, {'id': 999999})
        self.assertEqual(response.status_code, 404)

    def test_selector_only_until_chosen(self):
        self.client.force_login(self.admin)
        response = self.client.get(self.url, {'id': self.course.pk})
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.context['table'])
        self.assertIn('form', response.context)

    def test_report_table(self):
        self.client.force_login(self.admin)
        response = self.client.get(self.url, {'id': self.course.pk, 'chooselog': '1'})
        self.assertEqual(response.status_code, 200)
        table = response.context['table']
        self.assertEqual(table.head, ['Full name', 'Time'])
        self.assertEqual([row[0].text for row in table.rows],
                         ['Frank Black', 'Alice Smith', 'Bob Jones', 'Erin Green', 'Carol White'])
        self.assertEqual(table.rows[0][1].text, '10minuts0seconds')
        self.assertContains(response, 'Displaying 5 records')
        self.assertContains(response, '<td style="text-align: right">10minuts0seconds</td>', html=True)

    def test_report_pages(self):
        self.client.force_login(self.admin)
        response = self.client.get(self.url, {'id': self.course.pk, 'chooselog': '1', 'perpage': '2', 'page': '2'})
        self.assertEqual([row[0].text for row in response.context['table'].rows], ['Carol White'])

    def test_no_logs_notice(self):
        self.client.force_login(self.admin)
        response = self.client.get(self.url, {'id': self.course.pk, 'chooselog': '1', 'modaction': 'nothing'})
        self.assertTrue(response.context['no_logs'])
        self.assertContains(response, 'No logs')

    def test_learner_is_narrowed_to_own_report(self):
        UserRole.objects.create(user=self.alice, role=self.learner_role, course=self.course)
        self.client.force_login(self.alice)
        response = self.client.get(self.url, {'id': self.course.pk, 'chooselog': '1', 'user': self.bob.pk})
        self.assertEqual(response.status_code, 200)
        rows = response.context['table'].rows
        self.assertEqual(len(rows), 1)
        # No site:viewfullnames for learners
        self.assertEqual(rows[0][0].text, 'Alice S.')
        self.assertEqual(rows[0][1].text, '8minuts20seconds')

    def test_spreadsheet_download(self):
        self.client.force_login(self.admin)
        response = self.client.get(self.url, {
            'id': self.course.pk, 'chooselog': '1', 'logformat': 'downloadasexcel',
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'application/ms-excel')
        self.assertRegex(response['Content-Disposition'], r'attachment; filename="logs_\d{8}-\d{4}\.xls"')
        self.assertTrue(response.content.startswith(b'\xd0\xcf\x11\xe0'))

    def test_storage_failure_is_503(self):
        self.client.force_login(self.admin)
        with mock.patch('timestat.views.aggregate', side_effect=StorageUnavailable('down')):
            response = self.client.get(self.url, {'id': self.course.pk, 'chooselog': '1'})
        self.assertEqual(response.status_code, 503)

    def test_group_memo_lives_in_session(self):
        from courses.models import Course
        from groups.models import CourseGroup, GroupMembership
        self.course.group_mode = Course.GROUP_MODE_SEPARATE
        self.course.save()
        group = CourseGroup.objects.create(course=self.course, name='Red')
        GroupMembership.objects.create(group=group, user=self.alice)
        role = Role.objects.create_with_defaults('instructor')
        UserRole.objects.create(user=self.alice, role=role, course=self.course)
        self.client.force_login(self.alice)
        response = self.client.get(self.url, {'id': self.course.pk, 'chooselog': '1'})
        self.assertEqual([row[0].text for row in response.context['table'].rows], ['Alice Smith'])
        self.assertEqual(self.client.session['timestat_current_group'], {str(self.course.pk): group.pk})


class BlockTagTestCase(LogStoreMixin, TestCase):

    def setUp(self):
        self.create_log_store()
        self.template = Template('{% load timestat_tags %}{% timestat_block course %}')

    def test_link_for_viewers(self):
        UserRole.objects.create(user=self.alice, role=Role.objects.create_with_defaults('learner'))
        html = self.template.render(Context({'course': self.course, 'user': self.alice}))
        self.assertIn(f"{reverse('timestat:report')}?id={self.course.pk}", html)

    def test_nothing_for_others(self):
        html = self.template.render(Context({'course': self.course, 'user': self.bob}))
        self.assertNotIn('<a', html)

    def test_duration_filter(self):
        html = Template('{% load timestat_tags %}{{ seconds|duration }}').render(Context({'seconds': 3661}))
        self.assertEqual(html, '1hours1minuts1seconds')


class ExportCommandTestCase(LogStoreMixin, TestCase):

    def setUp(self):
        self.create_log_store()
        make_user('root', is_superuser=True, is_staff=True)

    def test_writes_workbook(self):
        with tempfile.TemporaryDirectory() as directory:
            output = os.path.join(directory, 'report.xls')
            call_command('timestat_export', '--course', str(self.course.pk), '--output', output)
            with open(output, 'rb') as handle:
                self.assertTrue(handle.read().startswith(b'\xd0\xcf\x11\xe0'))

    def test_unknown_course(self):
        with self.assertRaises(CommandError):
            call_command('timestat_export', '--course', '999999')
