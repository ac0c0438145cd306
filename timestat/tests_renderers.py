"""
Tests for the HTML table and spreadsheet renderers.
"""

import re

from django.test import SimpleTestCase, TestCase

from courses.models import Course

from .aggregator import AggregateResult, AggregateRow
from .capabilities import ReportCapabilities
from .filters import FilterSet, Pagination
from .testing import BASE_TIME
from .renderers import (
    DisplayContext, build_workbook, render_spreadsheet, render_table,
    sheet_capacity, spreadsheet_filename, user_display_name,
)


def make_rows(count, course_id=None):
    return tuple(
        AggregateRow(
            user_id=index + 1,
            username=f'user{index + 1}',
            first_name=f'First{index + 1}',
            last_name=f'Last{index + 1}',
            total_seconds_spent=10000 - index,
            course_id=course_id,
        )
        for index in range(count)
    )


class DisplayNameTestCase(SimpleTestCase):

    def test_full_name(self):
        self.assertEqual(user_display_name('Alice', 'Smith', 'alice'), 'Alice Smith')

    def test_anonymised_name(self):
        self.assertEqual(user_display_name('Alice', 'Smith', 'alice', full_names=False), 'Alice S.')

    def test_falls_back_to_username(self):
        self.assertEqual(user_display_name('', '', 'alice'), 'alice')
        self.assertEqual(user_display_name(None, None, 'alice', full_names=False), 'alice')


class RenderTableTestCase(TestCase):

    def test_course_report_columns(self):
        result = AggregateResult(rows=(
            AggregateRow(7, 'alice', 'Alice', 'Smith', 3661),
        ))
        filter_set = FilterSet(course_id=1, pagination=Pagination(offset=0, limit=100))
        table = render_table(result, filter_set, DisplayContext(view_full_names=True))
        self.assertEqual(table.head, ['Full name', 'Time'])
        self.assertEqual(len(table.align), 2)
        name, duration = table.rows[0]
        self.assertEqual(name.text, 'Alice Smith')
        self.assertEqual(name.url, '/users/7/')
        self.assertEqual(duration.text, '1hours1minuts1seconds')
        self.assertIsNone(duration.url)
        self.assertEqual(duration.align, 'right')
        self.assertEqual(name.align, 'left')
        self.assertEqual(table.header_cells, [('Full name', 'left'), ('Time', 'right')])
        self.assertEqual(table.total_count, 1)
        self.assertFalse(table.has_next)

    def test_names_are_anonymised_without_capability(self):
        result = AggregateResult(rows=(AggregateRow(7, 'alice', 'Alice', 'Smith', 5),))
        table = render_table(result, FilterSet(course_id=1), DisplayContext(view_full_names=False))
        self.assertEqual(table.rows[0][0].text, 'Alice S.')

    def test_all_courses_view_adds_course_column(self):
        course = Course.objects.create(short_name='PY101', full_name='Python Basics')
        site = Course.objects.create(short_name='site', full_name='Site', is_site=True)
        result = AggregateResult(rows=(
            AggregateRow(1, 'alice', 'Alice', 'Smith', 500, course.pk),
            AggregateRow(1, 'alice', 'Alice', 'Smith', 70, None),
        ))
        filter_set = FilterSet(course_id=site.pk, all_courses=True)
        context = DisplayContext.build(ReportCapabilities(view_full_names=True), filter_set)
        table = render_table(result, filter_set, context)
        self.assertEqual(table.head, ['Course', 'Full name', 'Time'])
        self.assertEqual(table.rows[0][0].text, 'PY101')
        self.assertEqual(table.rows[0][0].url, f'/courses/{course.pk}/')
        self.assertEqual(table.rows[1][0].text, 'Site')
        self.assertIsNone(table.rows[1][0].url)

    def test_full_page_offers_next_page(self):
        result = AggregateResult(rows=make_rows(2))
        filter_set = FilterSet(course_id=1, page=1, per_page=2, pagination=Pagination(offset=2, limit=2))
        table = render_table(result, filter_set, DisplayContext())
        self.assertTrue(table.has_next)
        self.assertTrue(table.has_previous)


class SpreadsheetTestCase(SimpleTestCase):

    def setUp(self):
        self.filter_set = FilterSet(course_id=1)
        self.capacity = sheet_capacity()

    def test_capacity_from_settings(self):
        # SPREADSHEET_MAX_ROWS=12 and FIRST_DATA_ROW=3 in test settings
        self.assertEqual(self.capacity, 10)

    def test_rows_split_across_sheets(self):
        result = AggregateResult(rows=make_rows(2 * self.capacity + 1))
        wb = build_workbook(result, self.filter_set, now=BASE_TIME)
        sheets = [wb.get_sheet(index) for index in range(3)]
        with self.assertRaises(IndexError):
            wb.get_sheet(3)
        self.assertEqual([ws.name for ws in sheets], ['Logs 1-3', 'Logs 2-3', 'Logs 3-3'])
        self.assertEqual(sorted(sheets[0].get_rows()), [0] + list(range(2, 3 + self.capacity)))
        self.assertEqual(sorted(sheets[1].get_rows()), [0] + list(range(2, 3 + self.capacity)))
        # Saved-at row, header row and a single data row
        self.assertEqual(sorted(sheets[2].get_rows()), [0, 2, 3])

    def test_exact_capacity_fits_one_sheet(self):
        wb = build_workbook(AggregateResult(rows=make_rows(self.capacity)), self.filter_set, now=BASE_TIME)
        wb.get_sheet(0)
        with self.assertRaises(IndexError):
            wb.get_sheet(1)

    def test_empty_result_still_has_headers(self):
        wb = build_workbook(AggregateResult(), self.filter_set, now=BASE_TIME)
        ws = wb.get_sheet(0)
        self.assertEqual(ws.name, 'Logs 1-1')
        self.assertEqual(sorted(ws.get_rows()), [0, 2])

    def test_render_spreadsheet_returns_xls_bytes(self):
        data = render_spreadsheet(AggregateResult(rows=make_rows(3)), self.filter_set, now=BASE_TIME)
        self.assertTrue(data.startswith(b'\xd0\xcf\x11\xe0'))

    def test_filename(self):
        self.assertEqual(spreadsheet_filename(now=BASE_TIME), 'logs_20231114-2213.xls')
        self.assertRegex(spreadsheet_filename(), re.compile(r'^logs_\d{8}-\d{4}\.xls$'))
