"""
HTML table and spreadsheet projections of an AggregateResult
"""

import io
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import xlwt

from courses.models import Course
from users.models import user_date

from .conf import get_setting
from .duration import format_duration

logger = logging.getLogger(__name__)

SITE_LABEL = 'Site'
COURSE_HEADER = 'Course'
NAME_HEADER = 'Full name'
TIME_HEADER = 'Time'


def user_display_name(first_name, last_name, username, full_names=True):
    """Full name, or first name plus last initial when full names are hidden"""
    first_name = (first_name or '').strip()
    last_name = (last_name or '').strip()
    if full_names:
        name = f"{first_name} {last_name}".strip()
    elif first_name and last_name:
        name = f"{first_name} {last_name[0]}."
    else:
        name = first_name or last_name
    return name or username


@dataclass(frozen=True)
class DisplayContext:
    view_full_names: bool = False
    course_names: Dict[int, str] = field(default_factory=dict)
    acting_user: object = None

    @classmethod
    def build(cls, capabilities, filter_set, acting_user=None):
        """Course shortnames are only looked up for the all-courses view"""
        course_names = {}
        if filter_set.all_courses:
            course_names = dict(Course.objects.values_list('id', 'short_name'))
        return cls(
            view_full_names=capabilities.view_full_names,
            course_names=course_names,
            acting_user=acting_user,
        )

    def name_for(self, row):
        return user_display_name(row.first_name, row.last_name, row.username, self.view_full_names)

    def course_label(self, course_id):
        if not course_id:
            return SITE_LABEL
        return self.course_names.get(course_id, str(course_id))


@dataclass(frozen=True)
class TableCell:
    text: str
    url: Optional[str] = None
    align: str = 'left'


@dataclass
class ReportTable:
    head: List[str]
    align: List[str]
    rows: List[List[TableCell]]
    total_count: int = 0
    page: int = 0
    per_page: int = 0

    @property
    def header_cells(self):
        return list(zip(self.head, self.align))

    @property
    def has_previous(self):
        return self.page > 0

    @property
    def has_next(self):
        # A full page may be followed by another one
        return bool(self.per_page) and self.total_count >= self.per_page


def headers_for(filter_set):
    head = [NAME_HEADER, TIME_HEADER]
    if filter_set.all_courses:
        head.insert(0, COURSE_HEADER)
    return head


def render_table(result, filter_set, display_context):
    head = headers_for(filter_set)
    align = ['left'] * (len(head) - 1) + ['right']
    profile_url = get_setting('USER_PROFILE_URL')
    course_url = get_setting('COURSE_URL')

    rows = []
    for row in result.rows:
        cells = []
        if filter_set.all_courses:
            if row.course_id:
                cells.append(TableCell(
                    display_context.course_label(row.course_id),
                    course_url.format(course_id=row.course_id),
                ))
            else:
                cells.append(TableCell(SITE_LABEL))
        cells.append(TableCell(
            display_context.name_for(row),
            profile_url.format(user_id=row.user_id),
        ))
        cells.append(TableCell(format_duration(row.total_seconds_spent), align=align[-1]))
        rows.append(cells)

    return ReportTable(
        head=head,
        align=align,
        rows=rows,
        total_count=result.total_count,
        page=filter_set.page,
        per_page=filter_set.per_page if not filter_set.pagination.unrestricted else 0,
    )


def sheet_capacity():
    return get_setting('SPREADSHEET_MAX_ROWS') - get_setting('FIRST_DATA_ROW') + 1


def spreadsheet_filename(now=None, acting_user=None):
    now = int(now if now is not None else time.time())
    return f"logs_{user_date(now, acting_user, '%Y%m%d-%H%M')}.xls"


def build_workbook(result, filter_set, display_context=None, now=None):
    """
    Workbook with the result rows spread over as many sheets as needed.

    Every sheet carries a 'Saved at' line in row 0 and the column headers
    just above the first data row; an empty result still gets one sheet.
    """
    display_context = display_context or DisplayContext(view_full_names=True)
    now = int(now if now is not None else time.time())
    first_row = get_setting('FIRST_DATA_ROW')
    capacity = sheet_capacity()
    sheet_count = max(1, math.ceil(result.total_count / capacity))

    header_style = xlwt.easyxf('font: bold on; align: wrap on, vert centre, horiz center')
    saved_at = f"Saved at: {user_date(now, display_context.acting_user, '%A, %d %B %Y, %I:%M %p')}"
    headers = headers_for(filter_set)

    wb = xlwt.Workbook(encoding='utf-8')
    sheets = []
    for number in range(1, sheet_count + 1):
        ws = wb.add_sheet(f"Logs {number}-{sheet_count}")
        ws.write(0, 0, saved_at)
        for col, header in enumerate(headers):
            ws.write(first_row - 1, col, header, header_style)
            ws.col(col).width = 30 * 256
        sheets.append(ws)

    for index, row in enumerate(result.rows):
        ws = sheets[index // capacity]
        line = first_row + index % capacity
        values = []
        if filter_set.all_courses:
            values.append(display_context.course_label(row.course_id))
        values.append(display_context.name_for(row))
        values.append(format_duration(row.total_seconds_spent))
        for col, value in enumerate(values):
            ws.write(line, col, value)

    logger.debug(f"Built time-spent workbook with {sheet_count} sheet(s) for {result.total_count} rows")
    return wb


def render_spreadsheet(result, filter_set, display_context=None, now=None):
    stream = io.BytesIO()
    build_workbook(result, filter_set, display_context, now).save(stream)
    return stream.getvalue()
