import logging

from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied
from django.http import HttpResponse, Http404
from django.shortcuts import render, get_object_or_404
from django.views.decorators.http import require_GET

from core.decorators import report_error_handler
from core.structured_logging import report_logger
from courses.models import Course

from .aggregator import aggregate
from .capabilities import ReportCapabilities
from .exceptions import InvalidFilter
from .filters import parse_id, resolve
from .forms import ReportSelectorForm
from .memo import SessionMemo
from .renderers import DisplayContext, render_spreadsheet, render_table, spreadsheet_filename
from .selectors import build_selector

logger = logging.getLogger(__name__)


def _report_course(request):
    """Course named by ?id=, the site course when absent"""
    try:
        course_id = parse_id(request.GET.get('id'), 'id')
    except InvalidFilter:
        raise Http404("Course not found")
    if course_id:
        return get_object_or_404(Course, pk=course_id)
    course = Course.objects.filter(is_site=True).first()
    if course is None:
        raise Http404("Course not found")
    return course


@login_required
@require_GET
@report_error_handler
def report(request):
    """Time-spent report for a course: selector form plus result table or xls download"""
    course = _report_course(request)
    capabilities = ReportCapabilities.for_user(request.user, course)
    if not capabilities.view:
        raise PermissionDenied(f"timestat:view missing in course {course.pk}")

    filter_set = resolve(request.GET, course, request.user, capabilities, SessionMemo(request.session))

    if filter_set.choose_log and filter_set.is_export:
        result = aggregate(filter_set)
        display_context = DisplayContext.build(capabilities, filter_set, request.user)
        report_logger.info("Time-spent spreadsheet exported", user=request.user, request=request,
                           course=course, extra_data={'rows': result.total_count})
        response = HttpResponse(
            render_spreadsheet(result, filter_set, display_context),
            content_type='application/ms-excel',
        )
        response['Content-Disposition'] = f'attachment; filename="{spreadsheet_filename(acting_user=request.user)}"'
        return response

    options = build_selector(course, request.user, filter_set, request.GET, capabilities)
    context = {
        'course': course,
        'form': ReportSelectorForm(options, filter_set),
        'options': options,
        'filter_set': filter_set,
        'table': None,
        'no_logs': False,
    }

    if filter_set.choose_log:
        result = aggregate(filter_set)
        if result.is_empty:
            context['no_logs'] = True
        else:
            display_context = DisplayContext.build(capabilities, filter_set, request.user)
            context['table'] = render_table(result, filter_set, display_context)
            context['previous_query'] = _page_query(request, filter_set.page - 1)
            context['next_query'] = _page_query(request, filter_set.page + 1)
        report_logger.debug("Time-spent report rendered", user=request.user, request=request,
                            course=course, extra_data={'rows': result.total_count})

    return render(request, 'timestat/index.html', context)


def _page_query(request, page):
    query = request.GET.copy()
    query['page'] = str(max(page, 0))
    return query.urlencode()
