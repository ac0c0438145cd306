from django import template
from django.urls import reverse

from role_management.services import has_capability
from timestat.capabilities import VIEW
from timestat.duration import format_duration

register = template.Library()


@register.inclusion_tag('timestat/block.html', takes_context=True)
def timestat_block(context, course):
    """Link to the course's time-spent report, shown only to users who may view it"""
    request = context.get('request')
    user = getattr(request, 'user', None) or context.get('user')
    if course is None or not has_capability(user, VIEW, course):
        return {'report_url': None}
    return {'report_url': f"{reverse('timestat:report')}?id={course.pk}"}


@register.filter
def duration(seconds):
    """Render a second count the way the report does"""
    try:
        return format_duration(int(seconds))
    except (TypeError, ValueError):
        return "-"
