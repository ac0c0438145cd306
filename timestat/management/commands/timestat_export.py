from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from courses.models import Course
from timestat.aggregator import aggregate
from timestat.capabilities import ReportCapabilities
from timestat.exceptions import StorageUnavailable
from timestat.filters import LOG_FORMAT_EXCEL, resolve
from timestat.memo import SessionMemo
from timestat.renderers import DisplayContext, render_spreadsheet, spreadsheet_filename

User = get_user_model()


class Command(BaseCommand):
    help = 'Export the time-spent report of a course to an .xls file'

    def add_arguments(self, parser):
        parser.add_argument('--course', type=int, required=True, help='Course id')
        parser.add_argument('--user', type=int, default=0, help='Only this user')
        parser.add_argument('--group', type=int, default=0, help='Only members of this group')
        parser.add_argument('--date', default='', help="Start of the day to report (epoch seconds or 'today')")
        parser.add_argument('--dateto', default='', help='End of the period (epoch seconds)')
        parser.add_argument('--modid', default='', help="Activity id or 'site_errors'")
        parser.add_argument('--modname', default='', help='Component name, e.g. quiz')
        parser.add_argument('--modaction', default='', help="Action substring; prefix with '-' to exclude")
        parser.add_argument('--as-user', dest='as_user', default='',
                            help='Username whose timezone is used; defaults to the first superuser')
        parser.add_argument('--output', default='', help='Target path; defaults to logs_<timestamp>.xls')

    def handle(self, *args, **options):
        try:
            course = Course.objects.get(pk=options['course'])
        except Course.DoesNotExist:
            raise CommandError(f"Course {options['course']} does not exist")

        if options['as_user']:
            acting_user = User.objects.filter(username=options['as_user']).first()
        else:
            acting_user = User.objects.filter(is_superuser=True).order_by('pk').first()
        if acting_user is None:
            raise CommandError('No acting user found; pass --as-user')

        raw = {
            'user': options['user'],
            'group': options['group'],
            'date': options['date'],
            'dateto': options['dateto'],
            'modid': options['modid'],
            'modname': options['modname'],
            'modaction': options['modaction'],
            'logformat': LOG_FORMAT_EXCEL,
            'chooselog': '1',
        }
        capabilities = ReportCapabilities.unrestricted()
        filter_set = resolve(raw, course, acting_user, capabilities, SessionMemo({}))

        try:
            result = aggregate(filter_set)
        except StorageUnavailable as e:
            raise CommandError(str(e))

        display_context = DisplayContext.build(capabilities, filter_set, acting_user)
        output = options['output'] or spreadsheet_filename(acting_user=acting_user)
        with open(output, 'wb') as handle:
            handle.write(render_spreadsheet(result, filter_set, display_context))

        self.stdout.write(
            self.style.SUCCESS(f'✓ Wrote {result.total_count} rows for course {course} to {output}')
        )
