"""
Tests for the report error handler and structured logging.
"""

import json

from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import PermissionDenied
from django.db import OperationalError
from django.http import Http404, HttpResponse
from django.test import SimpleTestCase, RequestFactory

from timestat.exceptions import StorageUnavailable

from .decorators import report_error_handler
from .structured_logging import StructuredLogger


def _view_raising(exc):
    @report_error_handler
    def view(request):
        raise exc
    return view


class ReportErrorHandlerTestCase(SimpleTestCase):

    def setUp(self):
        self.factory = RequestFactory()

    def _get(self, view, **headers):
        request = self.factory.get('/timestat/', **headers)
        request.user = AnonymousUser()
        return view(request)

    def test_passes_through_success(self):
        view = report_error_handler(lambda request: HttpResponse('ok'))
        self.assertEqual(self._get(view).content, b'ok')

    def test_permission_denied_is_403(self):
        with self.assertLogs('security', level='WARNING'):
            response = self._get(_view_raising(PermissionDenied('nope')))
        self.assertEqual(response.status_code, 403)

    def test_storage_unavailable_is_503(self):
        with self.assertLogs('timestat.report', level='ERROR'):
            response = self._get(_view_raising(StorageUnavailable('down')))
        self.assertEqual(response.status_code, 503)
        self.assertIn(b'temporarily unavailable', response.content)

    def test_json_clients_get_json(self):
        with self.assertLogs('timestat.report', level='ERROR'):
            response = self._get(_view_raising(StorageUnavailable('down')), HTTP_ACCEPT='application/json')
        self.assertEqual(response.status_code, 503)
        self.assertEqual(json.loads(response.content)['type'], 'storage_error')

    def test_other_errors_are_500(self):
        with self.assertLogs('timestat.report', level='ERROR'):
            response = self._get(_view_raising(OperationalError('boom')))
        self.assertEqual(response.status_code, 500)

    def test_not_found_propagates(self):
        with self.assertRaises(Http404):
            self._get(_view_raising(Http404('missing')))


class StructuredLoggerTestCase(SimpleTestCase):

    def test_context_is_appended_as_json(self):
        request = RequestFactory().get('/timestat/', REMOTE_ADDR='10.0.0.1')
        logger = StructuredLogger('timestat.test')
        with self.assertLogs('timestat.test', level='INFO') as logs:
            logger.info('Report rendered', request=request, course=42, extra_data={'rows': 3})
        message, context = logs.output[0].split(' | Context: ')
        context = json.loads(context)
        self.assertTrue(message.endswith('Report rendered'))
        self.assertEqual(context['course_id'], 42)
        self.assertEqual(context['rows'], 3)
        self.assertEqual(context['request_ip'], '10.0.0.1')
        self.assertIsNone(context['session_id'])
