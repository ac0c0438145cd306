"""
Structured logging utilities for report requests
"""

import logging
import json
from typing import Dict, Any, Optional
from django.http import HttpRequest


class StructuredLogger:
    """Logger that appends request, user and course context as JSON"""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _create_context(self,
                        user=None,
                        request: Optional[HttpRequest] = None,
                        course=None,
                        extra_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Create structured context for logging"""
        context = {}

        if user is not None and getattr(user, 'pk', None):
            context.update({
                'user_id': user.pk,
                'username': user.get_username(),
            })

        if course is not None:
            context['course_id'] = getattr(course, 'pk', course)

        if request is not None:
            session = getattr(request, 'session', None)
            context.update({
                'request_method': request.method,
                'request_path': request.path,
                'request_ip': self._get_client_ip(request),
                'session_id': session.session_key if session is not None else None,
            })

        if extra_data:
            context.update(extra_data)

        return context

    def _get_client_ip(self, request: HttpRequest) -> str:
        """Get client IP address from request"""
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            return x_forwarded_for.split(',')[0]
        return request.META.get('REMOTE_ADDR')

    def _emit(self, level, message, context):
        if self.logger.isEnabledFor(level):
            self.logger.log(level, f"{message} | Context: {json.dumps(context, default=str)}")

    def info(self, message: str, user=None, request: Optional[HttpRequest] = None,
             course=None, extra_data: Optional[Dict[str, Any]] = None):
        self._emit(logging.INFO, message, self._create_context(user, request, course, extra_data))

    def warning(self, message: str, user=None, request: Optional[HttpRequest] = None,
                course=None, extra_data: Optional[Dict[str, Any]] = None):
        self._emit(logging.WARNING, message, self._create_context(user, request, course, extra_data))

    def debug(self, message: str, user=None, request: Optional[HttpRequest] = None,
              course=None, extra_data: Optional[Dict[str, Any]] = None):
        self._emit(logging.DEBUG, message, self._create_context(user, request, course, extra_data))

    def error(self, message: str,
              exception: Optional[Exception] = None,
              user=None,
              request: Optional[HttpRequest] = None,
              course=None,
              extra_data: Optional[Dict[str, Any]] = None):
        """Log error message with context and exception details"""
        context = self._create_context(user, request, course, extra_data)

        if exception is not None:
            context.update({
                'exception_type': type(exception).__name__,
                'exception_message': str(exception),
            })

        self.logger.error(f"{message} | Context: {json.dumps(context, default=str)}",
                          exc_info=exception is not None)


report_logger = StructuredLogger('timestat.report')
security_logger = StructuredLogger('security')
