"""
Error handling decorators for report views
"""

import logging
from functools import wraps
from django.http import Http404, JsonResponse, HttpResponse, HttpResponseForbidden, HttpResponseServerError
from django.core.exceptions import PermissionDenied

from core.structured_logging import report_logger, security_logger
from timestat.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

STORAGE_MESSAGE = 'Activity logs are temporarily unavailable. Please try again later.'
SERVER_MESSAGE = 'Server error occurred - Our team has been notified. Please try again in a few minutes.'


def _wants_json(request):
    return request.headers.get('Accept', '').startswith('application/json')


def report_error_handler(view_func):
    """
    Map report failures to responses.

    PermissionDenied gives 403, an unreachable log store 503 and anything
    else 500; every failure is logged with the request context.
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)

        except Http404:
            raise

        except PermissionDenied as e:
            security_logger.warning(f"Permission denied in {view_func.__name__}: {e}",
                                    user=request.user, request=request)
            if _wants_json(request):
                return JsonResponse({
                    'error': 'Permission denied',
                    'message': 'You do not have permission to view this report',
                    'type': 'permission_error'
                }, status=403)
            return HttpResponseForbidden("You do not have permission to view this report")

        except StorageUnavailable as e:
            report_logger.error(f"Log store unavailable in {view_func.__name__}",
                                exception=e, user=request.user, request=request)
            if _wants_json(request):
                return JsonResponse({
                    'error': 'Service unavailable',
                    'message': STORAGE_MESSAGE,
                    'type': 'storage_error'
                }, status=503)
            return HttpResponse(STORAGE_MESSAGE, status=503)

        except Exception as e:
            report_logger.error(f"Unexpected error in {view_func.__name__}",
                                exception=e, user=request.user, request=request)
            if _wants_json(request):
                return JsonResponse({
                    'error': 'Internal server error',
                    'message': SERVER_MESSAGE,
                    'type': 'server_error'
                }, status=500)
            return HttpResponseServerError("Internal server error")

    return wrapper
