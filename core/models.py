from django.db import models
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


class StandardLog(models.Model):
    """Platform-wide activity log, one row per user event"""
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='standard_logs'
    )
    course = models.ForeignKey(
        'courses.Course',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='standard_logs'
    )
    context_instance_id = models.BigIntegerField(
        default=0,
        help_text="Id of the activity the event happened in, 0 for course level events"
    )
    module_name = models.CharField(max_length=100, blank=True, help_text="Component that raised the event")
    action = models.CharField(max_length=100)
    time_created = models.BigIntegerField(help_text="Unix timestamp of the event")

    class Meta:
        ordering = ['-time_created']
        indexes = [
            models.Index(fields=['user', 'course'], name='core_stdlog_user_course_idx'),
            models.Index(fields=['time_created'], name='core_stdlog_time_idx'),
            models.Index(fields=['context_instance_id'], name='core_stdlog_context_idx'),
        ]

    def __str__(self):
        return f"{self.user_id} {self.action} @ {self.time_created}"
