from django.db import models
from django.conf import settings
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)


class Course(models.Model):
    """Course as seen by the reporting components"""
    GROUP_MODE_NONE = 0
    GROUP_MODE_SEPARATE = 1
    GROUP_MODE_VISIBLE = 2
    GROUP_MODE_CHOICES = [
        (GROUP_MODE_NONE, 'No groups'),
        (GROUP_MODE_SEPARATE, 'Separate groups'),
        (GROUP_MODE_VISIBLE, 'Visible groups'),
    ]

    short_name = models.CharField(max_length=100)
    full_name = models.CharField(max_length=255)
    start_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    group_mode = models.PositiveSmallIntegerField(
        choices=GROUP_MODE_CHOICES,
        default=GROUP_MODE_NONE,
        help_text='Separate groups restrict visibility to the member\'s own group'
    )
    is_site = models.BooleanField(
        default=False,
        help_text='The front-page course; reports on it cover all courses'
    )

    class Meta:
        ordering = ['full_name']

    def __str__(self):
        if self.is_site:
            return f"{self.full_name} (Site)"
        return self.full_name

    def get_display_name(self):
        """Name used in course dropdowns"""
        return self.full_name or self.short_name

    def get_section_name(self, number):
        section = self.sections.filter(number=number).first()
        if section and section.name:
            return section.name
        return f"Topic {number}"


class CourseSection(models.Model):
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='sections')
    number = models.PositiveIntegerField()
    name = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ['course', 'number']
        unique_together = ['course', 'number']

    def __str__(self):
        return f"{self.course.short_name} - {self.name or self.number}"


class CourseModule(models.Model):
    """An activity instance placed in a course section"""
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='modules')
    section_number = models.PositiveIntegerField(default=0)
    position = models.PositiveIntegerField(default=0)
    module_name = models.CharField(max_length=50, help_text='Activity type, e.g. quiz or forum')
    name = models.CharField(max_length=255)
    visible = models.BooleanField(default=True)
    has_view = models.BooleanField(default=True, help_text='Whether the activity has its own page')

    class Meta:
        ordering = ['course', 'section_number', 'position', 'id']

    def __str__(self):
        return f"{self.name} ({self.module_name})"


class CourseEnrollment(models.Model):
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='enrollments')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='course_enrollments'
    )
    enrolled_at = models.DateTimeField(auto_now_add=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        unique_together = ['course', 'user']
        ordering = ['course', 'user']

    def __str__(self):
        return f"{self.user} in {self.course}"
