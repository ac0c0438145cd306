from django.db import models
from django.conf import settings


class CourseGroup(models.Model):
    """Group of participants inside one course"""
    course = models.ForeignKey(
        'courses.Course',
        on_delete=models.CASCADE,
        related_name='groups'
    )
    name = models.CharField(max_length=255)
    id_number = models.CharField(max_length=100, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        unique_together = ['name', 'course']
        ordering = ['course', 'name']

    def __str__(self):
        return f"{self.name} ({self.course.short_name})"


class GroupMembership(models.Model):
    group = models.ForeignKey(
        CourseGroup,
        on_delete=models.CASCADE,
        related_name='memberships'
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='group_memberships'
    )
    added_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['group', 'user']
        ordering = ['group', 'user']

    def __str__(self):
        return f"{self.user.username} in {self.group.name}"
