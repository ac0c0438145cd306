from django.db import models


class TimeSpent(models.Model):
    """Seconds a user spent on the event recorded by one log row"""
    log = models.OneToOneField(
        'core.StandardLog',
        on_delete=models.CASCADE,
        related_name='time_spent'
    )
    seconds_spent = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = 'Time spent'
        verbose_name_plural = 'Time spent'

    def __str__(self):
        return f"log {self.log_id}: {self.seconds_spent}s"
