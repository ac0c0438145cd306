from django.apps import AppConfig


class TimestatConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'timestat'
    verbose_name = 'Time spent'

    def ready(self):
        from .dialects import configure
        configure()
