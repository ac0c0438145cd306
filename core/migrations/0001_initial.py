# Generated manually for the platform activity log

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('courses', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='StandardLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('context_instance_id', models.BigIntegerField(default=0, help_text='Id of the activity the event happened in, 0 for course level events')),
                ('module_name', models.CharField(blank=True, help_text='Component that raised the event', max_length=100)),
                ('action', models.CharField(max_length=100)),
                ('time_created', models.BigIntegerField(help_text='Unix timestamp of the event')),
                ('course', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='standard_logs', to='courses.course')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='standard_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-time_created'],
                'indexes': [models.Index(fields=['user', 'course'], name='core_stdlog_user_course_idx'), models.Index(fields=['time_created'], name='core_stdlog_time_idx'), models.Index(fields=['context_instance_id'], name='core_stdlog_context_idx')],
            },
        ),
    ]
