# Generated manually for the time-spent fact table

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='TimeSpent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('seconds_spent', models.PositiveIntegerField(default=0)),
                ('log', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='time_spent', to='core.standardlog')),
            ],
            options={
                'verbose_name': 'Time spent',
                'verbose_name_plural': 'Time spent',
            },
        ),
    ]
