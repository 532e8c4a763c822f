# Generated manually for the employees app

import uuid
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models
import apps.employees.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Employee',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('employee_code', models.CharField(max_length=32, unique=True)),
                ('name', models.CharField(max_length=200)),
                ('email', models.EmailField(max_length=255)),
                ('phone', models.CharField(blank=True, max_length=32)),
                ('status', models.CharField(choices=[('active', 'Active'), ('on_leave', 'On leave'), ('suspended', 'Suspended'), ('terminated', 'Terminated')], default='active', max_length=20)),
                ('monthly_allocation', models.PositiveIntegerField(default=apps.employees.models.default_monthly_allocation)),
                ('current_balance', models.IntegerField(blank=True, help_text='Starts at the monthly allocation when left empty.', null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('last_allocation_date', models.DateTimeField(blank=True, null=True)),
                ('hire_date', models.DateField()),
                ('termination_date', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='employee_profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'employees',
                'ordering': ['employee_code'],
                'indexes': [
                    models.Index(fields=['status'], name='employees_status_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(current_balance__gte=0), name='employee_balance_non_negative'),
                ],
            },
        ),
    ]
