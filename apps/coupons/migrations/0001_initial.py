# Generated manually for the coupons app

import uuid
from decimal import Decimal
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('employees', '0001_initial'),
        ('suppliers', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='QRCode',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('code', models.CharField(editable=False, max_length=64, unique=True)),
                ('expires_at', models.DateTimeField()),
                ('is_used', models.BooleanField(default=False)),
                ('used_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='qr_codes', to='employees.employee')),
            ],
            options={
                'verbose_name': 'QR code',
                'db_table': 'qr_codes',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['employee', 'created_at'], name='qr_codes_employee_idx'),
                    models.Index(fields=['expires_at'], name='qr_codes_expires_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CouponTransaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('coupons_used', models.PositiveSmallIntegerField()),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed'), ('rejected', 'Rejected')], default='pending', max_length=20)),
                ('employee_latitude', models.FloatField(blank=True, null=True)),
                ('employee_longitude', models.FloatField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('rejection_reason', models.CharField(blank=True, max_length=500)),
                ('processed_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('resolved_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='coupon_transactions', to='employees.employee')),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='coupon_transactions', to='suppliers.supplier')),
                ('qr_code', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transactions', to='coupons.qrcode')),
            ],
            options={
                'db_table': 'coupon_transactions',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['employee', 'status'], name='coupon_txn_employee_idx'),
                    models.Index(fields=['supplier', 'created_at'], name='coupon_txn_supplier_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(status='completed'), fields=('qr_code',), name='unique_completed_transaction_per_qr_code'),
                    models.UniqueConstraint(condition=models.Q(status='pending'), fields=('qr_code',), name='unique_pending_transaction_per_qr_code'),
                ],
            },
        ),
    ]
