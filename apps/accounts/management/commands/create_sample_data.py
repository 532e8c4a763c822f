"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data

This creates:
- 1 admin user
- 3 employees (active, on leave, suspended) with coupon balances
- 2 suppliers (one verified, one waiting for verification)
"""

from datetime import date

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User, UserRole
from apps.coupons.models import CouponTransaction, QRCode
from apps.employees.models import Employee, EmployeeStatus
from apps.suppliers.models import Supplier


EMPLOYEES = [
    # email, code, name, status
    ('abebe@example.com', 'EMP-001', 'Abebe Kebede', EmployeeStatus.ACTIVE),
    ('sara@example.com', 'EMP-002', 'Sara Tadesse', EmployeeStatus.ON_LEAVE),
    ('dawit@example.com', 'EMP-003', 'Dawit Alemu', EmployeeStatus.SUSPENDED),
]

SUPPLIERS = [
    # email, business name, address, lat, lon, verified
    ('canteen@example.com', 'Main Canteen', 'Bole Road 12', 9.0300, 38.7400, True),
    ('cafe@example.com', 'Corner Cafe', 'Churchill Avenue 4', 9.0350, 38.7520, False),
]


class Command(BaseCommand):
    help = 'Create sample employees and suppliers for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        self.create_admin()
        self.create_employees()
        self.create_suppliers()

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        for email, *_ in EMPLOYEES + SUPPLIERS:
            self.stdout.write(f'  {email} / password123')

    def clear_data(self):
        """Clear all coupon data from the database."""
        CouponTransaction.objects.all().delete()
        QRCode.objects.all().delete()
        Employee.objects.all().delete()
        Supplier.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()

    def create_admin(self):
        self.stdout.write('  Creating admin...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'display_name': 'Admin User',
                'role': UserRole.ADMIN,
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()
        return admin

    def _user(self, email, role, display_name):
        user, _ = User.objects.get_or_create(
            email=email,
            defaults={'display_name': display_name, 'role': role}
        )
        user.set_password('password123')
        user.save()
        return user

    def create_employees(self):
        self.stdout.write('  Creating employees...')

        for email, code, name, status in EMPLOYEES:
            user = self._user(email, UserRole.EMPLOYEE, name)
            employee, created = Employee.objects.get_or_create(
                user=user,
                defaults={
                    'employee_code': code,
                    'name': name,
                    'email': email,
                    'hire_date': date(2023, 1, 15),
                }
            )
            if created and status != EmployeeStatus.ACTIVE:
                employee.change_status(status)

    def create_suppliers(self):
        self.stdout.write('  Creating suppliers...')

        for email, business_name, address, lat, lon, verified in SUPPLIERS:
            user = self._user(email, UserRole.SUPPLIER, business_name)
            Supplier.objects.get_or_create(
                user=user,
                defaults={
                    'business_name': business_name,
                    'address': address,
                    'latitude': lat,
                    'longitude': lon,
                    'is_verified': verified,
                }
            )
