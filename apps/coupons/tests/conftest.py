import pytest
from datetime import date, timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.coupons.models import CouponTransaction, QRCode, TransactionStatus
from apps.coupons.services.qr_rendering import QRPayloadGenerator
from apps.employees.models import Employee
from apps.suppliers.models import Supplier


# Canteen location used by the supplier fixture
SUPPLIER_LAT = 9.0300
SUPPLIER_LON = 38.7400


def bearer_client(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def employee_user(db):
    """Create and return a user with the employee role."""
    return User.objects.create_user(
        email='employee@example.com',
        password='TestPass123!',
        display_name='Abebe',
        role=UserRole.EMPLOYEE,
    )


@pytest.fixture
def employee(employee_user):
    """Active employee with 10 coupons."""
    return Employee.objects.create(
        user=employee_user,
        employee_code='EMP-001',
        name='Abebe Kebede',
        email='employee@example.com',
        hire_date=date(2023, 1, 15),
        current_balance=10,
    )


@pytest.fixture
def other_employee(db):
    """A second employee, used for ownership checks."""
    user = User.objects.create_user(
        email='other.employee@example.com',
        password='TestPass123!',
        role=UserRole.EMPLOYEE,
    )
    return Employee.objects.create(
        user=user,
        employee_code='EMP-002',
        name='Sara Tadesse',
        email='other.employee@example.com',
        hire_date=date(2022, 6, 1),
        current_balance=5,
    )


@pytest.fixture
def supplier_user(db):
    """Create and return a user with the supplier role."""
    return User.objects.create_user(
        email='canteen@example.com',
        password='TestPass123!',
        display_name='Canteen',
        role=UserRole.SUPPLIER,
    )


@pytest.fixture
def supplier(supplier_user):
    """Active, verified supplier with a 500 m radius."""
    return Supplier.objects.create(
        user=supplier_user,
        business_name='Main Canteen',
        address='Bole Road 12',
        latitude=SUPPLIER_LAT,
        longitude=SUPPLIER_LON,
        location_radius=500,
        is_active=True,
        is_verified=True,
    )


@pytest.fixture
def qr_code(employee):
    """Fresh, unused QR code for the employee."""
    return QRCode.objects.create(
        employee=employee,
        expires_at=timezone.now() + timedelta(minutes=15),
    )


@pytest.fixture
def qr_payload(employee, qr_code):
    return QRPayloadGenerator.build_payload(employee.employee_code, qr_code.code)


@pytest.fixture
def pending_transaction(employee, supplier, qr_code):
    """Pending 2-coupon transaction on the employee's QR code."""
    return CouponTransaction.objects.create(
        employee=employee,
        supplier=supplier,
        qr_code=qr_code,
        coupons_used=2,
        total_amount='90.00',
        status=TransactionStatus.PENDING,
    )


@pytest.fixture
def employee_client(employee_user, employee):
    """API client authenticated as the employee."""
    return bearer_client(employee_user)


@pytest.fixture
def supplier_client(supplier_user, supplier):
    """API client authenticated as the supplier."""
    return bearer_client(supplier_user)
