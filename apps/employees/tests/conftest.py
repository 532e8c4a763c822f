import pytest
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.employees.models import Employee


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
        role=UserRole.EMPLOYEE,
    )


@pytest.fixture
def employee(employee_user):
    """Active employee seeded from the default monthly allocation."""
    return Employee.objects.create(
        user=employee_user,
        employee_code='EMP-001',
        name='Abebe Kebede',
        email='employee@example.com',
        hire_date=date(2023, 1, 15),
    )


@pytest.fixture
def employee_client(api_client, employee_user, employee):
    """Return an API client authenticated as the employee."""
    refresh = RefreshToken.for_user(employee_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client
