import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def supplier_user(db):
    return User.objects.create_user(
        email='canteen@example.com',
        password='TestPass123!',
        role=UserRole.SUPPLIER,
    )


@pytest.fixture
def supplier_client(api_client, supplier_user):
    """Return an API client authenticated as the supplier user."""
    refresh = RefreshToken.for_user(supplier_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client
