"""
Pytest configuration and fixtures.
"""
import pytest
from django.conf import settings


def pytest_configure(config):
    """Configure Django settings for tests."""
    settings.DATABASES['default'] = {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
        'ATOMIC_REQUESTS': False,
    }
    settings.RATELIMIT_ENABLE = False
    settings.SECURE_SSL_REDIRECT = False
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


@pytest.fixture
def api_client():
    """Return DRF API client."""
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def user(db):
    """Create a private marketplace user."""
    from apps.accounts.models import User
    return User.objects.create_user(
        email='buyer@example.com',
        password='s3cure-pass',
        first_name='Jane',
        last_name='Buyer',
    )


@pytest.fixture
def other_user(db):
    """Create a second private user for isolation tests."""
    from apps.accounts.models import User
    return User.objects.create_user(
        email='other@example.com',
        password='s3cure-pass',
    )


@pytest.fixture
def admin_user(db):
    """Create a platform administrator."""
    from apps.accounts.models import User
    return User.objects.create_superuser(
        email='admin@example.com',
        password='s3cure-pass',
    )


@pytest.fixture
def user_client(api_client, user):
    """API client authenticated as the private user."""
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def admin_client(admin_user):
    """API client authenticated as an administrator."""
    from rest_framework.test import APIClient
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def dealer_payload():
    return {
        'business_name': 'Acme Motors',
        'business_type': 'independent',
        'license_number': 'LIC123',
    }


@pytest.fixture
def dealer_account(db, user):
    """Open a basic-tier dealer account for the private user."""
    from apps.entitlements.services import EntitlementService
    account, _ = EntitlementService.open_account(
        owner=user,
        account_type='dealer',
        business_name='Acme Motors',
        business_type='independent',
    )
    return account
