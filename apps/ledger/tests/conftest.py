import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.ledger.models import Transaction, TransactionType, TransactionStatus


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a fund member."""
    return User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        display_name='Fund Member',
    )


@pytest.fixture
def other_user(db):
    """Create and return another fund member."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other Member',
    )


@pytest.fixture
def admin_user(db):
    """Create and return a fund administrator."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        display_name='Fund Admin',
        is_staff=True,
    )


@pytest.fixture
def pending_deposit(user):
    """A 200,000 deposit waiting for approval."""
    return Transaction.objects.create(
        user=user,
        type=TransactionType.DEPOSIT,
        status=TransactionStatus.PENDING,
        amount=Decimal('200000'),
        note='Bank transfer',
    )


@pytest.fixture
def authenticated_client(user):
    """Return API client authenticated as the member."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def admin_client(admin_user):
    """Return API client authenticated as the administrator."""
    client = APIClient()
    refresh = RefreshToken.for_user(admin_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client
