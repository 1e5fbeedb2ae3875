import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.lunch.models import LunchSession, SessionStatus
from apps.reimbursements.models import ReimbursementRequest, ReimbursementType


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def settler(db):
    """Create and return the buyer who paid for lunch."""
    return User.objects.create_user(
        email='settler@example.com',
        password='TestPass123!',
        display_name='Lunch Buyer',
    )


@pytest.fixture
def other_user(db):
    """Create and return an unrelated member."""
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
def reimbursement(settler):
    """A pending lunch reimbursement of 503,000."""
    session = LunchSession.objects.create(
        session_date=date(2025, 3, 3),
        status=SessionStatus.SETTLED,
        buyer_ids=[str(settler.id)],
        payer=settler,
        total_bill=Decimal('503000'),
    )
    return ReimbursementRequest.objects.create(
        type=ReimbursementType.LUNCH,
        session=session,
        settler=settler,
        total_amount=Decimal('503000'),
    )


def client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def settler_client(settler):
    """Return API client authenticated as the settler."""
    return client_for(settler)


@pytest.fixture
def admin_client(admin_user):
    """Return API client authenticated as the administrator."""
    return client_for(admin_user)


@pytest.fixture
def other_client(other_user):
    """Return API client authenticated as an unrelated member."""
    return client_for(other_user)
