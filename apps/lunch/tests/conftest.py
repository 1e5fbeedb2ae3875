import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.lunch.models import LunchSession, LunchOrder, SessionStatus


# A Monday
SESSION_DATE = date(2025, 3, 3)


def create_member(name, **extra_fields):
    """Create an active lunch member named ``name``."""
    return User.objects.create_user(
        email=f'{name.lower()}@example.com',
        password='TestPass123!',
        display_name=name,
        **extra_fields
    )


def open_session(session_date, participants):
    """Create an ordering session with a confirmed order per participant."""
    session = LunchSession.objects.create(session_date=session_date)
    for user in participants:
        LunchOrder.objects.create(session=session, user=user)
    return session


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def members(db):
    """Create and return five members, A to E."""
    return [create_member(name) for name in ['Alice', 'Bob', 'Carol', 'Dave', 'Erin']]


@pytest.fixture
def lunch_admin(db):
    """Create and return a staff user who does not eat lunch."""
    return create_member('Admin', is_staff=True)


@pytest.fixture
def ordering_session(members):
    """Today's session with all five members joined."""
    return open_session(SESSION_DATE, members)


@pytest.fixture
def selected_session(members):
    """A session where Alice and Bob were selected as buyers."""
    session = open_session(SESSION_DATE, members)
    session.status = SessionStatus.BUYERS_SELECTED
    session.buyer_ids = [str(members[0].id), str(members[1].id)]
    session.total_participants = len(members)
    session.save()
    return session


@pytest.fixture
def funded_members(members):
    """Give every member a balance of 500,000."""
    User.objects.filter(id__in=[m.id for m in members]).update(balance=Decimal('500000'))
    for member in members:
        member.refresh_from_db()
    return members


@pytest.fixture
def member_client(members):
    """Return API client authenticated as Alice."""
    client = APIClient()
    refresh = RefreshToken.for_user(members[0])
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def admin_client(lunch_admin):
    """Return API client authenticated as the lunch admin."""
    client = APIClient()
    refresh = RefreshToken.for_user(lunch_admin)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client
