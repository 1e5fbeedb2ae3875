import pytest
from decimal import Decimal
from apps.accounts.models import User
from apps.ledger.models import Transaction, TransactionType, TransactionStatus


@pytest.fixture
def member(db):
    return User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        display_name='Fund Member',
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        display_name='Fund Admin',
        is_staff=True,
    )


@pytest.fixture
def pending_deposit(member):
    return Transaction.objects.create(
        user=member,
        type=TransactionType.DEPOSIT,
        status=TransactionStatus.PENDING,
        amount=Decimal('200000'),
    )
