"""
Fund statistics for the admin dashboard.

Read-only aggregates over members, lunch sessions and pending deposits.
"""
from datetime import date
from decimal import Decimal
from typing import Dict

from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce

from apps.accounts.models import User
from apps.ledger.models import Transaction, TransactionType, TransactionStatus
from apps.lunch.models import LunchSession, SessionStatus, OrderStatus


def get_fund_stats(*, today: date) -> Dict:
    """
    Snapshot of the fund.

    Args:
        today: Office date whose lunch session is reported

    Returns:
        Dict with ``users`` (active count, sum of their balances),
        ``sessions`` (total, settled), ``pending_deposits`` (count, total
        amount) and ``today`` (id, status, participants, total_bill of
        today's session, or None when there is no session)
    """
    users = User.objects.filter(is_active=True).aggregate(
        total=Count('id'),
        total_balance=Coalesce(Sum('balance'), Decimal('0')),
    )

    sessions = LunchSession.objects.aggregate(
        total=Count('id'),
        settled=Count('id', filter=Q(status=SessionStatus.SETTLED)),
    )

    pending_deposits = Transaction.objects.filter(
        type=TransactionType.DEPOSIT,
        status=TransactionStatus.PENDING,
    ).aggregate(
        count=Count('id'),
        total_amount=Coalesce(Sum('amount'), Decimal('0')),
    )

    session = (
        LunchSession.objects
        .filter(session_date=today)
        .annotate(participants=Count('orders', filter=Q(orders__status=OrderStatus.CONFIRMED)))
        .first()
    )
    today_summary = None
    if session is not None:
        today_summary = {
            'id': session.id,
            'status': session.status,
            'participants': session.participants,
            'total_bill': session.total_bill,
        }

    return {
        'users': users,
        'sessions': sessions,
        'pending_deposits': pending_deposits,
        'today': today_summary,
    }
