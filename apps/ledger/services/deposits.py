"""
Deposit and adjustment service.

Deposits are the only way money enters the fund and manual adjustments
the only way an administrator corrects a balance. Every balance change
is written together with its ledger entry in one transaction.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import F, QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.ledger.models import Transaction, TransactionType, TransactionStatus
from apps.notifications.models import NotificationEvent
from apps.notifications.services import enqueue

from apps.ledger.exceptions import (
    InvalidInputError,
    NotFoundError,
    InvalidStateError,
    AlreadyProcessedError,
)

logger = logging.getLogger(__name__)


def to_amount(value) -> Decimal:
    """Coerce an int, str or Decimal into a Decimal amount."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInputError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise InvalidInputError(f"Invalid amount: {value!r}")
    return amount


@transaction.atomic
def create_deposit(
    *,
    user: User,
    amount,
    note: Optional[str] = None,
    bank_reference: Optional[str] = None
) -> Transaction:
    """
    Record a deposit request awaiting administrator approval.

    The balance is not touched until the deposit is approved.

    Args:
        user: Depositing user
        amount: Positive amount
        note: Optional free text
        bank_reference: Optional bank transfer reference

    Returns:
        Pending deposit Transaction

    Raises:
        InvalidInputError: If amount is not positive
    """
    amount = to_amount(amount)
    if amount <= 0:
        raise InvalidInputError("Deposit amount must be greater than zero")

    metadata = {}
    if bank_reference:
        metadata['bank_reference'] = bank_reference

    deposit = Transaction.objects.create(
        user=user,
        type=TransactionType.DEPOSIT,
        status=TransactionStatus.PENDING,
        amount=amount,
        note=note or '',
        metadata=metadata,
    )

    logger.info(f"Deposit requested: {amount} by {user.email} ({deposit.id})")
    return deposit


def _lock_pending_deposit(transaction_id: UUID) -> Transaction:
    try:
        deposit = (
            Transaction.objects
            .select_for_update()
            .select_related('user')
            .get(id=transaction_id)
        )
    except Transaction.DoesNotExist:
        raise NotFoundError(f"Transaction {transaction_id} not found")

    if deposit.type != TransactionType.DEPOSIT:
        raise InvalidStateError("Only deposits can be approved or rejected")

    if deposit.status != TransactionStatus.PENDING:
        raise AlreadyProcessedError(f"Deposit has already been {deposit.status}")

    return deposit


@transaction.atomic
def approve_deposit(*, transaction_id: UUID, admin: User) -> Transaction:
    """
    Approve a pending deposit and credit the depositor.

    Args:
        transaction_id: UUID of the deposit transaction
        admin: Approving administrator

    Returns:
        Approved Transaction

    Raises:
        NotFoundError: If the transaction doesn't exist
        InvalidStateError: If the transaction is not a deposit
        AlreadyProcessedError: If the deposit is no longer pending
    """
    deposit = _lock_pending_deposit(transaction_id)

    deposit.status = TransactionStatus.APPROVED
    deposit.admin = admin
    deposit.processed_at = timezone.now()
    deposit.save(update_fields=['status', 'admin', 'processed_at'])

    User.objects.filter(id=deposit.user_id).update(balance=F('balance') + deposit.amount)
    deposit.user.refresh_from_db(fields=['balance'])

    enqueue(
        event_type=NotificationEvent.DEPOSIT_APPROVED,
        recipients=[deposit.user],
        payload={
            'transaction_id': str(deposit.id),
            'amount': str(deposit.amount),
            'balance': str(deposit.user.balance),
        },
    )

    logger.info(f"Deposit approved: {deposit.amount} for {deposit.user.email} by {admin.email}")
    return deposit


@transaction.atomic
def reject_deposit(
    *,
    transaction_id: UUID,
    admin: User,
    reason: Optional[str] = None
) -> Transaction:
    """
    Reject a pending deposit. The balance is left untouched.

    Args:
        transaction_id: UUID of the deposit transaction
        admin: Rejecting administrator
        reason: Optional reason, appended to the deposit note

    Returns:
        Rejected Transaction

    Raises:
        NotFoundError: If the transaction doesn't exist
        InvalidStateError: If the transaction is not a deposit
        AlreadyProcessedError: If the deposit is no longer pending
    """
    deposit = _lock_pending_deposit(transaction_id)

    deposit.status = TransactionStatus.REJECTED
    deposit.admin = admin
    deposit.processed_at = timezone.now()
    if reason:
        if deposit.note:
            deposit.note = f"{deposit.note} | Rejection reason: {reason}"
        else:
            deposit.note = reason
    deposit.save(update_fields=['status', 'admin', 'processed_at', 'note'])

    enqueue(
        event_type=NotificationEvent.DEPOSIT_REJECTED,
        recipients=[deposit.user],
        payload={
            'transaction_id': str(deposit.id),
            'amount': str(deposit.amount),
            'reason': reason or '',
        },
    )

    logger.info(f"Deposit rejected: {deposit.amount} for {deposit.user.email} by {admin.email}")
    return deposit


@transaction.atomic
def adjust_balance(*, user_id: UUID, amount, admin: User, note: str) -> Transaction:
    """
    Manually correct a user's balance.

    The resulting balance may be negative.

    Args:
        user_id: UUID of the user to adjust
        amount: Non-zero signed amount
        admin: Administrator performing the adjustment
        note: Mandatory explanation

    Returns:
        Completed adjustment Transaction

    Raises:
        InvalidInputError: If amount is zero or note is blank
        NotFoundError: If the user doesn't exist
    """
    amount = to_amount(amount)
    if amount == 0:
        raise InvalidInputError("Adjustment amount must not be zero")
    if not note or not note.strip():
        raise InvalidInputError("A note is required for balance adjustments")

    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise NotFoundError(f"User {user_id} not found")

    adjustment = Transaction.objects.create(
        user=user,
        type=TransactionType.ADJUSTMENT,
        status=TransactionStatus.COMPLETED,
        amount=amount,
        note=note.strip(),
        admin=admin,
        processed_at=timezone.now(),
    )

    User.objects.filter(id=user.id).update(balance=F('balance') + amount)
    user.refresh_from_db(fields=['balance'])

    enqueue(
        event_type=NotificationEvent.BALANCE_ADJUSTED,
        recipients=[user],
        payload={
            'transaction_id': str(adjustment.id),
            'amount': str(amount),
            'balance': str(user.balance),
            'note': adjustment.note,
        },
    )

    logger.info(f"Balance adjusted: {amount} for {user.email} by {admin.email}")
    return adjustment


def list_pending_deposits() -> QuerySet:
    """Get all deposits awaiting a decision, oldest first."""
    return (
        Transaction.objects
        .filter(type=TransactionType.DEPOSIT, status=TransactionStatus.PENDING)
        .select_related('user')
        .order_by('created_at')
    )


def get_user_transactions(*, user: User, limit: Optional[int] = None) -> QuerySet:
    """
    Get a user's ledger history, newest first.

    Args:
        user: User whose history to fetch
        limit: Optional maximum number of entries

    Returns:
        QuerySet of Transaction
    """
    queryset = (
        Transaction.objects
        .filter(user=user)
        .select_related('session', 'snack_menu', 'admin')
        .order_by('-created_at')
    )
    if limit:
        queryset = queryset[:limit]
    return queryset
