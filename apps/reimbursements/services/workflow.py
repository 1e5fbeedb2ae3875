"""
Reimbursement workflow service.

    pending -> admin_transferred -> user_confirmed
                                 -> user_disputed -> admin_transferred

An administrator marks the transfer as sent; the settler then confirms
or disputes it. A disputed request can be transferred again.
"""
import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.notifications.models import NotificationEvent
from apps.notifications.services import enqueue
from apps.reimbursements.models import (
    ReimbursementRequest,
    ReimbursementStatus,
    UserResponse,
)

from apps.ledger.exceptions import InvalidInputError, NotFoundError, ForbiddenError

logger = logging.getLogger(__name__)


TRANSFERABLE_STATUSES = (ReimbursementStatus.PENDING, ReimbursementStatus.USER_DISPUTED)

RESPONSE_STATUS = {
    UserResponse.RECEIVED: ReimbursementStatus.USER_CONFIRMED,
    UserResponse.NOT_RECEIVED: ReimbursementStatus.USER_DISPUTED,
}


@transaction.atomic
def mark_transferred(
    *,
    request_id: UUID,
    admin: User,
    note: Optional[str] = None
) -> ReimbursementRequest:
    """
    Record that an administrator sent the bank transfer.

    Args:
        request_id: UUID of the reimbursement request
        admin: Administrator who made the transfer
        note: Optional transfer note (bank reference, remarks)

    Returns:
        Updated ReimbursementRequest

    Raises:
        NotFoundError: If the request doesn't exist or is neither pending
            nor disputed
    """
    try:
        request = (
            ReimbursementRequest.objects
            .select_for_update()
            .select_related('settler')
            .get(id=request_id, status__in=TRANSFERABLE_STATUSES)
        )
    except ReimbursementRequest.DoesNotExist:
        raise NotFoundError("Reimbursement request not found or already transferred")

    request.status = ReimbursementStatus.ADMIN_TRANSFERRED
    request.admin = admin
    request.admin_note = note or ''
    request.admin_transferred_at = timezone.now()
    request.user_response = ''
    request.user_confirmed_at = None
    request.save(update_fields=[
        'status', 'admin', 'admin_note', 'admin_transferred_at',
        'user_response', 'user_confirmed_at', 'updated_at'
    ])

    enqueue(
        event_type=NotificationEvent.REIMBURSEMENT_TRANSFERRED,
        recipients=[request.settler],
        payload={
            'reimbursement_id': str(request.id),
            'amount': str(request.total_amount),
            'note': request.admin_note,
        },
    )

    logger.info(
        f"Reimbursement {request.id} ({request.total_amount}) marked transferred "
        f"to {request.settler.email} by {admin.email}"
    )
    return request


@transaction.atomic
def confirm_receipt(*, request_id: UUID, user: User, response: str) -> ReimbursementRequest:
    """
    Settler confirms or disputes a transfer.

    Args:
        request_id: UUID of the reimbursement request
        user: Responding user (must be the settler)
        response: 'received' or 'not_received'

    Returns:
        Updated ReimbursementRequest

    Raises:
        InvalidInputError: If response is not a known value
        NotFoundError: If the request doesn't exist or was not transferred
        ForbiddenError: If the user is not the settler
    """
    if response not in RESPONSE_STATUS:
        raise InvalidInputError("Response must be 'received' or 'not_received'")

    try:
        request = (
            ReimbursementRequest.objects
            .select_for_update()
            .get(id=request_id, status=ReimbursementStatus.ADMIN_TRANSFERRED)
        )
    except ReimbursementRequest.DoesNotExist:
        raise NotFoundError("Reimbursement request not found or not transferred yet")

    if request.settler_id != user.id:
        raise ForbiddenError("Only the settler can confirm this reimbursement")

    request.status = RESPONSE_STATUS[response]
    request.user_response = response
    request.user_confirmed_at = timezone.now()
    request.save(update_fields=['status', 'user_response', 'user_confirmed_at', 'updated_at'])

    if request.status == ReimbursementStatus.USER_DISPUTED:
        admins = User.objects.active().filter(is_staff=True)
        enqueue(
            event_type=NotificationEvent.REIMBURSEMENT_DISPUTED,
            recipients=list(admins),
            payload={
                'reimbursement_id': str(request.id),
                'amount': str(request.total_amount),
                'settler': user.get_display_name(),
            },
        )

    logger.info(f"Reimbursement {request.id} {response} by {user.email}")
    return request


def list_pending_reimbursements() -> QuerySet:
    """Requests waiting for an administrator transfer, oldest first."""
    return (
        ReimbursementRequest.objects
        .filter(status__in=TRANSFERABLE_STATUSES)
        .select_related('settler', 'session', 'snack_menu')
        .order_by('created_at')
    )


def list_user_reimbursements(*, user: User) -> QuerySet:
    """All of a user's reimbursement requests, newest first."""
    return (
        ReimbursementRequest.objects
        .filter(settler=user)
        .select_related('admin', 'session', 'snack_menu')
        .order_by('-created_at')
    )
