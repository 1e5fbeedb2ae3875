"""
Lunch settlement service.

The buyer who paid reports the real bill; it is split evenly between
everybody who ordered and the buyer is owed the full bill back.
"""
import logging
from typing import Dict, Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.lunch.models import LunchSession, LunchOrder, SessionStatus, OrderStatus
from apps.ledger.exceptions import (
    AlreadySettledError,
    InvalidInputError,
    NoParticipantsError,
)
from apps.ledger.services.deposits import to_amount
from apps.ledger.services.settlement import EqualSplitSource, apply_settlement

from .exceptions import (
    SessionNotFoundError,
    InvalidSessionStateError,
    NotABuyerError,
    PaymentClaimedByOtherError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def settle_invoice(
    *,
    session_id: UUID,
    payer_id: UUID,
    total_bill,
    receipt_ref: Optional[str] = None
) -> Dict:
    """
    Split a lunch bill and open the payer's reimbursement.

    Every confirmed participant, the payer included, is charged
    ``round_half_up(total_bill / participants)``. Nothing is charged unless
    every participant can cover that share.

    Args:
        session_id: UUID of the session
        payer_id: UUID of the buyer who paid
        total_bill: Amount paid to the restaurant
        receipt_ref: Optional receipt reference (image URL, invoice no.)

    Returns:
        Summary dict (session_id, participants, amount_per_person,
        total_bill, payer_id, reimbursement_id)

    Raises:
        SessionNotFoundError: If session doesn't exist
        AlreadySettledError: If the session is already settled
        InvalidSessionStateError: If buyers have not been selected or the
            session was cancelled
        NotABuyerError: If the payer is not a selected buyer
        PaymentClaimedByOtherError: If another buyer claimed the payment
        InvalidInputError: If total_bill is not positive
        NoParticipantsError: If nobody has a confirmed order
        InsufficientBalanceError: If any participant cannot cover the share
    """
    try:
        session = LunchSession.objects.select_for_update().get(id=session_id)
    except LunchSession.DoesNotExist:
        raise SessionNotFoundError(f"Lunch session {session_id} not found")

    if session.status == SessionStatus.SETTLED:
        raise AlreadySettledError(f"Lunch {session.session_date} is already settled")

    if session.status not in (SessionStatus.BUYERS_SELECTED, SessionStatus.BUYING):
        raise InvalidSessionStateError(f"Cannot settle a {session.status} session")

    if not session.is_buyer(payer_id):
        raise NotABuyerError("Only selected buyers can submit the bill")

    if session.payer_id and str(session.payer_id) != str(payer_id):
        raise PaymentClaimedByOtherError("Another buyer has claimed the payment")

    total_bill = to_amount(total_bill)
    if total_bill <= 0:
        raise InvalidInputError("Total bill must be greater than zero")

    participants = [
        order.user
        for order in LunchOrder.objects
        .filter(session=session, status=OrderStatus.CONFIRMED)
        .select_related('user')
        .order_by('created_at', 'id')
    ]
    if not participants:
        raise NoParticipantsError(f"No participants for {session.session_date}")

    payer = User.objects.get(id=payer_id)
    source = EqualSplitSource(session, participants, total_bill)
    result = apply_settlement(source=source, settler=payer)

    session.payer = payer
    session.total_bill = total_bill
    session.amount_per_person = source.amount_per_person
    session.receipt_ref = receipt_ref or ''
    session.status = SessionStatus.SETTLED
    session.settled_at = timezone.now()
    session.save(update_fields=[
        'payer', 'total_bill', 'amount_per_person', 'receipt_ref',
        'status', 'settled_at', 'updated_at'
    ])

    logger.info(
        f"Lunch {session.session_date} settled by {payer.email}: "
        f"{total_bill} / {len(participants)} = {source.amount_per_person}"
    )

    return {
        'session_id': session.id,
        'participants': len(participants),
        'amount_per_person': source.amount_per_person,
        'total_bill': total_bill,
        'payer_id': payer.id,
        'reimbursement_id': result['reimbursement'].id,
    }
