"""
Lunch session management service.

Sessions are created lazily, one per date. Orders can only change while
the session is ordering; after buyer selection they are frozen.
"""
import logging
from datetime import date
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError

from apps.accounts.models import User
from apps.lunch.models import LunchSession, LunchOrder, SessionStatus, OrderStatus

from .exceptions import (
    SessionNotFoundError,
    InvalidSessionStateError,
    AlreadyJoinedError,
    NotJoinedError,
    InactiveUserError,
    NotABuyerError,
    PaymentClaimedByOtherError,
)

logger = logging.getLogger(__name__)


def get_or_create_session(*, session_date: date) -> LunchSession:
    """Get the session for a date, creating it in ordering status."""
    try:
        with transaction.atomic():
            session, _ = LunchSession.objects.get_or_create(session_date=session_date)
    except IntegrityError:
        # Created concurrently
        session = LunchSession.objects.get(session_date=session_date)
    return session


def get_session_for_date(*, session_date: date) -> Optional[LunchSession]:
    return LunchSession.objects.filter(session_date=session_date).first()


def _lock_session(session_id: UUID) -> LunchSession:
    try:
        return LunchSession.objects.select_for_update().get(id=session_id)
    except LunchSession.DoesNotExist:
        raise SessionNotFoundError(f"Lunch session {session_id} not found")


@transaction.atomic
def join_session(*, user: User, session_date: date) -> LunchOrder:
    """
    Join the lunch session for a date.

    Args:
        user: Joining user
        session_date: Date of the session

    Returns:
        Confirmed LunchOrder

    Raises:
        InactiveUserError: If the user is deactivated
        InvalidSessionStateError: If the session is no longer ordering
        AlreadyJoinedError: If the user already joined
    """
    if not user.is_active:
        raise InactiveUserError("Inactive users cannot join lunch")

    session = _lock_session(get_or_create_session(session_date=session_date).id)

    if session.status != SessionStatus.ORDERING:
        raise InvalidSessionStateError(
            f"Orders for {session_date} are closed (session is {session.status})"
        )

    if LunchOrder.objects.filter(session=session, user=user).exists():
        raise AlreadyJoinedError(f"Already joined lunch for {session_date}")

    try:
        with transaction.atomic():
            order = LunchOrder.objects.create(
                session=session,
                user=user,
                status=OrderStatus.CONFIRMED
            )
    except IntegrityError:
        raise AlreadyJoinedError(f"Already joined lunch for {session_date}")

    logger.info(f"{user.email} joined lunch {session_date}")
    return order


@transaction.atomic
def leave_session(*, user: User, session_date: date) -> None:
    """
    Leave the lunch session for a date.

    Raises:
        SessionNotFoundError: If there is no session for the date
        InvalidSessionStateError: If the session is no longer ordering
        NotJoinedError: If the user never joined
    """
    session = get_session_for_date(session_date=session_date)
    if session is None:
        raise SessionNotFoundError(f"No lunch session for {session_date}")

    session = _lock_session(session.id)
    if session.status != SessionStatus.ORDERING:
        raise InvalidSessionStateError(
            f"Orders for {session_date} are closed (session is {session.status})"
        )

    deleted, _ = LunchOrder.objects.filter(session=session, user=user).delete()
    if not deleted:
        raise NotJoinedError(f"Not joined lunch for {session_date}")

    logger.info(f"{user.email} left lunch {session_date}")


@transaction.atomic
def claim_payment(*, session_id: UUID, user: User) -> LunchSession:
    """
    Claim the bill of a session: the claiming buyer will pay the restaurant.

    Claiming again as the same buyer is a no-op.

    Args:
        session_id: UUID of the session
        user: Buyer claiming the payment

    Returns:
        Updated LunchSession (status buying)

    Raises:
        SessionNotFoundError: If session doesn't exist
        PaymentClaimedByOtherError: If another buyer already claimed it
        InvalidSessionStateError: If buyers are not selected yet or the
            session is closed
        NotABuyerError: If the user is not one of the selected buyers
    """
    session = _lock_session(session_id)

    if session.status == SessionStatus.BUYING:
        if session.payer_id == user.id:
            return session
        raise PaymentClaimedByOtherError("Another buyer has already claimed the payment")

    if session.status != SessionStatus.BUYERS_SELECTED:
        raise InvalidSessionStateError(
            f"Payment can only be claimed after buyer selection (session is {session.status})"
        )

    if not session.is_buyer(user.id):
        raise NotABuyerError("Only selected buyers can claim the payment")

    session.payer = user
    session.status = SessionStatus.BUYING
    session.save(update_fields=['payer', 'status', 'updated_at'])

    logger.info(f"{user.email} claimed payment for lunch {session.session_date}")
    return session


@transaction.atomic
def cancel_session(*, session_id: UUID) -> LunchSession:
    """
    Cancel a session that has not been settled.

    Raises:
        SessionNotFoundError: If session doesn't exist
        InvalidSessionStateError: If the session is settled or cancelled
    """
    session = _lock_session(session_id)

    if not session.can_transition_to(SessionStatus.CANCELLED):
        raise InvalidSessionStateError(f"Cannot cancel a {session.status} session")

    session.status = SessionStatus.CANCELLED
    session.save(update_fields=['status', 'updated_at'])

    logger.info(f"Lunch {session.session_date} cancelled")
    return session
