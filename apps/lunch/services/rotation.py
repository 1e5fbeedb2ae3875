"""
Buyer rotation.

Picks up to LUNCH_BUYER_COUNT buyers for a session so that, over time,
every regular participant buys about equally often and nobody buys two
days in a row unless there is nobody else.
"""
import logging
from datetime import timedelta
from typing import List
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import F, Max, Min
from django.utils import timezone

from apps.accounts.models import User
from apps.lunch.models import LunchSession, SessionStatus, OrderStatus
from apps.notifications.models import NotificationEvent
from apps.notifications.services import enqueue

from apps.ledger.exceptions import NoParticipantsError, NoEligibleBuyersError
from .exceptions import SessionNotFoundError, InvalidSessionStateError

logger = logging.getLogger(__name__)


# Most overdue first
FAIRNESS_ORDER = (
    'rotation_index',
    F('last_bought_date').asc(nulls_first=True),
    'total_bought_times',
    'created_at',
    'id',
)


def get_session_participants(session: LunchSession):
    """Active users with a confirmed order, in fairness order."""
    return (
        User.objects
        .active()
        .filter(
            lunch_orders__session=session,
            lunch_orders__status=OrderStatus.CONFIRMED,
        )
        .order_by(*FAIRNESS_ORDER)
    )


def get_previous_buyer_ids(session: LunchSession) -> List[str]:
    """Buyer ids of the session dated the day before, empty when none."""
    previous = (
        LunchSession.objects
        .filter(session_date=session.session_date - timedelta(days=1))
        .values_list('buyer_ids', flat=True)
        .first()
    )
    return list(previous or [])


def pick_buyers(participants: List[User], previous_buyer_ids, target: int) -> List[User]:
    """
    Choose buyers from participants already sorted by fairness.

    Yesterday's buyers are skipped first; if that leaves fewer than
    ``target`` candidates they are added back, in the same order, until
    the target is met.
    """
    previous = {str(buyer_id) for buyer_id in previous_buyer_ids}
    candidates = [user for user in participants if str(user.id) not in previous]

    if len(candidates) < target:
        repeat_buyers = [user for user in participants if str(user.id) in previous]
        candidates.extend(repeat_buyers[:target - len(candidates)])

    return candidates[:target]


@transaction.atomic
def select_buyers(*, session_id: UUID) -> List[User]:
    """
    Select the buyers for a session and advance the rotation.

    Every selected buyer moves to the back of the rotation
    (max rotation_index over all users + 1). Once the least recent buyer
    among active users has an index at least as large as the number of
    participants, the cycle is complete and all indexes reset to 0.

    Args:
        session_id: UUID of the session

    Returns:
        Selected users, in selection order

    Raises:
        SessionNotFoundError: If session doesn't exist
        InvalidSessionStateError: If the session is not ordering
        NoParticipantsError: If nobody has a confirmed order
        NoEligibleBuyersError: If no buyer could be picked
    """
    try:
        session = LunchSession.objects.select_for_update().get(id=session_id)
    except LunchSession.DoesNotExist:
        raise SessionNotFoundError(f"Lunch session {session_id} not found")

    if session.status != SessionStatus.ORDERING:
        raise InvalidSessionStateError(
            f"Buyers can only be selected while ordering (session is {session.status})"
        )

    participants = list(get_session_participants(session))
    if not participants:
        raise NoParticipantsError(f"No participants for {session.session_date}")

    buyers = pick_buyers(
        participants,
        get_previous_buyer_ids(session),
        settings.LUNCH_BUYER_COUNT,
    )
    if not buyers:
        raise NoEligibleBuyersError(f"No eligible buyers for {session.session_date}")

    buyer_ids = [buyer.id for buyer in buyers]

    # Lock the buyers, then derive the next index under the lock
    list(User.objects.select_for_update().filter(id__in=buyer_ids).order_by('id'))
    next_index = (User.objects.aggregate(top=Max('rotation_index'))['top'] or 0) + 1

    User.objects.filter(id__in=buyer_ids).update(
        rotation_index=next_index,
        last_bought_date=session.session_date,
        total_bought_times=F('total_bought_times') + 1,
    )

    lowest_index = User.objects.active().aggregate(low=Min('rotation_index'))['low']
    if lowest_index is not None and lowest_index >= len(participants):
        User.objects.active().update(rotation_index=0)
        logger.info(f"Rotation cycle complete on {session.session_date}, indexes reset")

    session.buyer_ids = [str(buyer_id) for buyer_id in buyer_ids]
    session.status = SessionStatus.BUYERS_SELECTED
    session.total_participants = len(participants)
    session.selected_at = timezone.now()
    session.save(update_fields=[
        'buyer_ids', 'status', 'total_participants', 'selected_at', 'updated_at'
    ])

    enqueue(
        event_type=NotificationEvent.BUYERS_SELECTED,
        recipients=buyers,
        payload={
            'session_id': str(session.id),
            'session_date': session.session_date.isoformat(),
            'buyers': [buyer.get_display_name() for buyer in buyers],
            'total_participants': len(participants),
        },
    )

    logger.info(
        f"Selected {len(buyers)} of {len(participants)} participants for "
        f"{session.session_date}: {', '.join(b.email for b in buyers)}"
    )

    selected = {user.id: user for user in User.objects.filter(id__in=buyer_ids)}
    return [selected[buyer_id] for buyer_id in buyer_ids]
