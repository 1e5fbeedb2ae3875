"""
Lunch app services layer.

Session lifecycle, buyer rotation and lunch settlement. All state-changing
operations lock the session row inside a transaction.
"""

from apps.ledger.exceptions import (
    LedgerServiceError,
    AlreadySettledError,
    NoParticipantsError,
    NoEligibleBuyersError,
)

from .exceptions import (
    SessionNotFoundError,
    InvalidSessionStateError,
    AlreadyJoinedError,
    NotJoinedError,
    InactiveUserError,
    NotABuyerError,
    PaymentClaimedByOtherError,
)

from .clock import (
    office_now,
    office_today,
    order_target_date,
    is_weekday,
)

from .session_management import (
    get_or_create_session,
    get_session_for_date,
    join_session,
    leave_session,
    claim_payment,
    cancel_session,
)

from .rotation import (
    select_buyers,
    pick_buyers,
    get_session_participants,
)

from .settlement import (
    settle_invoice,
)


__all__ = [
    # Exceptions
    'LedgerServiceError',
    'AlreadySettledError',
    'NoParticipantsError',
    'NoEligibleBuyersError',
    'SessionNotFoundError',
    'InvalidSessionStateError',
    'AlreadyJoinedError',
    'NotJoinedError',
    'InactiveUserError',
    'NotABuyerError',
    'PaymentClaimedByOtherError',

    # Clock
    'office_now',
    'office_today',
    'order_target_date',
    'is_weekday',

    # Session management
    'get_or_create_session',
    'get_session_for_date',
    'join_session',
    'leave_session',
    'claim_payment',
    'cancel_session',

    # Rotation
    'select_buyers',
    'pick_buyers',
    'get_session_participants',

    # Settlement
    'settle_invoice',
]
