"""
Domain-specific exceptions for the lunch app.

Each one specializes a shared kind from apps.ledger.exceptions, so views
only need to catch LedgerServiceError.
"""

from apps.ledger.exceptions import (
    NotFoundError,
    ForbiddenError,
    InvalidStateError,
)


class SessionNotFoundError(NotFoundError):
    """Raised when a lunch session does not exist."""
    default_message = 'Lunch session not found.'


class InvalidSessionStateError(InvalidStateError):
    """Raised when a session is not in the status an operation needs."""
    pass


class AlreadyJoinedError(InvalidStateError):
    """Raised when a user joins a session they already joined."""
    code = 'already_joined'


class NotJoinedError(NotFoundError):
    """Raised when a user leaves a session they never joined."""
    code = 'not_joined'


class InactiveUserError(ForbiddenError):
    """Raised when a deactivated user tries to take part in lunch."""
    pass


class NotABuyerError(ForbiddenError):
    """Raised when a user who was not selected acts as a buyer."""
    code = 'not_a_buyer'


class PaymentClaimedByOtherError(ForbiddenError):
    """Raised when another buyer has already claimed the payment."""
    code = 'payment_claimed'
