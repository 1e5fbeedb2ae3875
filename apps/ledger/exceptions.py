"""
Domain exceptions shared by the lunch fund apps.

Every business rule violation raised by a service is a LedgerServiceError.
Each kind carries a stable ``code`` and the HTTP status views answer with,
so callers can tell "fix your input" (validation, insufficient balance)
from "the world changed under you" (invalid state, already settled)
from "not your request" (forbidden).
"""
from rest_framework.response import Response


class LedgerServiceError(Exception):
    """Base exception for all lunch fund service errors."""
    status_code = 400
    code = 'ledger_error'
    default_message = 'The operation could not be completed.'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class InvalidInputError(LedgerServiceError):
    """Raised when caller input is malformed (e.g. a non-positive amount)."""
    status_code = 400
    code = 'validation_error'
    default_message = 'Invalid input.'


class NotFoundError(LedgerServiceError):
    """Raised when a referenced entity is missing or not eligible."""
    status_code = 404
    code = 'not_found'
    default_message = 'Not found.'


class ForbiddenError(LedgerServiceError):
    """Raised when the actor has no rights over the entity."""
    status_code = 403
    code = 'forbidden'
    default_message = 'You do not have permission to perform this action.'


class InvalidStateError(LedgerServiceError):
    """Raised when an operation is attempted in the wrong status."""
    status_code = 409
    code = 'invalid_state'
    default_message = 'Operation not allowed in the current state.'


class AlreadySettledError(LedgerServiceError):
    """Raised when settling something that is already settled."""
    status_code = 409
    code = 'already_settled'
    default_message = 'Already settled.'


class AlreadyProcessedError(LedgerServiceError):
    """Raised when a deposit has already been approved or rejected."""
    status_code = 409
    code = 'already_processed'
    default_message = 'Already processed.'


class NoParticipantsError(LedgerServiceError):
    """Raised when there is nobody to select or charge."""
    status_code = 422
    code = 'no_participants'
    default_message = 'No participants found.'


class NoEligibleBuyersError(LedgerServiceError):
    """Raised when the rotation cannot pick a single buyer."""
    status_code = 422
    code = 'no_eligible_buyers'
    default_message = 'No eligible buyers found.'


class InsufficientBalanceError(LedgerServiceError):
    """
    Raised when one or more participants cannot cover their share.

    ``users`` lists every underfunded user, not only the first one found.
    """
    status_code = 422
    code = 'insufficient_balance'

    def __init__(self, users):
        self.users = list(users)
        names = ', '.join(user.get_display_name() for user in self.users)
        super().__init__(f"Insufficient balance for users: {names}")


def service_error_response(exc):
    """Convert a service error into the API error payload."""
    payload = {'error': str(exc), 'code': exc.code}
    if isinstance(exc, InsufficientBalanceError):
        payload['users'] = [str(user.id) for user in exc.users]
    return Response(payload, status=exc.status_code)


# Router lookup pattern; malformed ids 404 instead of reaching a service
UUID_LOOKUP_REGEX = r'[0-9a-fA-F]{8}-(?:[0-9a-fA-F]{4}-){3}[0-9a-fA-F]{12}'
