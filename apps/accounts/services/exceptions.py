"""
Domain-specific exceptions for the accounts app.
"""

from apps.ledger.exceptions import LedgerServiceError, ForbiddenError


class InvalidCredentialsError(LedgerServiceError):
    """Raised when the email or password does not match."""
    status_code = 401
    code = 'invalid_credentials'
    default_message = 'Invalid credentials'


class InactiveAccountError(ForbiddenError):
    """Raised when a deactivated member logs in with the right password."""
    code = 'account_deactivated'
    default_message = 'Account is deactivated'
