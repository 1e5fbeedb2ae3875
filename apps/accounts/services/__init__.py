"""Services for accounts business logic."""

from .exceptions import InvalidCredentialsError, InactiveAccountError
from .user_authentication import authenticate_member, issue_tokens

__all__ = [
    # Exceptions
    'InvalidCredentialsError',
    'InactiveAccountError',
    # Services
    'authenticate_member',
    'issue_tokens',
]
