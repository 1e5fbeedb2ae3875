"""User authentication service."""
import logging
from typing import Dict

from django.db import transaction
from django.utils import timezone
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User

from .exceptions import InvalidCredentialsError, InactiveAccountError

logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_member(*, email: str, password: str) -> User:
    """
    Authenticate a member with email and password.

    Locks the row so concurrent logins don't race on last_login.

    Args:
        email: Member's email
        password: Member's password

    Returns:
        Authenticated User instance

    Raises:
        InvalidCredentialsError: If no member matches or the password is wrong
        InactiveAccountError: If the password is right but the account is deactivated
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email__iexact=email.strip())
        )
    except User.DoesNotExist:
        raise InvalidCredentialsError()

    if not user.check_password(password):
        raise InvalidCredentialsError()

    if not user.is_active:
        logger.info(f"Login refused for deactivated account {user.email}")
        raise InactiveAccountError()

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    return user


def issue_tokens(user: User) -> Dict[str, str]:
    """JWT refresh/access pair for the user."""
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }
