"""
Authentication service tests.

Tests cover:
- Matching credentials return the member and stamp last_login
- Unknown email and wrong password look the same
- Deactivated members are refused only once the password matches
"""

import pytest

from apps.accounts.services import (
    authenticate_member,
    issue_tokens,
    InvalidCredentialsError,
    InactiveAccountError,
)


@pytest.mark.django_db
class TestAuthenticateMember:
    """Tests for authenticate_member."""

    def test_success(self, user):
        authenticated = authenticate_member(email=user.email, password='TestPass123!')

        assert authenticated == user
        assert authenticated.last_login is not None

    def test_email_is_case_insensitive(self, user):
        assert authenticate_member(email='  TestUser@Example.com', password='TestPass123!') == user

    @pytest.mark.parametrize('email, password', [
        ('testuser@example.com', 'WrongPassword123!'),
        ('nobody@example.com', 'TestPass123!'),
    ])
    def test_invalid_credentials(self, user, email, password):
        with pytest.raises(InvalidCredentialsError) as exc_info:
            authenticate_member(email=email, password=password)

        assert exc_info.value.status_code == 401
        user.refresh_from_db()
        assert user.last_login is None

    def test_inactive_account(self, user_inactive):
        with pytest.raises(InactiveAccountError) as exc_info:
            authenticate_member(email=user_inactive.email, password='TestPass123!')

        assert exc_info.value.status_code == 403
        user_inactive.refresh_from_db()
        assert user_inactive.last_login is None

    def test_inactive_account_wrong_password(self, user_inactive):
        with pytest.raises(InvalidCredentialsError):
            authenticate_member(email=user_inactive.email, password='WrongPassword123!')


def test_issue_tokens(user):
    tokens = issue_tokens(user)

    assert set(tokens) == {'refresh', 'access'}
    assert tokens['refresh'] != tokens['access']
