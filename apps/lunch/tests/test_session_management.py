"""
Session management and office clock tests.
"""

import pytest
from datetime import date, datetime
from uuid import uuid4
from zoneinfo import ZoneInfo

from apps.lunch.models import LunchSession, LunchOrder, SessionStatus
from apps.lunch.services import (
    get_or_create_session,
    join_session,
    leave_session,
    claim_payment,
    cancel_session,
    order_target_date,
    is_weekday,
    SessionNotFoundError,
    InvalidSessionStateError,
    AlreadyJoinedError,
    NotJoinedError,
    InactiveUserError,
    NotABuyerError,
    PaymentClaimedByOtherError,
)

from .conftest import SESSION_DATE


# =============================================================================
# Join / Leave Tests
# =============================================================================

@pytest.mark.django_db
class TestJoinLeave:
    """Tests for join_session and leave_session."""

    def test_session_is_created_lazily(self, db):
        session = get_or_create_session(session_date=SESSION_DATE)

        assert session.status == SessionStatus.ORDERING
        assert get_or_create_session(session_date=SESSION_DATE).id == session.id
        assert LunchSession.objects.count() == 1

    def test_join_creates_confirmed_order(self, members):
        order = join_session(user=members[0], session_date=SESSION_DATE)

        assert order.status == 'confirmed'
        assert order.session.session_date == SESSION_DATE

    def test_join_twice_fails(self, members):
        join_session(user=members[0], session_date=SESSION_DATE)

        with pytest.raises(AlreadyJoinedError):
            join_session(user=members[0], session_date=SESSION_DATE)

        assert LunchOrder.objects.count() == 1

    def test_join_after_selection_fails(self, selected_session, members):
        """Orders are frozen once buyers are selected."""
        with pytest.raises(InvalidSessionStateError):
            join_session(user=members[0], session_date=SESSION_DATE)

    def test_inactive_user_cannot_join(self, members):
        members[0].is_active = False
        members[0].save()

        with pytest.raises(InactiveUserError):
            join_session(user=members[0], session_date=SESSION_DATE)

    def test_leave_deletes_order(self, ordering_session, members):
        leave_session(user=members[0], session_date=SESSION_DATE)

        assert not LunchOrder.objects.filter(session=ordering_session, user=members[0]).exists()
        assert ordering_session.orders.count() == 4

    def test_leave_without_joining(self, ordering_session, lunch_admin):
        with pytest.raises(NotJoinedError):
            leave_session(user=lunch_admin, session_date=SESSION_DATE)

    def test_leave_without_session(self, members):
        with pytest.raises(SessionNotFoundError):
            leave_session(user=members[0], session_date=SESSION_DATE)

    def test_leave_after_selection_fails(self, selected_session, members):
        with pytest.raises(InvalidSessionStateError):
            leave_session(user=members[0], session_date=SESSION_DATE)

        assert selected_session.orders.count() == 5


# =============================================================================
# Claim / Cancel Tests
# =============================================================================

@pytest.mark.django_db
class TestClaimAndCancel:
    """Tests for claim_payment and cancel_session."""

    def test_buyer_claims_payment(self, selected_session, members):
        session = claim_payment(session_id=selected_session.id, user=members[1])

        assert session.status == SessionStatus.BUYING
        assert session.payer == members[1]

    def test_claim_again_is_noop(self, selected_session, members):
        claim_payment(session_id=selected_session.id, user=members[0])
        session = claim_payment(session_id=selected_session.id, user=members[0])

        assert session.payer == members[0]

    def test_other_buyer_cannot_claim(self, selected_session, members):
        claim_payment(session_id=selected_session.id, user=members[0])

        with pytest.raises(PaymentClaimedByOtherError):
            claim_payment(session_id=selected_session.id, user=members[1])

    def test_non_buyer_cannot_claim(self, selected_session, members):
        with pytest.raises(NotABuyerError):
            claim_payment(session_id=selected_session.id, user=members[4])

    def test_cannot_claim_before_selection(self, ordering_session, members):
        with pytest.raises(InvalidSessionStateError):
            claim_payment(session_id=ordering_session.id, user=members[0])

    def test_cancel_session(self, selected_session):
        session = cancel_session(session_id=selected_session.id)

        assert session.status == SessionStatus.CANCELLED

    @pytest.mark.parametrize('status', [SessionStatus.SETTLED, SessionStatus.CANCELLED])
    def test_cannot_cancel_closed_session(self, ordering_session, status):
        ordering_session.status = status
        ordering_session.save()

        with pytest.raises(InvalidSessionStateError):
            cancel_session(session_id=ordering_session.id)

    def test_cancel_unknown_session(self, db):
        with pytest.raises(SessionNotFoundError):
            cancel_session(session_id=uuid4())


# =============================================================================
# Office Clock Tests
# =============================================================================

class TestOfficeClock:
    """Tests for the office clock helpers."""

    def test_before_cutoff_orders_for_today(self, settings):
        settings.LUNCH_ORDER_CUTOFF_HOUR = 13
        now = datetime(2025, 3, 3, 10, 0, tzinfo=ZoneInfo('Asia/Ho_Chi_Minh'))

        assert order_target_date(now) == date(2025, 3, 3)

    def test_after_cutoff_orders_for_tomorrow(self, settings):
        settings.LUNCH_ORDER_CUTOFF_HOUR = 13
        now = datetime(2025, 3, 3, 13, 0, tzinfo=ZoneInfo('Asia/Ho_Chi_Minh'))

        assert order_target_date(now) == date(2025, 3, 4)

    def test_weekday(self):
        assert is_weekday(date(2025, 3, 3))
        assert not is_weekday(date(2025, 3, 8))
