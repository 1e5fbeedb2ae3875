"""
Buyer rotation tests.

Tests cover:
- Fairness ordering and even distribution over consecutive days
- No repeat buyers unless the pool is too small
- Backfill from yesterday's buyers
- Cycle reset of rotation indexes
- Error handling
"""

import pytest
from collections import Counter
from datetime import date, timedelta
from uuid import uuid4

from apps.accounts.models import User
from apps.lunch.models import LunchSession, SessionStatus
from apps.lunch.services import (
    select_buyers,
    pick_buyers,
    SessionNotFoundError,
    InvalidSessionStateError,
    NoParticipantsError,
)
from apps.notifications.models import Notification, NotificationEvent

from .conftest import SESSION_DATE, create_member, open_session


def run_days(participants, days, start=SESSION_DATE):
    """Select buyers on ``days`` consecutive sessions, returning each day's buyers."""
    picked = []
    for offset in range(days):
        session = open_session(start + timedelta(days=offset), participants)
        picked.append(select_buyers(session_id=session.id))
    return picked


# =============================================================================
# Selection Tests
# =============================================================================

@pytest.mark.django_db
class TestSelectBuyers:
    """Tests for select_buyers."""

    def test_selects_most_overdue_participants(self, members):
        """Lowest rotation_index wins, then oldest purchase."""
        alice, bob, carol, dave, erin = members
        User.objects.filter(id=alice.id).update(rotation_index=3)
        User.objects.filter(id=bob.id).update(rotation_index=1, last_bought_date=date(2025, 2, 1))
        User.objects.filter(id=carol.id).update(rotation_index=1, last_bought_date=date(2025, 1, 1))
        session = open_session(SESSION_DATE, members)

        buyers = select_buyers(session_id=session.id)

        assert [b.display_name for b in buyers] == ['Dave', 'Erin', 'Carol', 'Bob']

    def test_never_bought_goes_before_bought_at_same_index(self, members):
        """A null last_bought_date sorts first."""
        alice, bob, carol, dave, erin = members
        User.objects.filter(id__in=[alice.id, bob.id, carol.id, dave.id]).update(
            last_bought_date=date(2025, 1, 1)
        )
        session = open_session(SESSION_DATE, members)

        buyers = select_buyers(session_id=session.id)

        assert buyers[0] == erin

    def test_updates_session_and_buyers(self, ordering_session, members):
        """Selection persists buyers and moves buyers to the back of the rotation."""
        buyers = select_buyers(session_id=ordering_session.id)

        ordering_session.refresh_from_db()
        assert ordering_session.status == SessionStatus.BUYERS_SELECTED
        assert ordering_session.buyer_ids == [str(b.id) for b in buyers]
        assert ordering_session.total_participants == 5
        assert ordering_session.selected_at is not None

        for buyer in buyers:
            assert buyer.rotation_index == 1
            assert buyer.last_bought_date == SESSION_DATE
            assert buyer.total_bought_times == 1

        not_selected = User.objects.exclude(id__in=[b.id for b in buyers]).get()
        assert not_selected.rotation_index == 0
        assert not_selected.total_bought_times == 0

    def test_new_index_is_global_max_plus_one(self, members):
        """Index is derived from every user, including non-participants."""
        create_member('Zed', rotation_index=7, is_active=False)
        session = open_session(SESSION_DATE, members[:2])

        buyers = select_buyers(session_id=session.id)

        assert {b.rotation_index for b in buyers} == {8}

    def test_selects_everyone_when_fewer_than_buyer_count(self, members):
        """With 3 participants and no history all 3 are picked."""
        session = open_session(SESSION_DATE, members[:3])

        buyers = select_buyers(session_id=session.id)

        assert set(buyers) == set(members[:3])

    def test_inactive_participants_are_skipped(self, members):
        """Deactivated users with an order are not selected."""
        session = open_session(SESSION_DATE, members)
        User.objects.filter(id=members[0].id).update(is_active=False)

        buyers = select_buyers(session_id=session.id)

        assert members[0] not in buyers
        session.refresh_from_db()
        assert session.total_participants == 4

    def test_respects_configured_buyer_count(self, settings, ordering_session):
        """LUNCH_BUYER_COUNT controls how many are picked."""
        settings.LUNCH_BUYER_COUNT = 2

        buyers = select_buyers(session_id=ordering_session.id)

        assert len(buyers) == 2

    def test_queues_notification_per_buyer(self, ordering_session):
        """Each buyer gets a buyers_selected outbox row."""
        buyers = select_buyers(session_id=ordering_session.id)

        notifications = Notification.objects.filter(event_type=NotificationEvent.BUYERS_SELECTED)
        assert {n.recipient_id for n in notifications} == {b.id for b in buyers}
        assert notifications.first().payload['session_date'] == SESSION_DATE.isoformat()

    def test_session_not_found(self, db):
        """Raises SessionNotFoundError for unknown ids."""
        with pytest.raises(SessionNotFoundError):
            select_buyers(session_id=uuid4())

    def test_only_while_ordering(self, selected_session):
        """A session that already has buyers cannot be reselected."""
        with pytest.raises(InvalidSessionStateError):
            select_buyers(session_id=selected_session.id)

    def test_no_participants(self, db):
        """An empty session raises NoParticipantsError and stays ordering."""
        session = LunchSession.objects.create(session_date=SESSION_DATE)

        with pytest.raises(NoParticipantsError):
            select_buyers(session_id=session.id)

        session.refresh_from_db()
        assert session.status == SessionStatus.ORDERING


# =============================================================================
# Repeat Avoidance Tests
# =============================================================================

@pytest.mark.django_db
class TestRepeatAvoidance:
    """Yesterday's buyers are only picked again when needed."""

    def test_no_repeat_when_pool_is_large_enough(self, db):
        """With 8 participants two consecutive days share no buyer."""
        participants = [create_member(f'User{i}') for i in range(8)]

        day1, day2 = run_days(participants, 2)

        assert not set(day1) & set(day2)

    def test_backfill_from_yesterdays_buyers(self, members):
        """Yesterday A,B,C,D bought; today only A,B,C order, so all three buy again."""
        alice, bob, carol, dave, erin = members
        LunchSession.objects.create(
            session_date=SESSION_DATE - timedelta(days=1),
            status=SessionStatus.SETTLED,
            buyer_ids=[str(u.id) for u in (alice, bob, carol, dave)],
        )
        session = open_session(SESSION_DATE, [alice, bob, carol])

        buyers = select_buyers(session_id=session.id)

        assert set(buyers) == {alice, bob, carol}

    def test_backfill_takes_only_what_is_missing(self, members):
        """Non-repeat candidates come first, repeats fill the remaining slots."""
        alice, bob, carol, dave, erin = members
        LunchSession.objects.create(
            session_date=SESSION_DATE - timedelta(days=1),
            status=SessionStatus.SETTLED,
            buyer_ids=[str(u.id) for u in (alice, bob, carol, dave)],
        )
        session = open_session(SESSION_DATE, members)

        buyers = select_buyers(session_id=session.id)

        assert buyers[0] == erin
        assert buyers[1:] == [alice, bob, carol]

    def test_pick_buyers_keeps_fairness_order(self):
        """pick_buyers works on plain sequences."""
        class Member:
            def __init__(self, id):
                self.id = id

        people = [Member(i) for i in range(6)]
        picked = pick_buyers(people, ['0', '1'], 4)

        assert [p.id for p in picked] == [2, 3, 4, 5]


# =============================================================================
# Fairness and Cycle Tests
# =============================================================================

@pytest.mark.django_db
class TestRotationFairness:
    """Selections spread evenly over consecutive days."""

    def test_even_distribution_over_full_cycle(self, db):
        """6 participants, 4 buyers, 6 days: everyone buys exactly 4 times."""
        participants = [create_member(f'User{i}') for i in range(6)]

        picked = run_days(participants, 6)

        counts = Counter(buyer.id for day in picked for buyer in day)
        assert set(counts.values()) == {4}
        assert len(counts) == 6

    def test_counts_never_differ_by_more_than_one(self, db):
        """Any prefix of days stays within one selection of even."""
        participants = [create_member(f'User{i}') for i in range(6)]

        picked = run_days(participants, 5)

        counts = Counter()
        for day in picked:
            counts.update(buyer.id for buyer in day)
            values = [counts.get(p.id, 0) for p in participants]
            assert max(values) - min(values) <= 1

    def test_total_bought_times_matches_selections(self, db):
        """total_bought_times counts every selection."""
        participants = [create_member(f'User{i}') for i in range(6)]

        run_days(participants, 3)

        assert {u.total_bought_times for u in User.objects.all()} == {2}

    def test_cycle_reset(self, settings, db):
        """When the lowest index reaches the participant count, all indexes reset to 0."""
        settings.LUNCH_BUYER_COUNT = 1
        alice = create_member('Alice', rotation_index=1)
        bob = create_member('Bob', rotation_index=2)
        session = open_session(SESSION_DATE, [alice, bob])

        buyers = select_buyers(session_id=session.id)

        assert buyers[0].id == alice.id
        alice.refresh_from_db()
        bob.refresh_from_db()
        assert alice.rotation_index == 0
        assert bob.rotation_index == 0
        assert alice.total_bought_times == 1
        assert alice.last_bought_date == SESSION_DATE

    def test_no_reset_while_someone_is_behind(self, settings, db):
        """A low index among active users keeps the cycle going."""
        settings.LUNCH_BUYER_COUNT = 1
        alice = create_member('Alice', rotation_index=1)
        bob = create_member('Bob', rotation_index=2)
        carol = create_member('Carol')
        session = open_session(SESSION_DATE, [alice, bob])

        select_buyers(session_id=session.id)

        alice.refresh_from_db()
        carol.refresh_from_db()
        assert alice.rotation_index == 3
        assert carol.rotation_index == 0
