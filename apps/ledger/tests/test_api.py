"""
API tests for the ledger endpoints.
"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import patch
from rest_framework import status

from apps.ledger.models import Transaction, TransactionStatus


@pytest.mark.django_db
class TestTransactionsAPI:
    """Tests for /api/ledger/transactions/."""

    def test_requires_authentication(self, api_client):
        response = api_client.get('/api/ledger/transactions/')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_lists_only_own_transactions(self, authenticated_client, pending_deposit, other_user):
        Transaction.objects.create(user=other_user, type='deposit', amount=Decimal('1'))

        response = authenticated_client.get('/api/ledger/transactions/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['id'] == str(pending_deposit.id)


@pytest.mark.django_db
class TestDepositsAPI:
    """Tests for /api/ledger/deposits/."""

    def test_create_deposit(self, authenticated_client, user):
        response = authenticated_client.post(
            '/api/ledger/deposits/',
            {'amount': '300000', 'note': 'April', 'bank_reference': 'FT99'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == TransactionStatus.PENDING
        assert Transaction.objects.get(user=user).metadata['bank_reference'] == 'FT99'

    def test_create_deposit_validates_amount(self, authenticated_client):
        response = authenticated_client.post('/api/ledger/deposits/', {'amount': '-5'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_pending_requires_admin(self, authenticated_client):
        response = authenticated_client.get('/api/ledger/deposits/pending/')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_lists_pending(self, admin_client, pending_deposit):
        response = admin_client.get('/api/ledger/deposits/pending/')

        assert response.status_code == status.HTTP_200_OK
        assert [d['id'] for d in response.data] == [str(pending_deposit.id)]
        assert response.data[0]['user']['email'] == 'member@example.com'

    def test_admin_approves(self, admin_client, pending_deposit, user):
        response = admin_client.post(f'/api/ledger/deposits/{pending_deposit.id}/approve/')

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.balance == Decimal('200000')

    def test_approve_twice_conflicts(self, admin_client, pending_deposit):
        admin_client.post(f'/api/ledger/deposits/{pending_deposit.id}/approve/')
        response = admin_client.post(f'/api/ledger/deposits/{pending_deposit.id}/approve/')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'already_processed'

    def test_admin_rejects(self, admin_client, pending_deposit):
        response = admin_client.post(
            f'/api/ledger/deposits/{pending_deposit.id}/reject/',
            {'reason': 'Not received'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == TransactionStatus.REJECTED

    def test_member_cannot_approve(self, authenticated_client, pending_deposit):
        response = authenticated_client.post(f'/api/ledger/deposits/{pending_deposit.id}/approve/')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestAdjustmentsAPI:
    """Tests for /api/ledger/adjustments/."""

    def test_admin_adjusts(self, admin_client, user):
        response = admin_client.post(
            '/api/ledger/adjustments/',
            {'user_id': str(user.id), 'amount': '-12000', 'note': 'Missed lunch charge'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        user.refresh_from_db()
        assert user.balance == Decimal('-12000')

    def test_zero_rejected(self, admin_client, user):
        response = admin_client.post(
            '/api/ledger/adjustments/',
            {'user_id': str(user.id), 'amount': '0', 'note': 'Nothing'},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_member_cannot_adjust(self, authenticated_client, user):
        response = authenticated_client.post(
            '/api/ledger/adjustments/',
            {'user_id': str(user.id), 'amount': '1000', 'note': 'Free money'},
            format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestDepositLookup:
    """Deposit ids that are not UUIDs never reach a service."""

    @pytest.mark.parametrize('path', [
        '/api/ledger/deposits/abc/approve/',
        '/api/ledger/deposits/abc/reject/',
    ])
    def test_not_found(self, admin_client, path):
        response = admin_client.post(path)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_unknown_deposit(self, admin_client):
        response = admin_client.post('/api/ledger/deposits/12345678-1234-1234-1234-1234567890ab/approve/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['code'] == 'not_found'


@pytest.mark.django_db
class TestStatsAPI:
    """Tests for /api/ledger/stats/."""

    def test_member_cannot_read_stats(self, authenticated_client):
        response = authenticated_client.get('/api/ledger/stats/')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_reads_stats(self, admin_client, pending_deposit):
        with patch('apps.ledger.views.office_today', return_value=date(2025, 3, 3)):
            response = admin_client.get('/api/ledger/stats/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['users']['total'] == 2
        assert response.data['pending_deposits']['count'] == 1
        assert Decimal(response.data['pending_deposits']['total_amount']) == Decimal('200000')
        assert response.data['sessions'] == {'total': 0, 'settled': 0}
        assert response.data['today'] is None
