"""
API tests for the snack menu endpoints.
"""

import pytest
from decimal import Decimal
from rest_framework import status

from apps.reimbursements.models import ReimbursementRequest
from apps.snacks.models import SnackMenu, SnackItem, SnackOrder, MenuStatus, MenuKind


@pytest.mark.django_db
class TestSnackMenuAPI:
    """Tests for /api/snacks/."""

    def test_requires_auth(self, api_client):
        response = api_client.get('/api/snacks/')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_and_list(self, creator_client):
        response = creator_client.post('/api/snacks/', {'title': 'Bubble tea'}, format='json')
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == MenuStatus.ORDERING

        response = creator_client.get('/api/snacks/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1

    def test_retrieve_with_user_totals(self, creator_client, filled_menu, yen):
        response = creator_client.get(f'/api/snacks/{filled_menu.id}/')

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['items']) == 3
        totals = {entry['user']['display_name']: entry['total'] for entry in response.data['user_totals']}
        assert Decimal(totals['Yen']) == Decimal('20000')

    def test_add_and_remove_item(self, yen_client, menu):
        response = yen_client.post(
            f'/api/snacks/{menu.id}/items/',
            {'item_name': 'Taro', 'price': '12000', 'quantity': 1},
            format='json'
        )
        assert response.status_code == status.HTTP_201_CREATED

        item_id = response.data['id']
        response = yen_client.delete(f'/api/snacks/{menu.id}/items/{item_id}/')
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not SnackItem.objects.filter(id=item_id).exists()

    def test_add_item_invalid_price(self, yen_client, menu):
        response = yen_client.post(
            f'/api/snacks/{menu.id}/items/',
            {'item_name': 'Taro', 'price': '0'},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_settle_underfunded(self, creator_client, filled_menu, xuan):
        response = creator_client.post(f'/api/snacks/{filled_menu.id}/settle/')

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.data['code'] == 'insufficient_balance'
        assert response.data['users'] == [str(xuan.id)]

    def test_settle(self, creator_client, filled_menu, xuan):
        xuan.balance = Decimal('20000')
        xuan.save(update_fields=['balance'])

        response = creator_client.post(f'/api/snacks/{filled_menu.id}/settle/')

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['total_amount']) == Decimal('65000')
        assert response.data['participants'] == 3

    def test_other_member_cannot_settle(self, yen_client, filled_menu):
        response = yen_client.post(f'/api/snacks/{filled_menu.id}/settle/')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_settles(self, admin_client, filled_menu, creator, xuan):
        xuan.balance = Decimal('15000')
        xuan.save(update_fields=['balance'])

        response = admin_client.post(f'/api/snacks/{filled_menu.id}/settle/')

        assert response.status_code == status.HTTP_200_OK
        reimbursement = ReimbursementRequest.objects.get(id=response.data['reimbursement_id'])
        assert reimbursement.settler == creator

    def test_cancel_then_add(self, creator_client, yen_client, menu):
        response = creator_client.post(f'/api/snacks/{menu.id}/cancel/')
        assert response.status_code == status.HTTP_200_OK

        response = yen_client.post(
            f'/api/snacks/{menu.id}/items/',
            {'item_name': 'Taro', 'price': '12000'},
            format='json'
        )
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'menu_closed'

    def test_admin_can_cancel(self, admin_client, menu):
        response = admin_client.post(f'/api/snacks/{menu.id}/cancel/')

        assert response.status_code == status.HTTP_200_OK
        assert SnackMenu.objects.get(id=menu.id).status == MenuStatus.CANCELLED

    @pytest.mark.parametrize('method, path', [
        ('get', '/api/snacks/abc/'),
        ('post', '/api/snacks/abc/settle/'),
        ('post', '/api/snacks/abc/items/'),
        ('post', '/api/snacks/12345678-1234-1234-1234-1234567890ab/settle/'),
    ])
    def test_unknown_menu_is_not_found(self, creator_client, method, path):
        response = getattr(creator_client, method)(path)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_malformed_item_id_is_not_found(self, yen_client, menu):
        response = yen_client.delete(f'/api/snacks/{menu.id}/items/not-an-id/')

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestCatalogMenuAPI:
    """Tests for catalog menus and orders under /api/snacks/."""

    def test_create_catalog_menu(self, creator_client):
        response = creator_client.post(
            '/api/snacks/',
            {
                'title': 'Banh mi corner',
                'catalog': [
                    {'name': 'Banh mi', 'price': '20000'},
                    {'name': 'Xoi', 'price': '12000', 'description': 'Sticky rice'},
                ],
            },
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['kind'] == MenuKind.CATALOG
        assert sorted(dish['name'] for dish in response.data['catalog']) == ['Banh mi', 'Xoi']

    def test_catalog_price_must_be_positive(self, creator_client):
        response = creator_client.post(
            '/api/snacks/',
            {'title': 'Tea', 'catalog': [{'name': 'Water', 'price': '0'}]},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not SnackMenu.objects.exists()

    def test_active_menu_with_my_order(self, yen_client, catalog_menu, banh_mi):
        yen_client.post(
            f'/api/snacks/{catalog_menu.id}/orders/',
            {'lines': [{'catalog_item_id': str(banh_mi.id), 'quantity': 2}]},
            format='json'
        )

        response = yen_client.get('/api/snacks/active/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['menu']['id'] == str(catalog_menu.id)
        assert len(response.data['menu']['catalog']) == 2
        assert [(o['item_name'], o['quantity']) for o in response.data['my_orders']] == [('Banh mi', 2)]

    def test_no_active_menu(self, yen_client, menu):
        response = yen_client.get('/api/snacks/active/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'menu': None, 'my_orders': []}

    def test_place_order(self, yen_client, catalog_menu, banh_mi, xoi):
        response = yen_client.post(
            f'/api/snacks/{catalog_menu.id}/orders/',
            {'lines': [
                {'catalog_item_id': str(banh_mi.id), 'quantity': 1},
                {'catalog_item_id': str(xoi.id), 'quantity': 0},
            ]},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data) == 1
        assert Decimal(response.data[0]['subtotal']) == Decimal('20000')

    def test_order_on_free_form_menu(self, yen_client, menu):
        response = yen_client.post(f'/api/snacks/{menu.id}/orders/', {'lines': []}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'wrong_menu_kind'

    def test_change_and_drop_line(self, yen_client, catalog_menu, banh_mi):
        response = yen_client.post(
            f'/api/snacks/{catalog_menu.id}/orders/',
            {'lines': [{'catalog_item_id': str(banh_mi.id), 'quantity': 1}]},
            format='json'
        )
        order_id = response.data[0]['id']

        response = yen_client.patch(f'/api/snacks/orders/{order_id}/', {'quantity': 3}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['quantity'] == 3

        response = yen_client.get('/api/snacks/orders/mine/')
        assert [o['quantity'] for o in response.data] == [3]

        response = yen_client.delete(f'/api/snacks/orders/{order_id}/')
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not SnackOrder.objects.exists()

    def test_cannot_change_someone_elses_line(self, yen_client, creator_client, catalog_menu, banh_mi):
        response = yen_client.post(
            f'/api/snacks/{catalog_menu.id}/orders/',
            {'lines': [{'catalog_item_id': str(banh_mi.id), 'quantity': 1}]},
            format='json'
        )

        response = creator_client.delete(f"/api/snacks/orders/{response.data[0]['id']}/")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert SnackOrder.objects.count() == 1

    def test_menu_orders_show_balances_to_creator_only(
        self, creator_client, yen_client, catalog_menu, banh_mi
    ):
        yen_client.post(
            f'/api/snacks/{catalog_menu.id}/orders/',
            {'lines': [{'catalog_item_id': str(banh_mi.id), 'quantity': 2}]},
            format='json'
        )

        response = creator_client.get(f'/api/snacks/{catalog_menu.id}/orders/')
        assert response.status_code == status.HTTP_200_OK
        entry, = response.data
        assert entry['user']['display_name'] == 'Yen'
        assert Decimal(entry['total_cost']) == Decimal('40000')
        assert Decimal(entry['balance']) == Decimal('50000')

        response = yen_client.get(f'/api/snacks/{catalog_menu.id}/orders/')
        assert response.data[0]['balance'] is None

    def test_settle_catalog_menu(self, creator_client, yen_client, catalog_menu, banh_mi):
        yen_client.post(
            f'/api/snacks/{catalog_menu.id}/orders/',
            {'lines': [{'catalog_item_id': str(banh_mi.id), 'quantity': 2}]},
            format='json'
        )

        response = creator_client.post(f'/api/snacks/{catalog_menu.id}/settle/')

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['total_amount']) == Decimal('40000')
        assert response.data['participants'] == 1
