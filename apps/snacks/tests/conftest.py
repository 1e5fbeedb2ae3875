import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.snacks.models import SnackMenu, SnackItem, SnackCatalogItem, MenuKind


def create_member(name, balance='0', **extra):
    return User.objects.create_user(
        email=f'{name.lower()}@example.com',
        password='TestPass123!',
        display_name=name,
        balance=Decimal(balance),
        **extra
    )


def client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def creator(db):
    """Member who opens the menu and pays the shop."""
    return create_member('Mai', balance='100000')


@pytest.fixture
def xuan(db):
    return create_member('Xuan', balance='10000')


@pytest.fixture
def yen(db):
    return create_member('Yen', balance='50000')


@pytest.fixture
def admin_user(db):
    return create_member('Admin', is_staff=True)


@pytest.fixture
def menu(creator):
    """An open snack menu."""
    return SnackMenu.objects.create(title='Bubble tea', created_by=creator)


@pytest.fixture
def filled_menu(menu, creator, xuan, yen):
    """Menu where Xuan owes 15,000, Yen 20,000 and Mai 30,000."""
    SnackItem.objects.create(menu=menu, user=xuan, item_name='Milk tea', price=Decimal('15000'))
    SnackItem.objects.create(menu=menu, user=yen, item_name='Taro', price=Decimal('10000'), quantity=2)
    SnackItem.objects.create(menu=menu, user=creator, item_name='Matcha', price=Decimal('30000'))
    return menu


@pytest.fixture
def catalog_menu(creator):
    """An open catalog menu offering banh mi at 20,000 and xoi at 12,000."""
    menu = SnackMenu.objects.create(title='Banh mi corner', created_by=creator, kind=MenuKind.CATALOG)
    SnackCatalogItem.objects.create(menu=menu, name='Banh mi', price=Decimal('20000'))
    SnackCatalogItem.objects.create(menu=menu, name='Xoi', price=Decimal('12000'))
    return menu


@pytest.fixture
def banh_mi(catalog_menu):
    return catalog_menu.catalog.get(name='Banh mi')


@pytest.fixture
def xoi(catalog_menu):
    return catalog_menu.catalog.get(name='Xoi')


@pytest.fixture
def creator_client(creator):
    return client_for(creator)


@pytest.fixture
def yen_client(yen):
    return client_for(yen)


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)
