"""
Snack menu management service.
"""
import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.snacks.models import SnackMenu, SnackItem, MenuStatus, MenuKind
from apps.ledger.exceptions import InvalidInputError
from apps.ledger.services.deposits import to_amount

from .exceptions import (
    MenuNotFoundError,
    MenuClosedError,
    ItemNotFoundError,
    NotMenuOwnerError,
    WrongMenuKindError,
)

logger = logging.getLogger(__name__)


def get_menu_by_id(*, menu_id: UUID) -> SnackMenu:
    try:
        return (
            SnackMenu.objects
            .select_related('created_by', 'settled_by')
            .prefetch_related('items__user', 'catalog', 'orders__user', 'orders__catalog_item')
            .get(id=menu_id)
        )
    except SnackMenu.DoesNotExist:
        raise MenuNotFoundError(f"Snack menu {menu_id} not found")


def _lock_open_menu(menu_id: UUID) -> SnackMenu:
    try:
        menu = SnackMenu.objects.select_for_update().get(id=menu_id)
    except SnackMenu.DoesNotExist:
        raise MenuNotFoundError(f"Snack menu {menu_id} not found")

    if menu.status != MenuStatus.ORDERING:
        raise MenuClosedError(f"Menu is already {menu.status}")
    return menu


def list_menus(*, status: Optional[str] = None) -> QuerySet:
    queryset = (
        SnackMenu.objects
        .select_related('created_by')
        .prefetch_related('items', 'orders__catalog_item')
    )
    if status:
        queryset = queryset.filter(status=status)
    return queryset.order_by('-created_at')


@transaction.atomic
def create_menu(*, title: str, created_by: User, notes: str = '') -> SnackMenu:
    """
    Open a new snack menu.

    Raises:
        InvalidInputError: If the title is blank
    """
    title = (title or '').strip()
    if not title:
        raise InvalidInputError("Menu title must not be empty")

    menu = SnackMenu.objects.create(title=title, notes=notes or '', created_by=created_by)
    logger.info(f"Snack menu '{title}' opened by {created_by.email}")
    return menu


@transaction.atomic
def add_item(
    *,
    menu_id: UUID,
    user: User,
    item_name: str,
    price,
    quantity: int = 1
) -> SnackItem:
    """
    Add an item to an open menu.

    Args:
        menu_id: UUID of the menu
        user: User ordering the item
        item_name: Name of the item
        price: Unit price, positive
        quantity: Number of units, at least 1

    Returns:
        Created SnackItem

    Raises:
        InvalidInputError: If name, price or quantity are invalid
        MenuNotFoundError: If menu doesn't exist
        MenuClosedError: If the menu is settled or cancelled
        WrongMenuKindError: If the menu is a catalog menu
    """
    item_name = (item_name or '').strip()
    if not item_name:
        raise InvalidInputError("Item name must not be empty")

    price = to_amount(price)
    if price <= 0:
        raise InvalidInputError("Price must be greater than zero")

    if quantity is None or int(quantity) < 1:
        raise InvalidInputError("Quantity must be at least 1")

    menu = _lock_open_menu(menu_id)
    if menu.kind != MenuKind.FREE_FORM:
        raise WrongMenuKindError("Catalog menus take orders, not free-form items")

    return SnackItem.objects.create(
        menu=menu,
        user=user,
        item_name=item_name,
        price=price,
        quantity=int(quantity),
    )


@transaction.atomic
def remove_item(*, menu_id: UUID, item_id: UUID, user: User) -> None:
    """
    Remove one of the user's own items from an open menu.

    Raises:
        MenuNotFoundError: If menu doesn't exist
        MenuClosedError: If the menu is settled or cancelled
        ItemNotFoundError: If the item doesn't exist or isn't the user's
    """
    menu = _lock_open_menu(menu_id)

    deleted, _ = SnackItem.objects.filter(id=item_id, menu=menu, user=user).delete()
    if not deleted:
        raise ItemNotFoundError("Item not found or not yours")


@transaction.atomic
def cancel_menu(*, menu_id: UUID, user: User) -> SnackMenu:
    """
    Cancel an open menu. Only the creator or an administrator may cancel.

    Raises:
        MenuNotFoundError: If menu doesn't exist
        MenuClosedError: If the menu is settled or cancelled
        NotMenuOwnerError: If the user is neither creator nor admin
    """
    menu = _lock_open_menu(menu_id)

    if menu.created_by_id != user.id and not user.is_staff:
        raise NotMenuOwnerError("Only the menu creator or an admin can cancel it")

    menu.status = MenuStatus.CANCELLED
    menu.save(update_fields=['status', 'updated_at'])

    logger.info(f"Snack menu '{menu.title}' cancelled by {user.email}")
    return menu
