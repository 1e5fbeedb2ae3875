"""
Catalog menu service.

The creator lists the dishes on offer with their prices; members order
quantities of those dishes. Settlement charges each member for their
order lines at catalog prices.
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.snacks.models import (
    SnackMenu,
    SnackCatalogItem,
    SnackOrder,
    MenuStatus,
    MenuKind,
)
from apps.ledger.exceptions import InvalidInputError
from apps.ledger.services.deposits import to_amount

from .exceptions import (
    MenuNotFoundError,
    ItemNotFoundError,
    OrderNotFoundError,
    WrongMenuKindError,
)
from .menu_management import _lock_open_menu

logger = logging.getLogger(__name__)


def _lock_open_catalog_menu(menu_id: UUID) -> SnackMenu:
    menu = _lock_open_menu(menu_id)
    if menu.kind != MenuKind.CATALOG:
        raise WrongMenuKindError("Menu has no catalog to order from")
    return menu


def _clean_catalog(items: Iterable[Dict]) -> List[Dict]:
    """Keep the entries that have a name and a positive price."""
    cleaned = []
    for entry in items or []:
        name = (entry.get('name') or '').strip()
        if not name or entry.get('price') in (None, ''):
            continue
        price = to_amount(entry['price'])
        if price <= 0:
            continue
        cleaned.append({
            'name': name,
            'price': price,
            'description': entry.get('description') or '',
        })
    return cleaned


@transaction.atomic
def create_catalog_menu(
    *,
    title: str,
    created_by: User,
    items: Iterable[Dict],
    notes: str = ''
) -> SnackMenu:
    """
    Open a menu with a fixed list of dishes.

    Entries without a name or with a non-positive price are skipped.

    Args:
        title: Menu title
        created_by: User opening the menu, who will be reimbursed
        items: Dicts with ``name``, ``price`` and optional ``description``
        notes: Free text (shop, pickup time, image link)

    Returns:
        Created SnackMenu with its catalog

    Raises:
        InvalidInputError: If the title is blank or no valid dish is given
    """
    title = (title or '').strip()
    if not title:
        raise InvalidInputError("Menu title must not be empty")

    catalog = _clean_catalog(items)
    if not catalog:
        raise InvalidInputError("A catalog menu needs at least one dish")

    menu = SnackMenu.objects.create(
        title=title,
        notes=notes or '',
        created_by=created_by,
        kind=MenuKind.CATALOG,
    )
    SnackCatalogItem.objects.bulk_create([
        SnackCatalogItem(menu=menu, **entry) for entry in catalog
    ])

    logger.info(f"Catalog menu '{title}' opened by {created_by.email} with {len(catalog)} dishes")
    return menu


def get_active_menu() -> Optional[SnackMenu]:
    """Newest catalog menu still taking orders, or None."""
    return (
        SnackMenu.objects
        .filter(kind=MenuKind.CATALOG, status=MenuStatus.ORDERING)
        .select_related('created_by')
        .prefetch_related('catalog')
        .order_by('-created_at')
        .first()
    )


@transaction.atomic
def place_order(*, menu_id: UUID, user: User, lines: Iterable[Dict]) -> List[SnackOrder]:
    """
    Replace the user's order on a catalog menu.

    Every earlier line of the user on this menu is dropped first. Lines
    with a quantity of zero or less are skipped, so an empty or all-zero
    order withdraws the user. A dish listed twice keeps the last quantity.

    Args:
        menu_id: UUID of the menu
        user: User ordering
        lines: Dicts with ``catalog_item_id`` and ``quantity``

    Returns:
        The user's order lines after the change

    Raises:
        MenuNotFoundError: If menu doesn't exist
        MenuClosedError: If the menu is settled or cancelled
        WrongMenuKindError: If the menu is free-form
        ItemNotFoundError: If a dish is not on this menu
    """
    menu = _lock_open_catalog_menu(menu_id)

    quantities = {}
    for line in lines or []:
        quantity = line.get('quantity') or 0
        if int(quantity) <= 0:
            continue
        quantities[str(line['catalog_item_id'])] = int(quantity)

    catalog = {
        str(item.id): item
        for item in SnackCatalogItem.objects.filter(menu=menu, id__in=list(quantities))
    }
    missing = set(quantities) - set(catalog)
    if missing:
        raise ItemNotFoundError(f"Dish not on this menu: {', '.join(sorted(missing))}")

    SnackOrder.objects.filter(menu=menu, user=user).delete()
    SnackOrder.objects.bulk_create([
        SnackOrder(menu=menu, user=user, catalog_item=catalog[item_id], quantity=quantity)
        for item_id, quantity in quantities.items()
    ])

    logger.info(f"{user.email} ordered {sum(quantities.values())} dishes from '{menu.title}'")
    return list(list_my_orders(user=user, menu_id=menu.id))


def _lock_own_order(order_id: UUID, user: User) -> SnackOrder:
    try:
        order = (
            SnackOrder.objects
            .select_related('catalog_item')
            .get(id=order_id, user=user)
        )
    except SnackOrder.DoesNotExist:
        raise OrderNotFoundError("Order not found or not yours")

    _lock_open_menu(order.menu_id)
    return order


@transaction.atomic
def update_order(*, order_id: UUID, user: User, quantity: int) -> SnackOrder:
    """
    Change the quantity of one of the user's order lines.

    Raises:
        InvalidInputError: If quantity is below 1
        OrderNotFoundError: If the line doesn't exist or isn't the user's
        MenuClosedError: If the menu is settled or cancelled
    """
    if quantity is None or int(quantity) < 1:
        raise InvalidInputError("Quantity must be at least 1")

    order = _lock_own_order(order_id, user)
    order.quantity = int(quantity)
    order.save(update_fields=['quantity', 'updated_at'])
    return order


@transaction.atomic
def cancel_order(*, order_id: UUID, user: User) -> None:
    """
    Remove one of the user's order lines.

    Raises:
        OrderNotFoundError: If the line doesn't exist or isn't the user's
        MenuClosedError: If the menu is settled or cancelled
    """
    order = _lock_own_order(order_id, user)
    order.delete()


def list_my_orders(*, user: User, menu_id: Optional[UUID] = None) -> QuerySet:
    """The user's order lines, newest menu first, optionally for one menu."""
    queryset = SnackOrder.objects.filter(user=user).select_related('menu', 'catalog_item')
    if menu_id:
        queryset = queryset.filter(menu_id=menu_id)
    return queryset.order_by('-menu__created_at', 'catalog_item__created_at', 'catalog_item__id')


def get_menu_orders(*, menu_id: UUID) -> List[Dict]:
    """
    Per-member order summary for a menu.

    Returns:
        List of dicts (user, total_cost, lines) ordered by display name

    Raises:
        MenuNotFoundError: If menu doesn't exist
    """
    try:
        menu = SnackMenu.objects.get(id=menu_id)
    except SnackMenu.DoesNotExist:
        raise MenuNotFoundError(f"Snack menu {menu_id} not found")

    lines = menu.order_lines().select_related('user')
    if menu.kind == MenuKind.CATALOG:
        lines = lines.select_related('catalog_item')

    summary = {}
    for line in lines:
        entry = summary.setdefault(line.user_id, {
            'user': line.user,
            'total_cost': Decimal('0'),
            'lines': [],
        })
        entry['total_cost'] += line.subtotal
        entry['lines'].append(line)

    return sorted(summary.values(), key=lambda entry: entry['user'].get_display_name())
