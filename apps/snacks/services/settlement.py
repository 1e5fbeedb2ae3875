"""
Snack menu settlement service.

Each participant pays for their own lines. Unlike lunch's even split the
amounts differ per person, but the same rule holds: every participant is
checked before anything is deducted.
"""
import logging
from typing import Dict
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.snacks.models import SnackMenu, MenuStatus, MenuKind
from apps.ledger.exceptions import NoParticipantsError
from apps.ledger.services.settlement import (
    CatalogOrderSource,
    ItemizedSource,
    apply_settlement,
)

from .exceptions import MenuNotFoundError, MenuClosedError, NotMenuOwnerError

logger = logging.getLogger(__name__)


def _settlement_source(menu: SnackMenu):
    if menu.kind == MenuKind.CATALOG:
        orders = menu.orders.select_related('user', 'catalog_item').order_by('created_at', 'id')
        return CatalogOrderSource(menu, orders)
    items = menu.items.select_related('user').order_by('created_at', 'id')
    return ItemizedSource(menu, items)


@transaction.atomic
def settle_menu(*, menu_id: UUID, settler: User) -> Dict:
    """
    Close a menu and charge every participant for their lines.

    The creator paid the shop, so the reimbursement is always theirs;
    ``settled_by`` records who closed the menu.

    Args:
        menu_id: UUID of the menu
        settler: User closing the menu, its creator or an admin

    Returns:
        Summary dict (menu_id, participants, total_amount, reimbursement_id)

    Raises:
        MenuNotFoundError: If menu doesn't exist
        MenuClosedError: If the menu is settled or cancelled
        NotMenuOwnerError: If the settler is neither creator nor admin
        NoParticipantsError: If nobody ordered anything
        InsufficientBalanceError: If any participant cannot cover their lines
    """
    try:
        menu = SnackMenu.objects.select_for_update().select_related('created_by').get(id=menu_id)
    except SnackMenu.DoesNotExist:
        raise MenuNotFoundError(f"Snack menu {menu_id} not found")

    if menu.status != MenuStatus.ORDERING:
        raise MenuClosedError(f"Menu is already {menu.status}")

    if menu.created_by_id != settler.id and not settler.is_staff:
        raise NotMenuOwnerError("Only the menu creator or an admin can settle it")

    source = _settlement_source(menu)
    if not source.items:
        raise NoParticipantsError("Nobody ordered from this menu")

    result = apply_settlement(source=source, settler=menu.created_by)

    menu.status = MenuStatus.SETTLED
    menu.total_amount = result['total_amount']
    menu.settled_at = timezone.now()
    menu.settled_by = settler
    menu.save(update_fields=['status', 'total_amount', 'settled_at', 'settled_by', 'updated_at'])

    logger.info(f"Snack menu '{menu.title}' settled by {settler.email}: {menu.total_amount}")

    return {
        'menu_id': menu.id,
        'participants': len(result['charges']),
        'total_amount': menu.total_amount,
        'reimbursement_id': result['reimbursement'].id,
    }
