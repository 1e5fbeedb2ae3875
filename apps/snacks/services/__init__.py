"""
Snacks app services layer.

Ad-hoc group purchases, either free-form items or orders against a
catalog, settled through the ledger's settlement engine.
"""

from apps.ledger.exceptions import (
    LedgerServiceError,
    InsufficientBalanceError,
    NoParticipantsError,
)

from .exceptions import (
    MenuNotFoundError,
    MenuClosedError,
    ItemNotFoundError,
    NotMenuOwnerError,
    WrongMenuKindError,
    OrderNotFoundError,
)

from .menu_management import (
    get_menu_by_id,
    list_menus,
    create_menu,
    add_item,
    remove_item,
    cancel_menu,
)

from .catalog import (
    create_catalog_menu,
    get_active_menu,
    place_order,
    update_order,
    cancel_order,
    list_my_orders,
    get_menu_orders,
)

from .settlement import (
    settle_menu,
)


__all__ = [
    # Exceptions
    'LedgerServiceError',
    'InsufficientBalanceError',
    'NoParticipantsError',
    'MenuNotFoundError',
    'MenuClosedError',
    'ItemNotFoundError',
    'NotMenuOwnerError',
    'WrongMenuKindError',
    'OrderNotFoundError',

    # Menu management
    'get_menu_by_id',
    'list_menus',
    'create_menu',
    'add_item',
    'remove_item',
    'cancel_menu',

    # Catalog menus
    'create_catalog_menu',
    'get_active_menu',
    'place_order',
    'update_order',
    'cancel_order',
    'list_my_orders',
    'get_menu_orders',

    # Settlement
    'settle_menu',
]
