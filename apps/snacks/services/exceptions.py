"""
Domain-specific exceptions for the snacks app.
"""

from apps.ledger.exceptions import NotFoundError, ForbiddenError, InvalidStateError


class MenuNotFoundError(NotFoundError):
    """Raised when a snack menu does not exist."""
    default_message = 'Snack menu not found.'


class MenuClosedError(InvalidStateError):
    """Raised when a menu is no longer accepting changes."""
    code = 'menu_closed'


class ItemNotFoundError(NotFoundError):
    """Raised when an item does not exist or belongs to someone else."""
    pass


class NotMenuOwnerError(ForbiddenError):
    """Raised when someone other than the creator manages a menu."""
    pass


class WrongMenuKindError(InvalidStateError):
    """Raised when a free-form action hits a catalog menu or vice versa."""
    code = 'wrong_menu_kind'


class OrderNotFoundError(NotFoundError):
    """Raised when an order line does not exist or belongs to someone else."""
    pass
