"""
Reimbursements app services layer.

Tracks the manual bank transfer that repays a settler. The workflow never
touches balances, sessions or menus.
"""

from apps.ledger.exceptions import (
    LedgerServiceError,
    InvalidInputError,
    NotFoundError,
    ForbiddenError,
)

from .workflow import (
    mark_transferred,
    confirm_receipt,
    list_pending_reimbursements,
    list_user_reimbursements,
)


__all__ = [
    # Exceptions
    'LedgerServiceError',
    'InvalidInputError',
    'NotFoundError',
    'ForbiddenError',

    # Workflow
    'mark_transferred',
    'confirm_receipt',
    'list_pending_reimbursements',
    'list_user_reimbursements',
]
