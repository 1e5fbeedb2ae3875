"""
Ledger app services layer.

The ledger owns balances and the append-only transaction log. Deposits
and adjustments enter money; the settlement engine takes it out.
"""

from apps.ledger.exceptions import (
    LedgerServiceError,
    InvalidInputError,
    NotFoundError,
    ForbiddenError,
    InvalidStateError,
    AlreadySettledError,
    AlreadyProcessedError,
    NoParticipantsError,
    NoEligibleBuyersError,
    InsufficientBalanceError,
)

from .deposits import (
    create_deposit,
    approve_deposit,
    reject_deposit,
    adjust_balance,
    list_pending_deposits,
    get_user_transactions,
)

from .settlement import (
    SettlementSource,
    EqualSplitSource,
    ItemizedSource,
    CatalogOrderSource,
    apply_settlement,
    quantize_amount,
)

from .stats import (
    get_fund_stats,
)


__all__ = [
    # Exceptions
    'LedgerServiceError',
    'InvalidInputError',
    'NotFoundError',
    'ForbiddenError',
    'InvalidStateError',
    'AlreadySettledError',
    'AlreadyProcessedError',
    'NoParticipantsError',
    'NoEligibleBuyersError',
    'InsufficientBalanceError',

    # Deposits and adjustments
    'create_deposit',
    'approve_deposit',
    'reject_deposit',
    'adjust_balance',
    'list_pending_deposits',
    'get_user_transactions',

    # Settlement engine
    'SettlementSource',
    'EqualSplitSource',
    'ItemizedSource',
    'CatalogOrderSource',
    'apply_settlement',
    'quantize_amount',

    # Dashboard
    'get_fund_stats',
]
