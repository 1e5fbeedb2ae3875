"""
Settlement engine.

A settlement turns a bill into per-user debits, one completed expense
entry per debit, and exactly one reimbursement request for whoever
fronted the money. The bill comes from a settlement source:

- ``EqualSplitSource``: lunch, the bill is divided evenly.
- ``ItemizedSource``: free-form snack menus, each user pays for their own items.
- ``CatalogOrderSource``: catalog snack menus, priced from the menu catalog.

Every source checks that all participants can cover their share before
anything is deducted.

Both go through ``apply_settlement``, which must run inside the
caller's transaction after the source entity (session or menu) is locked.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Tuple

from django.conf import settings
from django.db import transaction
from django.db.models import F

from apps.accounts.models import User
from apps.ledger.models import Transaction, TransactionType, TransactionStatus
from apps.notifications.models import NotificationEvent
from apps.notifications.services import enqueue
from apps.reimbursements.models import ReimbursementRequest, ReimbursementType

from apps.ledger.exceptions import NoParticipantsError, InsufficientBalanceError

logger = logging.getLogger(__name__)


def quantize_amount(value: Decimal) -> Decimal:
    """Round half-up to the smallest currency unit."""
    return value.quantize(Decimal(settings.LEDGER_MINOR_UNIT), rounding=ROUND_HALF_UP)


class SettlementSource:
    """
    Base class for everything that can be settled.

    Subclasses set ``kind`` (a ReimbursementType) and implement
    ``compute_per_user_cost``, ``total_amount`` and ``references``.
    """

    kind = None
    requires_funds = False

    def compute_per_user_cost(self) -> List[Tuple[User, Decimal]]:
        """Return (user, amount) pairs in charging order."""
        raise NotImplementedError

    @property
    def total_amount(self) -> Decimal:
        raise NotImplementedError

    def references(self) -> Dict:
        """Model references stored on ledger entries and the reimbursement."""
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def metadata_for(self, user: User) -> Dict:
        return {}


class EqualSplitSource(SettlementSource):
    """A lunch bill divided evenly between the session's participants."""

    kind = ReimbursementType.LUNCH
    requires_funds = True

    def __init__(self, session, participants: List[User], total_bill: Decimal):
        self.session = session
        self.participants = list(participants)
        self.total_bill = total_bill

    @property
    def amount_per_person(self) -> Decimal:
        if not self.participants:
            raise NoParticipantsError("No participants to split the bill between")
        return quantize_amount(self.total_bill / len(self.participants))

    @property
    def total_amount(self) -> Decimal:
        return self.total_bill

    def compute_per_user_cost(self):
        if not self.participants:
            return []
        share = self.amount_per_person
        return [(user, share) for user in self.participants]

    def references(self):
        return {'session': self.session}

    def describe(self):
        return f"Lunch {self.session.session_date}"

    def metadata_for(self, user):
        return {
            'total_bill': str(self.total_bill),
            'participants': len(self.participants),
        }


class ItemizedSource(SettlementSource):
    """A snack menu where every participant pays for their own items."""

    kind = ReimbursementType.SNACK
    requires_funds = True

    def __init__(self, menu, items):
        self.menu = menu
        self.items = list(items)

    def _items_by_user(self):
        grouped = {}
        for item in self.items:
            grouped.setdefault(item.user_id, {'user': item.user, 'items': []})
            grouped[item.user_id]['items'].append(item)
        return grouped

    def compute_per_user_cost(self):
        costs = []
        for entry in self._items_by_user().values():
            subtotal = sum((item.subtotal for item in entry['items']), Decimal('0'))
            costs.append((entry['user'], quantize_amount(subtotal)))
        return costs

    @property
    def total_amount(self) -> Decimal:
        return sum((amount for _, amount in self.compute_per_user_cost()), Decimal('0'))

    def references(self):
        return {'snack_menu': self.menu}

    def describe(self):
        return f"Snack: {self.menu.title}"

    def metadata_for(self, user):
        entry = self._items_by_user().get(user.id, {'items': []})
        return {
            'kind': 'snack_expense',
            'items': [
                {
                    'item_name': item.item_name,
                    'price': str(item.price),
                    'quantity': item.quantity,
                }
                for item in entry['items']
            ],
        }


class CatalogOrderSource(ItemizedSource):
    """A catalog menu; lines are orders priced from the menu catalog."""

    def metadata_for(self, user):
        entry = self._items_by_user().get(user.id, {'items': []})
        return {
            'kind': 'snack_expense',
            'items': [
                {
                    'catalog_item_id': str(order.catalog_item_id),
                    'item_name': order.item_name,
                    'price': str(order.price),
                    'quantity': order.quantity,
                }
                for order in entry['items']
            ],
        }


@transaction.atomic
def apply_settlement(*, source: SettlementSource, settler: User) -> Dict:
    """
    Debit every participant and open the settler's reimbursement request.

    Participants are locked in id order. When the source requires funds,
    every participant is checked before anything is deducted.

    Args:
        source: What is being settled
        settler: User who paid and is owed the total

    Returns:
        Dict with ``charges`` [(user, amount)], ``total_amount`` and
        ``reimbursement``

    Raises:
        NoParticipantsError: If nobody is charged
        InsufficientBalanceError: If a funds-checked source finds
            underfunded participants (all of them are reported)
    """
    charges = source.compute_per_user_cost()
    if not charges:
        raise NoParticipantsError("No participants to charge")

    locked = {
        user.id: user
        for user in User.objects.select_for_update().filter(
            id__in=[user.id for user, _ in charges]
        ).order_by('id')
    }

    if source.requires_funds:
        underfunded = [
            locked[user.id]
            for user, amount in charges
            if locked[user.id].balance < amount
        ]
        if underfunded:
            raise InsufficientBalanceError(underfunded)

    references = source.references()
    note = source.describe()

    for user, amount in charges:
        User.objects.filter(id=user.id).update(balance=F('balance') - amount)
        Transaction.objects.create(
            user_id=user.id,
            type=TransactionType.EXPENSE,
            status=TransactionStatus.COMPLETED,
            amount=-amount,
            note=note,
            metadata=source.metadata_for(user),
            **references
        )

    total_amount = source.total_amount
    reimbursement = ReimbursementRequest.objects.create(
        type=source.kind,
        settler=settler,
        total_amount=total_amount,
        **references
    )

    for user, amount in charges:
        enqueue(
            event_type=NotificationEvent.SETTLEMENT_COMPLETE,
            recipients=[locked[user.id]],
            payload={
                'kind': source.kind,
                'description': note,
                'amount': str(amount),
                'total_amount': str(total_amount),
                'settler_id': str(settler.id),
            },
        )

    logger.info(
        f"Settled {note}: {len(charges)} participants, total {total_amount}, "
        f"reimbursement {reimbursement.id} for {settler.email}"
    )

    return {
        'charges': charges,
        'total_amount': total_amount,
        'reimbursement': reimbursement,
    }
