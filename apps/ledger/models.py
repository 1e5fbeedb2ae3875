from django.db import models
import uuid


class TransactionType(models.TextChoices):
    DEPOSIT = 'deposit', 'Deposit'
    EXPENSE = 'expense', 'Expense'
    INCOME = 'income', 'Income'
    ADJUSTMENT = 'adjustment', 'Adjustment'


class TransactionStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'
    COMPLETED = 'completed', 'Completed'


class Transaction(models.Model):
    """
    Append-only ledger entry.

    ``amount`` is signed: deposits and credits are positive, expenses are
    negative. Rows are never edited except for the status of a pending
    deposit (pending -> approved | rejected). A user's balance must always
    equal the sum of their approved/completed entries.
    """
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='transactions'
    )
    type = models.CharField(max_length=20, choices=TransactionType.choices)
    status = models.CharField(
        max_length=20,
        choices=TransactionStatus.choices,
        default=TransactionStatus.PENDING
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    
    # What the entry pays for
    session = models.ForeignKey(
        'lunch.LunchSession',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='transactions'
    )
    snack_menu = models.ForeignKey(
        'snacks.SnackMenu',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='transactions'
    )
    note = models.TextField(blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    
    # Admin decision (deposits and adjustments)
    admin = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='processed_transactions'
    )
    processed_at = models.DateTimeField(null=True, blank=True)
    
    created_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'transactions'
        indexes = [
            models.Index(fields=['user', 'created_at'], name='txn_user_created_idx'),
            models.Index(fields=['type', 'status'], name='txn_type_status_idx'),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return f"{self.user} {self.type} {self.amount} ({self.status})"
