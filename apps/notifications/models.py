from django.db import models
import uuid


class NotificationStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    SENDING = 'sending', 'Sending'
    SENT = 'sent', 'Sent'
    FAILED = 'failed', 'Failed'


class NotificationEvent(models.TextChoices):
    BUYERS_SELECTED = 'buyers_selected', 'Buyers selected'
    SETTLEMENT_COMPLETE = 'settlement_complete', 'Settlement complete'
    DEPOSIT_APPROVED = 'deposit_approved', 'Deposit approved'
    DEPOSIT_REJECTED = 'deposit_rejected', 'Deposit rejected'
    BALANCE_ADJUSTED = 'balance_adjusted', 'Balance adjusted'
    REIMBURSEMENT_TRANSFERRED = 'reimbursement_transferred', 'Reimbursement transferred'
    REIMBURSEMENT_DISPUTED = 'reimbursement_disputed', 'Reimbursement disputed'
    ORDER_REMINDER = 'order_reminder', 'Order reminder'


class Notification(models.Model):
    """
    Outbox row for one message to one recipient.

    Rows are written in the same database transaction as the change they
    announce and delivered only after that transaction commits, so a
    delivery failure can never undo a ledger change.
    """
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event_type = models.CharField(max_length=40, choices=NotificationEvent.choices)
    recipient = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    payload = models.JSONField(default=dict, blank=True)
    status = models.CharField(
        max_length=20,
        choices=NotificationStatus.choices,
        default=NotificationStatus.PENDING
    )
    attempts = models.PositiveIntegerField(default=0)
    last_error = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    
    class Meta:
        db_table = 'notifications'
        indexes = [
            models.Index(fields=['status', 'created_at'], name='notif_status_idx'),
        ]
        ordering = ['created_at']
    
    def __str__(self):
        return f"{self.event_type} -> {self.recipient} ({self.status})"
