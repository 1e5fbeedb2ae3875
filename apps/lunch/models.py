from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class SessionStatus(models.TextChoices):
    ORDERING = 'ordering', 'Ordering'
    BUYERS_SELECTED = 'buyers_selected', 'Buyers selected'
    BUYING = 'buying', 'Buying'
    SETTLED = 'settled', 'Settled'
    CANCELLED = 'cancelled', 'Cancelled'


# Status only moves forward
SESSION_TRANSITIONS = {
    SessionStatus.ORDERING: {SessionStatus.BUYERS_SELECTED, SessionStatus.CANCELLED},
    SessionStatus.BUYERS_SELECTED: {SessionStatus.BUYING, SessionStatus.SETTLED, SessionStatus.CANCELLED},
    SessionStatus.BUYING: {SessionStatus.SETTLED, SessionStatus.CANCELLED},
    SessionStatus.SETTLED: set(),
    SessionStatus.CANCELLED: set(),
}


class OrderStatus(models.TextChoices):
    CONFIRMED = 'confirmed', 'Confirmed'
    CANCELLED = 'cancelled', 'Cancelled'


class LunchSession(models.Model):
    """One group lunch order per calendar date."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session_date = models.DateField(unique=True)
    status = models.CharField(
        max_length=20,
        choices=SessionStatus.choices,
        default=SessionStatus.ORDERING
    )
    
    # Selected buyers, in selection order (user ids as strings)
    buyer_ids = models.JSONField(default=list, blank=True)
    total_participants = models.PositiveIntegerField(null=True, blank=True)
    selected_at = models.DateTimeField(null=True, blank=True)
    
    # Settlement
    payer = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='paid_sessions'
    )
    total_bill = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    amount_per_person = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    receipt_ref = models.CharField(max_length=500, blank=True)
    settled_at = models.DateTimeField(null=True, blank=True)
    
    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'lunch_sessions'
        indexes = [
            models.Index(fields=['status', 'session_date'], name='lunch_sess_status_idx'),
        ]
        ordering = ['-session_date']
    
    def __str__(self):
        return f"Lunch {self.session_date} ({self.status})"
    
    def can_transition_to(self, status):
        return status in SESSION_TRANSITIONS[SessionStatus(self.status)]
    
    def is_buyer(self, user_id):
        return str(user_id) in self.buyer_ids


class LunchOrder(models.Model):
    """A user's participation in a lunch session."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session = models.ForeignKey(LunchSession, on_delete=models.CASCADE, related_name='orders')
    user = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='lunch_orders')
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.CONFIRMED
    )
    created_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'lunch_orders'
        unique_together = [['session', 'user']]
        indexes = [
            models.Index(fields=['session', 'status'], name='lunch_order_status_idx'),
        ]
        ordering = ['created_at']
    
    def __str__(self):
        return f"{self.user.get_display_name()} in {self.session.session_date} ({self.status})"
