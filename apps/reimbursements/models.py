from django.db import models
import uuid


class ReimbursementType(models.TextChoices):
    LUNCH = 'lunch', 'Lunch'
    SNACK = 'snack', 'Snack'


class ReimbursementStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ADMIN_TRANSFERRED = 'admin_transferred', 'Transferred by admin'
    USER_CONFIRMED = 'user_confirmed', 'Confirmed by user'
    USER_DISPUTED = 'user_disputed', 'Disputed by user'


class UserResponse(models.TextChoices):
    RECEIVED = 'received', 'Received'
    NOT_RECEIVED = 'not_received', 'Not received'


class ReimbursementRequest(models.Model):
    """
    Obligation for an administrator to repay the member who fronted a bill.

    Created exactly once per settlement, inside the settlement transaction.
    Its lifecycle never feeds back into the session, menu or balances.
    """
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    type = models.CharField(max_length=20, choices=ReimbursementType.choices)
    
    # Settled source (exactly one is set, matching ``type``)
    session = models.OneToOneField(
        'lunch.LunchSession',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='reimbursement'
    )
    snack_menu = models.OneToOneField(
        'snacks.SnackMenu',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='reimbursement'
    )
    
    settler = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='reimbursements'
    )
    total_amount = models.DecimalField(max_digits=14, decimal_places=2)
    status = models.CharField(
        max_length=20,
        choices=ReimbursementStatus.choices,
        default=ReimbursementStatus.PENDING
    )
    
    # Admin transfer
    admin = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='handled_reimbursements'
    )
    admin_note = models.TextField(blank=True)
    admin_transferred_at = models.DateTimeField(null=True, blank=True)
    
    # Settler confirmation
    user_response = models.CharField(max_length=20, choices=UserResponse.choices, blank=True)
    user_confirmed_at = models.DateTimeField(null=True, blank=True)
    
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'reimbursement_requests'
        indexes = [
            models.Index(fields=['status', 'created_at'], name='reimb_status_idx'),
            models.Index(fields=['settler', 'created_at'], name='reimb_settler_idx'),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return f"{self.type} reimbursement {self.total_amount} to {self.settler} ({self.status})"
    
    @property
    def context_label(self):
        """Human label for the settled source."""
        if self.session_id:
            return str(self.session.session_date)
        if self.snack_menu_id:
            return self.snack_menu.title
        return ''
