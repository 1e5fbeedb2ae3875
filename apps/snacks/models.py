from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class MenuStatus(models.TextChoices):
    ORDERING = 'ordering', 'Ordering'
    SETTLED = 'settled', 'Settled'
    CANCELLED = 'cancelled', 'Cancelled'


class MenuKind(models.TextChoices):
    FREE_FORM = 'free_form', 'Free form'
    CATALOG = 'catalog', 'Catalog'


class SnackMenu(models.Model):
    """Ad-hoc group snack purchase opened by any member."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='snack_menus'
    )
    status = models.CharField(
        max_length=20,
        choices=MenuStatus.choices,
        default=MenuStatus.ORDERING
    )
    kind = models.CharField(
        max_length=20,
        choices=MenuKind.choices,
        default=MenuKind.FREE_FORM
    )
    
    # Settlement
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    settled_at = models.DateTimeField(null=True, blank=True)
    settled_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='settled_snack_menus'
    )
    
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'snack_menus'
        indexes = [
            models.Index(fields=['status', 'created_at'], name='snack_menu_status_idx'),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return f"{self.title} ({self.status})"
    
    def order_lines(self):
        """Chargeable lines: free-form items, or orders against the catalog."""
        if self.kind == MenuKind.CATALOG:
            return self.orders.all()
        return self.items.all()


class SnackItem(models.Model):
    """One line a participant adds to a snack menu."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    menu = models.ForeignKey(SnackMenu, on_delete=models.CASCADE, related_name='items')
    user = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='snack_items')
    item_name = models.CharField(max_length=200)
    price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    created_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'snack_items'
        indexes = [
            models.Index(fields=['menu', 'user'], name='snack_item_user_idx'),
        ]
        ordering = ['created_at']
    
    def __str__(self):
        return f"{self.item_name} x{self.quantity} ({self.user.get_display_name()})"
    
    @property
    def subtotal(self):
        return self.price * self.quantity


class SnackCatalogItem(models.Model):
    """Dish offered on a catalog menu; members order it by quantity."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    menu = models.ForeignKey(SnackMenu, on_delete=models.CASCADE, related_name='catalog')
    name = models.CharField(max_length=200)
    price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'snack_catalog_items'
        ordering = ['created_at', 'id']
    
    def __str__(self):
        return f"{self.name} ({self.price})"


class SnackOrder(models.Model):
    """A member's quantity of one catalog item."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    menu = models.ForeignKey(SnackMenu, on_delete=models.CASCADE, related_name='orders')
    user = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='snack_orders')
    catalog_item = models.ForeignKey(SnackCatalogItem, on_delete=models.CASCADE, related_name='orders')
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'snack_orders'
        constraints = [
            models.UniqueConstraint(
                fields=['menu', 'user', 'catalog_item'],
                name='unique_snack_order_line'
            ),
        ]
        ordering = ['created_at', 'id']
    
    def __str__(self):
        return f"{self.item_name} x{self.quantity} ({self.user.get_display_name()})"
    
    @property
    def item_name(self):
        return self.catalog_item.name
    
    @property
    def price(self):
        return self.catalog_item.price
    
    @property
    def subtotal(self):
        return self.price * self.quantity
