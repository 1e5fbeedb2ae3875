# ==========================================
# apps/ledger/admin.py
# ==========================================

from django.contrib import admin
from apps.ledger.models import Transaction


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Audit view of the append-only ledger."""
    
    list_display = [
        'created_at',
        'user',
        'type',
        'status',
        'amount',
        'session',
        'snack_menu',
        'admin',
    ]
    list_filter = ['type', 'status', 'created_at']
    search_fields = ['user__email', 'user__display_name', 'note']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    readonly_fields = [
        'user',
        'type',
        'status',
        'amount',
        'session',
        'snack_menu',
        'note',
        'metadata',
        'admin',
        'processed_at',
        'created_at',
    ]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
