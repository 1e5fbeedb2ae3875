# ==========================================
# apps/reimbursements/admin.py
# ==========================================

from django.contrib import admin
from apps.reimbursements.models import ReimbursementRequest


@admin.register(ReimbursementRequest)
class ReimbursementRequestAdmin(admin.ModelAdmin):
    """Audit view of reimbursement requests."""
    
    list_display = [
        'created_at',
        'type',
        'settler',
        'total_amount',
        'status',
        'admin',
        'admin_transferred_at',
        'user_confirmed_at',
    ]
    list_filter = ['type', 'status']
    search_fields = ['settler__email', 'settler__display_name']
    ordering = ['-created_at']
    readonly_fields = [
        'type',
        'session',
        'snack_menu',
        'settler',
        'total_amount',
        'status',
        'admin',
        'admin_note',
        'admin_transferred_at',
        'user_response',
        'user_confirmed_at',
        'created_at',
        'updated_at',
    ]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
