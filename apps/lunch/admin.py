# ==========================================
# apps/lunch/admin.py
# ==========================================

from django.contrib import admin
from apps.lunch.models import LunchSession, LunchOrder


class LunchOrderInline(admin.TabularInline):
    """Read-only list of a session's orders."""
    model = LunchOrder
    extra = 0
    fields = ['user', 'status', 'created_at']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(LunchSession)
class LunchSessionAdmin(admin.ModelAdmin):
    """
    Audit view of lunch sessions.

    Sessions change only through the lunch services, so every field is
    read-only here.
    """
    
    list_display = [
        'session_date',
        'status',
        'total_participants',
        'payer',
        'total_bill',
        'amount_per_person',
        'settled_at',
    ]
    list_filter = ['status', 'session_date']
    date_hierarchy = 'session_date'
    ordering = ['-session_date']
    inlines = [LunchOrderInline]
    readonly_fields = [
        'session_date',
        'status',
        'buyer_ids',
        'total_participants',
        'selected_at',
        'payer',
        'total_bill',
        'amount_per_person',
        'receipt_ref',
        'settled_at',
        'created_at',
        'updated_at',
    ]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
