# ==========================================
# apps/snacks/admin.py
# ==========================================

from django.contrib import admin
from apps.snacks.models import SnackMenu, SnackItem, SnackCatalogItem, SnackOrder


class SnackItemInline(admin.TabularInline):
    """Items ordered on a menu."""
    model = SnackItem
    extra = 0
    fields = ['user', 'item_name', 'price', 'quantity', 'created_at']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class SnackCatalogItemInline(admin.TabularInline):
    model = SnackCatalogItem
    extra = 0
    fields = ['name', 'price', 'description']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class SnackOrderInline(admin.TabularInline):
    model = SnackOrder
    extra = 0
    fields = ['user', 'catalog_item', 'quantity', 'updated_at']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(SnackMenu)
class SnackMenuAdmin(admin.ModelAdmin):
    """Audit view of snack menus."""
    
    list_display = ['title', 'created_by', 'kind', 'status', 'total_amount', 'settled_at', 'created_at']
    list_filter = ['status', 'kind', 'created_at']
    search_fields = ['title', 'created_by__email']
    ordering = ['-created_at']
    inlines = [SnackItemInline, SnackCatalogItemInline, SnackOrderInline]
    readonly_fields = [
        'title',
        'notes',
        'created_by',
        'status',
        'kind',
        'total_amount',
        'settled_at',
        'settled_by',
        'created_at',
        'updated_at',
    ]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
