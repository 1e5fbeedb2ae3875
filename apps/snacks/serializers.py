from decimal import Decimal
from rest_framework import serializers
from .models import SnackMenu, SnackItem, SnackCatalogItem, SnackOrder
from apps.accounts.serializers import UserMinimalSerializer


class SnackItemSerializer(serializers.ModelSerializer):
    """Item on a snack menu."""
    
    user = UserMinimalSerializer(read_only=True)
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    
    class Meta:
        model = SnackItem
        fields = ['id', 'user', 'item_name', 'price', 'quantity', 'subtotal', 'created_at']
        read_only_fields = ['id', 'user', 'subtotal', 'created_at']


class SnackItemCreateSerializer(serializers.Serializer):
    item_name = serializers.CharField(max_length=200)
    price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    quantity = serializers.IntegerField(min_value=1, default=1)


class SnackCatalogItemSerializer(serializers.ModelSerializer):
    """Dish offered on a catalog menu."""
    
    class Meta:
        model = SnackCatalogItem
        fields = ['id', 'name', 'price', 'description']
        read_only_fields = fields


class SnackCatalogEntrySerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    description = serializers.CharField(required=False, allow_blank=True)


class SnackOrderSerializer(serializers.ModelSerializer):
    """One of the current user's catalog order lines."""
    
    menu_title = serializers.CharField(source='menu.title', read_only=True)
    item_name = serializers.CharField(read_only=True)
    price = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    
    class Meta:
        model = SnackOrder
        fields = [
            'id',
            'menu',
            'menu_title',
            'catalog_item',
            'item_name',
            'price',
            'quantity',
            'subtotal',
        ]
        read_only_fields = fields


class OrderLineSerializer(serializers.Serializer):
    catalog_item_id = serializers.UUIDField()
    quantity = serializers.IntegerField()


class PlaceOrderSerializer(serializers.Serializer):
    """Full replacement of the user's order; zero quantities are dropped."""
    lines = OrderLineSerializer(many=True, allow_empty=True)


class OrderQuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)


class SnackMenuListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""
    
    created_by = UserMinimalSerializer(read_only=True)
    item_count = serializers.SerializerMethodField()
    current_total = serializers.SerializerMethodField()
    
    class Meta:
        model = SnackMenu
        fields = [
            'id',
            'title',
            'status',
            'kind',
            'created_by',
            'item_count',
            'current_total',
            'total_amount',
            'settled_at',
            'created_at',
        ]
    
    def get_item_count(self, obj):
        return len(obj.order_lines())
    
    def get_current_total(self, obj):
        total = sum((line.subtotal for line in obj.order_lines()), Decimal('0'))
        return str(total)


class SnackMenuSerializer(SnackMenuListSerializer):
    """Menu with all items and per-user totals."""
    
    items = SnackItemSerializer(many=True, read_only=True)
    catalog = SnackCatalogItemSerializer(many=True, read_only=True)
    settled_by = UserMinimalSerializer(read_only=True)
    user_totals = serializers.SerializerMethodField()
    
    class Meta(SnackMenuListSerializer.Meta):
        fields = SnackMenuListSerializer.Meta.fields + [
            'notes',
            'items',
            'catalog',
            'settled_by',
            'user_totals',
        ]
    
    def get_user_totals(self, obj):
        """Amount each participant will be charged on settlement."""
        totals = {}
        for line in obj.order_lines():
            entry = totals.setdefault(str(line.user_id), {
                'user': UserMinimalSerializer(line.user).data,
                'total': Decimal('0'),
            })
            entry['total'] += line.subtotal
        return [
            {'user': entry['user'], 'total': str(entry['total'])}
            for entry in totals.values()
        ]


class SnackMenuCreateSerializer(serializers.Serializer):
    """Sending a catalog opens a catalog menu."""
    title = serializers.CharField(max_length=200)
    notes = serializers.CharField(required=False, allow_blank=True)
    catalog = SnackCatalogEntrySerializer(many=True, required=False)


class SnackSettlementSerializer(serializers.Serializer):
    menu_id = serializers.UUIDField()
    participants = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    reimbursement_id = serializers.UUIDField()


class MenuOrdersSerializer(serializers.Serializer):
    """What one member ordered on a menu and what they will be charged."""
    
    user = UserMinimalSerializer()
    total_cost = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance = serializers.SerializerMethodField()
    lines = serializers.SerializerMethodField()
    
    def get_balance(self, obj):
        """Only the creator and admins see balances, to spot shortfalls."""
        if not self.context.get('show_balances'):
            return None
        return str(obj['user'].balance)
    
    def get_lines(self, obj):
        return [
            {
                'item_name': line.item_name,
                'price': str(line.price),
                'quantity': line.quantity,
                'subtotal': str(line.subtotal),
            }
            for line in obj['lines']
        ]


class ActiveMenuSerializer(serializers.Serializer):
    menu = SnackMenuSerializer()
    my_orders = SnackOrderSerializer(many=True)
