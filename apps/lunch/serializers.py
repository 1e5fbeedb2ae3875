from decimal import Decimal
from rest_framework import serializers
from .models import LunchSession, LunchOrder, OrderStatus
from apps.accounts.models import User
from apps.accounts.serializers import UserMinimalSerializer


class LunchOrderSerializer(serializers.ModelSerializer):
    """A participant's order in a session."""
    
    user = UserMinimalSerializer(read_only=True)
    
    class Meta:
        model = LunchOrder
        fields = ['id', 'user', 'status', 'created_at']
        read_only_fields = fields


class LunchSessionSerializer(serializers.ModelSerializer):
    """Session summary with buyers in selection order."""
    
    buyers = serializers.SerializerMethodField()
    payer = UserMinimalSerializer(read_only=True)
    participant_count = serializers.SerializerMethodField()
    
    class Meta:
        model = LunchSession
        fields = [
            'id',
            'session_date',
            'status',
            'buyers',
            'participant_count',
            'total_participants',
            'payer',
            'total_bill',
            'amount_per_person',
            'receipt_ref',
            'selected_at',
            'settled_at',
            'created_at',
        ]
        read_only_fields = fields
    
    def get_buyers(self, obj):
        users = {str(user.id): user for user in User.objects.filter(id__in=obj.buyer_ids)}
        ordered = [users[buyer_id] for buyer_id in obj.buyer_ids if buyer_id in users]
        return UserMinimalSerializer(ordered, many=True).data
    
    def get_participant_count(self, obj):
        return obj.orders.filter(status=OrderStatus.CONFIRMED).count()


class LunchSessionDetailSerializer(LunchSessionSerializer):
    """Session with its orders and the current user's role in it."""
    
    orders = LunchOrderSerializer(many=True, read_only=True)
    has_joined = serializers.SerializerMethodField()
    is_buyer = serializers.SerializerMethodField()
    
    class Meta(LunchSessionSerializer.Meta):
        fields = LunchSessionSerializer.Meta.fields + ['orders', 'has_joined', 'is_buyer']
        read_only_fields = fields
    
    def _current_user(self):
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return request.user
        return None
    
    def get_has_joined(self, obj):
        user = self._current_user()
        return bool(user) and obj.orders.filter(user=user).exists()
    
    def get_is_buyer(self, obj):
        user = self._current_user()
        return bool(user) and obj.is_buyer(user.id)


class SessionTargetSerializer(serializers.Serializer):
    """Optional explicit session for buyer actions (defaults to today)."""
    
    session_id = serializers.UUIDField(required=False)


class SubmitPaymentSerializer(SessionTargetSerializer):
    """Bill reported by the paying buyer."""
    
    total_bill = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
    receipt_ref = serializers.CharField(max_length=500, required=False, allow_blank=True)


class SettlementSummarySerializer(serializers.Serializer):
    session_id = serializers.UUIDField()
    participants = serializers.IntegerField()
    amount_per_person = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_bill = serializers.DecimalField(max_digits=14, decimal_places=2)
    payer_id = serializers.UUIDField()
    reimbursement_id = serializers.UUIDField()


class LunchHistorySerializer(serializers.ModelSerializer):
    """A past session from one participant's point of view."""
    
    payer = UserMinimalSerializer(read_only=True)
    my_charge = serializers.SerializerMethodField()
    was_buyer = serializers.SerializerMethodField()
    
    class Meta:
        model = LunchSession
        fields = [
            'id',
            'session_date',
            'status',
            'total_participants',
            'total_bill',
            'amount_per_person',
            'payer',
            'my_charge',
            'was_buyer',
            'settled_at',
        ]
        read_only_fields = fields
    
    def get_my_charge(self, obj):
        user = self.context['request'].user
        entry = obj.transactions.filter(user=user).first()
        return str(-entry.amount) if entry else None
    
    def get_was_buyer(self, obj):
        return obj.is_buyer(self.context['request'].user.id)
