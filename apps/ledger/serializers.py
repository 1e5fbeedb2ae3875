from decimal import Decimal
from rest_framework import serializers
from .models import Transaction
from apps.accounts.serializers import UserMinimalSerializer


class TransactionSerializer(serializers.ModelSerializer):
    """Ledger entry as shown in a user's history."""
    
    admin = UserMinimalSerializer(read_only=True)
    session_date = serializers.DateField(source='session.session_date', read_only=True, default=None)
    snack_menu_title = serializers.CharField(source='snack_menu.title', read_only=True, default=None)
    
    class Meta:
        model = Transaction
        fields = [
            'id',
            'type',
            'status',
            'amount',
            'note',
            'metadata',
            'session',
            'session_date',
            'snack_menu',
            'snack_menu_title',
            'admin',
            'processed_at',
            'created_at',
        ]
        read_only_fields = fields


class PendingDepositSerializer(TransactionSerializer):
    """Deposit awaiting approval, with the depositor."""
    
    user = UserMinimalSerializer(read_only=True)
    
    class Meta(TransactionSerializer.Meta):
        fields = ['user'] + TransactionSerializer.Meta.fields
        read_only_fields = fields


class DepositCreateSerializer(serializers.Serializer):
    """Deposit request."""
    
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    note = serializers.CharField(required=False, allow_blank=True)
    bank_reference = serializers.CharField(max_length=100, required=False, allow_blank=True)


class DepositRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True)


class AdjustmentSerializer(serializers.Serializer):
    """Manual balance correction by an administrator."""
    
    user_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    note = serializers.CharField()
    
    def validate_amount(self, value):
        if value == 0:
            raise serializers.ValidationError('Amount must not be zero')
        return value


class UserStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    total_balance = serializers.DecimalField(max_digits=16, decimal_places=2)


class SessionStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    settled = serializers.IntegerField()


class PendingDepositStatsSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=16, decimal_places=2)


class TodaySessionStatsSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    status = serializers.CharField()
    participants = serializers.IntegerField()
    total_bill = serializers.DecimalField(max_digits=14, decimal_places=2, allow_null=True)


class FundStatsSerializer(serializers.Serializer):
    """Admin dashboard snapshot."""
    
    users = UserStatsSerializer()
    sessions = SessionStatsSerializer()
    pending_deposits = PendingDepositStatsSerializer()
    today = TodaySessionStatsSerializer(allow_null=True)
