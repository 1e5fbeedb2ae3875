from rest_framework import serializers
from .models import ReimbursementRequest, UserResponse
from apps.accounts.serializers import UserMinimalSerializer


class ReimbursementSerializer(serializers.ModelSerializer):
    """Reimbursement request with its settler and handling admin."""
    
    settler = UserMinimalSerializer(read_only=True)
    admin = UserMinimalSerializer(read_only=True)
    context_label = serializers.CharField(read_only=True)
    
    class Meta:
        model = ReimbursementRequest
        fields = [
            'id',
            'type',
            'session',
            'snack_menu',
            'context_label',
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
        read_only_fields = fields


class TransferSerializer(serializers.Serializer):
    note = serializers.CharField(required=False, allow_blank=True)


class ConfirmSerializer(serializers.Serializer):
    response = serializers.ChoiceField(choices=UserResponse.choices)
