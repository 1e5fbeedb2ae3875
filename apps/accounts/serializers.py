from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Current user's profile, including fund balance and rotation stats."""
    
    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'phone',
            'balance',
            'rotation_index',
            'last_bought_date',
            'total_bought_times',
            'notifications_enabled',
            'device_token',
            'is_staff',
            'created_at',
            'last_login',
        ]
        read_only_fields = [
            'id',
            'email',
            'balance',
            'rotation_index',
            'last_bought_date',
            'total_bought_times',
            'is_staff',
            'created_at',
            'last_login',
        ]
        extra_kwargs = {'device_token': {'write_only': True}}


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""
    
    display_name = serializers.SerializerMethodField()
    
    class Meta:
        model = User
        fields = ['id', 'email', 'display_name']
        read_only_fields = fields
    
    def get_display_name(self, obj):
        return obj.get_display_name()


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""
    
    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class TokenPairSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class LoginResponseSerializer(serializers.Serializer):
    """Profile plus a fresh JWT pair."""

    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokenPairSerializer()
