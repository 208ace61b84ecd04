from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, UserType


class UserSerializer(serializers.ModelSerializer):
    """User profile including wallet balances."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'user_type',
            'coins',
            'locked_coins',
            'preferred_currency',
            'stripe_connect_account_id',
            'created_at',
            'last_login',
        ]
        read_only_fields = [
            'id', 'email', 'user_type', 'coins', 'locked_coins',
            'stripe_connect_account_id', 'created_at', 'last_login',
        ]

    def validate_preferred_currency(self, value):
        return value.upper()


class UserRegistrationSerializer(serializers.Serializer):
    """Serializer for user registration."""

    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        style={'input_type': 'password'}
    )
    name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    user_type = serializers.ChoiceField(
        choices=[UserType.FARMER, UserType.BUYER],
        default=UserType.BUYER
    )
    preferred_currency = serializers.CharField(max_length=3, required=False, default='USD')

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class UserPublicSerializer(serializers.ModelSerializer):
    """Public user info (for order counterparts, complaints, etc.)."""

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'user_type']
        read_only_fields = fields
