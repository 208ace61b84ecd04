from decimal import Decimal

from rest_framework import serializers

from .models import CurrencyRate, CoinPackage, CoinTransaction, TransactionType


class CurrencyRateSerializer(serializers.ModelSerializer):
    class Meta:
        model = CurrencyRate
        fields = [
            'currency',
            'coins_per_unit',
            'display_name',
            'symbol',
            'is_active',
            'updated_at',
        ]
        read_only_fields = fields


class CurrencyRateWriteSerializer(serializers.Serializer):
    """Payload for creating or updating a currency rate."""

    currency = serializers.CharField(max_length=10)
    coins_per_unit = serializers.DecimalField(max_digits=12, decimal_places=4)
    display_name = serializers.CharField(max_length=100)
    symbol = serializers.CharField(max_length=10)
    is_active = serializers.BooleanField(default=True)


class CoinPackageSerializer(serializers.ModelSerializer):
    """Package with its derived prices."""

    currency = serializers.CharField(source='currency_id', read_only=True)
    currency_symbol = serializers.CharField(source='currency.symbol', read_only=True)
    discounted_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    price_per_coin = serializers.DecimalField(max_digits=12, decimal_places=4, read_only=True)
    discounted_price_per_coin = serializers.DecimalField(max_digits=12, decimal_places=4, read_only=True)

    class Meta:
        model = CoinPackage
        fields = [
            'id',
            'name',
            'description',
            'coins',
            'price',
            'currency',
            'currency_symbol',
            'discount_percent',
            'discounted_price',
            'price_per_coin',
            'discounted_price_per_coin',
            'display_order',
            'is_active',
            'is_featured',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class CoinPackageWriteSerializer(serializers.Serializer):
    """Payload for creating (all required fields) or updating (partial) a package."""

    name = serializers.CharField(max_length=100)
    coins = serializers.IntegerField(min_value=1)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    currency = serializers.CharField(max_length=3)
    description = serializers.CharField(required=False, allow_blank=True)
    discount_percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, required=False,
        min_value=Decimal('0'), max_value=Decimal('100')
    )
    display_order = serializers.IntegerField(required=False)
    is_active = serializers.BooleanField(required=False)
    is_featured = serializers.BooleanField(required=False)


class CoinTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = CoinTransaction
        fields = [
            'id',
            'type',
            'amount',
            'balance_after',
            'reason',
            'ref_type',
            'ref_id',
            'status',
            'created_at',
        ]
        read_only_fields = fields


class TransactionFilterSerializer(serializers.Serializer):
    user_id = serializers.UUIDField(required=False)
    type = serializers.ChoiceField(choices=TransactionType.choices, required=False)


class BalanceSerializer(serializers.Serializer):
    user_id = serializers.UUIDField(source='id')
    coins = serializers.IntegerField()
    locked_coins = serializers.IntegerField()


class SetBalanceSerializer(serializers.Serializer):
    coins = serializers.IntegerField(min_value=0)


class CoinAmountSerializer(serializers.Serializer):
    amount = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True)


class PurchaseIntentSerializer(serializers.Serializer):
    package_id = serializers.UUIDField()
    success_url = serializers.URLField(required=False)
    cancel_url = serializers.URLField(required=False)
