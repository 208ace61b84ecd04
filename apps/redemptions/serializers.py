from rest_framework import serializers

from .models import PayoutMethod, PayoutMethodType, RedemptionRequest, RedemptionStatus


class PayoutMethodSerializer(serializers.ModelSerializer):
    method_type = serializers.ChoiceField(choices=PayoutMethodType.choices)

    class Meta:
        model = PayoutMethod
        fields = [
            'id',
            'method_type',
            'display_label',
            'stripe_account_id',
            'stripe_external_account_id',
            'is_default',
            'created_at',
        ]
        read_only_fields = ['id', 'created_at']


class RedemptionRequestSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True)
    payout_method_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = RedemptionRequest
        fields = [
            'id',
            'user_id',
            'coins_requested',
            'conversion_rate',
            'currency',
            'fiat_amount_cents',
            'platform_fee_cents',
            'payout_amount_cents',
            'payout_method_id',
            'status',
            'stripe_transfer_id',
            'admin_notes',
            'reviewed_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class RedemptionCreateSerializer(serializers.Serializer):
    coins_requested = serializers.IntegerField()
    payout_method_id = serializers.UUIDField(required=False, allow_null=True)


class AdminRedemptionSerializer(RedemptionRequestSerializer):
    """Request with the requesting user, payout method and reviewer."""
    user_name = serializers.CharField(source='user.name', read_only=True)
    user_email = serializers.EmailField(source='user.email', read_only=True)
    payout_method_label = serializers.CharField(
        source='payout_method.display_label', read_only=True, default=None
    )
    payout_method_type = serializers.CharField(
        source='payout_method.method_type', read_only=True, default=None
    )
    reviewed_by = serializers.UUIDField(source='reviewed_by_id', read_only=True)
    reviewer_name = serializers.CharField(source='reviewed_by.name', read_only=True, default=None)

    class Meta(RedemptionRequestSerializer.Meta):
        fields = RedemptionRequestSerializer.Meta.fields + [
            'user_name',
            'user_email',
            'payout_method_label',
            'payout_method_type',
            'stripe_account_id',
            'reviewed_by',
            'reviewer_name',
        ]
        read_only_fields = fields


class RedemptionActionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(
        choices=['approve', 'reject'],
        error_messages={'invalid_choice': 'Invalid action. Must be "approve" or "reject"'}
    )
    admin_notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AdminRedemptionFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=RedemptionStatus.choices, required=False)
    user_id = serializers.UUIDField(required=False)
    to = serializers.DateField(required=False)

    def get_fields(self):
        fields = super().get_fields()
        # 'from' is a keyword, so it cannot be declared as an attribute
        fields['from'] = serializers.DateField(required=False)
        return fields
