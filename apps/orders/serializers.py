from decimal import Decimal

from rest_framework import serializers

from .models import Order, OrderStatus


class OrderSerializer(serializers.ModelSerializer):
    buyer_id = serializers.UUIDField(read_only=True)
    field_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id',
            'buyer_id',
            'field_id',
            'quantity',
            'total_price',
            'coins_paid',
            'status',
            'selected_harvest_date',
            'selected_harvest_label',
            'mode_of_shipping',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    """Input for placing an order. The buyer is always the requester."""
    field_id = serializers.UUIDField()
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    selected_harvest_date = serializers.DateField(required=False, allow_null=True)
    selected_harvest_label = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    mode_of_shipping = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')


class OrderUpdateSerializer(serializers.ModelSerializer):
    """
    Delivery details may be edited directly. A status in the body is routed
    through the status workflow so coins move with it.
    """
    status = serializers.ChoiceField(
        choices=OrderStatus.choices,
        required=False,
        error_messages={'invalid_choice': 'Invalid status. Allowed: pending, active, completed, cancelled'}
    )

    class Meta:
        model = Order
        fields = [
            'status',
            'selected_harvest_date',
            'selected_harvest_label',
            'mode_of_shipping',
        ]


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.CharField()


class OrderFilterSerializer(serializers.Serializer):
    buyer_id = serializers.UUIDField(required=False)
    farmer_id = serializers.UUIDField(required=False)


class FieldOrderSerializer(serializers.ModelSerializer):
    """Order joined with its field, as shown on the order dashboards."""
    field_id = serializers.UUIDField(read_only=True)
    field_name = serializers.CharField(source='field.name', read_only=True)
    location = serializers.CharField(source='field.location', read_only=True)
    crop_type = serializers.CharField(source='field.category', read_only=True)
    available_area = serializers.DecimalField(
        source='field.available_area', max_digits=14, decimal_places=2, read_only=True
    )
    total_area = serializers.DecimalField(
        source='field.total_area', max_digits=14, decimal_places=2, read_only=True
    )
    price_per_m2 = serializers.DecimalField(
        source='field.price_per_m2', max_digits=12, decimal_places=4, read_only=True
    )
    image_url = serializers.CharField(source='field.image', read_only=True)
    farmer_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id',
            'quantity',
            'total_price',
            'coins_paid',
            'status',
            'created_at',
            'selected_harvest_date',
            'selected_harvest_label',
            'mode_of_shipping',
            'field_id',
            'field_name',
            'location',
            'crop_type',
            'available_area',
            'total_area',
            'price_per_m2',
            'image_url',
            'farmer_id',
        ]
        read_only_fields = fields


class BuyerOrderSerializer(FieldOrderSerializer):
    """Buyer's view: the counterpart is the farmer."""
    farmer_name = serializers.CharField(source='field.owner.name', read_only=True)
    farmer_email = serializers.EmailField(source='field.owner.email', read_only=True)

    class Meta(FieldOrderSerializer.Meta):
        fields = FieldOrderSerializer.Meta.fields + ['farmer_name', 'farmer_email']
        read_only_fields = fields


class FarmerOrderSerializer(FieldOrderSerializer):
    """Farmer's view: the counterpart is the buyer."""
    buyer_name = serializers.CharField(source='buyer.name', read_only=True)
    buyer_email = serializers.EmailField(source='buyer.email', read_only=True)

    class Meta(FieldOrderSerializer.Meta):
        fields = FieldOrderSerializer.Meta.fields + ['buyer_name', 'buyer_email']
        read_only_fields = fields
