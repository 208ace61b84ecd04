from rest_framework import serializers

from apps.accounts.serializers import UserPublicSerializer
from .models import Farm, Field

RENT_TERMS_ERROR = (
    'When "available for rent" is enabled, rent price per month and at least one '
    'rent duration (monthly, quarterly, yearly) are required'
)

RENT_FIELDS = (
    'available_for_rent',
    'rent_price_per_month',
    'rent_duration_monthly',
    'rent_duration_quarterly',
    'rent_duration_yearly',
)


class AliasedFieldsMixin:
    """
    Accept the frontend's camelCase keys as aliases of model fields.

    ``field_aliases`` maps an incoming key to the serializer field name. The
    snake_case key wins when both are sent.
    """
    field_aliases = {}

    def to_internal_value(self, data):
        data = data.dict() if hasattr(data, 'dict') else dict(data)
        for alias, target in self.field_aliases.items():
            if alias not in data:
                continue
            value = data.pop(alias)
            data.setdefault(target, value)
        return super().to_internal_value(data)


class FarmSerializer(AliasedFieldsMixin, serializers.ModelSerializer):
    owner = UserPublicSerializer(read_only=True)
    owner_id = serializers.UUIDField(read_only=True)
    field_count = serializers.SerializerMethodField()

    field_aliases = {
        'farmName': 'farm_name',
        'name': 'farm_name',
        'farmIcon': 'farm_icon',
        'webcamUrl': 'webcam_url',
        'cropType': 'crop_type',
        'irrigationType': 'irrigation_type',
        'soilType': 'soil_type',
        'monthlyRevenue': 'monthly_revenue',
        'plantingDate': 'planting_date',
        'harvestDate': 'harvest_date',
        'areaValue': 'area_value',
        'areaUnit': 'area_unit',
    }

    class Meta:
        model = Farm
        fields = [
            'id',
            'owner',
            'owner_id',
            'farm_name',
            'location',
            'farm_icon',
            'coordinates',
            'webcam_url',
            'description',
            'status',
            'crop_type',
            'irrigation_type',
            'soil_type',
            'area',
            'area_value',
            'area_unit',
            'planting_date',
            'harvest_date',
            'monthly_revenue',
            'progress',
            'image',
            'field_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'owner', 'owner_id', 'created_at', 'updated_at']

    def get_field_count(self, obj):
        return obj.fields.count()


class FieldSerializer(AliasedFieldsMixin, serializers.ModelSerializer):
    owner_id = serializers.UUIDField(read_only=True)
    farm_id = serializers.PrimaryKeyRelatedField(
        source='farm',
        queryset=Farm.objects.all(),
        required=False,
        allow_null=True
    )

    field_aliases = {
        'productName': 'name',
        'farmId': 'farm_id',
        'fieldSize': 'field_size',
        'fieldSizeUnit': 'field_size_unit',
        'productionRate': 'production_rate',
        'productionRateUnit': 'production_rate_unit',
        'sellingAmount': 'quantity',
        'sellingPrice': 'price',
        'deliveryCharges': 'delivery_charges',
        'hasWebcam': 'has_webcam',
        'shippingOption': 'shipping_option',
        'shippingScope': 'shipping_scope',
        'harvestDates': 'harvest_dates',
    }

    class Meta:
        model = Field
        fields = [
            'id',
            'owner_id',
            'farm_id',
            'name',
            'description',
            'coordinates',
            'location',
            'image',
            'category',
            'subcategory',
            'farmer_name',
            'weather',
            'has_webcam',
            'is_own_field',
            'field_size',
            'field_size_unit',
            'area_m2',
            'available_area',
            'total_area',
            'price',
            'price_per_m2',
            'unit',
            'quantity',
            'available',
            'available_for_buy',
            'production_rate',
            'production_rate_unit',
            'harvest_dates',
            'shipping_option',
            'shipping_scope',
            'delivery_charges',
            'available_for_rent',
            'rent_price_per_month',
            'rent_duration_monthly',
            'rent_duration_quarterly',
            'rent_duration_yearly',
            'rating',
            'reviews',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'owner_id', 'rating', 'reviews', 'created_at', 'updated_at']

    def validate(self, attrs):
        """Rentable fields need a monthly price and at least one duration.

        Checked against the stored row merged with the incoming values, so a
        partial update cannot leave a rentable field without terms.
        """
        merged = {}
        if self.instance is not None:
            merged = {name: getattr(self.instance, name) for name in RENT_FIELDS}
        merged.update({name: attrs[name] for name in RENT_FIELDS if name in attrs})

        if merged.get('available_for_rent'):
            has_price = merged.get('rent_price_per_month') is not None
            has_duration = any(
                merged.get(name) for name in
                ('rent_duration_monthly', 'rent_duration_quarterly', 'rent_duration_yearly')
            )
            if not (has_price and has_duration):
                raise serializers.ValidationError({'available_for_rent': RENT_TERMS_ERROR})
        return attrs


class FieldSummarySerializer(serializers.ModelSerializer):
    """Compact field info embedded in orders and rentals."""

    class Meta:
        model = Field
        fields = [
            'id',
            'name',
            'location',
            'category',
            'image',
            'available_area',
            'total_area',
            'price_per_m2',
            'owner_id',
        ]
        read_only_fields = fields


class OwnerFilterSerializer(serializers.Serializer):
    owner_id = serializers.UUIDField(required=False)
