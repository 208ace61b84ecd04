from rest_framework import serializers

from apps.farms.models import Field
from .models import RentedField


class RentedFieldSerializer(serializers.ModelSerializer):
    renter_id = serializers.UUIDField(read_only=True)
    field_id = serializers.PrimaryKeyRelatedField(
        source='field',
        queryset=Field.objects.all()
    )

    class Meta:
        model = RentedField
        fields = [
            'id',
            'renter_id',
            'field_id',
            'start_date',
            'end_date',
            'price',
            'area_rented',
            'status',
            'created_at',
        ]
        read_only_fields = ['id', 'renter_id', 'created_at']

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': 'End date cannot be before start date'})
        return attrs


class RentalCreateSerializer(RentedFieldSerializer):
    """New rentals always start active and must name a rentable field."""

    class Meta(RentedFieldSerializer.Meta):
        read_only_fields = ['id', 'renter_id', 'status', 'created_at']

    def validate_field_id(self, field):
        if not field.available_for_rent:
            raise serializers.ValidationError('This field is not available for rent')
        return field


class MyRentalSerializer(RentedFieldSerializer):
    """Rental with the details of the rented field."""
    field_name = serializers.CharField(source='field.name', read_only=True)
    field_location = serializers.CharField(source='field.location', read_only=True)
    category = serializers.CharField(source='field.category', read_only=True)
    subcategory = serializers.CharField(source='field.subcategory', read_only=True)
    price_per_m2 = serializers.DecimalField(
        source='field.price_per_m2', max_digits=12, decimal_places=4, read_only=True
    )
    available_area = serializers.DecimalField(
        source='field.available_area', max_digits=14, decimal_places=2, read_only=True
    )
    total_area = serializers.DecimalField(
        source='field.total_area', max_digits=14, decimal_places=2, read_only=True
    )
    owner_name = serializers.CharField(source='field.farmer_name', read_only=True)

    class Meta(RentedFieldSerializer.Meta):
        fields = RentedFieldSerializer.Meta.fields + [
            'field_name',
            'field_location',
            'category',
            'subcategory',
            'price_per_m2',
            'available_area',
            'total_area',
            'owner_name',
        ]


class ActiveByFieldQuerySerializer(serializers.Serializer):
    field_id = serializers.UUIDField()
