from decimal import Decimal

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
import uuid


# =============================================================================
# FARMS
# =============================================================================

class Farm(models.Model):
    """A farm owned by a farmer. Fields may be grouped under a farm."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='farms'
    )
    farm_name = models.CharField(max_length=200)
    location = models.CharField(max_length=255, blank=True)
    farm_icon = models.CharField(max_length=100, blank=True)
    coordinates = models.JSONField(null=True, blank=True)
    webcam_url = models.CharField(max_length=500, blank=True)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=30, default='Active')

    # Agronomy
    crop_type = models.CharField(max_length=100, blank=True)
    irrigation_type = models.CharField(max_length=100, blank=True)
    soil_type = models.CharField(max_length=100, blank=True)
    area = models.CharField(max_length=100, blank=True)
    area_value = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    area_unit = models.CharField(max_length=20, default='acres')
    planting_date = models.DateField(null=True, blank=True)
    harvest_date = models.DateField(null=True, blank=True)

    # Dashboard figures
    monthly_revenue = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    progress = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(100)]
    )
    image = models.CharField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'farms'
        indexes = [
            models.Index(fields=['owner'], name='farms_owner_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.farm_name


# =============================================================================
# FIELDS
# =============================================================================

class Field(models.Model):
    """
    A plot of land listed on the marketplace.

    A field can be sold by area/quantity (``available_for_buy``) and/or rented
    out to other farmers (``available_for_rent``). Rentable fields always carry
    a monthly price and at least one allowed rent duration.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='fields'
    )
    farm = models.ForeignKey(
        Farm,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='fields'
    )

    # Listing
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    coordinates = models.JSONField(null=True, blank=True)
    location = models.CharField(max_length=255, blank=True)
    image = models.CharField(max_length=500, blank=True)
    category = models.CharField(max_length=100, blank=True)
    subcategory = models.CharField(max_length=100, blank=True)
    farmer_name = models.CharField(max_length=150, blank=True)
    weather = models.CharField(max_length=100, blank=True)
    has_webcam = models.BooleanField(default=False)
    is_own_field = models.BooleanField(default=True)

    # Size
    field_size = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    field_size_unit = models.CharField(max_length=20, blank=True)
    area_m2 = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    available_area = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    total_area = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)

    # Selling
    price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    price_per_m2 = models.DecimalField(max_digits=12, decimal_places=4, null=True, blank=True)
    unit = models.CharField(max_length=20, blank=True)
    quantity = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    available = models.BooleanField(default=True)
    available_for_buy = models.BooleanField(default=True)
    production_rate = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    production_rate_unit = models.CharField(max_length=30, blank=True)
    harvest_dates = models.JSONField(default=list, blank=True)
    shipping_option = models.CharField(max_length=50, blank=True)
    shipping_scope = models.CharField(max_length=50, blank=True)
    delivery_charges = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    # Renting
    available_for_rent = models.BooleanField(default=False)
    rent_price_per_month = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))]
    )
    rent_duration_monthly = models.BooleanField(default=False)
    rent_duration_quarterly = models.BooleanField(default=False)
    rent_duration_yearly = models.BooleanField(default=False)

    # Reputation
    rating = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('5'))]
    )
    reviews = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fields'
        indexes = [
            models.Index(fields=['owner'], name='fields_owner_idx'),
            models.Index(fields=['available_for_rent', 'available'], name='fields_rentable_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def has_rent_duration(self):
        return self.rent_duration_monthly or self.rent_duration_quarterly or self.rent_duration_yearly
