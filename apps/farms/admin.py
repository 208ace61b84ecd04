from django.contrib import admin
from .models import Farm, Field


class FieldInline(admin.TabularInline):
    model = Field
    extra = 0
    fields = ['name', 'category', 'price', 'available', 'available_for_rent']
    show_change_link = True


@admin.register(Farm)
class FarmAdmin(admin.ModelAdmin):
    list_display = ['farm_name', 'owner', 'location', 'status', 'crop_type', 'created_at']
    list_filter = ['status', 'crop_type']
    search_fields = ['farm_name', 'location', 'owner__email']
    raw_id_fields = ['owner']
    inlines = [FieldInline]


@admin.register(Field)
class FieldAdmin(admin.ModelAdmin):
    list_display = [
        'name',
        'owner',
        'farm',
        'category',
        'price',
        'available',
        'available_for_rent',
        'rent_terms_complete',
    ]
    list_filter = ['available', 'available_for_buy', 'available_for_rent', 'category']
    search_fields = ['name', 'location', 'owner__email']
    raw_id_fields = ['owner', 'farm']
    readonly_fields = ['rating', 'reviews', 'created_at', 'updated_at']

    fieldsets = (
        ('Listing', {
            'fields': ('owner', 'farm', 'name', 'description', 'category', 'subcategory', 'image')
        }),
        ('Location', {
            'fields': ('location', 'coordinates', 'weather', 'has_webcam')
        }),
        ('Size', {
            'fields': ('field_size', 'field_size_unit', 'area_m2', 'available_area', 'total_area')
        }),
        ('Selling', {
            'fields': (
                'price', 'price_per_m2', 'unit', 'quantity', 'available', 'available_for_buy',
                'production_rate', 'production_rate_unit', 'harvest_dates',
                'shipping_option', 'shipping_scope', 'delivery_charges',
            )
        }),
        ('Renting', {
            'fields': (
                'available_for_rent', 'rent_price_per_month',
                'rent_duration_monthly', 'rent_duration_quarterly', 'rent_duration_yearly',
            )
        }),
        ('Reputation', {
            'fields': ('rating', 'reviews', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.display(boolean=True, description='Rent terms')
    def rent_terms_complete(self, obj):
        if not obj.available_for_rent:
            return None
        return obj.rent_price_per_month is not None and obj.has_rent_duration
