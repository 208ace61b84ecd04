from django.contrib import admin
from .models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'buyer', 'field', 'quantity', 'total_price', 'coins_paid', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['buyer__email', 'field__name']
    raw_id_fields = ['buyer', 'field']
    readonly_fields = ['coins_paid', 'created_at', 'updated_at']
