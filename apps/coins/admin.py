from django.contrib import admin
from .models import CurrencyRate, CoinPackage, CoinTransaction, CoinPurchase


@admin.register(CurrencyRate)
class CurrencyRateAdmin(admin.ModelAdmin):
    list_display = ['currency', 'display_name', 'symbol', 'coins_per_unit', 'is_active', 'updated_at']
    list_filter = ['is_active']
    search_fields = ['currency', 'display_name']


@admin.register(CoinPackage)
class CoinPackageAdmin(admin.ModelAdmin):
    list_display = [
        'name', 'coins', 'price', 'currency', 'discount_percent',
        'display_order', 'is_active', 'is_featured',
    ]
    list_filter = ['is_active', 'is_featured', 'currency']
    search_fields = ['name']
    ordering = ['display_order', 'coins']


@admin.register(CoinTransaction)
class CoinTransactionAdmin(admin.ModelAdmin):
    """Ledger entries are immutable; the admin is read-only."""

    list_display = ['created_at', 'user', 'type', 'amount', 'balance_after', 'reason', 'ref_type', 'status']
    list_filter = ['type', 'status', 'ref_type', 'created_at']
    search_fields = ['user__email', 'reason', 'ref_id']
    date_hierarchy = 'created_at'
    raw_id_fields = ['user']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(CoinPurchase)
class CoinPurchaseAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'user', 'coins_granted', 'amount_cents', 'currency', 'status', 'completed_at']
    list_filter = ['status', 'currency']
    search_fields = ['user__email', 'stripe_session_id']
    readonly_fields = ['stripe_session_id', 'created_at', 'completed_at']
    raw_id_fields = ['user', 'package']
