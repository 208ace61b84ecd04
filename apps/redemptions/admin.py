from django.contrib import admin
from .models import PayoutMethod, RedemptionRequest


@admin.register(PayoutMethod)
class PayoutMethodAdmin(admin.ModelAdmin):
    list_display = ['user', 'method_type', 'display_label', 'is_default', 'created_at']
    list_filter = ['method_type', 'is_default']
    search_fields = ['user__email', 'display_label', 'stripe_account_id']
    raw_id_fields = ['user']


@admin.register(RedemptionRequest)
class RedemptionRequestAdmin(admin.ModelAdmin):
    """
    Redemptions are reviewed through the API so coins and the ledger move
    together; here requests can only be marked as under review.
    """
    list_display = ['id', 'user', 'coins_requested', 'payout_dollars', 'status', 'created_at', 'reviewed_by']
    list_filter = ['status', 'created_at']
    search_fields = ['user__email', 'stripe_transfer_id']
    raw_id_fields = ['user', 'payout_method', 'reviewed_by']
    readonly_fields = [
        'user', 'coins_requested', 'conversion_rate', 'currency', 'fiat_amount_cents',
        'platform_fee_cents', 'payout_amount_cents', 'payout_method', 'stripe_account_id',
        'stripe_transfer_id', 'status', 'reviewed_at', 'reviewed_by', 'created_at', 'updated_at',
    ]
    actions = ['mark_under_review']

    @admin.display(description='Payout')
    def payout_dollars(self, obj):
        return f"${obj.payout_amount_cents / 100:.2f}"

    @admin.action(description='Mark selected pending requests as under review')
    def mark_under_review(self, request, queryset):
        updated = queryset.filter(status='pending').update(status='under_review')
        self.message_user(request, f"{updated} request(s) marked as under review.")

    def has_add_permission(self, request):
        return False
