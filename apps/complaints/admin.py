from django.contrib import admin
from .models import Complaint, ComplaintProof, ComplaintRemark


class ComplaintProofInline(admin.TabularInline):
    model = ComplaintProof
    extra = 0
    readonly_fields = ['created_at']


class ComplaintRemarkInline(admin.TabularInline):
    model = ComplaintRemark
    extra = 0
    raw_id_fields = ['author']
    readonly_fields = ['created_at']


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ['id', 'created_by', 'target_type', 'category', 'status', 'refund_coins', 'updated_at']
    list_filter = ['status', 'target_type', 'created_at']
    search_fields = ['created_by__email', 'description']
    raw_id_fields = ['created_by', 'complained_against_user']
    # Refunds go through the refund endpoint so the ledger stays in sync.
    readonly_fields = ['refund_coins', 'refunded_at', 'created_at', 'updated_at']
    inlines = [ComplaintProofInline, ComplaintRemarkInline]
