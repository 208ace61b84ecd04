from django.db import models
import uuid


# =============================================================================
# PAYOUT METHODS
# =============================================================================

class PayoutMethodType(models.TextChoices):
    STRIPE_CONNECT = 'stripe_connect', 'Stripe Connect'
    BANK_ACCOUNT = 'bank_account', 'Bank account'
    PAYPAL = 'paypal', 'PayPal'


class PayoutMethod(models.Model):
    """Where a user wants redemption payouts sent."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='payout_methods'
    )
    method_type = models.CharField(max_length=20, choices=PayoutMethodType.choices)
    display_label = models.CharField(max_length=100, blank=True)
    stripe_account_id = models.CharField(max_length=255, blank=True)
    stripe_external_account_id = models.CharField(max_length=255, blank=True)
    is_default = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'user_payout_methods'
        indexes = [
            models.Index(fields=['user'], name='payout_user_idx'),
        ]
        ordering = ['-is_default', '-created_at']

    def __str__(self):
        return self.display_label or f"{self.get_method_type_display()} ({self.user_id})"


# =============================================================================
# REDEMPTION REQUESTS
# =============================================================================

class RedemptionStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    UNDER_REVIEW = 'under_review', 'Under review'
    APPROVED = 'approved', 'Approved'
    PAID = 'paid', 'Paid'
    REJECTED = 'rejected', 'Rejected'
    FAILED = 'failed', 'Failed'


OPEN_STATUSES = (RedemptionStatus.PENDING, RedemptionStatus.UNDER_REVIEW)


class RedemptionRequest(models.Model):
    """
    A request to convert coins into a fiat payout.

    While the request is open its coins sit in the user's ``locked_coins``.
    Amounts are stored in cents, fixed at request time.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='redemptions'
    )
    coins_requested = models.PositiveIntegerField()
    conversion_rate = models.DecimalField(max_digits=12, decimal_places=6)
    currency = models.CharField(max_length=3, default='USD')
    fiat_amount_cents = models.PositiveIntegerField()
    platform_fee_cents = models.PositiveIntegerField()
    payout_amount_cents = models.PositiveIntegerField()
    payout_method = models.ForeignKey(
        PayoutMethod,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='redemptions'
    )
    status = models.CharField(
        max_length=20,
        choices=RedemptionStatus.choices,
        default=RedemptionStatus.PENDING
    )
    stripe_account_id = models.CharField(max_length=255, blank=True)
    stripe_transfer_id = models.CharField(max_length=255, blank=True)
    admin_notes = models.TextField(blank=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'redemption_requests'
        indexes = [
            models.Index(fields=['user', 'status'], name='redemption_user_status_idx'),
            models.Index(fields=['status', '-created_at'], name='redemption_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"Redemption {self.id} ({self.coins_requested} coins, {self.status})"
