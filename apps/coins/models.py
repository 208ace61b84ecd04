from decimal import Decimal, ROUND_HALF_UP

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
import uuid


# =============================================================================
# CURRENCIES & PACKAGES
# =============================================================================

class CurrencyRate(models.Model):
    """How many coins one unit of a fiat currency is worth."""

    currency = models.CharField(max_length=3, primary_key=True)
    coins_per_unit = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        validators=[MinValueValidator(Decimal('0.0001'))]
    )
    display_name = models.CharField(max_length=100)
    symbol = models.CharField(max_length=10)
    is_active = models.BooleanField(default=True)

    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    updated_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'currency_rates'
        ordering = ['currency']

    def __str__(self):
        return f"{self.currency} ({self.coins_per_unit} coins/unit)"


class CoinPackage(models.Model):
    """A purchasable bundle of coins priced in one currency."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    coins = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    currency = models.ForeignKey(
        CurrencyRate,
        on_delete=models.PROTECT,
        db_column='currency',
        related_name='packages'
    )
    discount_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    display_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    is_featured = models.BooleanField(default=False)

    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    updated_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'coin_packages'
        indexes = [
            models.Index(fields=['is_active', 'display_order'], name='coinpkg_active_order_idx'),
        ]
        ordering = ['display_order', 'coins']

    def __str__(self):
        return f"{self.name} - {self.coins} coins ({self.price} {self.currency_id})"

    @property
    def discounted_price(self) -> Decimal:
        factor = (Decimal('100') - self.discount_percent) / Decimal('100')
        return (self.price * factor).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    @property
    def price_per_coin(self) -> Decimal:
        return (self.price / self.coins).quantize(Decimal('0.0001'), rounding=ROUND_HALF_UP)

    @property
    def discounted_price_per_coin(self) -> Decimal:
        return (self.discounted_price / self.coins).quantize(Decimal('0.0001'), rounding=ROUND_HALF_UP)

    @property
    def amount_cents(self) -> int:
        """Discounted price in minor units, as charged at checkout."""
        return int((self.discounted_price * 100).to_integral_value(rounding=ROUND_HALF_UP))


# =============================================================================
# LEDGER
# =============================================================================

class TransactionType(models.TextChoices):
    CREDIT = 'credit', 'Credit'
    DEBIT = 'debit', 'Debit'
    REDEEM_REQUEST = 'redeem_request', 'Redemption requested'
    REDEEM_APPROVED = 'redeem_approved', 'Redemption approved'
    REDEEM_REJECTED = 'redeem_rejected', 'Redemption rejected'
    ADJUSTMENT = 'adjustment', 'Admin adjustment'


class TransactionStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'
    FAILED = 'failed', 'Failed'


class RefType(models.TextChoices):
    ORDER = 'order', 'Order'
    REFUND = 'refund', 'Refund'
    COIN_PURCHASE = 'coin_purchase', 'Coin purchase'
    REDEMPTION_REQUEST = 'redemption_request', 'Redemption request'
    COMPLAINT = 'complaint', 'Complaint'
    ADMIN = 'admin', 'Admin'


class CoinTransaction(models.Model):
    """
    Append-only ledger of every balance change.

    ``balance_after`` is the user's spendable balance once the entry was
    applied, except for ``redeem_approved`` entries which record the
    remaining locked balance.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='coin_transactions'
    )
    type = models.CharField(max_length=20, choices=TransactionType.choices)
    amount = models.BigIntegerField(validators=[MinValueValidator(0)])
    balance_after = models.BigIntegerField()
    reason = models.CharField(max_length=255, blank=True)
    ref_type = models.CharField(max_length=30, choices=RefType.choices, blank=True, null=True)
    ref_id = models.UUIDField(blank=True, null=True)
    status = models.CharField(
        max_length=20,
        choices=TransactionStatus.choices,
        default=TransactionStatus.COMPLETED
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'coin_transactions'
        indexes = [
            models.Index(fields=['user', 'created_at'], name='cointx_user_created_idx'),
            models.Index(fields=['ref_type', 'ref_id'], name='cointx_ref_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.type} {self.amount} for {self.user_id}"


# =============================================================================
# PURCHASES
# =============================================================================

class PurchaseStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'
    FAILED = 'failed', 'Failed'


class CoinPurchase(models.Model):
    """A Stripe Checkout session for buying a coin package."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='coin_purchases'
    )
    package = models.ForeignKey(
        CoinPackage,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='purchases'
    )
    amount_cents = models.PositiveIntegerField()
    currency = models.CharField(max_length=3)
    coins_granted = models.PositiveIntegerField()
    stripe_session_id = models.CharField(max_length=255, unique=True)
    status = models.CharField(
        max_length=20,
        choices=PurchaseStatus.choices,
        default=PurchaseStatus.PENDING
    )
    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'coin_purchases'
        indexes = [
            models.Index(fields=['user', 'status'], name='coinpurchase_user_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.coins_granted} coins for {self.user_id} ({self.status})"
