from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
import uuid


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACTIVE = 'active', 'Active'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class Order(models.Model):
    """
    A buyer's purchase of (part of) a field's produce.

    ``coins_paid`` is the amount debited from the buyer when the order was
    placed. Acceptance credits the farmer and cancellation refunds the buyer
    with exactly this amount.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    buyer = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='orders'
    )
    field = models.ForeignKey(
        'farms.Field',
        on_delete=models.CASCADE,
        related_name='orders'
    )
    quantity = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    total_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    coins_paid = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING
    )
    selected_harvest_date = models.DateField(null=True, blank=True)
    selected_harvest_label = models.CharField(max_length=100, blank=True)
    mode_of_shipping = models.CharField(max_length=50, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        indexes = [
            models.Index(fields=['buyer', '-created_at'], name='orders_buyer_idx'),
            models.Index(fields=['field', '-created_at'], name='orders_field_idx'),
            models.Index(fields=['status'], name='orders_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"Order {self.id} ({self.status})"

    @property
    def farmer_id(self):
        return self.field.owner_id
