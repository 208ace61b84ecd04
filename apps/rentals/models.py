from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
import uuid


class RentalStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    ENDED = 'ended', 'Ended'
    CANCELLED = 'cancelled', 'Cancelled'


class RentedFieldQuerySet(models.QuerySet):

    def active_on(self, day):
        """Active rentals that have not ended before ``day``."""
        return self.filter(status=RentalStatus.ACTIVE).filter(
            models.Q(end_date__isnull=True) | models.Q(end_date__gte=day)
        )


class RentedField(models.Model):
    """A farmer renting (part of) another owner's field."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    renter = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='rentals'
    )
    field = models.ForeignKey(
        'farms.Field',
        on_delete=models.CASCADE,
        related_name='rentals'
    )
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))]
    )
    area_rented = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=RentalStatus.choices,
        default=RentalStatus.ACTIVE
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = RentedFieldQuerySet.as_manager()

    class Meta:
        db_table = 'rented_fields'
        indexes = [
            models.Index(fields=['renter', '-start_date'], name='rentals_renter_idx'),
            models.Index(fields=['field', 'status'], name='rentals_field_status_idx'),
        ]
        ordering = ['-start_date', '-created_at']

    def __str__(self):
        return f"{self.renter} rents {self.field}"
