from django.db import models
import uuid

# Stored as target_id of complaints that are not about a single record.
GENERAL_TARGET_ID = uuid.UUID(int=0)


class ComplaintTargetType(models.TextChoices):
    FIELD = 'field', 'Field'
    ORDER = 'order', 'Order'
    USER = 'user', 'User'
    PAYMENT = 'payment', 'Payment'
    DELIVERY = 'delivery', 'Delivery'
    SERVICE = 'service', 'Service'
    QUALITY = 'quality', 'Quality'
    REFUND = 'refund', 'Refund'


# Target types whose target_id must point at an existing record.
RECORD_TARGET_TYPES = (
    ComplaintTargetType.FIELD,
    ComplaintTargetType.ORDER,
    ComplaintTargetType.USER,
)


class ComplaintStatus(models.TextChoices):
    OPEN = 'open', 'Open'
    IN_REVIEW = 'in_review', 'In review'
    RESOLVED = 'resolved', 'Resolved'


class Complaint(models.Model):
    """
    A user's complaint about a field, order, user or the platform.

    ``refunded_at`` is set once when an admin credits coins to the author;
    a complaint can be refunded only once.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='complaints'
    )
    target_type = models.CharField(max_length=20, choices=ComplaintTargetType.choices)
    target_id = models.UUIDField(default=GENERAL_TARGET_ID)
    category = models.CharField(max_length=50, blank=True)
    description = models.TextField()
    status = models.CharField(
        max_length=20,
        choices=ComplaintStatus.choices,
        default=ComplaintStatus.OPEN
    )
    admin_remarks = models.TextField(blank=True)
    refund_coins = models.PositiveIntegerField(null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)
    complained_against_user = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='complaints_against'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'complaints'
        indexes = [
            models.Index(fields=['created_by', '-created_at'], name='complaints_author_idx'),
            models.Index(fields=['status', '-updated_at'], name='complaints_status_idx'),
            models.Index(fields=['complained_against_user'], name='complaints_against_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"Complaint {self.id} ({self.target_type}, {self.status})"


class ComplaintProof(models.Model):
    """A file attached to a complaint as evidence."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name='proofs'
    )
    file_name = models.CharField(max_length=255, default='file')
    file_url = models.TextField()
    file_type = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'complaint_proofs'
        ordering = ['created_at']

    def __str__(self):
        return self.file_name


class ComplaintRemark(models.Model):
    """A message in a complaint's thread between its author and admins."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name='remarks'
    )
    author = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='complaint_remarks'
    )
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'complaint_remarks'
        ordering = ['created_at']

    def __str__(self):
        return f"Remark by {self.author_id} on {self.complaint_id}"
