from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
import uuid


class TransactionStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'
    REJECTED = 'rejected', 'Rejected'


# Allowed status changes; completed and rejected are terminal.
TRANSACTION_STATUS_TRANSITIONS = {
    TransactionStatus.PENDING: {TransactionStatus.COMPLETED, TransactionStatus.REJECTED},
    TransactionStatus.COMPLETED: set(),
    TransactionStatus.REJECTED: set(),
}


def can_transition(current, target):
    """Whether a transaction may move from ``current`` to ``target``."""
    return target in TRANSACTION_STATUS_TRANSITIONS[TransactionStatus(current)]


def statuses_leading_to(target):
    """Statuses the transition table allows to move into ``target``."""
    return [
        status for status, targets in TRANSACTION_STATUS_TRANSITIONS.items()
        if target in targets
    ]


class QRCode(models.Model):
    """
    Single-use redemption token handed by an employee to a supplier.

    A code is valid until ``expires_at``. Once ``is_used`` is set (by an
    approved transaction) the code is terminal and never accepted again.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Opaque token embedded in the QR image
    code = models.CharField(max_length=64, unique=True, editable=False)

    employee = models.ForeignKey(
        'employees.Employee',
        on_delete=models.CASCADE,
        related_name='qr_codes'
    )

    expires_at = models.DateTimeField()
    is_used = models.BooleanField(default=False)
    used_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'qr_codes'
        verbose_name = 'QR code'
        indexes = [
            models.Index(fields=['employee', 'created_at'], name='qr_codes_employee_idx'),
            models.Index(fields=['expires_at'], name='qr_codes_expires_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        state = 'used' if self.is_used else 'unused'
        return f"QR {self.code[:8]} ({state})"

    def is_expired(self, now=None):
        return (now or timezone.now()) > self.expires_at

    def save(self, *args, **kwargs):
        """Generate the token if not set."""
        if not self.code:
            self.code = str(uuid.uuid4())
        super().save(*args, **kwargs)


class CouponTransaction(models.Model):
    """
    Coupon charge requested by a supplier and confirmed by the employee.

    Created as ``pending`` by the supplier; the employee moves it to
    ``completed`` (coupons debited, QR code consumed) or ``rejected``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    employee = models.ForeignKey(
        'employees.Employee',
        on_delete=models.PROTECT,
        related_name='coupon_transactions'
    )
    supplier = models.ForeignKey(
        'suppliers.Supplier',
        on_delete=models.PROTECT,
        related_name='coupon_transactions'
    )
    qr_code = models.ForeignKey(
        QRCode,
        on_delete=models.PROTECT,
        related_name='transactions'
    )

    coupons_used = models.PositiveSmallIntegerField()
    total_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    status = models.CharField(
        max_length=20,
        choices=TransactionStatus.choices,
        default=TransactionStatus.PENDING
    )

    # Employee position when the supplier scanned the code (null if not sent)
    employee_latitude = models.FloatField(null=True, blank=True)
    employee_longitude = models.FloatField(null=True, blank=True)

    notes = models.TextField(blank=True)
    rejection_reason = models.CharField(max_length=500, blank=True)

    processed_at = models.DateTimeField(default=timezone.now)
    resolved_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'coupon_transactions'
        indexes = [
            models.Index(fields=['employee', 'status'], name='coupon_txn_employee_idx'),
            models.Index(fields=['supplier', 'created_at'], name='coupon_txn_supplier_idx'),
        ]
        constraints = [
            # One QR code pays for at most one transaction
            models.UniqueConstraint(
                fields=['qr_code'],
                condition=models.Q(status='completed'),
                name='unique_completed_transaction_per_qr_code',
            ),
            models.UniqueConstraint(
                fields=['qr_code'],
                condition=models.Q(status='pending'),
                name='unique_pending_transaction_per_qr_code',
            ),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.coupons_used} coupon(s) at {self.supplier_id} ({self.status})"
