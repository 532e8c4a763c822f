from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
import uuid

from apps.coupons.conf import coupon_setting


def default_location_radius():
    return coupon_setting('DEFAULT_LOCATION_RADIUS_METERS')


class Supplier(models.Model):
    """Merchant terminal allowed to charge meal coupons."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='supplier_profile'
    )

    business_name = models.CharField(max_length=200)
    business_license = models.CharField(max_length=100, blank=True)
    address = models.CharField(max_length=300)

    # Location used to check that the employee is on site
    latitude = models.FloatField(
        validators=[MinValueValidator(-90.0), MaxValueValidator(90.0)]
    )
    longitude = models.FloatField(
        validators=[MinValueValidator(-180.0), MaxValueValidator(180.0)]
    )
    location_radius = models.PositiveIntegerField(
        default=default_location_radius,
        help_text='Allowed distance from the supplier in meters.'
    )

    # Admin-controlled flags
    is_active = models.BooleanField(default=True)
    is_verified = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'suppliers'
        indexes = [
            models.Index(fields=['is_active', 'is_verified'], name='suppliers_eligibility_idx'),
        ]
        ordering = ['business_name']

    def __str__(self):
        return self.business_name

    @property
    def can_charge(self):
        """Whether the supplier may initiate coupon transactions."""
        return self.is_active and self.is_verified
