"""Access to the COUPONS settings block with built-in defaults."""

from decimal import Decimal

from django.conf import settings

DEFAULTS = {
    'QR_EXPIRY_MINUTES': 15,
    'COUPON_UNIT_VALUE': Decimal('45.00'),
    'MIN_COUPONS_PER_TRANSACTION': 1,
    'MAX_COUPONS_PER_TRANSACTION': 3,
    'MONTHLY_ALLOCATION': 26,
    'DEFAULT_LOCATION_RADIUS_METERS': 500,
    'STORE_TIMEOUT_SECONDS': 100,
}


def coupon_setting(name):
    """Return a COUPONS setting, falling back to the default value."""
    overrides = getattr(settings, 'COUPONS', {})
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
