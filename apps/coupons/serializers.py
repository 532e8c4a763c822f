from rest_framework import serializers

from .models import CouponTransaction
from apps.employees.models import Employee
from apps.suppliers.models import Supplier


# =============================================================================
# Input Serializers
# =============================================================================

class ValidateQRCodeSerializer(serializers.Serializer):
    """Scanned QR value (composite payload or bare token)."""

    qr_code = serializers.CharField(max_length=200, trim_whitespace=True)


class InitiateTransactionSerializer(serializers.Serializer):
    """
    Validate a supplier's charge request.

    The coupon amount bounds are checked by the service so that the
    response carries the coupon error code; only its type is checked here.
    """

    qr_code = serializers.CharField(max_length=200, trim_whitespace=True)
    coupons_requested = serializers.IntegerField()
    latitude = serializers.FloatField(
        required=False,
        allow_null=True,
        min_value=-90.0,
        max_value=90.0
    )
    longitude = serializers.FloatField(
        required=False,
        allow_null=True,
        min_value=-180.0,
        max_value=180.0
    )
    notes = serializers.CharField(required=False, allow_blank=True, max_length=500)

    def validate(self, attrs):
        """Location is a pair: both coordinates or neither."""
        has_latitude = attrs.get('latitude') is not None
        has_longitude = attrs.get('longitude') is not None

        if has_latitude != has_longitude:
            raise serializers.ValidationError(
                'latitude and longitude must be provided together'
            )

        return attrs


class ResolveTransactionSerializer(serializers.Serializer):
    approved = serializers.BooleanField()
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500)


# =============================================================================
# Output Serializers
# =============================================================================

class EmployeeMinimalSerializer(serializers.ModelSerializer):
    """Minimal employee info for nested serialization."""

    class Meta:
        model = Employee
        fields = ['id', 'employee_code', 'name']
        read_only_fields = fields


class SupplierMinimalSerializer(serializers.ModelSerializer):
    """Minimal supplier info for nested serialization."""

    class Meta:
        model = Supplier
        fields = ['id', 'business_name', 'address']
        read_only_fields = fields


class CouponTransactionSerializer(serializers.ModelSerializer):
    """Main serializer for coupon transactions."""

    employee = EmployeeMinimalSerializer(read_only=True)
    supplier = SupplierMinimalSerializer(read_only=True)

    class Meta:
        model = CouponTransaction
        fields = [
            'id',
            'employee',
            'supplier',
            'qr_code',
            'coupons_used',
            'total_amount',
            'status',
            'employee_latitude',
            'employee_longitude',
            'notes',
            'rejection_reason',
            'processed_at',
            'resolved_at',
            'created_at',
        ]
        read_only_fields = fields


class IssuedQRCodeSerializer(serializers.Serializer):
    qr_code_id = serializers.UUIDField(source='qr_code.id')
    code = serializers.CharField(source='qr_code.code')
    payload = serializers.CharField()
    qr_code_image = serializers.CharField(source='image_data_uri')
    expires_at = serializers.DateTimeField(source='qr_code.expires_at')
    expires_in_minutes = serializers.IntegerField()
    employee_balance = serializers.IntegerField()


class QRValidationSerializer(serializers.Serializer):
    qr_code_id = serializers.UUIDField(source='qr_code.id')
    employee_name = serializers.CharField()
    employee_code = serializers.CharField()
    current_balance = serializers.IntegerField()
    expires_at = serializers.DateTimeField()


class InitiatedTransactionSerializer(serializers.Serializer):
    """Pending transaction plus the balance the employee would be left with."""

    transaction = CouponTransactionSerializer()
    current_balance = serializers.IntegerField()
    new_balance = serializers.IntegerField()


class ResolutionResultSerializer(serializers.Serializer):
    transaction_id = serializers.UUIDField(source='transaction.id')
    status = serializers.CharField()
    employee_name = serializers.CharField()
    previous_balance = serializers.IntegerField()
    new_balance = serializers.IntegerField()
    coupons_deducted = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    supplier_name = serializers.CharField(allow_blank=True)
    supplier_address = serializers.CharField(allow_blank=True)
    reason = serializers.CharField(allow_blank=True)


class PendingTransactionsResponseSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    transactions = CouponTransactionSerializer(many=True)


class ErrorResponseSerializer(serializers.Serializer):
    """Body of every refused coupon operation; extra keys carry details."""

    error = serializers.CharField()
    code = serializers.CharField()
