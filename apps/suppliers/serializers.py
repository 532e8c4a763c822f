from rest_framework import serializers

from .models import Supplier


class SupplierProfileSerializer(serializers.ModelSerializer):
    """Profile of the current supplier, including whether it may charge."""

    can_charge = serializers.BooleanField(read_only=True)

    class Meta:
        model = Supplier
        fields = [
            'id',
            'business_name',
            'business_license',
            'address',
            'latitude',
            'longitude',
            'location_radius',
            'is_active',
            'is_verified',
            'can_charge',
            'created_at',
        ]
        read_only_fields = fields
