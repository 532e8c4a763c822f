from rest_framework import serializers

from .models import Employee


class EmployeeBalanceSerializer(serializers.ModelSerializer):
    """Coupon balance of the current employee."""

    class Meta:
        model = Employee
        fields = [
            'employee_code',
            'name',
            'current_balance',
            'monthly_allocation',
            'last_allocation_date',
            'status',
        ]
        read_only_fields = fields


class EmployeeProfileSerializer(serializers.ModelSerializer):
    """Profile of the current employee."""

    class Meta:
        model = Employee
        fields = [
            'id',
            'employee_code',
            'name',
            'email',
            'phone',
            'status',
            'monthly_allocation',
            'current_balance',
            'last_allocation_date',
            'hire_date',
            'created_at',
        ]
        read_only_fields = fields
