"""Resolve the employee or supplier profile behind an authenticated user."""

from apps.employees.models import Employee
from apps.suppliers.models import Supplier

from .exceptions import (
    EmployeeNotFoundError,
    SupplierNotFoundError,
    SupplierNotEligibleError,
)


def get_employee_for_user(user) -> Employee:
    try:
        return Employee.objects.get(user=user)
    except Employee.DoesNotExist:
        raise EmployeeNotFoundError(user_id=str(user.id))


def get_supplier_for_user(user) -> Supplier:
    try:
        return Supplier.objects.get(user=user)
    except Supplier.DoesNotExist:
        raise SupplierNotFoundError(user_id=str(user.id))


def get_eligible_supplier(user) -> Supplier:
    """Supplier profile that is both active and verified."""
    supplier = get_supplier_for_user(user)

    if not supplier.is_active:
        raise SupplierNotEligibleError(
            "Supplier account is not active",
            supplier_id=str(supplier.id),
        )
    if not supplier.is_verified:
        raise SupplierNotEligibleError(
            "Supplier account is not verified. Please contact admin.",
            supplier_id=str(supplier.id),
        )
    return supplier
