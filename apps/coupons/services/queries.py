"""
Read-side coupon operations.

Plain lookups for the employee and supplier apps; nothing here writes.
"""

from django.db.models import QuerySet

from apps.accounts.models import User
from apps.coupons.models import CouponTransaction, TransactionStatus
from apps.employees.models import Employee
from apps.suppliers.models import Supplier

from .profiles import get_employee_for_user, get_supplier_for_user


def get_my_balance(user: User) -> Employee:
    """Employee profile of ``user`` with its current balance."""
    return get_employee_for_user(user)


def get_my_employee_profile(user: User) -> Employee:
    return get_employee_for_user(user)


def get_my_supplier_profile(user: User) -> Supplier:
    """Supplier profile of ``user``, whether or not it may charge yet."""
    return get_supplier_for_user(user)


def list_pending_transactions(user: User) -> QuerySet:
    """Transactions waiting for the employee's approval, newest first."""
    employee = get_employee_for_user(user)
    return (
        CouponTransaction.objects
        .filter(employee=employee, status=TransactionStatus.PENDING)
        .select_related('employee', 'supplier')
        .order_by('-created_at')
    )


def list_employee_transactions(user: User) -> QuerySet:
    employee = get_employee_for_user(user)
    return (
        CouponTransaction.objects
        .filter(employee=employee)
        .select_related('employee', 'supplier')
        .order_by('-created_at')
    )


def list_supplier_transactions(user: User) -> QuerySet:
    supplier = get_supplier_for_user(user)
    return (
        CouponTransaction.objects
        .filter(supplier=supplier)
        .select_related('employee', 'supplier')
        .order_by('-created_at')
    )
