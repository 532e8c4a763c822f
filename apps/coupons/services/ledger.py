"""
Coupon ledger.

The only write path to ``Employee.current_balance``. A debit is a single
conditional UPDATE, so two concurrent debits can never take the balance
below zero.
"""

import logging

from django.db.models import F
from django.utils import timezone

from apps.employees.models import Employee

from .exceptions import (
    EmployeeNotFoundError,
    InsufficientBalanceError,
    InvalidCouponAmountError,
)

logger = logging.getLogger('coupons.ledger')


class CouponLedger:
    """Read and debit employee coupon balances."""

    @staticmethod
    def get_balance(employee_id):
        balance = (
            Employee.objects
            .filter(id=employee_id)
            .values_list('current_balance', flat=True)
            .first()
        )
        if balance is None:
            raise EmployeeNotFoundError(employee_id=str(employee_id))
        return balance

    @staticmethod
    def can_cover(employee, coupons):
        return employee.current_balance >= coupons

    @staticmethod
    def debit(*, employee_id, coupons):
        """
        Subtract ``coupons`` from the balance if it covers them.

        Must run inside the caller's atomic block.

        Returns:
            int: The new balance.

        Raises:
            InvalidCouponAmountError: If ``coupons`` is not positive
            InsufficientBalanceError: If the balance no longer covers it
        """
        if coupons <= 0:
            raise InvalidCouponAmountError(
                "Coupons to debit must be positive", coupons_requested=coupons
            )

        updated = (
            Employee.objects
            .filter(id=employee_id, current_balance__gte=coupons)
            .update(
                current_balance=F('current_balance') - coupons,
                updated_at=timezone.now(),
            )
        )

        if not updated:
            current = CouponLedger.get_balance(employee_id)
            logger.info(
                "Debit of %d refused for employee %s: balance %d",
                coupons, employee_id, current
            )
            raise InsufficientBalanceError(
                current_balance=current, requested=coupons
            )

        new_balance = CouponLedger.get_balance(employee_id)
        logger.info(
            "Debited %d coupon(s) from employee %s, balance now %d",
            coupons, employee_id, new_balance
        )
        return new_balance
