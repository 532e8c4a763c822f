from uuid import uuid4

import pytest

from apps.coupons.services import CouponLedger
from apps.coupons.services.exceptions import (
    EmployeeNotFoundError,
    InsufficientBalanceError,
    InvalidCouponAmountError,
)


@pytest.mark.django_db
class TestCouponLedger:

    def test_debit_returns_new_balance(self, employee):
        assert CouponLedger.debit(employee_id=employee.id, coupons=3) == 7
        assert CouponLedger.get_balance(employee.id) == 7

    @pytest.mark.parametrize('coupons', [0, -1])
    def test_debit_refuses_non_positive_amounts(self, employee, coupons):
        with pytest.raises(InvalidCouponAmountError) as exc_info:
            CouponLedger.debit(employee_id=employee.id, coupons=coupons)

        assert exc_info.value.details == {'coupons_requested': coupons}
        assert CouponLedger.get_balance(employee.id) == 10

    def test_debit_beyond_balance(self, employee):
        with pytest.raises(InsufficientBalanceError) as exc_info:
            CouponLedger.debit(employee_id=employee.id, coupons=11)

        assert exc_info.value.details == {'current_balance': 10, 'requested': 11}
        assert CouponLedger.get_balance(employee.id) == 10

    def test_balance_of_unknown_employee(self, db):
        with pytest.raises(EmployeeNotFoundError):
            CouponLedger.get_balance(uuid4())

    def test_can_cover(self, employee):
        assert CouponLedger.can_cover(employee, 10) is True
        assert CouponLedger.can_cover(employee, 11) is False
