"""
Concurrency tests for the redemption protocol.

These run real threads against the database, so they need
TransactionTestCase: a regular TestCase wraps each test in a
transaction the worker threads cannot see.
"""

import threading
from datetime import date, timedelta

from django.db import connection
from django.test import TransactionTestCase
from django.utils import timezone

from apps.accounts.models import User, UserRole
from apps.coupons.models import CouponTransaction, QRCode, TransactionStatus
from apps.coupons.services import initiate_transaction, resolve_transaction
from apps.coupons.services.exceptions import (
    InsufficientBalanceError,
    QRCodePendingError,
    TransactionAlreadyProcessedError,
)
from apps.coupons.services.qr_rendering import QRPayloadGenerator
from apps.employees.models import Employee
from apps.suppliers.models import Supplier


def run_in_threads(target, args_list):
    """Start one thread per args tuple and wait for all of them."""
    barrier = threading.Barrier(len(args_list))

    def worker(*args):
        try:
            barrier.wait()
            target(*args)
        finally:
            connection.close()

    threads = [threading.Thread(target=worker, args=args) for args in args_list]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


class TestConcurrency(TransactionTestCase):
    """Tests for concurrency protection of approvals and initiations."""

    def setUp(self):
        """Create test fixtures."""
        self.employee_user = User.objects.create_user(
            email='employee@test.com',
            password='TestPass123!',
            role=UserRole.EMPLOYEE,
        )
        self.employee = Employee.objects.create(
            user=self.employee_user,
            employee_code='EMP-100',
            name='Concurrent Employee',
            email='employee@test.com',
            hire_date=date(2023, 1, 1),
            current_balance=10,
        )
        self.supplier_user = User.objects.create_user(
            email='supplier@test.com',
            password='TestPass123!',
            role=UserRole.SUPPLIER,
        )
        self.supplier = Supplier.objects.create(
            user=self.supplier_user,
            business_name='Canteen',
            address='Main street',
            latitude=9.03,
            longitude=38.74,
            is_verified=True,
        )

    def _qr_code(self):
        return QRCode.objects.create(
            employee=self.employee,
            expires_at=timezone.now() + timedelta(minutes=15),
        )

    def _pending(self, qr_code, coupons):
        return CouponTransaction.objects.create(
            employee=self.employee,
            supplier=self.supplier,
            qr_code=qr_code,
            coupons_used=coupons,
            total_amount=45 * coupons,
        )

    def test_concurrent_double_approve_commits_once(self):
        """
        Two approvals of the same transaction: exactly one completes and
        the balance is decremented exactly once.
        """
        qr_code = self._qr_code()
        coupon_transaction = self._pending(qr_code, coupons=2)

        results = []
        conflicts = []
        errors = []

        def approve():
            try:
                results.append(resolve_transaction(
                    transaction_id=coupon_transaction.id,
                    user=self.employee_user,
                    approved=True,
                ))
            except TransactionAlreadyProcessedError as e:
                conflicts.append(e)
            except Exception as e:
                errors.append(f"Unexpected error: {e!r}")

        run_in_threads(approve, [(), ()])

        assert errors == []
        assert len(results) == 1, f"Expected 1 approval, got {len(results)}"
        assert len(conflicts) == 1

        self.employee.refresh_from_db()
        qr_code.refresh_from_db()
        coupon_transaction.refresh_from_db()
        assert self.employee.current_balance == 8
        assert qr_code.is_used is True
        assert coupon_transaction.status == TransactionStatus.COMPLETED

    def test_approve_and_reject_race_has_one_winner(self):
        qr_code = self._qr_code()
        coupon_transaction = self._pending(qr_code, coupons=3)

        outcomes = []
        errors = []

        def resolve(approved):
            try:
                result = resolve_transaction(
                    transaction_id=coupon_transaction.id,
                    user=self.employee_user,
                    approved=approved,
                )
                outcomes.append(result.status)
            except TransactionAlreadyProcessedError:
                outcomes.append('conflict')
            except Exception as e:
                errors.append(f"Unexpected error: {e!r}")

        run_in_threads(resolve, [(True,), (False,)])

        assert errors == []
        assert outcomes.count('conflict') == 1

        coupon_transaction.refresh_from_db()
        self.employee.refresh_from_db()
        if coupon_transaction.status == TransactionStatus.COMPLETED:
            assert self.employee.current_balance == 7
        else:
            assert coupon_transaction.status == TransactionStatus.REJECTED
            assert self.employee.current_balance == 10

    def test_concurrent_approvals_never_overdraw(self):
        """
        Two transactions for 3 coupons each against a balance of 4:
        only one can be paid.
        """
        Employee.objects.filter(id=self.employee.id).update(current_balance=4)
        transactions = [self._pending(self._qr_code(), coupons=3) for _ in range(2)]

        results = []
        refused = []
        errors = []

        def approve(transaction_id):
            try:
                results.append(resolve_transaction(
                    transaction_id=transaction_id,
                    user=self.employee_user,
                    approved=True,
                ))
            except InsufficientBalanceError as e:
                refused.append(e)
            except Exception as e:
                errors.append(f"Unexpected error: {e!r}")

        run_in_threads(approve, [(t.id,) for t in transactions])

        assert errors == []
        assert len(results) == 1
        assert len(refused) == 1

        self.employee.refresh_from_db()
        assert self.employee.current_balance == 1
        completed = CouponTransaction.objects.filter(status=TransactionStatus.COMPLETED)
        assert completed.count() == 1

    def test_concurrent_initiations_open_one_pending_transaction(self):
        qr_code = self._qr_code()
        payload = QRPayloadGenerator.build_payload(self.employee.employee_code, qr_code.code)

        created = []
        conflicts = []
        errors = []

        def initiate():
            try:
                created.append(initiate_transaction(
                    supplier_user=self.supplier_user,
                    qr_payload=payload,
                    coupons_requested=1,
                ))
            except QRCodePendingError as e:
                conflicts.append(e)
            except Exception as e:
                errors.append(f"Unexpected error: {e!r}")

        run_in_threads(initiate, [(), (), ()])

        assert errors == []
        assert len(created) == 1
        assert len(conflicts) == 2
        assert CouponTransaction.objects.filter(
            qr_code=qr_code, status=TransactionStatus.PENDING
        ).count() == 1
