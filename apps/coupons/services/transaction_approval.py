"""
Employee-side resolution of pending transactions.

Approval debits the ledger, consumes the QR code and completes the
transaction as one atomic unit. Each step is a compare-and-set UPDATE;
a step that matches no row raises and rolls back the whole unit, so
concurrent approvals commit at most once.
"""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID
import logging

from django.db import DatabaseError, OperationalError, transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.coupons.models import (
    CouponTransaction,
    QRCode,
    TransactionStatus,
    can_transition,
    statuses_leading_to,
)

from .concurrency import run_with_retry, store_deadline
from .exceptions import (
    ApprovalCommitError,
    CouponsServiceError,
    InsufficientBalanceError,
    OwnershipMismatchError,
    QRCodeAlreadyUsedError,
    TransactionAlreadyProcessedError,
    TransactionNotFoundError,
)
from .ledger import CouponLedger

logger = logging.getLogger('coupons.approval')

DEFAULT_REJECTION_REASON = 'Rejected by employee'


@dataclass
class ResolutionResult:
    transaction: CouponTransaction
    status: str
    employee_name: str
    previous_balance: int
    new_balance: int
    coupons_deducted: int
    amount: Decimal
    supplier_name: str = ''
    supplier_address: str = ''
    reason: str = ''

    @property
    def approved(self):
        return self.status == TransactionStatus.COMPLETED


def resolve_transaction(
    *,
    transaction_id: UUID,
    user: User,
    approved: bool,
    reason: str = ''
) -> ResolutionResult:
    """
    Approve or reject a pending transaction on behalf of its employee.

    Args:
        transaction_id: UUID of the pending transaction
        user: Authenticated employee user
        approved: True to pay, False to reject
        reason: Rejection reason (ignored on approval)

    Returns:
        ResolutionResult with balances before and after

    Raises:
        TransactionNotFoundError: If the transaction doesn't exist
        OwnershipMismatchError: If it belongs to another employee
        TransactionAlreadyProcessedError: If it is no longer pending
        InsufficientBalanceError: If the balance no longer covers it
        QRCodeAlreadyUsedError: If its QR code was consumed meanwhile
        ApprovalCommitError: If the atomic unit failed and was rolled back
        StoreTimeoutError: If the store stayed locked or too slow
    """
    try:
        return run_with_retry(
            lambda: _resolve(
                transaction_id=transaction_id,
                user=user,
                approved=approved,
                reason=reason,
            )
        )
    except CouponsServiceError as e:
        logger.info(
            "Resolution of transaction %s refused: %s %s",
            transaction_id, e.code, e.details
        )
        raise


@transaction.atomic
def _resolve(*, transaction_id, user, approved, reason):
    with store_deadline():
        try:
            coupon_transaction = (
                CouponTransaction.objects
                .select_for_update()
                .select_related('employee', 'supplier')
                .get(id=transaction_id)
            )
        except CouponTransaction.DoesNotExist:
            raise TransactionNotFoundError(transaction_id=str(transaction_id))

        if coupon_transaction.employee.user_id != user.id:
            raise OwnershipMismatchError(transaction_id=str(transaction_id))

        target = TransactionStatus.COMPLETED if approved else TransactionStatus.REJECTED
        if not can_transition(coupon_transaction.status, target):
            raise TransactionAlreadyProcessedError(
                f"Transaction is {coupon_transaction.status} and cannot be {target}",
                status=coupon_transaction.status,
            )

        if approved:
            return _approve(coupon_transaction)
        return _reject(coupon_transaction, reason or DEFAULT_REJECTION_REASON)


def _approve(coupon_transaction):
    employee = coupon_transaction.employee
    coupons = coupon_transaction.coupons_used
    previous_balance = employee.current_balance

    if not CouponLedger.can_cover(employee, coupons):
        raise InsufficientBalanceError(
            f"Insufficient coupon balance. Current: {previous_balance}, Requested: {coupons}",
            current_balance=previous_balance,
            requested=coupons,
        )

    now = timezone.now()
    try:
        with transaction.atomic():
            new_balance = CouponLedger.debit(employee_id=employee.id, coupons=coupons)
            _consume_qr_code(coupon_transaction.qr_code_id, now)
            _complete_transaction(coupon_transaction.id, now)
    except (CouponsServiceError, OperationalError):
        raise
    except DatabaseError as e:
        logger.exception(
            "Approval of transaction %s rolled back", coupon_transaction.id
        )
        raise ApprovalCommitError(transaction_id=str(coupon_transaction.id)) from e

    coupon_transaction.refresh_from_db()
    logger.info(
        "Transaction %s approved: %d coupon(s) debited from employee %s, balance %d -> %d",
        coupon_transaction.id, coupons, employee.id, previous_balance, new_balance
    )

    return ResolutionResult(
        transaction=coupon_transaction,
        status=TransactionStatus.COMPLETED,
        employee_name=employee.name,
        previous_balance=previous_balance,
        new_balance=new_balance,
        coupons_deducted=coupons,
        amount=coupon_transaction.total_amount,
        supplier_name=coupon_transaction.supplier.business_name,
        supplier_address=coupon_transaction.supplier.address,
    )


def _reject(coupon_transaction, reason):
    now = timezone.now()
    updated = (
        CouponTransaction.objects
        .filter(
            id=coupon_transaction.id,
            status__in=statuses_leading_to(TransactionStatus.REJECTED),
        )
        .update(
            status=TransactionStatus.REJECTED,
            rejection_reason=reason,
            resolved_at=now,
            updated_at=now,
        )
    )
    if not updated:
        raise TransactionAlreadyProcessedError(
            status=_current_status(coupon_transaction.id)
        )

    coupon_transaction.refresh_from_db()
    balance = coupon_transaction.employee.current_balance
    logger.info("Transaction %s rejected: %s", coupon_transaction.id, reason)

    return ResolutionResult(
        transaction=coupon_transaction,
        status=TransactionStatus.REJECTED,
        employee_name=coupon_transaction.employee.name,
        previous_balance=balance,
        new_balance=balance,
        coupons_deducted=0,
        amount=coupon_transaction.total_amount,
        reason=reason,
    )


def _consume_qr_code(qr_code_id, now):
    """Flip the QR code from unused to used, exactly once."""
    updated = (
        QRCode.objects
        .filter(id=qr_code_id, is_used=False)
        .update(is_used=True, used_at=now)
    )
    if not updated:
        raise QRCodeAlreadyUsedError(qr_code_id=str(qr_code_id))


def _complete_transaction(transaction_id, now):
    updated = (
        CouponTransaction.objects
        .filter(
            id=transaction_id,
            status__in=statuses_leading_to(TransactionStatus.COMPLETED),
        )
        .update(status=TransactionStatus.COMPLETED, resolved_at=now, updated_at=now)
    )
    if not updated:
        raise TransactionAlreadyProcessedError(status=_current_status(transaction_id))


def _current_status(transaction_id):
    return (
        CouponTransaction.objects
        .filter(id=transaction_id)
        .values_list('status', flat=True)
        .first()
    )
