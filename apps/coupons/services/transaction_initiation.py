"""
Supplier-side transaction initiation.

Validates a scanned QR code against the supplier, the employee and the
requested amount, then records a pending transaction. Nothing is debited
here; the employee's approval does that.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
import logging

from django.db import IntegrityError, transaction

from apps.accounts.models import User
from apps.coupons.conf import coupon_setting
from apps.coupons.models import CouponTransaction, TransactionStatus
from apps.employees.models import Employee, EmployeeStatus

from .concurrency import run_with_retry, store_deadline
from .exceptions import (
    CouponsServiceError,
    EmployeeNotEligibleError,
    EmployeeNotFoundError,
    InsufficientBalanceError,
    InvalidCouponAmountError,
    LocationOutOfRangeError,
    QRCodePendingError,
)
from . import geo
from .ledger import CouponLedger
from .profiles import get_eligible_supplier
from .qr_codes import resolve_qr_code

logger = logging.getLogger('coupons.initiation')

INELIGIBLE_STATUS_MESSAGES = {
    EmployeeStatus.TERMINATED: "Employee account has been terminated",
    EmployeeStatus.SUSPENDED: "Employee account is currently suspended",
}


@dataclass
class InitiatedTransaction:
    transaction: CouponTransaction
    current_balance: int
    new_balance: int


def initiate_transaction(
    *,
    supplier_user: User,
    qr_payload: str,
    coupons_requested: int,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    notes: str = ''
) -> InitiatedTransaction:
    """
    Create a pending coupon transaction for a scanned QR code.

    Validation is ordered and stops at the first failure: supplier, QR
    code, employee, location, amount, balance. Location is checked only
    when both coordinates are given.

    Args:
        supplier_user: Authenticated supplier user
        qr_payload: Scanned value (composite payload or bare token)
        coupons_requested: Number of coupons to charge
        latitude: Employee latitude, optional
        longitude: Employee longitude, optional
        notes: Free text stored on the transaction

    Returns:
        InitiatedTransaction with the pending record and a balance preview

    Raises:
        SupplierNotFoundError, SupplierNotEligibleError
        QRCodeNotFoundError, QRCodeAlreadyUsedError, QRCodeExpiredError,
        QRCodePendingError
        EmployeeNotFoundError, EmployeeNotEligibleError
        LocationOutOfRangeError
        InvalidCouponAmountError, InsufficientBalanceError
        StoreTimeoutError: If the store stayed locked or too slow
    """
    try:
        return run_with_retry(
            lambda: _create_pending_transaction(
                supplier_user=supplier_user,
                qr_payload=qr_payload,
                coupons_requested=coupons_requested,
                latitude=latitude,
                longitude=longitude,
                notes=notes,
            )
        )
    except CouponsServiceError as e:
        logger.info(
            "Initiation refused for supplier user %s: %s %s",
            supplier_user.id, e.code, e.details
        )
        raise


@transaction.atomic
def _create_pending_transaction(
    *,
    supplier_user,
    qr_payload,
    coupons_requested,
    latitude,
    longitude,
    notes
):
    with store_deadline():
        supplier = get_eligible_supplier(supplier_user)

        # Lock the QR row so two terminals cannot open transactions on it at once
        qr_code = resolve_qr_code(qr_payload, for_update=True)

        pending = (
            CouponTransaction.objects
            .filter(qr_code=qr_code, status=TransactionStatus.PENDING)
            .values_list('id', flat=True)
            .first()
        )
        if pending is not None:
            raise QRCodePendingError(transaction_id=str(pending))

        employee = Employee.objects.filter(id=qr_code.employee_id).first()
        if employee is None:
            raise EmployeeNotFoundError(employee_id=str(qr_code.employee_id))

        if not employee.can_redeem:
            raise EmployeeNotEligibleError(
                INELIGIBLE_STATUS_MESSAGES.get(
                    employee.status, "Employee account status does not allow transactions"
                ),
                status=employee.status,
            )

        if latitude is not None and longitude is not None:
            if not geo.within_radius(
                supplier.latitude, supplier.longitude,
                latitude, longitude,
                supplier.location_radius,
            ):
                distance = geo.distance_meters(
                    supplier.latitude, supplier.longitude, latitude, longitude
                )
                raise LocationOutOfRangeError(
                    f"Employee is too far from supplier location. "
                    f"Distance: {distance:.0f}m, Allowed: {supplier.location_radius}m",
                    distance_meters=int(round(distance)),
                    allowed_radius_meters=supplier.location_radius,
                )

        min_coupons = coupon_setting('MIN_COUPONS_PER_TRANSACTION')
        max_coupons = coupon_setting('MAX_COUPONS_PER_TRANSACTION')
        if not min_coupons <= coupons_requested <= max_coupons:
            raise InvalidCouponAmountError(
                f"Coupons requested must be between {min_coupons} and {max_coupons}",
                coupons_requested=coupons_requested,
                min_coupons=min_coupons,
                max_coupons=max_coupons,
            )

        if not CouponLedger.can_cover(employee, coupons_requested):
            raise InsufficientBalanceError(
                f"Insufficient coupon balance. Current: {employee.current_balance}, "
                f"Requested: {coupons_requested}",
                current_balance=employee.current_balance,
                requested=coupons_requested,
            )

        total_amount = Decimal(coupons_requested) * Decimal(coupon_setting('COUPON_UNIT_VALUE'))

        try:
            with transaction.atomic():
                coupon_transaction = CouponTransaction.objects.create(
                    employee=employee,
                    supplier=supplier,
                    qr_code=qr_code,
                    coupons_used=coupons_requested,
                    total_amount=total_amount,
                    status=TransactionStatus.PENDING,
                    employee_latitude=latitude if longitude is not None else None,
                    employee_longitude=longitude if latitude is not None else None,
                    notes=notes or '',
                )
        except IntegrityError:
            # Partial unique constraint caught a concurrent pending transaction
            raise QRCodePendingError()

    logger.info(
        "Transaction %s pending: supplier %s, employee %s, %d coupon(s), %s",
        coupon_transaction.id, supplier.id, employee.id,
        coupons_requested, total_amount
    )

    return InitiatedTransaction(
        transaction=coupon_transaction,
        current_balance=employee.current_balance,
        new_balance=employee.current_balance - coupons_requested,
    )
