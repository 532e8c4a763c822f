"""
QR code issuance and lookup.

Issuing a code never touches the employee balance; a code is consumed
only by the approval unit in ``transaction_approval``.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
import logging

from django.db import transaction
from django.utils import timezone

from apps.coupons.conf import coupon_setting
from apps.coupons.models import QRCode

from .exceptions import (
    EmployeeNotEligibleError,
    NoCouponsAvailableError,
    QRCodeAlreadyUsedError,
    QRCodeExpiredError,
    QRCodeNotFoundError,
)
from .profiles import get_eligible_supplier, get_employee_for_user
from .qr_rendering import QRPayloadGenerator

logger = logging.getLogger('coupons.qr')


@dataclass
class IssuedQRCode:
    qr_code: QRCode
    payload: str
    image_data_uri: str
    expires_in_minutes: int
    employee_balance: int


@dataclass
class QRValidation:
    qr_code: QRCode
    employee_name: str
    employee_code: str
    current_balance: int
    expires_at: datetime


def parse_qr_payload(raw):
    """Return ``(employee_code or None, token)`` for a scanned value."""
    return QRPayloadGenerator.parse_payload(raw)


@transaction.atomic
def issue_qr_code(*, user) -> IssuedQRCode:
    """
    Issue a fresh single-use QR code for the employee behind ``user``.

    Raises:
        EmployeeNotFoundError: If the user has no employee profile
        EmployeeNotEligibleError: If the employee status forbids coupon use
        NoCouponsAvailableError: If the balance is zero
    """
    employee = get_employee_for_user(user)

    if not employee.can_redeem:
        logger.info("QR refused for employee %s: status %s", employee.id, employee.status)
        raise EmployeeNotEligibleError(
            f"Employee account is not active (status: {employee.status})",
            status=employee.status,
        )

    if employee.current_balance <= 0:
        logger.info("QR refused for employee %s: no coupons left", employee.id)
        raise NoCouponsAvailableError(current_balance=employee.current_balance)

    expiry_minutes = coupon_setting('QR_EXPIRY_MINUTES')
    qr_code = QRCode.objects.create(
        employee=employee,
        expires_at=timezone.now() + timedelta(minutes=expiry_minutes),
    )

    payload = QRPayloadGenerator.build_payload(employee.employee_code, qr_code.code)
    logger.info("Issued QR %s for employee %s", qr_code.id, employee.id)

    return IssuedQRCode(
        qr_code=qr_code,
        payload=payload,
        image_data_uri=QRPayloadGenerator.generate_data_uri(payload),
        expires_in_minutes=expiry_minutes,
        employee_balance=employee.current_balance,
    )


def resolve_qr_code(payload, *, for_update: bool = False) -> QRCode:
    """
    Look up a redeemable QR code from a scanned value.

    Checks run in a fixed order: unknown token, owner mismatch, already
    used, expired.
    """
    employee_code, token = parse_qr_payload(payload)

    queryset = QRCode.objects.select_related('employee')
    if for_update:
        queryset = queryset.select_for_update()

    try:
        qr_code = queryset.get(code=token)
    except QRCode.DoesNotExist:
        raise QRCodeNotFoundError()

    # Composite payload must belong to the token's owner
    if employee_code is not None and employee_code != qr_code.employee.employee_code:
        raise QRCodeNotFoundError()

    if qr_code.is_used:
        raise QRCodeAlreadyUsedError(
            used_at=qr_code.used_at.isoformat() if qr_code.used_at else None
        )

    if qr_code.is_expired():
        raise QRCodeExpiredError(expired_at=qr_code.expires_at.isoformat())

    return qr_code


def validate_qr_code(*, user, payload) -> QRValidation:
    """
    Read-only supplier preview of a scanned QR code.

    Raises:
        SupplierNotFoundError, SupplierNotEligibleError: For the caller
        QRCodeNotFoundError, QRCodeAlreadyUsedError, QRCodeExpiredError:
            For the scanned code
    """
    get_eligible_supplier(user)
    qr_code = resolve_qr_code(payload)
    employee = qr_code.employee

    return QRValidation(
        qr_code=qr_code,
        employee_name=employee.name,
        employee_code=employee.employee_code,
        current_balance=employee.current_balance,
        expires_at=qr_code.expires_at,
    )
