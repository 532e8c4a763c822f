"""
Coupons app services layer.

Services contain the redemption protocol: QR issuance, supplier-initiated
transactions and the employee approval that debits the ledger.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    CouponsServiceError,
    EntityNotFoundError,
    EmployeeNotFoundError,
    SupplierNotFoundError,
    QRCodeNotFoundError,
    TransactionNotFoundError,
    ForbiddenOperationError,
    EmployeeNotEligibleError,
    NoCouponsAvailableError,
    SupplierNotEligibleError,
    LocationOutOfRangeError,
    OwnershipMismatchError,
    TransitionConflictError,
    TransactionAlreadyProcessedError,
    QRCodePendingError,
    InvalidCouponAmountError,
    InsufficientBalanceError,
    QRCodeAlreadyUsedError,
    QRCodeExpiredError,
    StoreTimeoutError,
    ApprovalCommitError,
)

from .geo import (
    distance_meters,
    within_radius,
)

from .ledger import CouponLedger

from .qr_codes import (
    IssuedQRCode,
    QRValidation,
    issue_qr_code,
    parse_qr_payload,
    validate_qr_code,
)

from .transaction_initiation import (
    InitiatedTransaction,
    initiate_transaction,
)

from .transaction_approval import (
    ResolutionResult,
    resolve_transaction,
)

from .queries import (
    get_my_balance,
    get_my_employee_profile,
    get_my_supplier_profile,
    list_pending_transactions,
    list_employee_transactions,
    list_supplier_transactions,
)


__all__ = [
    # Exceptions
    'CouponsServiceError',
    'EntityNotFoundError',
    'EmployeeNotFoundError',
    'SupplierNotFoundError',
    'QRCodeNotFoundError',
    'TransactionNotFoundError',
    'ForbiddenOperationError',
    'EmployeeNotEligibleError',
    'NoCouponsAvailableError',
    'SupplierNotEligibleError',
    'LocationOutOfRangeError',
    'OwnershipMismatchError',
    'TransitionConflictError',
    'TransactionAlreadyProcessedError',
    'QRCodePendingError',
    'InvalidCouponAmountError',
    'InsufficientBalanceError',
    'QRCodeAlreadyUsedError',
    'QRCodeExpiredError',
    'StoreTimeoutError',
    'ApprovalCommitError',

    # Distance
    'distance_meters',
    'within_radius',

    # Ledger
    'CouponLedger',

    # QR codes
    'IssuedQRCode',
    'QRValidation',
    'issue_qr_code',
    'parse_qr_payload',
    'validate_qr_code',

    # Transactions
    'InitiatedTransaction',
    'initiate_transaction',
    'ResolutionResult',
    'resolve_transaction',

    # Read side
    'get_my_balance',
    'get_my_employee_profile',
    'get_my_supplier_profile',
    'list_pending_transactions',
    'list_employee_transactions',
    'list_supplier_transactions',
]
