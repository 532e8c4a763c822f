"""
Domain-specific exceptions for the coupons app.

These exceptions represent protocol violations and are caught in views
and converted to HTTP responses. Each carries a stable ``code`` for
clients and a ``details`` dict with the measured values behind the
refusal (distance vs radius, balance vs requested, ...).
"""


class CouponsServiceError(Exception):
    """Base exception for all coupons service errors."""

    code = 'coupons_error'
    default_message = 'Coupon operation failed.'

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


# =============================================================================
# NotFound
# =============================================================================

class EntityNotFoundError(CouponsServiceError):
    """Raised when a referenced record does not exist."""
    code = 'not_found'
    default_message = 'Record not found.'


class EmployeeNotFoundError(EntityNotFoundError):
    code = 'employee_not_found'
    default_message = 'Employee not found.'


class SupplierNotFoundError(EntityNotFoundError):
    code = 'supplier_not_found'
    default_message = 'Supplier profile not found. Please contact admin.'


class QRCodeNotFoundError(EntityNotFoundError):
    code = 'qr_code_not_found'
    default_message = 'Invalid QR code.'


class TransactionNotFoundError(EntityNotFoundError):
    code = 'transaction_not_found'
    default_message = 'Transaction not found.'


# =============================================================================
# Forbidden
# =============================================================================

class ForbiddenOperationError(CouponsServiceError):
    """Raised when status, permission or location rules forbid the operation."""
    code = 'forbidden'
    default_message = 'Operation not allowed.'


class EmployeeNotEligibleError(ForbiddenOperationError):
    code = 'employee_not_eligible'
    default_message = 'Employee account status does not allow coupon use.'


class NoCouponsAvailableError(ForbiddenOperationError):
    code = 'no_coupons_available'
    default_message = 'No coupons available.'


class SupplierNotEligibleError(ForbiddenOperationError):
    code = 'supplier_not_eligible'
    default_message = 'Supplier account is not allowed to charge coupons.'


class LocationOutOfRangeError(ForbiddenOperationError):
    code = 'location_out_of_range'
    default_message = 'Employee is outside the allowed location radius.'


class OwnershipMismatchError(ForbiddenOperationError):
    code = 'ownership_mismatch'
    default_message = 'You can only approve your own transactions.'


# =============================================================================
# Conflict
# =============================================================================

class TransitionConflictError(CouponsServiceError):
    """Raised when a state transition is not allowed from the current state."""
    code = 'conflict'
    default_message = 'Conflicting state transition.'


class TransactionAlreadyProcessedError(TransitionConflictError):
    code = 'transaction_already_processed'
    default_message = 'Transaction has already been processed.'


class QRCodePendingError(TransitionConflictError):
    code = 'qr_code_pending'
    default_message = 'QR code already has a transaction waiting for approval.'


# =============================================================================
# Invalid argument / balance / QR lifecycle
# =============================================================================

class InvalidCouponAmountError(CouponsServiceError):
    code = 'invalid_coupon_amount'
    default_message = 'Invalid coupon amount.'


class InsufficientBalanceError(CouponsServiceError):
    code = 'insufficient_balance'
    default_message = 'Insufficient coupon balance.'


class QRCodeAlreadyUsedError(CouponsServiceError):
    code = 'qr_code_already_used'
    default_message = 'QR code has already been used.'


class QRCodeExpiredError(CouponsServiceError):
    code = 'qr_code_expired'
    default_message = 'QR code has expired. Please ask employee to generate a new one.'


# =============================================================================
# Store failures
# =============================================================================

class StoreTimeoutError(CouponsServiceError):
    """Raised when the database did not answer in time; safe to retry."""
    code = 'store_timeout'
    default_message = 'The operation timed out. Please retry.'


class ApprovalCommitError(CouponsServiceError):
    """Raised when the approval unit failed and was rolled back."""
    code = 'approval_failed'
    default_message = 'Failed to process transaction.'
