from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .serializers import (
    CouponTransactionSerializer,
    ErrorResponseSerializer,
    InitiateTransactionSerializer,
    InitiatedTransactionSerializer,
    IssuedQRCodeSerializer,
    PendingTransactionsResponseSerializer,
    QRValidationSerializer,
    ResolutionResultSerializer,
    ResolveTransactionSerializer,
    ValidateQRCodeSerializer,
)
from apps.accounts.permissions import IsEmployeeUser, IsSupplierUser

from apps.coupons.services import (
    issue_qr_code,
    validate_qr_code,
    initiate_transaction,
    resolve_transaction,
    list_pending_transactions,
    list_employee_transactions,
    list_supplier_transactions,
    # Exceptions
    CouponsServiceError,
    EntityNotFoundError,
    ForbiddenOperationError,
    TransitionConflictError,
    StoreTimeoutError,
    ApprovalCommitError,
)


# Most specific first; anything else is a client error
ERROR_STATUS_CODES = (
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenOperationError, status.HTTP_403_FORBIDDEN),
    (TransitionConflictError, status.HTTP_409_CONFLICT),
    (StoreTimeoutError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ApprovalCommitError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)

ERROR_RESPONSES = {
    code: ErrorResponseSerializer for code in (400, 403, 404, 409, 503)
}


def service_error_response(exc: CouponsServiceError) -> Response:
    """Convert a coupons service error to its HTTP response."""
    http_status = status.HTTP_400_BAD_REQUEST
    for exc_class, code in ERROR_STATUS_CODES:
        if isinstance(exc, exc_class):
            http_status = code
            break

    body = {'error': str(exc), 'code': exc.code}
    body.update(exc.details)
    return Response(body, status=http_status)


class TransactionPagination(PageNumberPagination):
    """Custom pagination for transaction history."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


# =============================================================================
# QR codes
# =============================================================================

@extend_schema(
    request=None,
    responses={201: IssuedQRCodeSerializer, **ERROR_RESPONSES},
    description="Generate a single-use QR code for the current employee.",
    tags=['coupons'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsEmployeeUser])
def generate_qr_code(request):
    """Issue a QR code for the authenticated employee."""
    try:
        issued = issue_qr_code(user=request.user)
    except CouponsServiceError as e:
        return service_error_response(e)

    return Response(IssuedQRCodeSerializer(issued).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=ValidateQRCodeSerializer,
    responses={200: QRValidationSerializer, **ERROR_RESPONSES},
    description="Check a scanned QR code before charging it.",
    tags=['coupons'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSupplierUser])
def validate_qr(request):
    """Preview the employee behind a scanned QR code."""
    serializer = ValidateQRCodeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        validation = validate_qr_code(
            user=request.user,
            payload=serializer.validated_data['qr_code'],
        )
    except CouponsServiceError as e:
        return service_error_response(e)

    return Response(QRValidationSerializer(validation).data)


# =============================================================================
# Transactions
# =============================================================================

@extend_schema(
    request=InitiateTransactionSerializer,
    responses={201: InitiatedTransactionSerializer, **ERROR_RESPONSES},
    description="Supplier requests coupons from a scanned QR code. "
                "The transaction stays pending until the employee approves it.",
    tags=['coupons'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSupplierUser])
def create_transaction(request):
    """Initiate a pending coupon transaction."""
    serializer = InitiateTransactionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        initiated = initiate_transaction(
            supplier_user=request.user,
            qr_payload=data['qr_code'],
            coupons_requested=data['coupons_requested'],
            latitude=data.get('latitude'),
            longitude=data.get('longitude'),
            notes=data.get('notes', ''),
        )
    except CouponsServiceError as e:
        return service_error_response(e)

    output_serializer = InitiatedTransactionSerializer(initiated)
    return Response(output_serializer.data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=ResolveTransactionSerializer,
    responses={200: ResolutionResultSerializer, 500: ErrorResponseSerializer, **ERROR_RESPONSES},
    description="Employee approves (debits coupons) or rejects a pending transaction.",
    tags=['coupons'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsEmployeeUser])
def resolve(request, transaction_id):
    """Approve or reject a pending transaction."""
    serializer = ResolveTransactionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        result = resolve_transaction(
            transaction_id=transaction_id,
            user=request.user,
            approved=serializer.validated_data['approved'],
            reason=serializer.validated_data.get('reason', ''),
        )
    except CouponsServiceError as e:
        return service_error_response(e)

    return Response(ResolutionResultSerializer(result).data)


@extend_schema(
    responses={200: PendingTransactionsResponseSerializer},
    description="Transactions waiting for the current employee's approval.",
    tags=['coupons'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsEmployeeUser])
def pending_transactions(request):
    try:
        transactions = list(list_pending_transactions(request.user))
    except CouponsServiceError as e:
        return service_error_response(e)

    return Response({
        'count': len(transactions),
        'transactions': CouponTransactionSerializer(transactions, many=True).data,
    })


@extend_schema(
    responses={200: CouponTransactionSerializer(many=True)},
    description="Transaction history of the current employee.",
    tags=['coupons'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsEmployeeUser])
def my_transactions(request):
    try:
        queryset = list_employee_transactions(request.user)
    except CouponsServiceError as e:
        return service_error_response(e)

    paginator = TransactionPagination()
    page = paginator.paginate_queryset(queryset, request)
    serializer = CouponTransactionSerializer(page, many=True)
    return paginator.get_paginated_response(serializer.data)


@extend_schema(
    responses={200: CouponTransactionSerializer(many=True)},
    description="Transactions charged by the current supplier.",
    tags=['coupons'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsSupplierUser])
def supplier_transactions(request):
    try:
        queryset = list_supplier_transactions(request.user)
    except CouponsServiceError as e:
        return service_error_response(e)

    paginator = TransactionPagination()
    page = paginator.paginate_queryset(queryset, request)
    serializer = CouponTransactionSerializer(page, many=True)
    return paginator.get_paginated_response(serializer.data)
