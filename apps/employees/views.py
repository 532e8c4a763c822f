from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import EmployeeBalanceSerializer, EmployeeProfileSerializer
from apps.accounts.permissions import IsEmployeeUser
from apps.coupons.serializers import ErrorResponseSerializer
from apps.coupons.services import (
    get_my_balance,
    get_my_employee_profile,
    EmployeeNotFoundError,
)


@extend_schema(
    responses={200: EmployeeBalanceSerializer, 404: ErrorResponseSerializer},
    description="Get the coupon balance of the current employee.",
    tags=['employees'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsEmployeeUser])
def my_balance(request):
    """Get current employee's coupon balance."""
    try:
        employee = get_my_balance(request.user)
    except EmployeeNotFoundError as e:
        return Response(
            {'error': str(e), 'code': e.code},
            status=status.HTTP_404_NOT_FOUND
        )

    return Response(EmployeeBalanceSerializer(employee).data)


@extend_schema(
    responses={200: EmployeeProfileSerializer, 404: ErrorResponseSerializer},
    description="Get the profile of the current employee.",
    tags=['employees'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsEmployeeUser])
def my_profile(request):
    try:
        employee = get_my_employee_profile(request.user)
    except EmployeeNotFoundError as e:
        return Response(
            {'error': str(e), 'code': e.code},
            status=status.HTTP_404_NOT_FOUND
        )

    return Response(EmployeeProfileSerializer(employee).data)
