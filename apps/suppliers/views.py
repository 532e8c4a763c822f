from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import SupplierProfileSerializer
from apps.accounts.permissions import IsSupplierUser
from apps.coupons.serializers import ErrorResponseSerializer
from apps.coupons.services import get_my_supplier_profile, SupplierNotFoundError


@extend_schema(
    responses={200: SupplierProfileSerializer, 404: ErrorResponseSerializer},
    description="Get the profile of the current supplier, including its "
                "location radius and verification state.",
    tags=['suppliers'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsSupplierUser])
def my_profile(request):
    """Get current supplier's profile."""
    try:
        supplier = get_my_supplier_profile(request.user)
    except SupplierNotFoundError as e:
        return Response(
            {'error': str(e), 'code': e.code},
            status=status.HTTP_404_NOT_FOUND
        )

    return Response(SupplierProfileSerializer(supplier).data)
