import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import IsPlatformAdmin

from .models import RedemptionRequest
from .serializers import (
    PayoutMethodSerializer,
    RedemptionRequestSerializer,
    RedemptionCreateSerializer,
    AdminRedemptionSerializer,
    RedemptionActionSerializer,
    AdminRedemptionFilterSerializer,
)
from .services import (
    get_payout_methods,
    add_payout_method,
    delete_payout_method,
    get_redemption_config,
    create_redemption_request,
    approve_redemption,
    reject_redemption,
    # Exceptions
    RedemptionServiceError,
    InvalidRedemptionAmountError,
    PendingRedemptionExistsError,
    PayoutMethodNotFoundError,
    PayoutMethodPermissionError,
    PayoutMethodInUseError,
    RedemptionNotAllowedError,
    RedemptionInsufficientCoinsError,
    RedemptionNotFoundError,
    InvalidRedemptionStateError,
    PayoutFailedError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    InvalidRedemptionAmountError: status.HTTP_400_BAD_REQUEST,
    RedemptionNotAllowedError: status.HTTP_400_BAD_REQUEST,
    RedemptionInsufficientCoinsError: status.HTTP_400_BAD_REQUEST,
    InvalidRedemptionStateError: status.HTTP_400_BAD_REQUEST,
    PendingRedemptionExistsError: status.HTTP_409_CONFLICT,
    PayoutMethodInUseError: status.HTTP_409_CONFLICT,
    PayoutMethodNotFoundError: status.HTTP_404_NOT_FOUND,
    RedemptionNotFoundError: status.HTTP_404_NOT_FOUND,
    PayoutMethodPermissionError: status.HTTP_403_FORBIDDEN,
    PayoutFailedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

ADMIN_LIST_LIMIT = 100


def _error_response(error):
    code = ERROR_STATUS.get(type(error), status.HTTP_400_BAD_REQUEST)
    return Response({'error': str(error)}, status=code)


# =============================================================================
# USER REDEMPTIONS
# =============================================================================

@extend_schema(
    request=RedemptionCreateSerializer,
    responses={200: RedemptionRequestSerializer(many=True), 201: RedemptionRequestSerializer},
    description="List own redemption requests or lock coins in a new one.",
    tags=['redemptions'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def redemptions(request):
    """List or create redemption requests of the current user."""
    if request.method == 'GET':
        queryset = RedemptionRequest.objects.filter(user=request.user)
        return Response(RedemptionRequestSerializer(queryset, many=True).data)

    serializer = RedemptionCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        redemption = create_redemption_request(
            user=request.user,
            coins_requested=serializer.validated_data['coins_requested'],
            payout_method_id=serializer.validated_data.get('payout_method_id'),
        )
    except RedemptionServiceError as e:
        return _error_response(e)

    return Response(RedemptionRequestSerializer(redemption).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={200: RedemptionRequestSerializer},
    tags=['redemptions'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def redemption_detail(request, redemption_id):
    """Get one redemption request (own, or any for admins)."""
    queryset = RedemptionRequest.objects.all()
    if not request.user.is_platform_admin:
        queryset = queryset.filter(user=request.user)
    redemption = get_object_or_404(queryset, id=redemption_id)
    return Response(RedemptionRequestSerializer(redemption).data)


@extend_schema(
    description="Redemption limits, conversion rate and platform fee.",
    tags=['redemptions'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def redemption_config(request):
    """Get redemption configuration."""
    return Response(get_redemption_config())


# =============================================================================
# PAYOUT METHODS
# =============================================================================

@extend_schema(
    request=PayoutMethodSerializer,
    responses={200: PayoutMethodSerializer(many=True), 201: PayoutMethodSerializer},
    tags=['redemptions'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def payout_methods(request):
    """List or add payout methods of the current user."""
    if request.method == 'GET':
        return Response(PayoutMethodSerializer(get_payout_methods(user=request.user), many=True).data)

    serializer = PayoutMethodSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    payout_method = add_payout_method(user=request.user, **serializer.validated_data)
    return Response(PayoutMethodSerializer(payout_method).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={204: None},
    tags=['redemptions'],
)
@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def payout_method_detail(request, payout_method_id):
    """Delete a payout method of the current user."""
    try:
        delete_payout_method(user=request.user, payout_method_id=payout_method_id)
    except RedemptionServiceError as e:
        return _error_response(e)
    return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# ADMIN
# =============================================================================

@extend_schema(
    parameters=[
        OpenApiParameter('status', str, description='Filter by status'),
        OpenApiParameter('user_id', str, description='Filter by user'),
        OpenApiParameter('from', str, description='Created on or after (YYYY-MM-DD)'),
        OpenApiParameter('to', str, description='Created on or before (YYYY-MM-DD)'),
    ],
    responses={200: AdminRedemptionSerializer(many=True)},
    description="Newest 100 redemption requests matching the filters.",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def admin_redemptions(request):
    """List redemption requests for review."""
    queryset = RedemptionRequest.objects.select_related('user', 'payout_method', 'reviewed_by')

    filters = AdminRedemptionFilterSerializer(data=request.query_params)
    filters.is_valid(raise_exception=True)

    params = filters.validated_data
    if params.get('status'):
        queryset = queryset.filter(status=params['status'])
    if params.get('user_id'):
        queryset = queryset.filter(user_id=params['user_id'])
    if params.get('from'):
        queryset = queryset.filter(created_at__date__gte=params['from'])
    if params.get('to'):
        queryset = queryset.filter(created_at__date__lte=params['to'])

    queryset = queryset.order_by('-created_at')[:ADMIN_LIST_LIMIT]
    return Response(AdminRedemptionSerializer(queryset, many=True).data)


@extend_schema(
    request=RedemptionActionSerializer,
    description="Approve (and pay out) or reject a redemption request.",
    tags=['admin'],
)
@api_view(['POST'])
@permission_classes([IsPlatformAdmin])
def admin_redemption_action(request, redemption_id):
    """Approve or reject a redemption request."""
    serializer = RedemptionActionSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'error': 'Invalid action. Must be "approve" or "reject"', 'details': serializer.errors},
            status=status.HTTP_400_BAD_REQUEST
        )

    action = serializer.validated_data['action']
    review = approve_redemption if action == 'approve' else reject_redemption
    try:
        result = review(
            redemption_id=redemption_id,
            admin=request.user,
            admin_notes=serializer.validated_data.get('admin_notes'),
        )
    except RedemptionServiceError as e:
        if isinstance(e, PayoutFailedError):
            logger.error("Redemption %s payout failed: %s", redemption_id, e)
        return _error_response(e)

    return Response({'success': True, **result})
