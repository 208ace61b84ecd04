import logging

from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from rest_framework import status, generics
from rest_framework.decorators import (
    api_view,
    permission_classes,
    authentication_classes,
)
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.models import User
from apps.accounts.permissions import IsPlatformAdmin

from .models import CoinTransaction, RefType
from .serializers import (
    CurrencyRateSerializer,
    CurrencyRateWriteSerializer,
    CoinPackageSerializer,
    CoinPackageWriteSerializer,
    CoinTransactionSerializer,
    TransactionFilterSerializer,
    BalanceSerializer,
    SetBalanceSerializer,
    CoinAmountSerializer,
    PurchaseIntentSerializer,
)
from .services import (
    deduct_coins,
    credit_coins,
    set_balance,
    get_currency_rates,
    get_all_currency_rates,
    upsert_currency_rate,
    delete_currency_rate,
    get_active_packages,
    get_all_packages,
    get_package_by_id,
    create_package,
    update_package,
    delete_package,
    create_checkout_session,
    handle_webhook_event,
    # Exceptions
    InsufficientCoinsError,
    InvalidAmountError,
    CurrencyNotFoundError,
    InvalidCurrencyRateError,
    PackageNotFoundError,
    InvalidPackageError,
    PackageInUseError,
    PaymentsNotConfiguredError,
    PaymentProviderError,
    WebhookVerificationError,
    PurchaseNotFoundError,
)

logger = logging.getLogger(__name__)


class TransactionPagination(PageNumberPagination):
    """Pagination for the coin ledger."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _forbidden():
    return Response(
        {'error': 'You do not have permission to access this wallet'},
        status=status.HTTP_403_FORBIDDEN
    )


# =============================================================================
# PUBLIC CATALOGUE
# =============================================================================

@extend_schema(
    parameters=[OpenApiParameter('currency', str, description='Filter by currency code')],
    responses={200: CoinPackageSerializer(many=True)},
    description="Active coin packages in active currencies.",
    tags=['coins'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def list_packs(request):
    """List purchasable coin packs."""
    packages = get_active_packages(currency=request.query_params.get('currency'))
    return Response(CoinPackageSerializer(packages, many=True).data)


@extend_schema(
    responses={200: CurrencyRateSerializer(many=True)},
    description="Active currency conversion rates.",
    tags=['coins'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def list_currency_rates(request):
    """List active currency rates."""
    return Response(CurrencyRateSerializer(get_currency_rates(), many=True).data)


# =============================================================================
# WALLET
# =============================================================================

class TransactionListView(generics.ListAPIView):
    """
    Coin ledger of the current user, newest first.

    Admins may pass ?user_id= to inspect another wallet.
    GET /api/coins/transactions/
    """
    serializer_class = CoinTransactionSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = TransactionPagination

    def get_queryset(self):
        user = self.request.user
        filters = TransactionFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)

        user_id = filters.validated_data.get('user_id')
        if user_id and user.is_platform_admin:
            queryset = CoinTransaction.objects.filter(user_id=user_id)
        else:
            queryset = CoinTransaction.objects.filter(user=user)

        tx_type = filters.validated_data.get('type')
        if tx_type:
            queryset = queryset.filter(type=tx_type)
        return queryset.order_by('-created_at')


@extend_schema(
    request=SetBalanceSerializer,
    responses={200: BalanceSerializer},
    description="Get a wallet balance (owner or admin) or overwrite it (admin).",
    tags=['coins'],
)
@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def balance(request, user_id):
    """Read or set a user's coin balance."""
    if request.method == 'GET':
        if request.user.id != user_id and not request.user.is_platform_admin:
            return _forbidden()
        wallet = get_object_or_404(User, id=user_id)
        return Response(BalanceSerializer(wallet).data)

    if not request.user.is_platform_admin:
        return _forbidden()

    serializer = SetBalanceSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    get_object_or_404(User, id=user_id)

    set_balance(user_id=user_id, coins=serializer.validated_data['coins'], admin=request.user)
    return Response(BalanceSerializer(User.objects.get(id=user_id)).data)


@extend_schema(
    request=CoinAmountSerializer,
    responses={200: BalanceSerializer},
    description="Spend coins from a wallet (owner or admin).",
    tags=['coins'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def deduct(request, user_id):
    """Deduct coins from a wallet."""
    if request.user.id != user_id and not request.user.is_platform_admin:
        return _forbidden()

    serializer = CoinAmountSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    get_object_or_404(User, id=user_id)

    try:
        entry = deduct_coins(
            user_id=user_id,
            amount=serializer.validated_data['amount'],
            reason=serializer.validated_data.get('reason') or 'Manual deduction',
            ref_type=RefType.ADMIN if request.user.id != user_id else None,
        )
    except InsufficientCoinsError as e:
        return Response({
            'error': 'Insufficient coins',
            'details': str(e),
            'available': e.available,
            'required': e.required,
        }, status=status.HTTP_400_BAD_REQUEST)
    except InvalidAmountError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'user_id': user_id,
        'coins': entry.balance_after,
        'transaction': CoinTransactionSerializer(entry).data,
    })


@extend_schema(
    request=CoinAmountSerializer,
    responses={200: BalanceSerializer},
    description="Grant coins to a wallet (admin only).",
    tags=['coins'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsPlatformAdmin])
def add(request, user_id):
    """Add coins to a wallet."""
    serializer = CoinAmountSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    get_object_or_404(User, id=user_id)

    entry = credit_coins(
        user_id=user_id,
        amount=serializer.validated_data['amount'],
        reason=serializer.validated_data.get('reason') or 'Granted by admin',
        ref_type=RefType.ADMIN,
        ref_id=request.user.id,
    )
    return Response({
        'user_id': user_id,
        'coins': entry.balance_after,
        'transaction': CoinTransactionSerializer(entry).data,
    })


# =============================================================================
# PURCHASES & WEBHOOK
# =============================================================================

@extend_schema(
    request=PurchaseIntentSerializer,
    description="Create a Stripe Checkout session for a coin package.",
    tags=['coins'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def purchase_intent(request):
    """Start a coin purchase and return the checkout URL."""
    serializer = PurchaseIntentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        purchase, url = create_checkout_session(
            user=request.user,
            package_id=serializer.validated_data['package_id'],
            success_url=serializer.validated_data.get('success_url'),
            cancel_url=serializer.validated_data.get('cancel_url'),
        )
    except PackageNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except PaymentsNotConfiguredError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    except PaymentProviderError as e:
        return Response(
            {'error': 'Failed to create checkout session', 'details': str(e)},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response({
        'url': url,
        'sessionId': purchase.stripe_session_id,
        'purchase_id': purchase.id,
    })


@extend_schema(exclude=True)
@csrf_exempt
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def stripe_webhook(request):
    """Receive Stripe webhook deliveries."""
    signature = request.META.get('HTTP_STRIPE_SIGNATURE', '')

    try:
        body = handle_webhook_event(payload=request.body, signature=signature)
    except PaymentsNotConfiguredError as e:
        logger.error("Stripe webhook received but not configured")
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except WebhookVerificationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except PurchaseNotFoundError as e:
        logger.warning("Stripe webhook for unknown purchase: %s", e)
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(body)


# =============================================================================
# ADMIN: PACKAGES & CURRENCY RATES
# =============================================================================

@extend_schema(
    request=CoinPackageWriteSerializer,
    responses={200: CoinPackageSerializer(many=True), 201: CoinPackageSerializer},
    description="List all packages or create a new one (admin).",
    tags=['admin'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsPlatformAdmin])
def admin_packages(request):
    """List or create coin packages."""
    if request.method == 'GET':
        return Response(CoinPackageSerializer(get_all_packages(), many=True).data)

    serializer = CoinPackageWriteSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'error': 'Missing required fields', 'details': serializer.errors},
            status=status.HTTP_400_BAD_REQUEST
        )

    try:
        package = create_package(admin=request.user, **serializer.validated_data)
    except InvalidPackageError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(CoinPackageSerializer(package).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=CoinPackageWriteSerializer,
    responses={200: CoinPackageSerializer},
    description="Retrieve, update or delete a package (admin).",
    tags=['admin'],
)
@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsPlatformAdmin])
def admin_package_detail(request, package_id):
    """Manage a single coin package."""
    try:
        if request.method == 'GET':
            return Response(CoinPackageSerializer(get_package_by_id(package_id)).data)

        if request.method == 'DELETE':
            delete_package(package_id=package_id)
            return Response({'message': 'Package deleted successfully'})

        serializer = CoinPackageWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        package = update_package(
            package_id=package_id,
            data=serializer.validated_data,
            admin=request.user,
        )
    except PackageNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (InvalidPackageError, PackageInUseError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(CoinPackageSerializer(package).data)


@extend_schema(
    request=CurrencyRateWriteSerializer,
    responses={200: CurrencyRateSerializer},
    description="List all currency rates or create/update one (admin).",
    tags=['admin'],
)
@api_view(['GET', 'POST', 'PUT'])
@permission_classes([IsAuthenticated, IsPlatformAdmin])
def admin_currency_rates(request):
    """List or upsert currency rates."""
    if request.method == 'GET':
        return Response(CurrencyRateSerializer(get_all_currency_rates(), many=True).data)

    serializer = CurrencyRateWriteSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'error': 'Missing required fields', 'details': serializer.errors},
            status=status.HTTP_400_BAD_REQUEST
        )

    try:
        rate = upsert_currency_rate(admin=request.user, **serializer.validated_data)
    except InvalidCurrencyRateError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(CurrencyRateSerializer(rate).data)


@extend_schema(
    responses={200: CurrencyRateSerializer},
    description="Deactivate a currency rate (admin).",
    tags=['admin'],
)
@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsPlatformAdmin])
def admin_currency_rate_detail(request, currency):
    """Soft-delete a currency rate."""
    try:
        rate = delete_currency_rate(currency=currency, admin=request.user)
    except CurrencyNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response({
        'message': 'Currency rate deactivated',
        'currency': CurrencyRateSerializer(rate).data,
    })
