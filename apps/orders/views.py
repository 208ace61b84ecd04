from uuid import UUID

from django.db import transaction
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.accounts.permissions import IsPlatformAdmin
from .models import Order
from .permissions import IsOrderParty
from .serializers import (
    OrderSerializer,
    OrderCreateSerializer,
    OrderUpdateSerializer,
    OrderStatusSerializer,
    OrderFilterSerializer,
    BuyerOrderSerializer,
    FarmerOrderSerializer,
)
from .services import (
    place_order,
    change_order_status,
    OrderNotFoundError,
    FieldNotFoundError,
    OwnFieldPurchaseError,
    InvalidOrderStatusError,
    OrderPermissionError,
    OrderPaymentError,
)

UUID_PATTERN = '[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'


def order_error_response(error):
    """Map an order service exception to an HTTP response."""
    if isinstance(error, (OrderNotFoundError, FieldNotFoundError)):
        return Response({'error': str(error)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(error, OrderPermissionError):
        return Response({'error': str(error)}, status=status.HTTP_403_FORBIDDEN)
    body = {'error': str(error)}
    if getattr(error, 'details', ''):
        body['details'] = error.details
    return Response(body, status=status.HTTP_400_BAD_REQUEST)


ORDER_ERRORS = (
    OrderNotFoundError,
    FieldNotFoundError,
    OwnFieldPurchaseError,
    InvalidOrderStatusError,
    OrderPermissionError,
    OrderPaymentError,
)


class OrderViewSet(viewsets.ModelViewSet):
    """
    ViewSet for orders.

    list: Role-scoped orders (admin: all or ?buyer_id / ?farmer_id)
    farmer_orders: Orders on a farmer's fields (?farmerId or self)
    farmer: Orders on the fields of the given farmer
    my_orders: Current buyer's orders with field details
    buyer: Orders of the given buyer with field details
    create: Place an order paid with coins
    update: Edit delivery details (a status goes through the workflow)
    set_status: Change status and settle coins
    destroy: Delete an order (admin)
    """

    permission_classes = [IsAuthenticated, IsOrderParty]
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):
        return Order.objects.select_related('field', 'field__owner', 'buyer')

    def get_serializer_class(self):
        if self.action == 'create':
            return OrderCreateSerializer
        if self.action in ('update', 'partial_update'):
            return OrderUpdateSerializer
        return OrderSerializer

    def get_permissions(self):
        if self.action == 'destroy':
            return [IsAuthenticated(), IsPlatformAdmin()]
        return super().get_permissions()

    def list(self, request, *args, **kwargs):
        """Orders visible to the current user's role."""
        user = request.user
        queryset = self.get_queryset()

        if user.is_platform_admin:
            filters = OrderFilterSerializer(data=request.query_params)
            filters.is_valid(raise_exception=True)
            buyer_id = filters.validated_data.get('buyer_id')
            farmer_id = filters.validated_data.get('farmer_id')
            if buyer_id:
                queryset = queryset.filter(buyer_id=buyer_id)
            elif farmer_id:
                queryset = queryset.filter(field__owner_id=farmer_id)
        elif user.is_buyer:
            queryset = queryset.filter(buyer=user)
        elif user.is_farmer:
            queryset = queryset.filter(field__owner=user)
        else:
            queryset = queryset.none()

        return Response(OrderSerializer(queryset, many=True).data)

    def create(self, request, *args, **kwargs):
        """Place an order as the current user."""
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = place_order(buyer=request.user, **serializer.validated_data)
        except ORDER_ERRORS as e:
            return order_error_response(e)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Update delivery details and, if given, the status."""
        partial = kwargs.pop('partial', False)
        order = self.get_object()
        serializer = OrderUpdateSerializer(order, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        new_status = serializer.validated_data.pop('status', None)
        try:
            with transaction.atomic():
                if new_status and new_status != order.status:
                    order = change_order_status(order_id=order.id, status=new_status, user=request.user)
                for attr, value in serializer.validated_data.items():
                    setattr(order, attr, value)
                order.save()
        except ORDER_ERRORS as e:
            return order_error_response(e)

        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=['put'], url_path='status')
    def set_status(self, request, pk=None):
        """Change the status of an order (field owner or admin)."""
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = change_order_status(
                order_id=pk,
                status=serializer.validated_data['status'],
                user=request.user
            )
        except ORDER_ERRORS as e:
            return order_error_response(e)

        return Response(OrderSerializer(order).data)

    def _farmer_orders(self, farmer_id):
        orders = self.get_queryset().filter(field__owner_id=farmer_id)
        return Response(FarmerOrderSerializer(orders, many=True).data)

    def _buyer_orders(self, buyer_id):
        orders = self.get_queryset().filter(buyer_id=buyer_id)
        return Response(BuyerOrderSerializer(orders, many=True).data)

    @staticmethod
    def _can_view(user, target_id):
        if user.is_platform_admin:
            return True
        try:
            return user.id == UUID(str(target_id))
        except ValueError:
            return False

    @action(detail=False, methods=['get'], url_path='farmer-orders')
    def farmer_orders(self, request):
        """Orders placed on a farmer's fields."""
        user = request.user
        farmer_id = request.query_params.get('farmerId') or (user.id if user.is_farmer else None)
        if not farmer_id:
            return Response({'error': 'Farmer ID is required'}, status=status.HTTP_400_BAD_REQUEST)
        try:
            farmer_id = UUID(str(farmer_id))
        except ValueError:
            return Response({'error': 'Invalid farmer ID'}, status=status.HTTP_400_BAD_REQUEST)
        if not self._can_view(user, farmer_id):
            return Response({'error': 'Access denied'}, status=status.HTTP_403_FORBIDDEN)
        return self._farmer_orders(farmer_id)

    @action(detail=False, methods=['get'], url_path=rf'farmer/(?P<farmer_id>{UUID_PATTERN})')
    def farmer(self, request, farmer_id=None):
        """Orders received by a specific farmer."""
        if not self._can_view(request.user, farmer_id):
            return Response({'error': 'Access denied'}, status=status.HTTP_403_FORBIDDEN)
        return self._farmer_orders(farmer_id)

    @action(detail=False, methods=['get'], url_path='my-orders')
    def my_orders(self, request):
        """Current buyer's orders. Other roles get an empty list."""
        if not request.user.is_buyer:
            return Response([])
        return self._buyer_orders(request.user.id)

    @action(detail=False, methods=['get'], url_path=rf'buyer/(?P<buyer_id>{UUID_PATTERN})')
    def buyer(self, request, buyer_id=None):
        """Orders placed by a specific buyer."""
        if not self._can_view(request.user, buyer_id):
            return Response({'error': 'Access denied'}, status=status.HTTP_403_FORBIDDEN)
        return self._buyer_orders(buyer_id)
