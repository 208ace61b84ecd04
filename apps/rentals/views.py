import logging

from django.db.models import Q
from django.utils import timezone
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import RentedField
from .permissions import IsRentalParty
from .serializers import (
    RentedFieldSerializer,
    RentalCreateSerializer,
    MyRentalSerializer,
    ActiveByFieldQuerySerializer,
)

logger = logging.getLogger(__name__)


class RentedFieldViewSet(viewsets.ModelViewSet):
    """
    ViewSet for field rentals.

    list: Admins see every rental, others the rentals they hold or grant
    my_rentals: The current user's rentals with field details
    active_by_field: Active rentals of one field (?field_id)
    create: Rent a field (farmers only)
    update: Change dates, price or status (renter, field owner or admin)
    destroy: Delete a rental (renter, field owner or admin)
    """

    serializer_class = RentedFieldSerializer
    permission_classes = [IsAuthenticated, IsRentalParty]

    def get_queryset(self):
        queryset = RentedField.objects.select_related('field', 'renter')
        user = self.request.user
        if self.action == 'list' and not user.is_platform_admin:
            queryset = queryset.filter(Q(renter=user) | Q(field__owner=user))
        return queryset

    def get_serializer_class(self):
        if self.action == 'create':
            return RentalCreateSerializer
        return RentedFieldSerializer

    def create(self, request, *args, **kwargs):
        """Rent another owner's field."""
        if not request.user.is_farmer:
            return Response(
                {'error': 'Only farmers can rent fields'},
                status=status.HTTP_403_FORBIDDEN
            )
        if not request.data.get('field_id'):
            return Response(
                {'error': 'field_id is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        field = serializer.validated_data['field']
        if field.owner_id == request.user.id:
            return Response(
                {'error': 'You cannot rent your own field'},
                status=status.HTTP_400_BAD_REQUEST
            )

        rental = serializer.save(renter=request.user)
        logger.info("User %s rented field %s (rental %s)", request.user.id, field.id, rental.id)
        return Response(RentedFieldSerializer(rental).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'], url_path='my-rentals')
    def my_rentals(self, request):
        """Current user's rentals, newest start date first."""
        rentals = (
            RentedField.objects
            .filter(renter=request.user)
            .select_related('field')
            .order_by('-start_date')
        )
        return Response(MyRentalSerializer(rentals, many=True).data)

    @action(detail=False, methods=['get'], url_path='active-by-field')
    def active_by_field(self, request):
        """Rentals of a field that are active today or later."""
        field_id = request.query_params.get('field_id')
        if not field_id:
            return Response(
                {'error': 'field_id query is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        query = ActiveByFieldQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        rentals = (
            RentedField.objects
            .filter(field_id=query.validated_data['field_id'])
            .active_on(timezone.localdate())
        )
        return Response(RentedFieldSerializer(rentals, many=True).data)
