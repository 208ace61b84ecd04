from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.accounts.permissions import IsOwnerOrPlatformAdmin
from .models import Farm, Field
from .serializers import FarmSerializer, FieldSerializer, OwnerFilterSerializer


def owner_filter(request):
    """Validated ?owner_id of the request, or None."""
    query = OwnerFilterSerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    return query.validated_data.get('owner_id')


class MergeUpdateMixin:
    """PUT behaves like PATCH: keys missing from the body keep their stored value."""

    def update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return super().update(request, *args, **kwargs)


class FarmViewSet(MergeUpdateMixin, viewsets.ModelViewSet):
    """
    ViewSet for Farm CRUD operations.

    list: Get all farms (optional ?owner_id)
    create: Create a farm owned by the current user
    retrieve: Get a specific farm
    update: Merge the body into the stored farm
    destroy: Delete a farm
    """

    serializer_class = FarmSerializer
    permission_classes = [IsAuthenticated, IsOwnerOrPlatformAdmin]

    def get_queryset(self):
        queryset = Farm.objects.select_related('owner')
        owner_id = owner_filter(self.request)
        if owner_id:
            queryset = queryset.filter(owner_id=owner_id)
        return queryset

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)


class FieldViewSet(MergeUpdateMixin, viewsets.ModelViewSet):
    """
    ViewSet for Field CRUD operations.

    list: Admins see every field (optional ?owner_id), others their own
    all: Every field on the marketplace
    available_to_rent: Other farmers' fields open for rent
    create: Create a field owned by the current user
    update: Merge the body into the stored field
    destroy: Delete a field (owner or admin)
    """

    serializer_class = FieldSerializer
    permission_classes = [IsAuthenticated, IsOwnerOrPlatformAdmin]
    queryset = Field.objects.all()

    def get_queryset(self):
        queryset = Field.objects.select_related('farm')
        if self.action != 'list':
            return queryset

        user = self.request.user
        if user.is_platform_admin:
            owner_id = owner_filter(self.request)
            if owner_id:
                queryset = queryset.filter(owner_id=owner_id)
            return queryset
        return queryset.filter(owner=user)

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)

    @action(detail=False, methods=['get'])
    def all(self, request):
        """Get every field regardless of owner."""
        fields = Field.objects.select_related('farm')
        return Response(FieldSerializer(fields, many=True).data)

    @action(detail=False, methods=['get'], url_path='available-to-rent')
    def available_to_rent(self, request):
        """Fields other farmers offer for rent."""
        if not request.user.is_farmer:
            return Response(
                {'error': 'Only farmers can rent fields'},
                status=status.HTTP_403_FORBIDDEN
            )

        fields = (
            Field.objects
            .filter(available=True, available_for_rent=True)
            .exclude(owner=request.user)
            .order_by('name')
        )
        return Response(FieldSerializer(fields, many=True).data)
