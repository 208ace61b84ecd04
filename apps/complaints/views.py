from django.db.models import Q
from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import IsPlatformAdmin

from .models import Complaint
from .serializers import (
    ComplaintSerializer,
    ComplaintDetailSerializer,
    ComplaintCreateSerializer,
    ComplaintProofSerializer,
    ComplaintRemarkSerializer,
    ProofUploadSerializer,
    RemarkCreateSerializer,
    ComplaintStatusSerializer,
    AdminRemarksSerializer,
    RefundSerializer,
    ComplaintFilterSerializer,
)
from .services import (
    create_complaint,
    add_proofs,
    add_remark,
    update_complaint_status,
    update_admin_remarks,
    refund_complaint,
    # Exceptions
    ComplaintsServiceError,
    ComplaintNotFoundError,
    ComplaintTargetNotFoundError,
    ComplaintPermissionError,
    InvalidComplaintTransitionError,
    TooManyProofsError,
)

UUID_PATTERN = '[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'

ERROR_STATUS = {
    ComplaintNotFoundError: status.HTTP_404_NOT_FOUND,
    ComplaintTargetNotFoundError: status.HTTP_404_NOT_FOUND,
    ComplaintPermissionError: status.HTTP_403_FORBIDDEN,
    InvalidComplaintTransitionError: status.HTTP_409_CONFLICT,
}


def _error_response(error):
    body = {'error': str(error)}
    if isinstance(error, TooManyProofsError) and error.current < error.limit:
        body['currentCount'] = error.current
        body['allowedMore'] = error.allowed_more
    code = ERROR_STATUS.get(type(error), status.HTTP_400_BAD_REQUEST)
    return Response(body, status=code)


class ComplaintViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for complaints.

    list: Admins see every complaint, others the ones they filed or that
        are against them (?status, ?user_id, ?complained_against_user_id)
    retrieve: Complaint with its proofs and remarks
    create: File a complaint as the current user
    proofs: Attach proof files (author or admin)
    remarks: Add a message to the thread (author or admin)
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):
        queryset = Complaint.objects.select_related('created_by', 'complained_against_user')
        user = self.request.user
        if not user.is_platform_admin:
            queryset = queryset.filter(Q(created_by=user) | Q(complained_against_user=user))
        if self.action == 'retrieve':
            queryset = queryset.prefetch_related('proofs', 'remarks__author')
        return queryset

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return ComplaintDetailSerializer
        if self.action == 'create':
            return ComplaintCreateSerializer
        return ComplaintSerializer

    @extend_schema(
        parameters=[
            OpenApiParameter('status', str, description='Filter by status'),
            OpenApiParameter('user_id', str, description='Filter by author'),
            OpenApiParameter('complained_against_user_id', str, description='Filter by accused user'),
        ],
    )
    def list(self, request, *args, **kwargs):
        filters = ComplaintFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        queryset = self.get_queryset()
        params = filters.validated_data
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('user_id'):
            queryset = queryset.filter(created_by_id=params['user_id'])
        if params.get('complained_against_user_id'):
            queryset = queryset.filter(complained_against_user_id=params['complained_against_user_id'])
        return Response(ComplaintSerializer(queryset, many=True).data)

    @extend_schema(request=ComplaintCreateSerializer, responses={201: ComplaintSerializer})
    def create(self, request, *args, **kwargs):
        """File a complaint."""
        serializer = ComplaintCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            complaint = create_complaint(
                author=request.user,
                target_type=data['target_type'],
                description=data['description'],
                target_id=data.get('target_id'),
                category=data.get('category') or '',
                complained_against_user_id=data.get('complained_against_user_id'),
            )
        except ComplaintsServiceError as e:
            return _error_response(e)

        body = ComplaintSerializer(complaint).data
        body['message'] = 'Complaint submitted successfully'
        return Response(body, status=status.HTTP_201_CREATED)

    @extend_schema(request=ProofUploadSerializer)
    @action(detail=True, methods=['post'])
    def proofs(self, request, pk=None):
        """Attach proof files. At most COMPLAINT_MAX_PROOFS per complaint."""
        serializer = ProofUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            created, total = add_proofs(
                complaint_id=pk,
                user=request.user,
                proofs=serializer.to_proof_list(),
            )
        except ComplaintsServiceError as e:
            return _error_response(e)

        return Response(
            {'proofs': ComplaintProofSerializer(created, many=True).data, 'totalProofs': total},
            status=status.HTTP_201_CREATED
        )

    @extend_schema(request=RemarkCreateSerializer, responses={201: ComplaintRemarkSerializer})
    @action(detail=True, methods=['post'])
    def remarks(self, request, pk=None):
        """Add a message to the complaint thread."""
        serializer = RemarkCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            remark = add_remark(
                complaint_id=pk,
                user=request.user,
                message=serializer.validated_data['message'],
            )
        except ComplaintsServiceError as e:
            return _error_response(e)

        return Response(ComplaintRemarkSerializer(remark).data, status=status.HTTP_201_CREATED)


# =============================================================================
# ADMIN QA
# =============================================================================

@extend_schema(
    parameters=[OpenApiParameter('status', str, description='Filter by status')],
    responses={200: ComplaintSerializer(many=True)},
    description="Complaints for review, most recently updated first.",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def admin_complaints(request):
    """List complaints for review."""
    filters = ComplaintFilterSerializer(data=request.query_params)
    filters.is_valid(raise_exception=True)

    queryset = Complaint.objects.select_related('created_by', 'complained_against_user')
    if filters.validated_data.get('status'):
        queryset = queryset.filter(status=filters.validated_data['status'])
    queryset = queryset.order_by('-updated_at')
    return Response(ComplaintSerializer(queryset, many=True).data)


@extend_schema(
    request=ComplaintStatusSerializer,
    description="Move a complaint to in_review or resolved.",
    tags=['admin'],
)
@api_view(['PATCH'])
@permission_classes([IsPlatformAdmin])
def admin_complaint_status(request, complaint_id):
    """Change the status of a complaint."""
    serializer = ComplaintStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        complaint = update_complaint_status(
            complaint_id=complaint_id,
            status=serializer.validated_data['status'],
            admin_remarks=serializer.validated_data.get('admin_remarks'),
        )
    except ComplaintsServiceError as e:
        return _error_response(e)

    return Response({'id': complaint.id, 'status': complaint.status})


@extend_schema(
    request=AdminRemarksSerializer,
    tags=['admin'],
)
@api_view(['PATCH'])
@permission_classes([IsPlatformAdmin])
def admin_complaint_remarks(request, complaint_id):
    """Replace the admin remarks of a complaint."""
    serializer = AdminRemarksSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        complaint = update_admin_remarks(
            complaint_id=complaint_id,
            remarks=serializer.validated_data.get('remarks'),
        )
    except ComplaintsServiceError as e:
        return _error_response(e)

    return Response({'id': complaint.id, 'admin_remarks': complaint.admin_remarks})


@extend_schema(
    request=RefundSerializer,
    description="Credit coins to the complainant and resolve the complaint. Once per complaint.",
    tags=['admin'],
)
@api_view(['POST'])
@permission_classes([IsPlatformAdmin])
def admin_complaint_refund(request, complaint_id):
    """Refund coins to the author of a complaint."""
    serializer = RefundSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'error': 'Invalid or missing coins amount (positive integer required)'},
            status=status.HTTP_400_BAD_REQUEST
        )

    try:
        result = refund_complaint(
            complaint_id=complaint_id,
            coins=serializer.validated_data['coins'],
            admin=request.user,
        )
    except ComplaintsServiceError as e:
        return _error_response(e)

    return Response(result)
