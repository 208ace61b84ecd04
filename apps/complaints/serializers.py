import uuid

from rest_framework import serializers

from .models import Complaint, ComplaintProof, ComplaintRemark, ComplaintStatus


class ComplaintProofSerializer(serializers.ModelSerializer):
    class Meta:
        model = ComplaintProof
        fields = ['id', 'file_name', 'file_url', 'file_type', 'created_at']
        read_only_fields = fields


class ComplaintRemarkSerializer(serializers.ModelSerializer):
    complaint_id = serializers.UUIDField(read_only=True)
    created_by = serializers.UUIDField(source='author_id', read_only=True)
    author_name = serializers.CharField(source='author.name', read_only=True)
    author_type = serializers.CharField(source='author.user_type', read_only=True)

    class Meta:
        model = ComplaintRemark
        fields = ['id', 'complaint_id', 'created_by', 'message', 'created_at', 'author_name', 'author_type']
        read_only_fields = fields


class ComplaintSerializer(serializers.ModelSerializer):
    """Complaint with its author and the user it is against."""
    created_by = serializers.UUIDField(source='created_by_id', read_only=True)
    created_by_name = serializers.CharField(source='created_by.name', read_only=True)
    created_by_email = serializers.EmailField(source='created_by.email', read_only=True)
    created_by_type = serializers.CharField(source='created_by.user_type', read_only=True)
    complained_against_user_id = serializers.UUIDField(read_only=True)
    complained_against_user_name = serializers.CharField(
        source='complained_against_user.name', read_only=True, default=None
    )
    complained_against_user_email = serializers.EmailField(
        source='complained_against_user.email', read_only=True, default=None
    )
    complained_against_user_type = serializers.CharField(
        source='complained_against_user.user_type', read_only=True, default=None
    )

    class Meta:
        model = Complaint
        fields = [
            'id',
            'created_by',
            'created_by_name',
            'created_by_email',
            'created_by_type',
            'category',
            'target_type',
            'target_id',
            'description',
            'status',
            'admin_remarks',
            'refund_coins',
            'refunded_at',
            'complained_against_user_id',
            'complained_against_user_name',
            'complained_against_user_email',
            'complained_against_user_type',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ComplaintDetailSerializer(ComplaintSerializer):
    proofs = ComplaintProofSerializer(many=True, read_only=True)
    remarks = ComplaintRemarkSerializer(many=True, read_only=True)

    class Meta(ComplaintSerializer.Meta):
        fields = ComplaintSerializer.Meta.fields + ['proofs', 'remarks']
        read_only_fields = fields


class ComplaintCreateSerializer(serializers.Serializer):
    """
    Input for filing a complaint. The author is always the requester.
    Description and target type rules are checked by the service.
    """
    target_type = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    target_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    category = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False, default='')
    complained_against_user_id = serializers.UUIDField(required=False, allow_null=True)

    def validate_target_id(self, value):
        # Blank means a general complaint.
        if not value or not value.strip():
            return None
        try:
            return uuid.UUID(value.strip())
        except ValueError:
            raise serializers.ValidationError('Invalid target_id')


class ProofInputSerializer(serializers.Serializer):
    file_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    file_url = serializers.CharField(required=False, allow_blank=True)
    file_type = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)


class ProofUploadSerializer(serializers.Serializer):
    """Either a ``proofs`` list or a single proof at the top level."""
    proofs = ProofInputSerializer(many=True, required=False)
    file_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    file_url = serializers.CharField(required=False, allow_blank=True)
    file_type = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)

    def to_proof_list(self):
        data = self.validated_data
        if 'proofs' in data:
            return [dict(proof) for proof in data['proofs']]
        if data.get('file_name') and data.get('file_url'):
            return [{
                'file_name': data['file_name'],
                'file_url': data['file_url'],
                'file_type': data.get('file_type'),
            }]
        return []


class RemarkCreateSerializer(serializers.Serializer):
    message = serializers.CharField(required=False, allow_blank=True, default='')


class ComplaintStatusSerializer(serializers.Serializer):
    status = serializers.CharField(required=False, allow_blank=True, default='')
    admin_remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AdminRemarksSerializer(serializers.Serializer):
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class RefundSerializer(serializers.Serializer):
    coins = serializers.IntegerField(min_value=1)


class ComplaintFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ComplaintStatus.choices, required=False)
    user_id = serializers.UUIDField(required=False)
    complained_against_user_id = serializers.UUIDField(required=False)
