from rest_framework import serializers

from .constants import UnmaskDecision
from .models import UnmaskRequest


class UnmaskRequestCreateSerializer(serializers.Serializer):
    fields = serializers.ListField(
        child=serializers.CharField(max_length=64),
        allow_empty=False
    )
    justification = serializers.CharField(max_length=2000, trim_whitespace=True)


class UnmaskDecisionSerializer(serializers.Serializer):
    decision = serializers.ChoiceField(choices=UnmaskDecision.choices)
    ttl_minutes = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class UnmaskRequestSerializer(serializers.ModelSerializer):
    """Read serializer for unmask requests"""
    requester_name = serializers.CharField(source='requester.name', read_only=True)
    decided_by_name = serializers.CharField(source='decided_by.name', read_only=True, allow_null=True)
    subject_type = serializers.CharField(source='subject_type.model', read_only=True)
    effective_status = serializers.SerializerMethodField()
    is_active = serializers.SerializerMethodField()

    class Meta:
        model = UnmaskRequest
        fields = [
            'id', 'requester', 'requester_name', 'subject_type', 'subject_id',
            'fields', 'justification', 'status', 'effective_status', 'is_active',
            'created_at', 'decided_by', 'decided_by_name', 'decided_at',
            'expires_at', 'decision_reason',
        ]
        read_only_fields = fields

    def get_effective_status(self, obj):
        return obj.effective_status()

    def get_is_active(self, obj):
        return obj.is_active()


class FieldAccessLogSerializer(serializers.Serializer):
    """Works for FieldAccessLog rows and in-memory AuditEntry objects alike"""
    id = serializers.IntegerField()
    accessor_id = serializers.IntegerField()
    accessor_role = serializers.CharField()
    field_name = serializers.CharField()
    outcome = serializers.CharField()
    level = serializers.CharField()
    access_type = serializers.CharField()
    timestamp = serializers.DateTimeField()
    request_id = serializers.CharField()
    ip = serializers.CharField(allow_null=True)
    user_agent = serializers.CharField()
