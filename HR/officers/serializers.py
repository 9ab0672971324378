from rest_framework import serializers

from core.privacy.constants import VisibilityLevel
from core.privacy.policy import OVERRIDE_COLUMNS
from HR.officers.dtos import OfficerVisibilityUpdateDTO


def _visibility_field():
    return serializers.ChoiceField(
        choices=VisibilityLevel.choices,
        required=False,
        allow_null=True
    )


class OfficerVisibilitySerializer(serializers.Serializer):
    """PATCH body for visibility overrides; null resets a column to the baseline"""
    phone_visibility = _visibility_field()
    email_visibility = _visibility_field()
    nid_visibility = _visibility_field()
    dob_visibility = _visibility_field()
    salary_visibility = _visibility_field()

    def validate(self, data):
        if not data:
            raise serializers.ValidationError(
                f"Provide at least one of: {', '.join(OVERRIDE_COLUMNS)}"
            )
        return data

    def to_dto(self, officer_id):
        return OfficerVisibilityUpdateDTO(
            officer_id=officer_id,
            overrides=dict(self.validated_data)
        )


class OfficerVisibilityReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    phone_visibility = serializers.CharField(allow_null=True)
    email_visibility = serializers.CharField(allow_null=True)
    nid_visibility = serializers.CharField(allow_null=True)
    dob_visibility = serializers.CharField(allow_null=True)
    salary_visibility = serializers.CharField(allow_null=True)
    updated_at = serializers.DateTimeField()
