from rest_framework import serializers
from .models import ProfileBoost


class BoostActivateSerializer(serializers.Serializer):
    # Out-of-range values are clamped, not rejected
    minutes = serializers.IntegerField(required=False, allow_null=True)


class ProfileBoostSerializer(serializers.ModelSerializer):
    remaining_seconds = serializers.IntegerField(read_only=True)

    class Meta:
        model = ProfileBoost
        fields = ['id', 'started_at', 'expires_at', 'remaining_seconds']
        read_only_fields = fields
