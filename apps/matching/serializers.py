"""
Matching Serializers
=====================
Request payload validation for the relationship endpoints, and the
response shapes of the aggregation views.
"""

from rest_framework import serializers

from apps.users.serializers import UserBriefSerializer
from .models import Swipe, Compliment


# ============================================================================
# REQUEST PAYLOADS
# ============================================================================

class SwipeSerializer(serializers.Serializer):
    swiped_id = serializers.UUIDField()
    action = serializers.ChoiceField(choices=[choice for choice, _ in Swipe.ACTION_TYPES])


class MatchIdSerializer(serializers.Serializer):
    match_id = serializers.UUIDField()


class RequestRematchSerializer(MatchIdSerializer):
    other_user_id = serializers.UUIDField(required=False, allow_null=True)


class BlockSerializer(serializers.Serializer):
    """
    Block a user. ``reason`` attaches a report.
    """
    user_id = serializers.UUIDField()
    match_id = serializers.UUIDField(required=False, allow_null=True)
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    details = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ProfileViewSerializer(serializers.Serializer):
    viewed_id = serializers.UUIDField()


class ComplimentCreateSerializer(serializers.Serializer):
    recipient_id = serializers.UUIDField()
    # Emptiness and length are checked by ComplimentService.send
    message = serializers.CharField(allow_blank=True, trim_whitespace=False)


# ============================================================================
# RESPONSES
# ============================================================================

class ComplimentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Compliment
        fields = ['id', 'sender', 'recipient', 'message', 'status', 'created_at', 'accepted_at', 'declined_at']
        read_only_fields = fields


class LikeSerializer(serializers.Serializer):
    user = UserBriefSerializer()
    liked_at = serializers.DateTimeField()
    is_superlike = serializers.BooleanField()


class ViewerSerializer(serializers.Serializer):
    user = UserBriefSerializer()
    view_count = serializers.IntegerField()
    last_viewed_at = serializers.DateTimeField()


class PassedSerializer(serializers.Serializer):
    user = UserBriefSerializer()
    passed_at = serializers.DateTimeField()


class UnmatchEntrySerializer(serializers.Serializer):
    user = UserBriefSerializer()
    type = serializers.CharField()
    match_id = serializers.UUIDField(allow_null=True)
    unmatched_by = serializers.CharField()
    rematch_status = serializers.CharField(allow_null=True)
    at = serializers.DateTimeField()


class LastMessageSerializer(serializers.Serializer):
    id = serializers.CharField()
    sender_id = serializers.CharField()
    content = serializers.CharField()
    created_at = serializers.DateTimeField()


class ChatEntrySerializer(serializers.Serializer):
    """
    One row of the chat list. Rematch and compliment rows carry the
    extra flags the client needs to render their actions.
    """
    id = serializers.CharField()
    type = serializers.CharField()
    other_user = UserBriefSerializer()
    created_at = serializers.DateTimeField()
    last_message = LastMessageSerializer(allow_null=True)
    unread_count = serializers.IntegerField()
    last_message_time = serializers.DateTimeField()
    is_unmatched = serializers.BooleanField()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        for key in ('has_pending_rematch_request', 'is_rematch_rejected', 'rematch_requested_by',
                    'compliment_id', 'compliment_status'):
            if key in instance:
                data[key] = instance[key]
        return data
