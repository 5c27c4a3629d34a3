"""
Messaging Serializers
======================
"""

from rest_framework import serializers
from .models import Message


class MessageSerializer(serializers.ModelSerializer):
    """
    Serializer for Message model.
    """

    class Meta:
        model = Message
        fields = ['id', 'match_id', 'sender', 'content', 'is_read', 'read_at', 'created_at']
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    """
    Serializer for creating messages.
    """

    match_id = serializers.UUIDField(required=True)
    content = serializers.CharField(required=True, trim_whitespace=True)


class HistoryQuerySerializer(serializers.Serializer):
    match_id = serializers.UUIDField(required=True)
    mark_as_read = serializers.BooleanField(required=False, default=True)
