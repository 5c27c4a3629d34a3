"""
User Serializers
=================
Read-side shapes for the profile fields the relationship endpoints return
alongside their results.
"""

from rest_framework import serializers

from .models import User, DeviceToken


class UserBriefSerializer(serializers.ModelSerializer):
    """
    Lightweight user serializer for lists.
    """
    name = serializers.CharField(source='display_name', read_only=True)
    photos = serializers.SerializerMethodField()
    primary_photo = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'username', 'first_name', 'last_name', 'name', 'photos', 'primary_photo']

    def get_photos(self, obj):
        profile = getattr(obj, 'profile', None)
        return list(profile.photos) if profile else []

    def get_primary_photo(self, obj):
        """
        Get URL of primary photo.
        """
        profile = getattr(obj, 'profile', None)
        return profile.primary_photo if profile else None


class DeviceTokenSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeviceToken
        fields = ['token', 'platform', 'device_type']
