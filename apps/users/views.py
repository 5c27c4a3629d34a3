"""
User Views
===========
Handles:
- Device token registration for push notifications
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from .models import DeviceToken
from .serializers import DeviceTokenSerializer


#======= Expo push notifications
class DeviceTokenViewSet(viewsets.ViewSet):
    """
    Manage device tokens for push notifications.
    """
    permission_classes = [IsAuthenticated]

    @action(detail=False, methods=['post'])
    def register(self, request):
        """
        Register or update device token.

        POST /api/device-tokens/register/
        Body: {
            "token": "ExponentPushToken[xxx]",
            "platform": "ios" or "android",
            "device_type": "iPhone 13"
        }
        """
        serializer = DeviceTokenSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        device_token, created = DeviceToken.objects.update_or_create(
            user=request.user,
            token=data['token'],
            defaults={
                'platform': data['platform'],
                'device_type': data.get('device_type', ''),
                'is_active': True
            }
        )

        return Response({
            'message': 'Token registered successfully',
            'created': created
        }, status=status.HTTP_200_OK)
