from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from apps.users.models import Profile
from .serializers import BoostActivateSerializer, ProfileBoostSerializer
from .services import BoostAllocator


class BoostViewSet(viewsets.ViewSet):
    """
    POST /api/boosts/activate/  Body: {"minutes": 30} (optional)
    GET  /api/boosts/active/
    """
    permission_classes = [IsAuthenticated]

    @action(detail=False, methods=['post'])
    def activate(self, request):
        serializer = BoostActivateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        boost = BoostAllocator.activate(request.user, serializer.validated_data.get('minutes'))
        remaining = Profile.objects.filter(user=request.user).values_list('boost_count', flat=True).first()

        return Response({
            'success': True,
            'boost': ProfileBoostSerializer(boost).data,
            'boost_count': remaining,
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def active(self, request):
        boost = BoostAllocator.active(request.user)
        return Response({'boost': ProfileBoostSerializer(boost).data if boost else None})
