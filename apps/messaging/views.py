"""
apps/messaging/views.py
"""

from rest_framework import viewsets, status
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from apps.common.pagination import MessagePagination
from apps.users.models import User
from apps.users.serializers import UserBriefSerializer
from .serializers import MessageSerializer, MessageCreateSerializer, HistoryQuerySerializer
from .services import MessageService


class MessageViewSet(viewsets.ViewSet):
    """
    GET  /api/messages/?match_id=<uuid>  - chat history (also after unmatch), oldest first, paged
    POST /api/messages/                  - append to an active match
    """
    permission_classes = [IsAuthenticated]

    def list(self, request):
        query = HistoryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        chat = MessageService.history(
            user=request.user,
            match_id=query.validated_data['match_id'],
            mark_as_read=query.validated_data['mark_as_read'],
        )
        other_user = User.objects.select_related('profile').filter(id=chat['other_user_id']).first()

        paginator = MessagePagination()
        page = paginator.paginate_queryset(chat['messages'], request)

        return Response({
            'match_id': str(chat['match_id']),
            'other_user': UserBriefSerializer(other_user).data if other_user else None,
            'is_unmatched': chat['is_unmatched'],
            'is_blocked': chat['is_blocked'],
            'count': paginator.page.paginator.count,
            'next': paginator.get_next_link(),
            'previous': paginator.get_previous_link(),
            'messages': MessageSerializer(page, many=True).data,
        })

    def create(self, request):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        message = MessageService.append(
            sender=request.user,
            match_id=serializer.validated_data['match_id'],
            content=serializer.validated_data['content'],
        )
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)
