from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from apps.common.pagination import StandardResultsSetPagination
from apps.users.serializers import UserBriefSerializer
from .aggregations import AggregationService
from .serializers import (
    SwipeSerializer, MatchIdSerializer, RequestRematchSerializer, BlockSerializer,
    ProfileViewSerializer, ComplimentCreateSerializer, ComplimentSerializer,
    LikeSerializer, ViewerSerializer, PassedSerializer, UnmatchEntrySerializer,
    ChatEntrySerializer,
)
from .services import (
    SwipeLedger, RelationshipService, ComplimentService, ProfileViewService,
)


def validated(serializer_class, data):
    serializer = serializer_class(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def paginated(request, entries, serializer_class):
    paginator = StandardResultsSetPagination()
    page = paginator.paginate_queryset(entries, request)
    return paginator.get_paginated_response(serializer_class(page, many=True).data)


# ============================================================================
# RELATIONSHIP VIEWSET
# ============================================================================
class RelationshipViewSet(viewsets.ViewSet):
    """
    State transitions between two users. Errors are raised by the services
    and rendered by the project exception handler.
    """
    permission_classes = [IsAuthenticated]

    @action(detail=False, methods=['post'])
    def swipe(self, request):
        """
        Record a swipe action (like, pass or superlike).

        POST /api/relationships/swipe/
        Body: {"swiped_id": "<uuid>", "action": "like"}
        """
        data = validated(SwipeSerializer, request.data)

        swipe, match, created = SwipeLedger.record(
            swiper=request.user,
            swiped_id=data['swiped_id'],
            action=data['action'],
        )

        return Response({
            'matched': match is not None,
            'match_id': str(match.id) if match else None,
            'other_user': UserBriefSerializer(swipe.swiped).data if match else None,
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def unmatch(self, request):
        data = validated(MatchIdSerializer, request.data)
        unmatch = RelationshipService.unmatch(request.user, data['match_id'])

        return Response({
            'success': True,
            'match_id': str(unmatch.match_id),
            'rematch_status': unmatch.rematch_status,
        })

    @action(detail=False, methods=['post'])
    def block(self, request):
        """
        Block a user.

        POST /api/relationships/block/
        Body: {
            "user_id": "<uuid>",
            "match_id": "<uuid>" (optional),
            "reason": "spam" (optional),
            "details": "..." (optional)
        }
        """
        data = validated(BlockSerializer, request.data)

        block, created = RelationshipService.block(
            request.user,
            data['user_id'],
            match_id=data.get('match_id'),
            reason=data.get('reason'),
            details=data.get('details'),
        )

        return Response({'success': True, 'created': created}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'], url_path='request-rematch')
    def request_rematch(self, request):
        data = validated(RequestRematchSerializer, request.data)

        unmatch, existing = RelationshipService.request_rematch(
            request.user,
            data['match_id'],
            other_user_id=data.get('other_user_id'),
        )

        if existing is not None:
            return Response({'success': True, 'matched': True, 'match_id': str(existing.id)})

        return Response({
            'success': True,
            'matched': False,
            'match_id': str(unmatch.match_id),
            'rematch_status': unmatch.rematch_status,
        })

    @action(detail=False, methods=['post'], url_path='accept-rematch')
    def accept_rematch(self, request):
        data = validated(MatchIdSerializer, request.data)
        match, requester_id = RelationshipService.accept_rematch(request.user, data['match_id'])

        return Response({
            'success': True,
            'matched': True,
            'match_id': str(match.id),
            'rematch_requester_id': str(requester_id),
        })

    @action(detail=False, methods=['post'], url_path='reject-rematch')
    def reject_rematch(self, request):
        data = validated(MatchIdSerializer, request.data)
        unmatch = RelationshipService.reject_rematch(request.user, data['match_id'])

        return Response({
            'success': True,
            'match_id': str(unmatch.match_id),
            'rematch_status': unmatch.rematch_status,
        })


# ============================================================================
# LIKES VIEWSET
# ============================================================================
class LikesViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    @action(detail=False, methods=['get'])
    def received(self, request):
        """
        Users who liked me, minus matches, unmatches and blocks.
        """
        likes = AggregationService.likes_received(request.user)
        return paginated(request, likes, LikeSerializer)

    @action(detail=False, methods=['get'])
    def sent(self, request):
        likes = AggregationService.likes_sent(request.user)
        return paginated(request, likes, LikeSerializer)

    @action(detail=False, methods=['get'])
    def passed(self, request):
        passed = AggregationService.passed_on(request.user)
        return paginated(request, passed, PassedSerializer)


# ============================================================================
# VIEWERS VIEWSET
# ============================================================================
class ViewersViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def list(self, request):
        viewers = AggregationService.viewers(request.user)
        return paginated(request, viewers, ViewerSerializer)

    @action(detail=False, methods=['post'])
    def record(self, request):
        """
        POST /api/viewers/record/
        Body: {"viewed_id": "<uuid>"}
        """
        data = validated(ProfileViewSerializer, request.data)
        view = ProfileViewService.record_view(request.user, data['viewed_id'])
        return Response({'success': True, 'viewed_at': view.created_at}, status=status.HTTP_201_CREATED)


# ============================================================================
# CHAT LIST VIEWSET
# ============================================================================
class ChatViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def list(self, request):
        """
        Matches, pending rematch requests and compliments, latest first.
        """
        chats = AggregationService.chat_list(request.user)
        return paginated(request, chats, ChatEntrySerializer)

    @action(detail=False, methods=['get'])
    def unmatches(self, request):
        entries = AggregationService.unmatches(request.user)
        return paginated(request, entries, UnmatchEntrySerializer)


# ============================================================================
# COMPLIMENT VIEWSET
# ============================================================================
class ComplimentViewSet(viewsets.ViewSet):
    """
    POST /api/compliments/               - send
    POST /api/compliments/{id}/accept/   - accept, creating the match
    POST /api/compliments/{id}/decline/  - decline
    """
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"[0-9a-fA-F]{8}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{12}"

    def create(self, request):
        data = validated(ComplimentCreateSerializer, request.data)
        compliment = ComplimentService.send(request.user, data['recipient_id'], data['message'])
        return Response(ComplimentSerializer(compliment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def accept(self, request, pk=None):
        compliment, match = ComplimentService.accept(request.user, pk)
        return Response({
            'success': True,
            'match_id': str(match.id),
            'compliment': ComplimentSerializer(compliment).data,
        })

    @action(detail=True, methods=['post'])
    def decline(self, request, pk=None):
        compliment = ComplimentService.decline(request.user, pk)
        return Response({'success': True, 'compliment': ComplimentSerializer(compliment).data})
