"""
Messaging Service Layer
========================
The chat log is opaque to the relationship engine: it only needs to append,
read back, re-key on rematch, and summarise (last message, unread count)
for the chat list.

Key Principle: Views should be thin - they handle HTTP, services handle business logic.
"""

from django.conf import settings
from django.db import transaction
from django.db.models import Count
from django.utils import timezone
import logging

from apps.matching.exceptions import (
    AlreadyBlocked, InvalidTransition, MatchNotFound, NotParticipant,
)
from apps.matching.models import Block, Match, Unmatch
from apps.users.utils.push_notifications import send_message_notification
from .models import Message

logger = logging.getLogger(__name__)


# ============================================================================
# MESSAGE SERVICE
# ============================================================================

class MessageService:
    """
    Encapsulates all business logic for messaging operations.
    """

    @staticmethod
    def append(sender, match_id, content):
        """
        Append a message to an active match.

        Raises:
            MatchNotFound: no active match with this id
            NotParticipant: sender is not part of the match
            AlreadyBlocked: a block now separates the pair
            InvalidTransition: empty or oversized content
        """
        content = (content or '').strip()
        if not content:
            raise InvalidTransition('Message content cannot be empty.')
        if len(content) > settings.MESSAGE_MAX_LENGTH:
            raise InvalidTransition(
                f'Message content too long (max {settings.MESSAGE_MAX_LENGTH} characters).'
            )

        match = Match.objects.filter(id=match_id).first()
        if match is None:
            raise MatchNotFound()
        if not match.involves(sender.id):
            raise NotParticipant('Unauthorized access to this chat.')

        other_user_id = match.other_user_id(sender.id)
        if Block.is_blocked(sender.id, other_user_id):
            raise AlreadyBlocked('Cannot send message due to block.')

        message = Message.objects.create(match_id=match.id, sender=sender, content=content)
        send_message_notification(sender, other_user_id, match.id, content)
        logger.info(f"Message appended to {match.id} by {sender.id}")
        return message

    @staticmethod
    def seed(match_id, sender_id, content):
        """
        Write an opening message on behalf of ``sender_id`` without checks.
        Used when an accepted compliment becomes the first chat message.
        """
        return Message.objects.create(match_id=match_id, sender_id=sender_id, content=content)

    @staticmethod
    def rekey(old_match_id, new_match_id):
        """
        Move a chat's history to a new match id.
        """
        moved = Message.objects.filter(match_id=old_match_id).update(match_id=new_match_id)
        if moved:
            logger.info(f"Re-keyed {moved} messages from {old_match_id} to {new_match_id}")
        return moved

    @staticmethod
    @transaction.atomic
    def history(user, match_id, mark_as_read=True):
        """
        Read a chat by match id.

        Readable while the match is active, and after an unmatch through the
        Unmatch record that archived it. A blocked pair reads an empty chat.
        Counterpart messages are marked read only while the match is active.

        Returns:
            dict: match_id, other_user_id, is_unmatched, is_blocked, messages
        """
        match = Match.objects.filter(id=match_id).first()
        if match is not None:
            relationship, is_unmatched = match, False
        else:
            relationship = Unmatch.objects.filter(match_id=match_id).first()
            is_unmatched = True
            if relationship is None:
                raise MatchNotFound()

        if not relationship.involves(user.id):
            raise NotParticipant('Unauthorized access to this chat.')

        other_user_id = relationship.other_user_id(user.id)
        is_blocked = Block.is_blocked(user.id, other_user_id)

        if is_blocked:
            messages = Message.objects.order_by('created_at').none()
        else:
            if mark_as_read and not is_unmatched:
                Message.objects.filter(
                    match_id=match_id, sender_id=other_user_id, is_read=False
                ).update(is_read=True, read_at=timezone.now())
            messages = Message.objects.filter(match_id=match_id).order_by('created_at')

        return {
            'match_id': match_id,
            'other_user_id': other_user_id,
            'is_unmatched': is_unmatched,
            'is_blocked': is_blocked,
            'messages': messages,
        }

    @staticmethod
    def last_message(match_id):
        return Message.objects.filter(match_id=match_id).order_by('-created_at').first()

    @staticmethod
    def unread_counts(match_ids, reader_id):
        """
        Unread messages per match, counting only what the other side sent.
        """
        rows = (
            Message.objects.filter(match_id__in=list(match_ids), is_read=False)
            .exclude(sender_id=reader_id)
            .values('match_id')
            .annotate(unread=Count('id'))
        )
        return {row['match_id']: row['unread'] for row in rows}
