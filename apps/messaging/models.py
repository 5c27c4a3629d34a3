"""
Chat Log Models
================
Messages form an append-only log keyed by a match id.

Design Decision: ``match_id`` is a plain UUID column, not a foreign key.
Match rows are hard-deleted on unmatch and block, and the conversation
must stay readable afterwards (and be carried over on rematch).
"""

from django.db import models
from django.conf import settings
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
import uuid


class Message(models.Model):
    """
    Individual messages within a match's chat.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    match_id = models.UUIDField(db_index=True)

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='sent_messages'
    )

    content = models.TextField(
        help_text=_('Message content')
    )

    # Message status
    is_read = models.BooleanField(default=False, db_index=True)
    read_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'messages'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['match_id', 'created_at'], name='messages_match_created_idx'),
            models.Index(fields=['match_id', 'sender', 'is_read'], name='messages_match_unread_idx'),
        ]

    def __str__(self):
        return f"Message from {self.sender_id} in {self.match_id}"
