"""
Relationship Models
====================
Rows that together define the durable relationship between two users:

- Swipe: append-only like/pass/superlike events
- Match: one row per matched pair, stored in canonical order
- Unmatch: the archived, resumable record of a dissolved match
- Block / Report: directional records with symmetric effect
- ProfileView: "who viewed me" events
- Compliment: a message that can be accepted into a match
"""

from django.db import models
from django.db.models import Q, F
from django.conf import settings
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
import uuid


def canonical_pair(user_a_id, user_b_id):
    """
    Order two user ids so the smaller one comes first.

    Ids compare by their canonical lowercase hyphenated string form, which
    matches PostgreSQL's native uuid ordering, so the database check
    constraint and this function always agree on ``(user1, user2)``.
    """
    a = uuid.UUID(str(user_a_id))
    b = uuid.UUID(str(user_b_id))
    return (a, b) if str(a) < str(b) else (b, a)


def pair_q(user_a_id, user_b_id, first='user1', second='user2'):
    """
    Q object matching the canonical row for an unordered pair.
    """
    user1_id, user2_id = canonical_pair(user_a_id, user_b_id)
    return Q(**{f'{first}_id': user1_id, f'{second}_id': user2_id})


# ============================================================================
# SWIPE MODEL
# ============================================================================

class SwipeQuerySet(models.QuerySet):

    def positive(self):
        return self.filter(action__in=Swipe.POSITIVE_ACTIONS)

    def passes(self):
        return self.filter(action=Swipe.PASS)


class Swipe(models.Model):
    """
    Records every swipe action.

    Append-only: a later pass does not erase an earlier like. The engine only
    ever asks "has X ever liked Y", and any like/superlike row answers yes.
    """
    LIKE = 'like'
    PASS = 'pass'
    SUPERLIKE = 'superlike'

    ACTION_TYPES = [
        (LIKE, 'Like'),
        (PASS, 'Pass'),
        (SUPERLIKE, 'Super Like'),
    ]
    POSITIVE_ACTIONS = (LIKE, SUPERLIKE)

    swiper = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='swipes_made'
    )
    swiped = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='swipes_received'
    )
    action = models.CharField(max_length=20, choices=ACTION_TYPES, db_index=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    objects = SwipeQuerySet.as_manager()

    class Meta:
        db_table = 'swipes'
        indexes = [
            models.Index(fields=['swiper', 'swiped', 'action'], name='swipes_pair_action_idx'),
            models.Index(fields=['swiped', 'action', '-created_at'], name='swipes_received_idx'),
            models.Index(fields=['swiper', 'action', '-created_at'], name='swipes_made_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.swiper_id} {self.action} {self.swiped_id}"

    @property
    def is_positive(self):
        return self.action in self.POSITIVE_ACTIONS

    @classmethod
    def has_liked(cls, swiper_id, swiped_id):
        """
        True if ``swiper`` has ever liked or superliked ``swiped``.
        """
        return cls.objects.positive().filter(
            swiper_id=swiper_id, swiped_id=swiped_id
        ).exists()


# ============================================================================
# MATCH MODEL
# ============================================================================

class MatchQuerySet(models.QuerySet):

    def for_user(self, user_id):
        return self.filter(Q(user1_id=user_id) | Q(user2_id=user_id))

    def for_pair(self, user_a_id, user_b_id):
        return self.filter(pair_q(user_a_id, user_b_id))


class Match(models.Model):
    """
    A mutual, chat-enabled relationship between two users.

    Design Pattern: one row per unordered pair, ``user1 < user2``.
    The unique constraint on the pair is what makes concurrent mutual likes
    converge on a single row; the check constraint pins the ordering.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user1 = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='matches_as_user1'
    )
    user2 = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='matches_as_user2'
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    objects = MatchQuerySet.as_manager()

    class Meta:
        db_table = 'matches'
        constraints = [
            models.UniqueConstraint(fields=['user1', 'user2'], name='unique_match_pair'),
            models.CheckConstraint(condition=Q(user1__lt=F('user2')), name='match_canonical_order'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"Match {self.user1_id} <-> {self.user2_id}"

    def involves(self, user_id):
        return str(user_id) in (str(self.user1_id), str(self.user2_id))

    def other_user_id(self, user_id):
        return self.user2_id if str(self.user1_id) == str(user_id) else self.user1_id


# ============================================================================
# UNMATCH MODEL
# ============================================================================

class UnmatchQuerySet(models.QuerySet):

    def for_user(self, user_id):
        return self.filter(Q(user1_id=user_id) | Q(user2_id=user_id))

    def for_pair(self, user_a_id, user_b_id):
        return self.filter(pair_q(user_a_id, user_b_id))


class Unmatch(models.Model):
    """
    Archive of a deleted match, and the state of its rematch handshake.

    ``match_id`` keeps the deleted Match's id so chat history stays
    addressable. ``rematch_status`` is the only lock between the request and
    the answer: every transition re-reads and re-validates it.
    """
    NONE = 'none'
    PENDING = 'pending'
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'

    REMATCH_STATUS = [
        (NONE, 'None'),
        (PENDING, 'Pending'),
        (ACCEPTED, 'Accepted'),
        (REJECTED, 'Rejected'),
    ]

    match_id = models.UUIDField(unique=True, help_text=_('Id of the deleted match'))

    user1 = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='unmatches_as_user1'
    )
    user2 = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='unmatches_as_user2'
    )
    unmatched_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='unmatches_initiated'
    )

    rematch_requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='rematch_requests'
    )
    rematch_status = models.CharField(
        max_length=20,
        choices=REMATCH_STATUS,
        default=NONE,
        db_index=True
    )
    rematch_requested_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)

    objects = UnmatchQuerySet.as_manager()

    class Meta:
        db_table = 'unmatches'
        constraints = [
            models.UniqueConstraint(fields=['user1', 'user2'], name='unique_unmatch_pair'),
        ]
        indexes = [
            models.Index(fields=['rematch_status', 'rematch_requested_by'], name='unmatches_rematch_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"Unmatch {self.user1_id} <-> {self.user2_id} ({self.rematch_status})"

    def involves(self, user_id):
        return str(user_id) in (str(self.user1_id), str(self.user2_id))

    def other_user_id(self, user_id):
        return self.user2_id if str(self.user1_id) == str(user_id) else self.user1_id


# ============================================================================
# BLOCK MODEL
# ============================================================================

class Block(models.Model):
    """
    Users can block others to prevent them from appearing anywhere.

    Business Rule: the row is one-way, the effect is mutual invisibility,
    so every check looks in both directions.
    """
    blocker = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='blocks_made'
    )
    blocked = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='blocks_received'
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'blocks'
        unique_together = ['blocker', 'blocked']
        indexes = [
            models.Index(fields=['blocker', '-created_at'], name='blocks_blocker_idx'),
            models.Index(fields=['blocked', '-created_at'], name='blocks_blocked_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.blocker_id} blocked {self.blocked_id}"

    @classmethod
    def is_blocked(cls, user_a_id, user_b_id):
        """
        Check if either user has blocked the other.
        """
        return cls.objects.filter(
            Q(blocker_id=user_a_id, blocked_id=user_b_id) |
            Q(blocker_id=user_b_id, blocked_id=user_a_id)
        ).exists()

    @classmethod
    def blocked_ids_for(cls, user_id):
        """
        Ids of every user separated from ``user_id`` by a block, either way.
        """
        rows = cls.objects.filter(
            Q(blocker_id=user_id) | Q(blocked_id=user_id)
        ).values_list('blocker_id', 'blocked_id')

        blocked_ids = set()
        for blocker_id, blocked_id in rows:
            blocked_ids.add(blocked_id if str(blocker_id) == str(user_id) else blocker_id)
        return blocked_ids


# ============================================================================
# REPORT MODEL
# ============================================================================

class Report(models.Model):
    """
    Abuse report attached to a block. One per reporter -> reported pair;
    reporting again overwrites the reason.
    """
    reporter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='reports_made'
    )
    reported = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='reports_received'
    )
    reason = models.CharField(max_length=100)
    details = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'reports'
        unique_together = ['reporter', 'reported']
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.reporter_id} reported {self.reported_id}: {self.reason}"


# ============================================================================
# PROFILE VIEW MODEL
# ============================================================================

class ProfileView(models.Model):
    """
    Tracks when users view other profiles.
    Used for the "who viewed me" list.
    """
    viewer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='viewed_profiles'
    )
    viewed = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='profile_views_received'
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'profile_views'
        indexes = [
            models.Index(fields=['viewer', '-created_at'], name='profile_views_viewer_idx'),
            models.Index(fields=['viewed', '-created_at'], name='profile_views_viewed_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.viewer_id} viewed {self.viewed_id}"


# ============================================================================
# COMPLIMENT MODEL
# ============================================================================

class Compliment(models.Model):
    """
    A short opening message sent before matching.
    Accepting it creates the match and becomes the first chat message.
    """
    PENDING = 'pending'
    ACCEPTED = 'accepted'
    DECLINED = 'declined'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (ACCEPTED, 'Accepted'),
        (DECLINED, 'Declined'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='compliments_sent'
    )
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='compliments_received'
    )
    message = models.CharField(max_length=500)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING, db_index=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    accepted_at = models.DateTimeField(null=True, blank=True)
    declined_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'compliments'
        unique_together = ['sender', 'recipient']
        ordering = ['-created_at']

    def __str__(self):
        return f"Compliment {self.sender_id} -> {self.recipient_id} ({self.status})"
