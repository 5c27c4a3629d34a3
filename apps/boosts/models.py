"""
Boost Models
=============
A boost is a time-bounded visibility grant drawn from the
``Profile.boost_count`` balance. At most one is active per user at a time.
"""

from django.db import models
from django.conf import settings
from django.utils import timezone
import uuid


class ProfileBoostQuerySet(models.QuerySet):

    def active(self, at=None):
        at = at or timezone.now()
        return self.filter(started_at__lte=at, expires_at__gt=at)

    def expired_before(self, cutoff):
        return self.filter(expires_at__lte=cutoff)


class ProfileBoost(models.Model):
    """
    One activation of a boost.

    The active-boost invariant is held by the allocator's row lock on the
    user's profile; on PostgreSQL an exclusion constraint over
    ``(user, [started_at, expires_at))`` also backs it (see migration 0002).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='boosts'
    )
    started_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField(db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ProfileBoostQuerySet.as_manager()

    class Meta:
        db_table = 'profile_boosts'
        indexes = [
            models.Index(fields=['user', '-expires_at'], name='boosts_user_expires_idx'),
        ]
        ordering = ['-started_at']

    def __str__(self):
        return f"Boost {self.user_id} until {self.expires_at:%Y-%m-%d %H:%M}"

    @property
    def is_active(self):
        now = timezone.now()
        return self.started_at <= now < self.expires_at

    @property
    def remaining_seconds(self):
        return max(0, int((self.expires_at - timezone.now()).total_seconds()))
