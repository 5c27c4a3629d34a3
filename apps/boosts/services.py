"""
Boost Allocator
================
Concurrency-safe grant of a time-bounded, single-active-instance boost
from a per-user balance.

The balance decrement and the boost insert happen in one transaction,
under a row lock on the user's profile. A request that loses a race
therefore either waits for the winner and then sees its boost, or (on
PostgreSQL, if the exclusion constraint fires) rolls its own decrement
back. Either way a losing attempt never spends balance.
"""

from datetime import timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone
import logging

from apps.common.exceptions import StorageError
from apps.matching.exceptions import DailyLimitReached
from apps.users.models import Profile
from .exceptions import BoostAlreadyActive, InsufficientBalance
from .models import ProfileBoost

logger = logging.getLogger(__name__)


def clamp_minutes(minutes):
    """
    Bound a requested duration to the configured window.
    Missing or unparseable values fall back to the default.
    """
    try:
        minutes = int(minutes)
    except (TypeError, ValueError):
        minutes = settings.BOOST_DEFAULT_MINUTES
    return max(settings.BOOST_MIN_MINUTES, min(settings.BOOST_MAX_MINUTES, minutes))


class BoostAllocator:

    @staticmethod
    def active(user):
        """
        The user's currently active boost, or None.
        """
        return ProfileBoost.objects.active().filter(user_id=user.id).order_by('-expires_at').first()

    @staticmethod
    def started_today(user):
        day_start = timezone.now().replace(hour=0, minute=0, second=0, microsecond=0)
        return ProfileBoost.objects.filter(user_id=user.id, started_at__gte=day_start).count()

    @staticmethod
    def activate(user, minutes=None):
        """
        Activate a boost for ``user``.

        Raises:
            BoostAlreadyActive: a boost is already running
            DailyLimitReached: the daily activation limit is used up
            InsufficientBalance: no boosts left

        Returns:
            ProfileBoost
        """
        minutes = clamp_minutes(minutes)

        try:
            with transaction.atomic():
                profile = Profile.objects.select_for_update().get(user_id=user.id)

                if BoostAllocator.active(user) is not None:
                    raise BoostAlreadyActive()
                if BoostAllocator.started_today(user) >= settings.BOOST_DAILY_LIMIT:
                    raise DailyLimitReached(
                        f'You can only activate {settings.BOOST_DAILY_LIMIT} boost(s) per day.'
                    )
                if profile.boost_count < 1:
                    raise InsufficientBalance()

                Profile.objects.filter(pk=profile.pk).update(boost_count=F('boost_count') - 1)

                now = timezone.now()
                boost = ProfileBoost.objects.create(
                    user_id=user.id,
                    started_at=now,
                    expires_at=now + timedelta(minutes=minutes),
                )
        except IntegrityError:
            existing = BoostAllocator.active(user)
            if existing is None:
                logger.error(f"Boost insert conflicted for {user.id} but no active boost found")
                raise StorageError()
            logger.info(f"Boost activation for {user.id} lost a race, returning {existing.id}")
            return existing

        logger.info(f"Boost {boost.id} activated for {user.id}: {minutes} minutes")
        return boost

    @staticmethod
    def cleanup(retention_days=None):
        """
        Delete boosts that expired more than ``retention_days`` ago.
        """
        if retention_days is None:
            retention_days = settings.BOOST_RETENTION_DAYS
        cutoff = timezone.now() - timedelta(days=retention_days)
        deleted, _ = ProfileBoost.objects.expired_before(cutoff).delete()
        return deleted
