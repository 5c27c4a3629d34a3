"""
Relationship Service Layer
===========================
Decides, from swipe/block/unmatch/rematch actions, what the durable
relationship between two users is.

- SwipeLedger: append-only like/pass/superlike events
- MatchRegistry: one Match per unordered pair, safe under concurrent inserts
- RelationshipService: unmatch, block and the rematch handshake
- ComplimentService: compliments that can be accepted into a match
- ProfileViewService: "who viewed me" events

Key Principle: Views should be thin - they handle HTTP, services handle business logic.
"""

from datetime import timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
import logging

from apps.common.exceptions import StorageError
from apps.messaging.services import MessageService
from apps.users.models import User
from apps.users.utils.push_notifications import (
    send_like_notification,
    send_match_notification,
    send_compliment_notification,
    send_compliment_accepted_notification,
    send_rematch_request_notification,
    send_rematch_accepted_notification,
)
from .exceptions import (
    AlreadyBlocked, AlreadyMatched, AlreadyPending, AlreadyRequested,
    AlreadyResolved, AlreadySent, ComplimentNotFound, DailyLimitReached,
    InvalidTransition, MatchNotFound, NotCounterparty, NotParticipant,
    NotPending, RematchClosed, SelfAction, UnmatchNotFound, UserNotFound,
)
from .models import (
    Block, Compliment, Match, ProfileView, Report, Swipe, Unmatch, canonical_pair,
)

logger = logging.getLogger(__name__)


def get_active_user(user_id):
    """
    Load the counterpart of an action, or raise UserNotFound.
    """
    user = User.objects.select_related('profile').filter(id=user_id, is_active=True).first()
    if user is None:
        raise UserNotFound()
    return user


def lock_pair(user_a_id, user_b_id):
    """
    Row-lock both users in canonical order. Concurrent actions on the same
    pair then run one after the other, and the later one sees the earlier
    one's committed rows.
    """
    for user_id in canonical_pair(user_a_id, user_b_id):
        User.objects.select_for_update().filter(id=user_id).values_list('id', flat=True).first()


def start_of_utc_day():
    return timezone.now().replace(hour=0, minute=0, second=0, microsecond=0)


# ============================================================================
# MATCH REGISTRY
# ============================================================================

class MatchRegistry:
    """
    Canonical, unique-per-pair match creation.

    Design Pattern: insert first, recover on conflict. The unique constraint
    on ``(user1, user2)`` decides the race; the loser re-reads the winner's
    row, so callers never see the conflict.
    """

    @staticmethod
    def create_if_absent(user_a_id, user_b_id):
        """
        Return the Match for the pair, creating it if none exists.

        The result is the same logical Match whichever order the ids are
        passed in.

        A new match takes over the chat of an earlier, unmatched match of the
        same pair: its messages move to the new id and the Unmatch record is
        dropped.

        Returns:
            tuple: (Match, created)
        """
        user1_id, user2_id = canonical_pair(user_a_id, user_b_id)

        try:
            with transaction.atomic():
                match = Match.objects.create(user1_id=user1_id, user2_id=user2_id)
        except IntegrityError:
            match = Match.objects.filter(user1_id=user1_id, user2_id=user2_id).first()
            if match is None:
                logger.error(f"Match insert conflicted but no row found for {user1_id} <-> {user2_id}")
                raise StorageError()
            logger.info(f"Match {match.id} already existed for {user1_id} <-> {user2_id}")
            return match, False

        MatchRegistry.resume_history(match)
        logger.info(f"Match created: {match.id} ({user1_id} <-> {user2_id})")
        return match, True

    @staticmethod
    def resume_history(match):
        """
        Move the pair's archived chat onto ``match`` and drop the Unmatch record.

        Returns:
            Unmatch or None: the record that was absorbed
        """
        unmatch = Unmatch.objects.filter(user1_id=match.user1_id, user2_id=match.user2_id).first()
        if unmatch is None:
            return None
        if unmatch.match_id != match.id:
            MessageService.rekey(unmatch.match_id, match.id)
        unmatch.delete()
        logger.info(f"Match {match.id} resumed chat of unmatched {unmatch.match_id}")
        return unmatch

    @staticmethod
    def delete(match_id):
        """
        Hard-delete a match. Archive it first: messages keep pointing at its id.
        """
        deleted, _ = Match.objects.filter(id=match_id).delete()
        return deleted > 0

    @staticmethod
    def get_for_pair(user_a_id, user_b_id):
        return Match.objects.for_pair(user_a_id, user_b_id).first()


# ============================================================================
# SWIPE LEDGER
# ============================================================================

class SwipeLedger:
    """
    Records swipes and turns mutual likes into matches.
    """

    @staticmethod
    def has_liked(swiper_id, swiped_id):
        return Swipe.has_liked(swiper_id, swiped_id)

    @staticmethod
    def likes_today(user):
        """
        Likes and superlikes in the last 24 hours.
        """
        since = timezone.now() - timedelta(hours=24)
        return Swipe.objects.positive().filter(swiper=user, created_at__gte=since).count()

    @staticmethod
    def record(swiper, swiped_id, action):
        """
        Record a swipe action and create the match when the like is mutual.

        A pass is only recorded. A like or superlike matches when the other
        side has ever liked back and the pair is not blocked.

        Args:
            swiper: User performing the swipe
            swiped_id: id of the user being swiped on
            action: 'like', 'pass' or 'superlike'

        Returns:
            tuple: (Swipe, Match or None, created)
        """
        if str(swiper.id) == str(swiped_id):
            raise SelfAction('You cannot swipe on yourself.')

        swiped = get_active_user(swiped_id)

        if action in Swipe.POSITIVE_ACTIONS:
            profile = getattr(swiper, 'profile', None)
            is_premium = profile.is_premium if profile else False
            if not is_premium and SwipeLedger.likes_today(swiper) >= settings.DAILY_LIKE_LIMIT:
                raise DailyLimitReached(
                    f'Daily like limit reached ({settings.DAILY_LIKE_LIMIT}). Upgrade to premium for unlimited likes.'
                )

        match, created = None, False
        with transaction.atomic():
            lock_pair(swiper.id, swiped.id)
            swipe = Swipe.objects.create(swiper=swiper, swiped=swiped, action=action)

            if swipe.is_positive and SwipeLedger.has_liked(swiped.id, swiper.id):
                if Block.is_blocked(swiper.id, swiped.id):
                    logger.info(f"Mutual like between blocked users {swiper.id} and {swiped.id}, no match")
                else:
                    match, created = MatchRegistry.create_if_absent(swiper.id, swiped.id)

            if created:
                send_match_notification(swiper.id, matched_with=swiped, match_id=match.id)
                send_match_notification(swiped.id, matched_with=swiper, match_id=match.id)
            elif swipe.is_positive and match is None:
                send_like_notification(swiper, swiped.id, superlike=action == Swipe.SUPERLIKE)

        logger.info(f"Swipe recorded: {swiper.id} {action} {swiped.id}")
        return swipe, match, created


# ============================================================================
# RELATIONSHIP STATE MACHINE
# ============================================================================

class RelationshipService:
    """
    Transitions between matched, unmatched, rematch-pending and blocked.

    Every transition re-reads the rows it depends on inside a transaction and
    re-validates their status: between the two halves of a rematch handshake
    no lock is held, so ``Unmatch.rematch_status`` is the only source of truth.
    """

    @staticmethod
    def _load_unmatch(user, match_id):
        unmatch = Unmatch.objects.select_for_update().filter(match_id=match_id).first()
        if unmatch is None:
            raise UnmatchNotFound()
        if not unmatch.involves(user.id):
            raise NotParticipant('You are not part of this unmatch.')
        return unmatch

    @staticmethod
    @transaction.atomic
    def unmatch(user, match_id):
        """
        Dissolve a match, keeping an Unmatch record so the chat stays readable
        and a rematch can be requested.

        An earlier rejected rematch for the same pair stays rejected.

        Returns:
            Unmatch
        """
        match = Match.objects.select_for_update().filter(id=match_id).first()
        if match is None:
            raise MatchNotFound()
        if not match.involves(user.id):
            raise NotParticipant('You are not part of this match.')

        unmatch = Unmatch.objects.select_for_update().filter(
            user1_id=match.user1_id, user2_id=match.user2_id
        ).first()

        if unmatch is None:
            unmatch = Unmatch.objects.create(
                match_id=match.id,
                user1_id=match.user1_id,
                user2_id=match.user2_id,
                unmatched_by=user,
            )
        else:
            if unmatch.rematch_status != Unmatch.REJECTED:
                unmatch.rematch_status = Unmatch.NONE
                unmatch.rematch_requested_by = None
                unmatch.rematch_requested_at = None
            MessageService.rekey(unmatch.match_id, match.id)
            unmatch.match_id = match.id
            unmatch.unmatched_by = user
            unmatch.created_at = timezone.now()
            unmatch.save()

        match.delete()

        logger.info(f"Unmatch: {user.id} dissolved match {match_id}")
        return unmatch

    @staticmethod
    @transaction.atomic
    def block(user, target_id, match_id=None, reason=None, details=None):
        """
        Block a user, optionally reporting them.

        Deletes any match between the two. No Unmatch record is written: the
        Block row alone records the severed relationship.

        Returns:
            tuple: (Block, created)
        """
        if str(user.id) == str(target_id):
            raise SelfAction('You cannot block yourself.')

        target = get_active_user(target_id)

        block, created = Block.objects.get_or_create(blocker=user, blocked=target)

        if reason:
            Report.objects.update_or_create(
                reporter=user,
                reported=target,
                defaults={'reason': reason, 'details': details},
            )

        if match_id:
            match = Match.objects.filter(id=match_id).first()
            if match is not None and match.involves(user.id):
                match.delete()

        Match.objects.for_pair(user.id, target.id).delete()

        logger.info(f"Block: {user.id} blocked {target.id}" + (f" (reported: {reason})" if reason else ''))
        return block, created

    @staticmethod
    @transaction.atomic
    def request_rematch(user, match_id, other_user_id=None):
        """
        Ask to re-establish an unmatched relationship.

        If the pair has been matched again by another path in the meantime,
        the Unmatch record is dropped and the existing match is returned.

        Returns:
            tuple: (Unmatch or None, existing Match or None)
        """
        unmatch = RelationshipService._load_unmatch(user, match_id)
        other_id = unmatch.other_user_id(user.id)

        if other_user_id and str(other_user_id) != str(other_id):
            raise NotParticipant('The other user is not part of this unmatch.')

        existing = MatchRegistry.get_for_pair(user.id, other_id)
        if existing is not None:
            unmatch.delete()
            logger.info(f"Rematch request by {user.id} resolved to existing match {existing.id}")
            return None, existing

        if Block.is_blocked(user.id, other_id):
            raise AlreadyBlocked('Cannot request a rematch with a blocked user.')
        if unmatch.rematch_status == Unmatch.PENDING:
            raise AlreadyPending()
        if str(unmatch.rematch_requested_by_id) == str(user.id):
            raise AlreadyRequested()
        if unmatch.rematch_status == Unmatch.REJECTED:
            raise RematchClosed()
        if unmatch.rematch_status != Unmatch.NONE:
            raise InvalidTransition(f'Cannot request a rematch from status {unmatch.rematch_status}.')

        unmatch.rematch_status = Unmatch.PENDING
        unmatch.rematch_requested_by = user
        unmatch.rematch_requested_at = timezone.now()
        unmatch.save(update_fields=['rematch_status', 'rematch_requested_by', 'rematch_requested_at'])

        send_rematch_request_notification(user, other_id, unmatch.match_id)

        logger.info(f"Rematch requested by {user.id} for {unmatch.match_id}")
        return unmatch, None

    @staticmethod
    def _validate_answer(user, unmatch):
        if unmatch.rematch_status != Unmatch.PENDING:
            raise NotPending()
        if str(unmatch.rematch_requested_by_id) == str(user.id):
            raise NotCounterparty('You cannot answer your own rematch request.')

    @staticmethod
    @transaction.atomic
    def accept_rematch(user, match_id):
        """
        Accept the counterpart's rematch request.

        Creates the new match, moves the old chat history onto it and
        deletes the Unmatch record.

        Returns:
            tuple: (Match, requester id)
        """
        unmatch = RelationshipService._load_unmatch(user, match_id)
        RelationshipService._validate_answer(user, unmatch)

        other_id = unmatch.other_user_id(user.id)
        if Block.is_blocked(user.id, other_id):
            raise AlreadyBlocked('Cannot rematch with a blocked user.')

        requester_id = unmatch.rematch_requested_by_id
        match, created = MatchRegistry.create_if_absent(user.id, other_id)
        if not created:
            MatchRegistry.resume_history(match)

        send_rematch_accepted_notification(user, requester_id, match.id)

        logger.info(f"Rematch accepted by {user.id}: {match_id} -> {match.id}")
        return match, requester_id

    @staticmethod
    @transaction.atomic
    def reject_rematch(user, match_id):
        """
        Reject the counterpart's rematch request. Rejection is permanent.

        Returns:
            Unmatch
        """
        unmatch = RelationshipService._load_unmatch(user, match_id)
        RelationshipService._validate_answer(user, unmatch)

        unmatch.rematch_status = Unmatch.REJECTED
        unmatch.save(update_fields=['rematch_status'])

        logger.info(f"Rematch rejected by {user.id} for {match_id}")
        return unmatch


# ============================================================================
# COMPLIMENT SERVICE
# ============================================================================

class ComplimentService:
    """
    Compliments are opening messages sent before a match.
    Accepting one goes through the Match Registry like any other match.
    """

    @staticmethod
    def sent_today(user):
        return Compliment.objects.filter(sender=user, created_at__gte=start_of_utc_day()).count()

    @staticmethod
    def send(sender, recipient_id, message):
        """
        Send a compliment.

        Also records a superlike from the sender, unless they already swiped
        on the recipient.

        Returns:
            Compliment
        """
        message = (message or '').strip()
        if not message:
            raise InvalidTransition('Compliment message cannot be empty.')
        if len(message) > settings.COMPLIMENT_MAX_LENGTH:
            raise InvalidTransition(
                f'Compliment message too long (max {settings.COMPLIMENT_MAX_LENGTH} characters).'
            )
        if str(sender.id) == str(recipient_id):
            raise SelfAction('You cannot send a compliment to yourself.')

        recipient = get_active_user(recipient_id)

        if ComplimentService.sent_today(sender) >= settings.DAILY_COMPLIMENT_LIMIT:
            raise DailyLimitReached(
                f'Daily compliment limit reached ({settings.DAILY_COMPLIMENT_LIMIT} per day).'
            )
        if Compliment.objects.filter(sender=sender, recipient=recipient).exists():
            raise AlreadySent()
        if Match.objects.for_pair(sender.id, recipient.id).exists():
            raise AlreadyMatched()
        if Block.is_blocked(sender.id, recipient.id):
            raise AlreadyBlocked('Cannot send a compliment to this user.')

        try:
            with transaction.atomic():
                compliment = Compliment.objects.create(sender=sender, recipient=recipient, message=message)
                if not Swipe.objects.filter(swiper=sender, swiped=recipient).exists():
                    Swipe.objects.create(swiper=sender, swiped=recipient, action=Swipe.SUPERLIKE)
                send_compliment_notification(sender, recipient.id, compliment.id, message)
        except IntegrityError:
            raise AlreadySent()

        logger.info(f"Compliment sent: {sender.id} -> {recipient.id}")
        return compliment

    @staticmethod
    def _load_for_recipient(user, compliment_id):
        compliment = Compliment.objects.select_for_update().filter(id=compliment_id).first()
        if compliment is None:
            raise ComplimentNotFound()
        if str(compliment.recipient_id) != str(user.id):
            raise NotParticipant('Only the recipient can answer this compliment.')
        if compliment.status != Compliment.PENDING:
            raise AlreadyResolved()
        return compliment

    @staticmethod
    @transaction.atomic
    def accept(user, compliment_id):
        """
        Accept a compliment: match with the sender and open the chat with
        the compliment text.

        Returns:
            tuple: (Compliment, Match)
        """
        compliment = ComplimentService._load_for_recipient(user, compliment_id)
        if Block.is_blocked(compliment.sender_id, user.id):
            raise AlreadyBlocked('Cannot accept a compliment from this user.')

        match, _ = MatchRegistry.create_if_absent(compliment.sender_id, user.id)

        compliment.status = Compliment.ACCEPTED
        compliment.accepted_at = timezone.now()
        compliment.save(update_fields=['status', 'accepted_at'])

        MessageService.seed(match.id, compliment.sender_id, compliment.message)
        send_compliment_accepted_notification(user, compliment.sender_id, match.id)

        logger.info(f"Compliment {compliment.id} accepted, match {match.id}")
        return compliment, match

    @staticmethod
    @transaction.atomic
    def decline(user, compliment_id):
        compliment = ComplimentService._load_for_recipient(user, compliment_id)

        compliment.status = Compliment.DECLINED
        compliment.declined_at = timezone.now()
        compliment.save(update_fields=['status', 'declined_at'])

        logger.info(f"Compliment {compliment.id} declined")
        return compliment


# ============================================================================
# PROFILE VIEWS
# ============================================================================

class ProfileViewService:

    @staticmethod
    def record_view(viewer, viewed_id):
        """
        Record that ``viewer`` opened a profile. The viewed profile's counter
        is maintained by a signal.
        """
        if str(viewer.id) == str(viewed_id):
            raise SelfAction('Viewing your own profile is not recorded.')

        viewed = get_active_user(viewed_id)
        return ProfileView.objects.create(viewer=viewer, viewed=viewed)
