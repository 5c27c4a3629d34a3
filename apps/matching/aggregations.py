"""
Aggregation Views
==================
Read models derived from the relationship rows. Each one is computed per
request from Swipe, Match, Unmatch and Block; nothing is cached, so a block
or unmatch is reflected on the very next read.

Exclusion rules:
- Blocked in either direction: hidden everywhere.
- Matched, or unmatched in either direction: hidden from the like lists.
- Viewers and passed-on only apply the block rule.
"""

from django.db.models import Count, Max, Q

from apps.messaging.services import MessageService
from apps.users.models import User
from .models import Block, Compliment, Match, ProfileView, Swipe, Unmatch


def other_ids(pairs, user_id):
    """
    Given ``(user1_id, user2_id)`` rows that involve ``user_id``, return the
    set of counterpart ids.
    """
    me = str(user_id)
    return {user2_id if str(user1_id) == me else user1_id for user1_id, user2_id in pairs}


def users_by_id(user_ids):
    """
    Active users with profiles, keyed by id. Inactive accounts drop out.
    """
    users = User.objects.filter(id__in=list(user_ids), is_active=True).select_related('profile')
    return {user.id: user for user in users}


def message_summary(message):
    if message is None:
        return None
    return {
        'id': str(message.id),
        'sender_id': str(message.sender_id),
        'content': message.content,
        'created_at': message.created_at,
    }


# ============================================================================
# AGGREGATION SERVICE
# ============================================================================

class AggregationService:
    """
    Relationship-filtered read models for the likes, viewers and chat screens.
    """

    @staticmethod
    def matched_ids(user_id):
        return other_ids(Match.objects.for_user(user_id).values_list('user1_id', 'user2_id'), user_id)

    @staticmethod
    def unmatched_ids(user_id):
        return other_ids(Unmatch.objects.for_user(user_id).values_list('user1_id', 'user2_id'), user_id)

    @staticmethod
    def excluded_ids(user_id):
        """
        Everyone hidden from the like lists of ``user_id``.
        """
        return (
            AggregationService.matched_ids(user_id)
            | Block.blocked_ids_for(user_id)
            | AggregationService.unmatched_ids(user_id)
        )

    @staticmethod
    def _likes(rows, user_key):
        rows = list(rows)
        users = users_by_id(row[user_key] for row in rows)

        results = []
        for row in rows:
            user = users.get(row[user_key])
            if user is None:
                continue
            results.append({
                'user': user,
                'liked_at': row['liked_at'],
                'is_superlike': row['superlikes'] > 0,
            })
        return results

    @staticmethod
    def likes_received(user):
        """
        Users who liked ``user``, most recent like first.

        Returns:
            list of dicts: user, liked_at, is_superlike
        """
        rows = (
            Swipe.objects.positive()
            .filter(swiped_id=user.id)
            .exclude(swiper_id__in=AggregationService.excluded_ids(user.id))
            .values('swiper_id')
            .annotate(
                liked_at=Max('created_at'),
                superlikes=Count('id', filter=Q(action=Swipe.SUPERLIKE)),
            )
            .order_by('-liked_at')
        )
        return AggregationService._likes(rows, 'swiper_id')

    @staticmethod
    def likes_sent(user):
        """
        Users ``user`` liked, most recent like first.
        """
        rows = (
            Swipe.objects.positive()
            .filter(swiper_id=user.id)
            .exclude(swiped_id__in=AggregationService.excluded_ids(user.id))
            .values('swiped_id')
            .annotate(
                liked_at=Max('created_at'),
                superlikes=Count('id', filter=Q(action=Swipe.SUPERLIKE)),
            )
            .order_by('-liked_at')
        )
        return AggregationService._likes(rows, 'swiped_id')

    @staticmethod
    def viewers(user):
        """
        Who viewed ``user``, grouped by viewer.

        Returns:
            list of dicts: user, view_count, last_viewed_at
        """
        rows = list(
            ProfileView.objects.filter(viewed_id=user.id)
            .exclude(viewer_id=user.id)
            .exclude(viewer_id__in=Block.blocked_ids_for(user.id))
            .values('viewer_id')
            .annotate(view_count=Count('id'), last_viewed_at=Max('created_at'))
            .order_by('-last_viewed_at')
        )
        users = users_by_id(row['viewer_id'] for row in rows)

        return [
            {
                'user': users[row['viewer_id']],
                'view_count': row['view_count'],
                'last_viewed_at': row['last_viewed_at'],
            }
            for row in rows
            if row['viewer_id'] in users
        ]

    @staticmethod
    def passed_on(user):
        """
        Users ``user`` passed on, most recent pass first.
        """
        rows = list(
            Swipe.objects.passes()
            .filter(swiper_id=user.id)
            .exclude(swiped_id__in=Block.blocked_ids_for(user.id))
            .values('swiped_id')
            .annotate(passed_at=Max('created_at'))
            .order_by('-passed_at')
        )
        users = users_by_id(row['swiped_id'] for row in rows)

        return [
            {'user': users[row['swiped_id']], 'passed_at': row['passed_at']}
            for row in rows
            if row['swiped_id'] in users
        ]

    @staticmethod
    def unmatches(user):
        """
        The unmatch history of ``user`` plus the users who blocked them.

        Pending and accepted rematches are left out (they live in the chat
        list), as are users ``user`` blocked. When someone both unmatched
        and blocked ``user``, the block entry wins.

        Returns:
            list of dicts: user, type, match_id, unmatched_by, at
        """
        blocked_by_me = set(Block.objects.filter(blocker_id=user.id).values_list('blocked_id', flat=True))

        entries = {}
        unmatches = (
            Unmatch.objects.for_user(user.id)
            .exclude(rematch_status__in=[Unmatch.PENDING, Unmatch.ACCEPTED])
            .order_by('-created_at')
        )
        for unmatch in unmatches:
            other_id = unmatch.other_user_id(user.id)
            if other_id in blocked_by_me or other_id in entries:
                continue
            entries[other_id] = {
                'type': 'unmatched',
                'match_id': unmatch.match_id,
                'unmatched_by': 'me' if str(unmatch.unmatched_by_id) == str(user.id) else 'them',
                'rematch_status': unmatch.rematch_status,
                'at': unmatch.created_at,
            }

        for blocker_id, blocked_at in Block.objects.filter(blocked_id=user.id).values_list('blocker_id', 'created_at'):
            entries[blocker_id] = {
                'type': 'blocked',
                'match_id': None,
                'unmatched_by': 'them',
                'rematch_status': None,
                'at': blocked_at,
            }

        users = users_by_id(entries.keys())
        results = [dict(entry, user=users[user_id]) for user_id, entry in entries.items() if user_id in users]
        results.sort(key=lambda entry: entry['at'], reverse=True)
        return results

    # ------------------------------------------------------------------------
    # Chat list
    # ------------------------------------------------------------------------

    @staticmethod
    def chat_list(user):
        """
        Every conversation ``user`` can see, latest activity first.

        - active matches, with last message and unread count
        - pending rematch requests where ``user`` is the counterpart, listed
          under the old match id so the chat history stays reachable
        - rematch requests ``user`` made that were rejected
        - compliments received and still pending (shown as unread)
        - compliments sent that are pending or declined
        """
        blocked = Block.blocked_ids_for(user.id)
        entries = []

        matches = [m for m in Match.objects.for_user(user.id) if m.other_user_id(user.id) not in blocked]
        matched = {m.other_user_id(user.id) for m in matches}
        unread = MessageService.unread_counts([m.id for m in matches], user.id)
        for match in matches:
            last = MessageService.last_message(match.id)
            entries.append({
                'id': str(match.id),
                'type': 'match',
                'other_user_id': match.other_user_id(user.id),
                'created_at': match.created_at,
                'last_message': message_summary(last),
                'unread_count': unread.get(match.id, 0),
                'last_message_time': last.created_at if last else match.created_at,
                'is_unmatched': False,
            })

        pending = (
            Unmatch.objects.for_user(user.id)
            .filter(rematch_status=Unmatch.PENDING)
            .exclude(rematch_requested_by_id=user.id)
        )
        rejected = Unmatch.objects.for_user(user.id).filter(
            rematch_status=Unmatch.REJECTED, rematch_requested_by_id=user.id
        )
        for unmatch in list(pending) + list(rejected):
            other_id = unmatch.other_user_id(user.id)
            if other_id in blocked or other_id in matched:
                continue
            last = MessageService.last_message(unmatch.match_id)
            entry = {
                'id': str(unmatch.match_id),
                'type': 'rematch',
                'other_user_id': other_id,
                'created_at': unmatch.created_at,
                'last_message': message_summary(last),
                'unread_count': 0,
                'last_message_time': last.created_at if last else unmatch.created_at,
                'is_unmatched': True,
                'rematch_requested_by': str(unmatch.rematch_requested_by_id),
            }
            if unmatch.rematch_status == Unmatch.PENDING:
                entry['has_pending_rematch_request'] = True
            else:
                entry['is_rematch_rejected'] = True
            entries.append(entry)

        received = Compliment.objects.filter(recipient_id=user.id, status=Compliment.PENDING)
        sent = Compliment.objects.filter(
            sender_id=user.id, status__in=[Compliment.PENDING, Compliment.DECLINED]
        )
        for compliment in list(received) + list(sent):
            is_received = str(compliment.recipient_id) == str(user.id)
            other_id = compliment.sender_id if is_received else compliment.recipient_id
            if other_id in blocked or other_id in matched:
                continue
            entries.append({
                'id': f'compliment-{compliment.id}',
                'type': 'compliment_received' if is_received else 'compliment_sent',
                'other_user_id': other_id,
                'created_at': compliment.created_at,
                'last_message': {
                    'id': str(compliment.id),
                    'sender_id': str(compliment.sender_id),
                    'content': compliment.message,
                    'created_at': compliment.created_at,
                },
                'unread_count': 1 if is_received else 0,
                'last_message_time': compliment.created_at,
                'is_unmatched': False,
                'compliment_id': str(compliment.id),
                'compliment_status': compliment.status,
            })

        users = users_by_id(entry['other_user_id'] for entry in entries)
        results = []
        for entry in entries:
            other_user = users.get(entry.pop('other_user_id'))
            if other_user is None:
                continue
            entry['other_user'] = other_user
            results.append(entry)

        results.sort(key=lambda entry: entry['last_message_time'], reverse=True)
        return results
