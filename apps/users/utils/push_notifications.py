# apps/users/utils/push_notifications.py

import json
import logging
from typing import Dict, Any

import requests
from django.conf import settings
from django.db import transaction

from apps.users.models import DeviceToken, Profile

logger = logging.getLogger(__name__)


def send_push_notification(
    user_id: str,
    title: str,
    body: str,
    data: Dict[str, Any] = None
) -> bool:
    """
    Send push notification to a specific user.

    Delivery is best effort: failures are logged and reported through the
    return value, never raised to the caller.

    Args:
        user_id: User UUID
        title: Notification title
        body: Notification body
        data: Additional data to include

    Returns:
        bool: True if sent successfully
    """
    if not settings.PUSH_NOTIFICATIONS_ENABLED:
        return False

    data = data or {}

    try:
        enabled = Profile.objects.filter(user_id=user_id).values_list(
            'notifications_enabled', flat=True
        ).first()
        if enabled is False:
            logger.info(f'Push notification skipped for {user_id}: disabled in preferences')
            return False

        tokens = list(
            DeviceToken.objects.filter(user_id=user_id, is_active=True)
            .order_by('-last_seen_at')
            .values_list('token', flat=True)[:settings.PUSH_TOKENS_PER_USER]
        )

        if not tokens:
            logger.debug(f'No active tokens for user {user_id}')
            return False

        messages = [
            {
                'to': token,
                'sound': 'default',
                'title': title,
                'body': body,
                'data': data,
                'priority': 'high',
            }
            for token in tokens
        ]

        response = requests.post(
            settings.EXPO_PUSH_URL,
            headers={
                'Accept': 'application/json',
                'Accept-encoding': 'gzip, deflate',
                'Content-Type': 'application/json',
            },
            data=json.dumps(messages),
            timeout=10,
        )

        if response.status_code == 200:
            logger.info(f'Push notification sent to {user_id}: {data.get("type")}')
            return True

        logger.warning(f'Failed to send notification to {user_id}: {response.text}')
        return False

    except requests.RequestException as e:
        logger.error(f'Error sending push notification to {user_id}: {e}')
        return False


def notify_after_commit(user_id, title: str, body: str, data: Dict[str, Any] = None):
    """
    Queue a notification for when the surrounding transaction commits,
    so a rolled-back action never notifies anyone.
    """
    transaction.on_commit(
        lambda: send_push_notification(str(user_id), title, body, data),
        robust=True,
    )


# --- Relationship events ---

def send_like_notification(liker, liked_user_id, superlike=False):
    """Send notification when someone likes you."""
    body = (
        f'{liker.display_name} super liked you! 💫' if superlike
        else f'{liker.display_name} liked you! 💖'
    )
    notify_after_commit(
        liked_user_id,
        title='New Like!',
        body=body,
        data={'type': 'new_like', 'swiperId': str(liker.id)},
    )


def send_match_notification(user_id, matched_with, match_id):
    """Send notification when there's a mutual match."""
    notify_after_commit(
        user_id,
        title="It's a Match! 🎉",
        body=f'You and {matched_with.display_name} have matched! Tap to chat.',
        data={'type': 'match', 'matchId': str(match_id), 'swiperId': str(matched_with.id)},
    )


def send_compliment_notification(sender, recipient_id, compliment_id, message):
    """Send notification for a new compliment."""
    notify_after_commit(
        recipient_id,
        title='You received a new compliment! ✨',
        body=f'{sender.display_name} sent you a message: "{message[:100]}"',
        data={'type': 'new_compliment', 'complimentId': str(compliment_id)},
    )


def send_compliment_accepted_notification(accepter, sender_id, match_id):
    notify_after_commit(
        sender_id,
        title='Compliment Accepted! 💖',
        body=f"{accepter.display_name} accepted your compliment. It's a match!",
        data={'type': 'match', 'matchId': str(match_id)},
    )


def send_rematch_request_notification(requester, other_user_id, match_id):
    notify_after_commit(
        other_user_id,
        title='Rematch request',
        body=f'{requester.display_name} would like to match with you again.',
        data={'type': 'rematch_request', 'matchId': str(match_id)},
    )


def send_rematch_accepted_notification(accepter, requester_id, match_id):
    notify_after_commit(
        requester_id,
        title="You're matched again! 🎉",
        body=f'{accepter.display_name} accepted your rematch request.',
        data={'type': 'match', 'matchId': str(match_id)},
    )


def send_message_notification(sender, recipient_id, match_id, content):
    """Send notification for a new chat message."""
    notify_after_commit(
        recipient_id,
        title='New message',
        body=f'{sender.display_name}: {content[:120]}',
        data={'type': 'chat_message', 'matchId': str(match_id)},
    )
