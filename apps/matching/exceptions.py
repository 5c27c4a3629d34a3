"""
Relationship transition errors.

Each class names the precondition that failed. None of them are retried:
they are terminal for the request and the client is expected to refresh
its view of the relationship.
"""

from rest_framework import status

from apps.common.exceptions import DomainError, NotFound


class InvalidTransition(DomainError):
    reason = 'InvalidTransition'
    default_detail = 'This action is not allowed in the current state.'


class SelfAction(InvalidTransition):
    reason = 'SelfAction'
    default_detail = 'You cannot do this to yourself.'


class AlreadyBlocked(InvalidTransition):
    reason = 'AlreadyBlocked'
    default_detail = 'A block exists between these users.'


class AlreadyMatched(InvalidTransition):
    reason = 'AlreadyMatched'
    default_detail = 'You are already matched with this user.'


class AlreadyPending(InvalidTransition):
    reason = 'AlreadyPending'
    default_detail = 'Rematch request already pending.'


class AlreadyRequested(InvalidTransition):
    reason = 'AlreadyRequested'
    default_detail = 'You have already requested a rematch. Rematch requests can only be sent once.'


class RematchClosed(InvalidTransition):
    reason = 'RematchClosed'
    default_detail = 'Rematch request was rejected. You cannot request a rematch again.'


class NotPending(InvalidTransition):
    reason = 'NotPending'
    default_detail = 'No pending rematch request.'


class NotCounterparty(InvalidTransition):
    reason = 'NotCounterparty'
    default_detail = 'Only the other user can answer this request.'


class AlreadyResolved(InvalidTransition):
    reason = 'AlreadyResolved'
    default_detail = 'This compliment has already been answered.'


class AlreadySent(InvalidTransition):
    reason = 'AlreadySent'
    default_detail = 'You have already sent a compliment to this user.'


class DailyLimitReached(InvalidTransition):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    reason = 'DailyLimitReached'
    default_detail = 'Daily limit reached.'


class NotParticipant(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    reason = 'NotParticipant'
    default_detail = 'You are not part of this relationship.'


class MatchNotFound(NotFound):
    reason = 'MatchNotFound'
    default_detail = 'Match not found.'


class UnmatchNotFound(NotFound):
    reason = 'UnmatchNotFound'
    default_detail = 'Unmatch record not found.'


class ComplimentNotFound(NotFound):
    reason = 'ComplimentNotFound'
    default_detail = 'Compliment not found.'


class UserNotFound(NotFound):
    reason = 'UserNotFound'
    default_detail = 'User not found.'
