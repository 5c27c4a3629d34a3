from rest_framework import status

from apps.matching.exceptions import InvalidTransition


class BoostAlreadyActive(InvalidTransition):
    status_code = status.HTTP_409_CONFLICT
    reason = 'BoostAlreadyActive'
    default_detail = 'You already have an active boost.'


class InsufficientBalance(InvalidTransition):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    reason = 'InsufficientBalance'
    default_detail = 'You have no boosts left.'
