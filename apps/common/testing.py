"""
Test data helpers shared by the app test suites.
"""

import uuid

from faker import Faker

from apps.users.models import User

fake = Faker()


def make_user(user_id=None, premium=False, boosts=0, **extra):
    """
    Create an active user (and, through the signal, its profile).
    """
    username = extra.pop('username', None) or f'{fake.user_name()}{uuid.uuid4().hex[:6]}'
    user = User.objects.create_user(
        email=extra.pop('email', None) or f'{username}@example.com',
        username=username,
        password='testpassword123',
        first_name=extra.pop('first_name', fake.first_name()),
        id=uuid.UUID(str(user_id)) if user_id else uuid.uuid4(),
        **extra,
    )
    if premium or boosts:
        profile = user.profile
        profile.is_premium = premium
        profile.boost_count = boosts
        profile.save(update_fields=['is_premium', 'boost_count'])
    return user
