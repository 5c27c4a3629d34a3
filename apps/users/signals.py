from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import User, Profile


@receiver(post_save, sender=User)
def create_profile_for_new_user(sender, instance, created, **kwargs):
    """
    Every user gets a profile row; balances and counters live there.
    """
    if created:
        Profile.objects.get_or_create(user=instance)
