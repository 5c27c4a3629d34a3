from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from django.db.models import F

from .models import Match, ProfileView
from apps.users.models import Profile


@receiver(post_save, sender=Match)
def update_match_count_on_save(sender, instance, created, **kwargs):
    """
    Update total_matches when a match is created.
    """
    if created:
        Profile.objects.filter(user_id__in=[instance.user1_id, instance.user2_id]).update(
            total_matches=F('total_matches') + 1
        )


@receiver(post_delete, sender=Match)
def update_match_count_on_delete(sender, instance, **kwargs):
    """
    Decrease total_matches when a match is deleted (but not below 0).
    """
    Profile.objects.filter(
        user_id__in=[instance.user1_id, instance.user2_id],
        total_matches__gt=0,
    ).update(total_matches=F('total_matches') - 1)


@receiver(post_save, sender=ProfileView)
def update_view_count(sender, instance, created, **kwargs):
    """
    Increment profile_views when someone views a profile.
    """
    if created:
        Profile.objects.filter(user_id=instance.viewed_id).update(
            profile_views=F('profile_views') + 1
        )
