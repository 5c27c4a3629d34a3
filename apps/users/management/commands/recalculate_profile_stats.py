from django.core.management.base import BaseCommand
from django.db.models import Sum
from apps.users.models import Profile
from apps.matching.models import Match, ProfileView


class Command(BaseCommand):
    help = 'Recalculate profile statistics for all users'

    def handle(self, *args, **options):
        profiles = Profile.objects.all()
        total = profiles.count()

        self.stdout.write(f'Recalculating stats for {total} profiles...')

        updated_count = 0
        for profile in profiles.iterator():
            # Count current matches
            matches_count = Match.objects.for_user(profile.user_id).count()

            # Count profile views
            views_count = ProfileView.objects.filter(viewed_id=profile.user_id).count()

            profile.total_matches = matches_count
            profile.profile_views = views_count
            profile.save(update_fields=['total_matches', 'profile_views'])

            updated_count += 1

            if updated_count % 50 == 0:
                self.stdout.write(f'Processed {updated_count}/{total}...')

        self.stdout.write(self.style.SUCCESS(
            f'\n✅ Successfully updated stats for {updated_count} profiles'
        ))

        # Show summary
        totals = Profile.objects.aggregate(
            matches=Sum('total_matches'),
            views=Sum('profile_views'),
        )
        self.stdout.write('\nSummary:')
        self.stdout.write(f"Total matches: {(totals['matches'] or 0) // 2}")
        self.stdout.write(f"Total views: {totals['views'] or 0}")
