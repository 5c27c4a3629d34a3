from django.conf import settings
from django.core.management.base import BaseCommand
from apps.boosts.services import BoostAllocator

class Command(BaseCommand):
    help = 'Delete boosts that expired more than BOOST_RETENTION_DAYS ago'

    def add_arguments(self, parser):
        parser.add_argument(
            '--days',
            type=int,
            default=settings.BOOST_RETENTION_DAYS,
            help='Retention window in days'
        )

    def handle(self, *args, **options):
        count = BoostAllocator.cleanup(retention_days=options['days'])

        if count > 0:
            self.stdout.write(
                self.style.SUCCESS(f'✅ Deleted {count} expired boosts')
            )
        else:
            self.stdout.write(
                self.style.SUCCESS('✓ No expired boosts to delete')
            )
