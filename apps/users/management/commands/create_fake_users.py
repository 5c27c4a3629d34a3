from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from django.db import DatabaseError
from apps.matching.models import Swipe
from apps.matching.services import MatchRegistry, SwipeLedger
from faker import Faker
import random

User = get_user_model()
fake = Faker()

class Command(BaseCommand):
    help = 'Create fake users with profiles and some mutual likes for testing'

    def add_arguments(self, parser):
        parser.add_argument(
            '--count',
            type=int,
            default=20,
            help='Number of fake users to create'
        )
        parser.add_argument(
            '--likes',
            type=int,
            default=5,
            help='Likes each fake user sends to other fake users'
        )

    def handle(self, *args, **options):
        count = options['count']

        self.stdout.write(f'Creating {count} fake users...')

        users = []
        for i in range(count):
            try:
                username = fake.user_name() + str(random.randint(1000, 9999))
                email = f"{username}@example.com"

                user = User.objects.create_user(
                    email=email,
                    username=username,
                    first_name=fake.first_name(),
                    last_name=fake.last_name(),
                    password='testpassword123'
                )

                # Profile is created by the post_save signal
                profile = user.profile
                profile.bio = fake.text(max_nb_chars=200)
                profile.photos = [fake.image_url() for _ in range(random.randint(1, 4))]
                profile.boost_count = random.randint(0, 3)
                profile.save()

                users.append(user)
                self.stdout.write(self.style.SUCCESS(f'✓ Created: {username}'))

            except DatabaseError as e:
                self.stdout.write(self.style.ERROR(f'✗ Error: {str(e)}'))

        matches = 0
        for user in users:
            others = [u for u in users if u.id != user.id]
            for target in random.sample(others, k=min(options['likes'], len(others))):
                action = random.choice([Swipe.LIKE, Swipe.LIKE, Swipe.SUPERLIKE, Swipe.PASS])
                # Seeding bypasses the daily like limit
                Swipe.objects.create(swiper=user, swiped=target, action=action)
                if action != Swipe.PASS and SwipeLedger.has_liked(target.id, user.id):
                    _, created = MatchRegistry.create_if_absent(user.id, target.id)
                    matches += int(created)

        self.stdout.write(self.style.SUCCESS(
            f'\n✅ Successfully created {len(users)} fake users and {matches} matches'
        ))
