import uuid

from django.test import TestCase, override_settings

from apps.common.testing import make_user
from apps.matching.exceptions import (
    AlreadyBlocked, AlreadyMatched, AlreadyResolved, AlreadySent,
    ComplimentNotFound, DailyLimitReached, InvalidTransition, NotParticipant,
    SelfAction,
)
from apps.matching.models import Block, Compliment, Match, Swipe
from apps.matching.services import ComplimentService, MatchRegistry
from apps.messaging.models import Message


class SendComplimentTests(TestCase):

    def setUp(self):
        self.sender = make_user()
        self.recipient = make_user()

    def test_send_records_a_superlike(self):
        compliment = ComplimentService.send(self.sender, self.recipient.id, '  Nice photos!  ')

        self.assertEqual(compliment.message, 'Nice photos!')
        self.assertEqual(compliment.status, Compliment.PENDING)
        swipe = Swipe.objects.get(swiper=self.sender, swiped=self.recipient)
        self.assertEqual(swipe.action, Swipe.SUPERLIKE)

    def test_existing_swipe_is_kept(self):
        Swipe.objects.create(swiper=self.sender, swiped=self.recipient, action=Swipe.LIKE)

        ComplimentService.send(self.sender, self.recipient.id, 'Hello')

        self.assertEqual(
            list(Swipe.objects.filter(swiper=self.sender).values_list('action', flat=True)),
            [Swipe.LIKE],
        )

    def test_validation(self):
        with self.assertRaises(InvalidTransition):
            ComplimentService.send(self.sender, self.recipient.id, '   ')
        with self.assertRaises(InvalidTransition):
            ComplimentService.send(self.sender, self.recipient.id, 'x' * 201)
        with self.assertRaises(SelfAction):
            ComplimentService.send(self.sender, self.sender.id, 'Me!')

    def test_only_one_per_pair(self):
        ComplimentService.send(self.sender, self.recipient.id, 'Hello')

        with self.assertRaises(AlreadySent):
            ComplimentService.send(self.sender, self.recipient.id, 'Hello again')

    def test_not_when_matched(self):
        MatchRegistry.create_if_absent(self.sender.id, self.recipient.id)

        with self.assertRaises(AlreadyMatched):
            ComplimentService.send(self.sender, self.recipient.id, 'Hello')

    def test_not_when_blocked(self):
        Block.objects.create(blocker=self.recipient, blocked=self.sender)

        with self.assertRaises(AlreadyBlocked):
            ComplimentService.send(self.sender, self.recipient.id, 'Hello')

    @override_settings(DAILY_COMPLIMENT_LIMIT=1)
    def test_daily_limit(self):
        ComplimentService.send(self.sender, self.recipient.id, 'Hello')

        with self.assertRaises(DailyLimitReached):
            ComplimentService.send(self.sender, make_user().id, 'Hello')


class AnswerComplimentTests(TestCase):

    def setUp(self):
        self.sender = make_user()
        self.recipient = make_user()
        self.compliment = ComplimentService.send(self.sender, self.recipient.id, 'Great smile')

    def test_accept_matches_and_seeds_the_chat(self):
        compliment, match = ComplimentService.accept(self.recipient, self.compliment.id)

        self.assertEqual(compliment.status, Compliment.ACCEPTED)
        self.assertIsNotNone(compliment.accepted_at)
        self.assertTrue(match.involves(self.sender.id))
        message = Message.objects.get(match_id=match.id)
        self.assertEqual(message.sender_id, self.sender.id)
        self.assertEqual(message.content, 'Great smile')

    def test_accept_reuses_an_existing_match(self):
        existing, _ = MatchRegistry.create_if_absent(self.sender.id, self.recipient.id)

        _, match = ComplimentService.accept(self.recipient, self.compliment.id)

        self.assertEqual(match.id, existing.id)
        self.assertEqual(Match.objects.count(), 1)

    def test_only_recipient_answers(self):
        with self.assertRaises(NotParticipant):
            ComplimentService.accept(self.sender, self.compliment.id)
        with self.assertRaises(NotParticipant):
            ComplimentService.decline(make_user(), self.compliment.id)

    def test_answer_once(self):
        ComplimentService.decline(self.recipient, self.compliment.id)

        with self.assertRaises(AlreadyResolved):
            ComplimentService.accept(self.recipient, self.compliment.id)
        with self.assertRaises(AlreadyResolved):
            ComplimentService.decline(self.recipient, self.compliment.id)
        self.assertFalse(Match.objects.exists())

    def test_accept_after_block(self):
        Block.objects.create(blocker=self.sender, blocked=self.recipient)

        with self.assertRaises(AlreadyBlocked):
            ComplimentService.accept(self.recipient, self.compliment.id)

    def test_unknown(self):
        with self.assertRaises(ComplimentNotFound):
            ComplimentService.accept(self.recipient, uuid.uuid4())
