import uuid
from unittest import mock

from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from apps.common.testing import make_user
from apps.matching.exceptions import (
    AlreadyBlocked, InvalidTransition, MatchNotFound, NotParticipant,
)
from apps.matching.models import Block
from apps.matching.services import MatchRegistry, RelationshipService
from apps.messaging.models import Message
from apps.messaging.services import MessageService


class MessageServiceTests(TestCase):

    def setUp(self):
        self.a = make_user()
        self.b = make_user()
        self.match, _ = MatchRegistry.create_if_absent(self.a.id, self.b.id)

    def test_append(self):
        message = MessageService.append(self.a, self.match.id, '  hello  ')

        self.assertEqual(message.content, 'hello')
        self.assertEqual(message.match_id, self.match.id)

    def test_append_rules(self):
        with self.assertRaises(InvalidTransition):
            MessageService.append(self.a, self.match.id, '   ')
        with self.assertRaises(MatchNotFound):
            MessageService.append(self.a, uuid.uuid4(), 'hello')
        with self.assertRaises(NotParticipant):
            MessageService.append(make_user(), self.match.id, 'hello')

    @override_settings(MESSAGE_MAX_LENGTH=5)
    def test_append_too_long(self):
        with self.assertRaises(InvalidTransition):
            MessageService.append(self.a, self.match.id, 'too long')

    def test_append_blocked(self):
        Block.objects.create(blocker=self.b, blocked=self.a)

        with self.assertRaises(AlreadyBlocked):
            MessageService.append(self.a, self.match.id, 'hello')

    def test_history_marks_counterpart_messages_read(self):
        MessageService.append(self.a, self.match.id, 'hi')
        MessageService.append(self.b, self.match.id, 'hey')

        chat = MessageService.history(self.b, self.match.id)

        self.assertFalse(chat['is_unmatched'])
        self.assertEqual(chat['other_user_id'], self.a.id)
        self.assertEqual([m.content for m in chat['messages']], ['hi', 'hey'])
        self.assertTrue(Message.objects.get(content='hi').is_read)
        self.assertFalse(Message.objects.get(content='hey').is_read)

    def test_history_survives_unmatch(self):
        MessageService.append(self.a, self.match.id, 'hi')
        RelationshipService.unmatch(self.b, self.match.id)

        chat = MessageService.history(self.a, self.match.id, mark_as_read=False)

        self.assertTrue(chat['is_unmatched'])
        self.assertEqual(len(chat['messages']), 1)

        with self.assertRaises(MatchNotFound):
            MessageService.append(self.a, self.match.id, 'still there?')
        with self.assertRaises(NotParticipant):
            MessageService.history(make_user(), self.match.id)

    def test_blocked_pair_reads_an_empty_chat(self):
        MessageService.append(self.a, self.match.id, 'hi')
        Block.objects.create(blocker=self.a, blocked=self.b)

        chat = MessageService.history(self.b, self.match.id)

        self.assertTrue(chat['is_blocked'])
        self.assertEqual(list(chat['messages']), [])
        self.assertFalse(Message.objects.get().is_read)

    def test_unmatched_chat_is_not_marked_read(self):
        MessageService.append(self.a, self.match.id, 'hi')
        RelationshipService.unmatch(self.a, self.match.id)

        chat = MessageService.history(self.b, self.match.id)

        self.assertEqual(len(chat['messages']), 1)
        self.assertFalse(Message.objects.get().is_read)

    @override_settings(PUSH_NOTIFICATIONS_ENABLED=True)
    def test_append_notifies_the_other_user(self):
        with mock.patch('apps.users.utils.push_notifications.send_push_notification') as send:
            with self.captureOnCommitCallbacks(execute=True):
                MessageService.append(self.a, self.match.id, 'hello there')

        send.assert_called_once()
        self.assertEqual(send.call_args.args[0], str(self.b.id))
        self.assertIn('hello there', send.call_args.args[2])
        self.assertEqual(send.call_args.args[3], {'type': 'chat_message', 'matchId': str(self.match.id)})

    def test_rekey(self):
        MessageService.append(self.a, self.match.id, 'one')
        MessageService.append(self.b, self.match.id, 'two')
        new_id = uuid.uuid4()

        self.assertEqual(MessageService.rekey(self.match.id, new_id), 2)
        self.assertEqual(Message.objects.filter(match_id=new_id).count(), 2)

    def test_unread_counts(self):
        MessageService.append(self.a, self.match.id, 'one')
        MessageService.append(self.a, self.match.id, 'two')
        MessageService.append(self.b, self.match.id, 'three')

        self.assertEqual(MessageService.unread_counts([self.match.id], self.b.id), {self.match.id: 2})
        self.assertEqual(MessageService.last_message(self.match.id).content, 'three')


class MessageAPITests(APITestCase):

    def setUp(self):
        self.a = make_user()
        self.b = make_user()
        self.match, _ = MatchRegistry.create_if_absent(self.a.id, self.b.id)
        self.client.force_authenticate(user=self.a)

    def test_send_and_read(self):
        response = self.client.post('/api/messages/', {'match_id': str(self.match.id), 'content': 'hello'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        self.client.force_authenticate(user=self.b)
        response = self.client.get('/api/messages/', {'match_id': str(self.match.id)})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['other_user']['id'], str(self.a.id))
        self.assertEqual([m['content'] for m in response.data['messages']], ['hello'])

    def test_history_requires_match_id(self):
        response = self.client.get('/api/messages/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'InvalidPayload')

    def test_history_is_paged(self):
        for i in range(3):
            MessageService.append(self.a, self.match.id, f'message {i}')

        response = self.client.get('/api/messages/', {'match_id': str(self.match.id), 'page_size': 2})

        self.assertEqual(response.data['count'], 3)
        self.assertIsNotNone(response.data['next'])
        self.assertEqual([m['content'] for m in response.data['messages']], ['message 0', 'message 1'])
