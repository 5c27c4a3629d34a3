import uuid

from rest_framework import status
from rest_framework.test import APITestCase

from apps.common.testing import make_user
from apps.matching.models import Compliment, Match, Swipe, Unmatch
from apps.matching.services import MatchRegistry, SwipeLedger

AAA = '00000000-0000-0000-0000-000000000aaa'
BBB = '00000000-0000-0000-0000-000000000bbb'


class RelationshipAPITests(APITestCase):

    def setUp(self):
        self.u1 = make_user(AAA)
        self.u2 = make_user(BBB)

    def as_user(self, user):
        self.client.force_authenticate(user=user)

    def test_requires_authentication(self):
        response = self.client.post('/api/relationships/swipe/', {'swiped_id': BBB, 'action': 'like'})

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error'], 'Unauthorized')

    def test_swipe_then_match(self):
        self.as_user(self.u1)
        response = self.client.post('/api/relationships/swipe/', {'swiped_id': BBB, 'action': 'like'})

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data, {'matched': False, 'match_id': None, 'other_user': None})

        self.as_user(self.u2)
        response = self.client.post('/api/relationships/swipe/', {'swiped_id': AAA, 'action': 'like'})

        match = Match.objects.get()
        self.assertTrue(response.data['matched'])
        self.assertEqual(response.data['match_id'], str(match.id))
        self.assertEqual(response.data['other_user']['id'], AAA)
        self.assertEqual(str(match.user1_id), AAA)

    def test_invalid_payload(self):
        self.as_user(self.u1)
        response = self.client.post('/api/relationships/swipe/', {'swiped_id': 'nope', 'action': 'love'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'InvalidPayload')
        self.assertIn('swiped_id', response.data['detail'])
        self.assertIn('action', response.data['detail'])

    def test_self_swipe_reason(self):
        self.as_user(self.u1)
        response = self.client.post('/api/relationships/swipe/', {'swiped_id': AAA, 'action': 'like'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'SelfAction')

    def test_unknown_user(self):
        self.as_user(self.u1)
        response = self.client.post(
            '/api/relationships/swipe/', {'swiped_id': str(uuid.uuid4()), 'action': 'like'}
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'UserNotFound')

    def test_unmatch_rematch_flow(self):
        match, _ = MatchRegistry.create_if_absent(self.u1.id, self.u2.id)

        self.as_user(self.u1)
        response = self.client.post('/api/relationships/unmatch/', {'match_id': str(match.id)})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['rematch_status'], 'none')

        self.as_user(self.u2)
        response = self.client.post(
            '/api/relationships/request-rematch/',
            {'match_id': str(match.id), 'other_user_id': AAA},
        )
        self.assertEqual(response.data['rematch_status'], 'pending')
        self.assertFalse(response.data['matched'])

        response = self.client.post('/api/relationships/accept-rematch/', {'match_id': str(match.id)})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'NotCounterparty')

        self.as_user(self.u1)
        response = self.client.post('/api/relationships/accept-rematch/', {'match_id': str(match.id)})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['match_id'], str(Match.objects.get().id))
        self.assertEqual(response.data['rematch_requester_id'], BBB)
        self.assertFalse(Unmatch.objects.exists())

    def test_reject_rematch(self):
        match, _ = MatchRegistry.create_if_absent(self.u1.id, self.u2.id)
        self.as_user(self.u1)
        self.client.post('/api/relationships/unmatch/', {'match_id': str(match.id)})
        self.client.post('/api/relationships/request-rematch/', {'match_id': str(match.id)})

        self.as_user(self.u2)
        response = self.client.post('/api/relationships/reject-rematch/', {'match_id': str(match.id)})
        self.assertEqual(response.data['rematch_status'], 'rejected')

        response = self.client.post('/api/relationships/request-rematch/', {'match_id': str(match.id)})
        self.assertEqual(response.data['error'], 'RematchClosed')

    def test_unmatch_not_found(self):
        self.as_user(self.u1)
        response = self.client.post('/api/relationships/unmatch/', {'match_id': str(uuid.uuid4())})

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'MatchNotFound')

    def test_not_participant(self):
        match, _ = MatchRegistry.create_if_absent(self.u1.id, self.u2.id)
        self.as_user(make_user())

        response = self.client.post('/api/relationships/unmatch/', {'match_id': str(match.id)})

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'NotParticipant')

    def test_block_with_report(self):
        match, _ = MatchRegistry.create_if_absent(self.u1.id, self.u2.id)
        self.as_user(self.u1)

        response = self.client.post('/api/relationships/block/', {
            'user_id': BBB,
            'match_id': str(match.id),
            'reason': 'spam',
            'details': 'sends links',
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['created'])
        self.assertFalse(Match.objects.exists())


class ReadAPITests(APITestCase):

    def setUp(self):
        self.me = make_user()
        self.fan = make_user()
        self.client.force_authenticate(user=self.me)

    def test_likes_received(self):
        SwipeLedger.record(self.fan, self.me.id, Swipe.LIKE)

        response = self.client.get('/api/likes/received/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['user']['id'], str(self.fan.id))

    def test_likes_are_paged(self):
        for _ in range(3):
            SwipeLedger.record(make_user(), self.me.id, Swipe.LIKE)

        response = self.client.get('/api/likes/received/', {'page_size': 2})

        self.assertEqual(response.data['count'], 3)
        self.assertEqual(len(response.data['results']), 2)
        self.assertIsNotNone(response.data['next'])

        response = self.client.get('/api/likes/received/', {'page_size': 2, 'page': 2})
        self.assertEqual(len(response.data['results']), 1)

    def test_likes_sent_and_passed(self):
        SwipeLedger.record(self.me, self.fan.id, Swipe.PASS)

        self.assertEqual(self.client.get('/api/likes/sent/').data['count'], 0)
        self.assertEqual(self.client.get('/api/likes/passed/').data['count'], 1)

    def test_record_and_list_viewers(self):
        response = self.client.post('/api/viewers/record/', {'viewed_id': str(self.fan.id)})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        self.client.force_authenticate(user=self.fan)
        response = self.client.get('/api/viewers/')
        self.assertEqual(response.data['results'][0]['view_count'], 1)

    def test_chat_list_and_unmatches(self):
        match, _ = MatchRegistry.create_if_absent(self.me.id, self.fan.id)

        response = self.client.get('/api/chats/')
        self.assertEqual(response.data['results'][0]['id'], str(match.id))
        self.assertEqual(response.data['results'][0]['other_user']['id'], str(self.fan.id))

        self.client.post('/api/relationships/unmatch/', {'match_id': str(match.id)})
        response = self.client.get('/api/chats/unmatches/')
        self.assertEqual(response.data['results'][0]['unmatched_by'], 'me')


class ComplimentAPITests(APITestCase):

    def setUp(self):
        self.sender = make_user()
        self.recipient = make_user()

    def test_send_and_accept(self):
        self.client.force_authenticate(user=self.sender)
        response = self.client.post(
            '/api/compliments/', {'recipient_id': str(self.recipient.id), 'message': 'Hi there'}
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        compliment_id = response.data['id']

        self.client.force_authenticate(user=self.recipient)
        response = self.client.post(f'/api/compliments/{compliment_id}/accept/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['match_id'], str(Match.objects.get().id))
        self.assertEqual(Compliment.objects.get().status, Compliment.ACCEPTED)

    def test_decline_twice(self):
        compliment = Compliment.objects.create(sender=self.sender, recipient=self.recipient, message='Hey')
        self.client.force_authenticate(user=self.recipient)

        self.client.post(f'/api/compliments/{compliment.id}/decline/')
        response = self.client.post(f'/api/compliments/{compliment.id}/decline/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'AlreadyResolved')
