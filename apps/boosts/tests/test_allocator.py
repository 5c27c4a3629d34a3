import threading
from datetime import timedelta
from unittest import mock, skipUnless

from django.db import IntegrityError, connection
from django.test import TestCase, TransactionTestCase, override_settings
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.boosts.exceptions import BoostAlreadyActive, InsufficientBalance
from apps.boosts.models import ProfileBoost
from apps.boosts.services import BoostAllocator, clamp_minutes
from apps.common.exceptions import StorageError
from apps.common.testing import make_user
from apps.matching.exceptions import DailyLimitReached
from apps.users.models import Profile


def balance(user):
    return Profile.objects.get(user=user).boost_count


class ClampTests(TestCase):

    def test_clamp(self):
        self.assertEqual(clamp_minutes(None), 30)
        self.assertEqual(clamp_minutes('abc'), 30)
        self.assertEqual(clamp_minutes(0), 1)
        self.assertEqual(clamp_minutes(500), 60)
        self.assertEqual(clamp_minutes('45'), 45)


class BoostAllocatorTests(TestCase):

    def setUp(self):
        self.user = make_user(boosts=2)

    def test_activate(self):
        boost = BoostAllocator.activate(self.user, 15)

        self.assertEqual(balance(self.user), 1)
        self.assertTrue(boost.is_active)
        self.assertEqual(boost.expires_at - boost.started_at, timedelta(minutes=15))
        self.assertEqual(BoostAllocator.active(self.user), boost)

    def test_double_activation(self):
        BoostAllocator.activate(self.user)

        with self.assertRaises(BoostAlreadyActive):
            BoostAllocator.activate(self.user)
        self.assertEqual(balance(self.user), 1)

    def test_no_balance(self):
        user = make_user()

        with self.assertRaises(InsufficientBalance):
            BoostAllocator.activate(user)
        self.assertFalse(ProfileBoost.objects.exists())

    def test_daily_limit(self):
        now = timezone.now()
        ProfileBoost.objects.create(
            user=self.user,
            started_at=now.replace(hour=0, minute=0, second=0, microsecond=0),
            expires_at=now - timedelta(microseconds=1),
        )

        with self.assertRaises(DailyLimitReached):
            BoostAllocator.activate(self.user)
        self.assertEqual(balance(self.user), 2)

    @override_settings(BOOST_DAILY_LIMIT=5)
    def test_expired_boost_does_not_block_a_new_one(self):
        past = timezone.now() - timedelta(minutes=5)
        ProfileBoost.objects.create(user=self.user, started_at=past - timedelta(minutes=30), expires_at=past)

        BoostAllocator.activate(self.user)

        self.assertEqual(balance(self.user), 1)

    def test_lost_race_returns_winner_without_charging(self):
        winner = ProfileBoost.objects.create(
            user=self.user,
            started_at=timezone.now(),
            expires_at=timezone.now() + timedelta(minutes=30),
        )

        with mock.patch.object(BoostAllocator, 'active', side_effect=[None, winner]), \
                mock.patch.object(BoostAllocator, 'started_today', return_value=0), \
                mock.patch.object(ProfileBoost.objects, 'create', side_effect=IntegrityError('overlap')):
            boost = BoostAllocator.activate(self.user)

        self.assertEqual(boost, winner)
        self.assertEqual(balance(self.user), 2)

    def test_conflict_without_winner(self):
        with mock.patch.object(ProfileBoost.objects, 'create', side_effect=IntegrityError('overlap')):
            with self.assertRaises(StorageError):
                BoostAllocator.activate(self.user)
        self.assertEqual(balance(self.user), 2)

    def test_cleanup(self):
        old = timezone.now() - timedelta(days=40)
        ProfileBoost.objects.create(user=self.user, started_at=old, expires_at=old + timedelta(minutes=30))
        BoostAllocator.activate(self.user)

        self.assertEqual(BoostAllocator.cleanup(), 1)
        self.assertEqual(ProfileBoost.objects.count(), 1)


@skipUnless(connection.vendor == 'postgresql', 'needs real row locks')
class ConcurrentBoostTests(TransactionTestCase):

    def test_two_concurrent_activations_spend_one_boost(self):
        user = make_user(boosts=1)
        results, errors = [], []
        barrier = threading.Barrier(2)

        def activate():
            try:
                barrier.wait()
                results.append(BoostAllocator.activate(user))
            except (BoostAlreadyActive, InsufficientBalance) as e:
                errors.append(e)
            finally:
                connection.close()

        threads = [threading.Thread(target=activate) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(ProfileBoost.objects.filter(user=user).count(), 1)
        self.assertEqual(balance(user), 0)
        self.assertEqual(len(results) + len(errors), 2)


class BoostAPITests(APITestCase):

    def setUp(self):
        self.user = make_user(boosts=1)
        self.client.force_authenticate(user=self.user)

    def test_activate_and_read(self):
        response = self.client.post('/api/boosts/activate/', {'minutes': 90}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['boost_count'], 0)

        response = self.client.get('/api/boosts/active/')
        boost = ProfileBoost.objects.get()
        self.assertEqual(response.data['boost']['id'], str(boost.id))
        self.assertEqual(boost.expires_at - boost.started_at, timedelta(minutes=60))

    def test_error_codes(self):
        self.client.post('/api/boosts/activate/', {}, format='json')

        response = self.client.post('/api/boosts/activate/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'BoostAlreadyActive')

        ProfileBoost.objects.all().delete()
        response = self.client.post('/api/boosts/activate/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_402_PAYMENT_REQUIRED)
        self.assertEqual(response.data['error'], 'InsufficientBalance')

    def test_no_active_boost(self):
        response = self.client.get('/api/boosts/active/')
        self.assertIsNone(response.data['boost'])
