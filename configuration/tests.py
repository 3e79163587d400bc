from decimal import Decimal

from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import User
from configuration.models import PlatformConfig
from configuration.store import CREATION_FEE, PlatformConfigStore


class PlatformConfigStoreTest(TestCase):

    def test_creation_fee_defaults_to_zero(self):
        self.assertEqual(PlatformConfigStore.get(CREATION_FEE), '0')
        self.assertEqual(PlatformConfigStore.creation_fee(), Decimal('0'))

    @override_settings(PLATFORM_CONFIG_DEFAULTS={'creation_fee': '25'})
    def test_default_comes_from_settings(self):
        self.assertEqual(PlatformConfigStore.creation_fee(), Decimal('25'))

    def test_set_then_get(self):
        PlatformConfigStore.set(CREATION_FEE, ' 500 ')
        self.assertEqual(PlatformConfigStore.get(CREATION_FEE), '500')
        self.assertEqual(PlatformConfigStore.creation_fee(), Decimal('500'))
        entry = PlatformConfig.objects.get(key=CREATION_FEE)
        self.assertEqual(entry.description, 'Fee charged for creating a new hackathon')

    def test_set_updates_in_place(self):
        PlatformConfigStore.set(CREATION_FEE, '10')
        PlatformConfigStore.set(CREATION_FEE, '20', description='Hosting fee')
        self.assertEqual(PlatformConfig.objects.filter(key=CREATION_FEE).count(), 1)
        self.assertEqual(PlatformConfig.objects.get(key=CREATION_FEE).description, 'Hosting fee')

    def test_invalid_fee_is_rejected_on_write(self):
        with self.assertRaises(ValueError):
            PlatformConfigStore.set(CREATION_FEE, 'ten')
        with self.assertRaises(ValueError):
            PlatformConfigStore.set(CREATION_FEE, '-5')

    def test_unparsable_stored_fee_falls_back_to_default(self):
        PlatformConfig.objects.create(key=CREATION_FEE, value='abc')
        with self.assertLogs('configuration.store', level='WARNING'):
            self.assertEqual(PlatformConfigStore.creation_fee(), Decimal('0'))

    def test_free_text_keys_are_not_validated(self):
        PlatformConfigStore.set('support_email', 'help@example.com')
        self.assertEqual(PlatformConfigStore.get('support_email'), 'help@example.com')
        self.assertIsNone(PlatformConfigStore.get('unknown_key'))
        self.assertEqual(PlatformConfigStore.get('unknown_key', 'fallback'), 'fallback')


class PlatformConfigAPITest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email='admin@example.com', username='admin', first_name='Ade', password='password123', is_admin=True
        )
        self.user = User.objects.create_user(
            email='user@example.com', username='user', first_name='Uche', password='password123'
        )

    def test_only_admins_can_edit(self):
        self.client.force_authenticate(user=self.user)
        resp = self.client.post('/api/v1/config/', {'key': CREATION_FEE, 'value': '100'}, format='json')
        self.assertEqual(resp.status_code, 403)

    def test_admin_sets_and_reads_fee(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.post('/api/v1/config/', {'key': CREATION_FEE, 'value': '100'}, format='json')
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get(f'/api/v1/config/{CREATION_FEE}/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['value'], '100')

        resp = self.client.put(f'/api/v1/config/{CREATION_FEE}/', {'value': '250.50'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(PlatformConfigStore.creation_fee(), Decimal('250.50'))

    def test_invalid_fee_returns_400(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.post('/api/v1/config/', {'key': CREATION_FEE, 'value': 'free'}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('value', resp.data)

    def test_default_is_served_before_anything_is_stored(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.get(f'/api/v1/config/{CREATION_FEE}/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['value'], '0')
        self.assertEqual(self.client.get('/api/v1/config/nothing_here/').status_code, 404)
