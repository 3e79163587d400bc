from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User, HostApprovalRequest
from accounts.services import HostApprovalWorkflow
from utils.failures import AlreadyDecided, Forbidden, NotFound, UnknownOutcome


class HostApprovalWorkflowTest(TestCase):
    """Host requests are created once and decided once, by an administrator."""

    def setUp(self):
        self.host = User.objects.create_user(
            email='host@example.com', username='host', first_name='Hana', password='password123'
        )
        self.admin = User.objects.create_user(
            email='admin@example.com', username='admin', first_name='Ade', password='password123', is_admin=True
        )

    def test_request_host_is_idempotent(self):
        first = HostApprovalWorkflow.request_host(self.host, organization_name='Hack Club')
        second = HostApprovalWorkflow.request_host(self.host, organization_name='Something else')
        self.assertEqual(first.id, second.id)
        self.assertEqual(second.status, HostApprovalRequest.PENDING)
        self.assertEqual(second.organization_name, 'Hack Club')
        self.assertEqual(HostApprovalRequest.objects.filter(user=self.host).count(), 1)

    def test_request_defaults_contact_email_to_user_email(self):
        host_request = HostApprovalWorkflow.request_host(self.host)
        self.assertEqual(host_request.contact_email, 'host@example.com')

    def test_admin_approves_pending_request(self):
        host_request = HostApprovalWorkflow.request_host(self.host)
        result = HostApprovalWorkflow.decide(self.admin, host_request.id, HostApprovalRequest.APPROVED)
        self.assertEqual(result.status, HostApprovalRequest.APPROVED)
        self.assertEqual(result.decided_by, self.admin)
        self.assertIsNotNone(result.decided_at)
        self.assertTrue(HostApprovalWorkflow.is_approved_host(self.host))

    def test_approval_does_not_change_role_flags(self):
        host_request = HostApprovalWorkflow.request_host(self.host)
        HostApprovalWorkflow.decide(self.admin, host_request.id, HostApprovalRequest.APPROVED)
        self.host.refresh_from_db()
        self.assertFalse(self.host.is_organizer)

    def test_non_admin_cannot_decide(self):
        host_request = HostApprovalWorkflow.request_host(self.host)
        result = HostApprovalWorkflow.decide(self.host, host_request.id, HostApprovalRequest.APPROVED)
        self.assertIsInstance(result, Forbidden)
        host_request.refresh_from_db()
        self.assertEqual(host_request.status, HostApprovalRequest.PENDING)

    def test_decided_request_cannot_be_decided_again(self):
        host_request = HostApprovalWorkflow.request_host(self.host)
        HostApprovalWorkflow.decide(self.admin, host_request.id, HostApprovalRequest.REJECTED)
        result = HostApprovalWorkflow.decide(self.admin, host_request.id, HostApprovalRequest.APPROVED)
        self.assertIsInstance(result, AlreadyDecided)
        self.assertEqual(result.current_status, HostApprovalRequest.REJECTED)
        self.assertFalse(HostApprovalWorkflow.is_approved_host(self.host))

    def test_unknown_request(self):
        result = HostApprovalWorkflow.decide(self.admin, 9999, HostApprovalRequest.APPROVED)
        self.assertIsInstance(result, NotFound)

    def test_unknown_outcome_is_refused_without_deciding(self):
        host_request = HostApprovalWorkflow.request_host(self.host)
        result = HostApprovalWorkflow.decide(self.admin, host_request.id, 'MAYBE')
        self.assertIsInstance(result, UnknownOutcome)
        self.assertEqual(result.as_dict()['error'], 'unknown_outcome')
        host_request.refresh_from_db()
        self.assertEqual(host_request.status, HostApprovalRequest.PENDING)
        self.assertIsNone(host_request.decided_by)

    def test_rejected_user_requesting_again_gets_the_rejected_request(self):
        host_request = HostApprovalWorkflow.request_host(self.host)
        HostApprovalWorkflow.decide(self.admin, host_request.id, HostApprovalRequest.REJECTED)
        again = HostApprovalWorkflow.request_host(self.host)
        self.assertEqual(again.id, host_request.id)
        self.assertEqual(again.status, HostApprovalRequest.REJECTED)


class HostRequestAPITest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.host = User.objects.create_user(
            email='host@example.com', username='host', first_name='Hana', password='password123'
        )
        self.admin = User.objects.create_user(
            email='admin@example.com', username='admin', first_name='Ade', password='password123', is_admin=True
        )

    def test_register_and_login(self):
        resp = self.client.post('/api/v1/accounts/register/', {
            'first_name': 'Nia', 'last_name': 'Obi', 'username': 'nia', 'email': 'nia@example.com',
            'password': 'password123', 'password2': 'password123',
        }, format='json')
        self.assertEqual(resp.status_code, 201)
        resp = self.client.post('/api/v1/accounts/login/', {'username': 'nia', 'password': 'password123'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertIn('access_token', resp.data)
        self.assertIsNone(resp.data['user']['host_status'])

    def test_request_twice_returns_same_request(self):
        self.client.force_authenticate(user=self.host)
        first = self.client.post('/api/v1/accounts/host-requests/', {'organization_name': 'Hack Club'}, format='json')
        second = self.client.post('/api/v1/accounts/host-requests/', {}, format='json')
        self.assertEqual(first.status_code, 201)
        self.assertEqual(second.status_code, 200)
        self.assertEqual(first.data['id'], second.data['id'])

    def test_pending_queue_is_admin_only(self):
        HostApprovalWorkflow.request_host(self.host)
        self.client.force_authenticate(user=self.host)
        self.assertEqual(self.client.get('/api/v1/accounts/host-requests/pending/').status_code, 403)

        self.client.force_authenticate(user=self.admin)
        resp = self.client.get('/api/v1/accounts/host-requests/pending/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data), 1)

    def test_decide_maps_failures_to_status_codes(self):
        host_request = HostApprovalWorkflow.request_host(self.host)
        url = f'/api/v1/accounts/host-requests/{host_request.id}/decide/'

        self.client.force_authenticate(user=self.host)
        resp = self.client.post(url, {'outcome': 'approved'}, format='json')
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.data['error'], 'forbidden')

        self.client.force_authenticate(user=self.admin)
        resp = self.client.post(url, {'outcome': 'approved'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['status'], HostApprovalRequest.APPROVED)

        resp = self.client.post(url, {'outcome': 'rejected'}, format='json')
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.data['error'], 'already_decided')

        resp = self.client.post('/api/v1/accounts/host-requests/9999/decide/', {'outcome': 'approved'}, format='json')
        self.assertEqual(resp.status_code, 404)

    def test_me_shows_host_status(self):
        HostApprovalWorkflow.request_host(self.host)
        self.client.force_authenticate(user=self.host)
        resp = self.client.get('/api/v1/accounts/me/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['host_status'], HostApprovalRequest.PENDING)
