"""Accounts app tests."""

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import ADMIN, DESIGNER, WORKER
from accounts.permissions import HasActionRole, role_required


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class AccountTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.user = User.objects.create_user(
			username='designer_one',
			email='designer@example.com',
			password='12345678',
			role=DESIGNER,
			full_name='Mona Designer',
		)

	def test_login_returns_tokens(self):
		res = APIClient().post(
			'/api/accounts/login/', data={'username': 'designer_one', 'password': '12345678'}, format='json',
		)
		self.assertEqual(res.status_code, 200)
		self.assertIn('access', res.data)
		self.assertIn('refresh', res.data)

	def test_me_requires_auth(self):
		res = APIClient().get('/api/accounts/profile/me/')
		self.assertEqual(res.status_code, 401)

	def test_me_returns_profile(self):
		client = APIClient()
		client.force_authenticate(user=self.user)
		res = client.get('/api/accounts/profile/me/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['role'], DESIGNER)
		self.assertEqual(res.data['full_name'], 'Mona Designer')

	def test_me_update_cannot_change_role(self):
		client = APIClient()
		client.force_authenticate(user=self.user)
		res = client.put('/api/accounts/profile/me/', data={'full_name': 'Mona D.', 'role': ADMIN}, format='json')
		self.assertEqual(res.status_code, 200)
		self.user.refresh_from_db()
		self.assertEqual(self.user.full_name, 'Mona D.')
		self.assertEqual(self.user.role, DESIGNER)

	def test_display_name_falls_back_to_username(self):
		User = get_user_model()
		self.assertEqual(User(username='plain').display_name, 'plain')
		self.assertEqual(self.user.display_name, 'Mona Designer')


class _Request:
	def __init__(self, user):
		self.user = user


class _View:
	action_roles = {'list': {WORKER}}
	default_roles = None

	def __init__(self, action):
		self.action = action


class PermissionTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.worker = User.objects.create_user(username='perm_worker', password='12345678', role=WORKER)
		cls.admin = User.objects.create_user(username='perm_admin', password='12345678', role=ADMIN)

	def test_role_required(self):
		permission = role_required(ADMIN)()
		self.assertTrue(permission.has_permission(_Request(self.admin), None))
		self.assertFalse(permission.has_permission(_Request(self.worker), None))

	def test_action_roles(self):
		permission = HasActionRole()
		self.assertTrue(permission.has_permission(_Request(self.worker), _View('list')))
		self.assertFalse(permission.has_permission(_Request(self.admin), _View('list')))
		# unmapped actions only need authentication
		self.assertTrue(permission.has_permission(_Request(self.admin), _View('retrieve')))

	def test_default_roles(self):
		view = _View('create')
		view.default_roles = {ADMIN}
		permission = HasActionRole()
		self.assertTrue(permission.has_permission(_Request(self.admin), view))
		self.assertFalse(permission.has_permission(_Request(self.worker), view))
