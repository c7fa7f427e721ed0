"""Notifications app tests."""

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import ADMIN, DESIGNER, FINANCIAL, WORKER
from notifications.dispatcher import notify_roles
from notifications.models import Notification


class DispatcherTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.admin = User.objects.create_user(username='n_admin', password='12345678', role=ADMIN)
		cls.worker = User.objects.create_user(username='n_worker', password='12345678', role=WORKER)
		cls.retired = User.objects.create_user(username='n_retired', password='12345678', role=WORKER, is_active=False)
		cls.financial = User.objects.create_user(username='n_finance', password='12345678', role=FINANCIAL)

	def test_fan_out_to_active_users_in_roles(self):
		sent = notify_roles((ADMIN, WORKER), title='Heads up', message='Shift change', related_id=7, related_type='order')
		self.assertEqual(sent, 2)
		self.assertEqual(
			set(Notification.objects.values_list('user__username', flat=True)),
			{'n_admin', 'n_worker'},
		)

	def test_no_recipients(self):
		self.assertEqual(notify_roles((DESIGNER,), title='Nobody', message='Empty'), 0)
		self.assertFalse(Notification.objects.exists())

	def test_mark_as_read_sets_timestamp(self):
		notify_roles((ADMIN,), title='One', message='Single')
		notification = Notification.objects.get()
		notification.mark_as_read()
		notification.refresh_from_db()
		self.assertTrue(notification.read)
		self.assertIsNotNone(notification.read_at)


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class NotificationApiTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.user = User.objects.create_user(username='inbox_user', password='12345678', role=DESIGNER)
		cls.other = User.objects.create_user(username='inbox_other', password='12345678', role=DESIGNER)

	def setUp(self):
		self.client_api = APIClient()
		self.client_api.force_authenticate(user=self.user)
		for i in range(3):
			Notification.objects.create(user=self.user, title=f'Order {i}', message='m', type='order')
		Notification.objects.create(user=self.user, title='Invoice', message='m', type='invoice', read=True)
		Notification.objects.create(user=self.other, title='Not mine', message='m')

	def test_list_only_own_with_unread_count(self):
		res = self.client_api.get('/api/notifications/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['count'], 4)
		self.assertEqual(res.data['unread_count'], 3)

	def test_list_filters(self):
		res = self.client_api.get('/api/notifications/', {'filter': 'read'})
		self.assertEqual(res.data['count'], 1)
		res = self.client_api.get('/api/notifications/', {'filter': 'unread', 'category': 'order'})
		self.assertEqual(res.data['count'], 3)

	def test_unread_count(self):
		res = self.client_api.get('/api/notifications/unread-count/')
		self.assertEqual(res.data, {'unread_count': 3})

	def test_mark_read(self):
		notification = Notification.objects.filter(user=self.user, read=False).first()
		res = self.client_api.put(f'/api/notifications/{notification.id}/read/')
		self.assertEqual(res.status_code, 200)
		self.assertTrue(res.data['read'])

	def test_cannot_touch_other_users_notification(self):
		foreign = Notification.objects.get(user=self.other)
		res = self.client_api.put(f'/api/notifications/{foreign.id}/read/')
		self.assertEqual(res.status_code, 404)
		res = self.client_api.delete(f'/api/notifications/{foreign.id}/')
		self.assertEqual(res.status_code, 404)

	def test_mark_all_read_then_clear(self):
		res = self.client_api.put('/api/notifications/mark-all-read/')
		self.assertEqual(res.data['updated'], 3)

		res = self.client_api.delete('/api/notifications/read/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['deleted'], 4)
		self.assertFalse(Notification.objects.filter(user=self.user).exists())
		self.assertTrue(Notification.objects.filter(user=self.other).exists())

	def test_delete_one(self):
		notification = Notification.objects.filter(user=self.user).first()
		res = self.client_api.delete(f'/api/notifications/{notification.id}/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Notification.objects.filter(user=self.user).count(), 3)
