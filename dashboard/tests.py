"""Dashboard app tests."""

from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import ADMIN, CLIENT, WORKER
from clients.models import Client
from dashboard.cache import get_or_compute, invalidate
from inventory.models import Material
from orders import services as order_services


class CacheHelperTests(TestCase):
	def setUp(self):
		cache.clear()

	def test_get_or_compute_caches(self):
		compute = mock.Mock(return_value={'value': 1})
		self.assertEqual(get_or_compute('demo', ('a',), compute, 60), {'value': 1})
		self.assertEqual(get_or_compute('demo', ('a',), compute, 60), {'value': 1})
		self.assertEqual(compute.call_count, 1)

	def test_invalidate_drops_namespace_only(self):
		get_or_compute('demo', ('a',), lambda: 1, 60)
		get_or_compute('other', ('a',), lambda: 1, 60)
		invalidate('demo')
		self.assertEqual(get_or_compute('demo', ('a',), lambda: 2, 60), 2)
		self.assertEqual(get_or_compute('other', ('a',), lambda: 2, 60), 1)

	def test_cache_failure_falls_back(self):
		with mock.patch('dashboard.cache.cache') as broken:
			broken.get.side_effect = ConnectionError('down')
			self.assertEqual(get_or_compute('demo', ('a',), lambda: 'fresh', 60), 'fresh')
			broken.incr.side_effect = ConnectionError('down')
			invalidate('demo')


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class DashboardSummaryTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.admin = User.objects.create_user(username='dash_admin', password='12345678', role=ADMIN)
		cls.worker = User.objects.create_user(username='dash_worker', password='12345678', role=WORKER)
		cls.portal = User.objects.create_user(username='dash_client', password='12345678', role=CLIENT)
		cls.client_obj = Client.objects.create(name='Sphinx Media', phone='01055556666')
		cls.material = Material.objects.create(
			name='Canvas', selling_price=Decimal('4'), current_stock=Decimal('2'), min_stock_level=Decimal('5'),
		)

	def setUp(self):
		cache.clear()

	def api(self, user):
		client = APIClient()
		client.force_authenticate(user=user)
		return client

	def create_order(self):
		return order_services.create_order(
			{'client': self.client_obj, 'material': self.material, 'repeats': 2, 'sheet_height': Decimal('5')},
			actor=self.admin,
		)

	def test_summary(self):
		self.create_order()
		res = self.api(self.worker).get('/api/dashboard/summary/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['overall']['total_orders'], 1)
		self.assertEqual(res.data['overall']['total_revenue'], Decimal('40'))
		self.assertEqual(res.data['overall']['total_clients'], 1)
		self.assertEqual([m['name'] for m in res.data['low_stock']], ['Canvas'])
		self.assertEqual(len(res.data['recent_orders']), 1)

	def test_portal_client_forbidden(self):
		res = self.api(self.portal).get('/api/dashboard/summary/')
		self.assertEqual(res.status_code, 403)

	def test_summary_is_cached_until_orders_change(self):
		client = self.api(self.admin)
		self.assertEqual(client.get('/api/dashboard/summary/').data['overall']['total_orders'], 0)

		# written without events: the cached summary is still served
		self.create_order()
		self.assertEqual(client.get('/api/dashboard/summary/').data['overall']['total_orders'], 0)

		with self.captureOnCommitCallbacks(execute=True):
			self.create_order()
		self.assertEqual(client.get('/api/dashboard/summary/').data['overall']['total_orders'], 2)
