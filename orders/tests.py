"""Orders app tests."""

from datetime import date, datetime
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from accounts.models import ADMIN, DESIGNER, FINANCIAL, RECEPTIONIST, WORKER
from clients.models import Client
from inventory.models import InventoryRecord, Material
from invoices.models import Invoice
from notifications.models import Notification
from orders.exceptions import PricingError
from orders.models import Order
from orders.pricing import calculate_order_size, resolve_pricing, to_decimal
from orders.stats import bucket_starts, build_timeseries, parse_timeseries_params
from products.models import Product


class PricingTests(SimpleTestCase):
	def test_order_size_ignores_sheet_width(self):
		self.assertEqual(calculate_order_size(5, '2'), Decimal('10'))
		self.assertEqual(calculate_order_size(3, None), Decimal('0'))

	def test_to_decimal_falls_back_on_garbage(self):
		self.assertEqual(to_decimal('abc'), Decimal('0'))
		self.assertEqual(to_decimal('NaN'), Decimal('0'))
		self.assertEqual(to_decimal('12.5'), Decimal('12.5'))

	def test_material_price_scales_with_size(self):
		material = Material(name='Film', selling_price=Decimal('10'))
		result = resolve_pricing(material=material, order_size=Decimal('10'))
		self.assertEqual(result.total_price, Decimal('100'))
		self.assertEqual(result.type, 'Film')
		self.assertEqual(result.source, 'material')

	def test_material_price_is_flat_when_size_is_zero(self):
		material = Material(name='Film', selling_price=Decimal('10'))
		result = resolve_pricing(material=material, order_size=Decimal('0'))
		self.assertEqual(result.total_price, Decimal('10'))

	def test_product_price_is_flat(self):
		product = Product(name='Banner', selling_price=Decimal('250'))
		material = Material(name='Film', selling_price=Decimal('10'))
		result = resolve_pricing(material=material, product=product, order_size=Decimal('40'))
		self.assertEqual(result.total_price, Decimal('250'))
		self.assertEqual(result.type, 'Banner')

	def test_unpriced_material_needs_total(self):
		material = Material(name='Ink', selling_price=None)
		with self.assertRaises(PricingError):
			resolve_pricing(material=material, order_size=Decimal('4'))
		result = resolve_pricing(material=material, order_size=Decimal('4'), total_price='75')
		self.assertEqual(result.total_price, Decimal('75'))
		self.assertEqual(result.type, 'Ink')

	def test_manual_needs_total(self):
		with self.assertRaises(PricingError):
			resolve_pricing(manual_type='Custom')
		result = resolve_pricing(manual_type=' Custom ', total_price=Decimal('40'))
		self.assertEqual(result.type, 'Custom')
		self.assertEqual(result.source, 'manual')


class TimeseriesHelperTests(SimpleTestCase):
	def test_params_defaults_and_clamping(self):
		self.assertEqual(parse_timeseries_params(None, None), (7, 'day'))
		self.assertEqual(parse_timeseries_params('', 'month'), (6, 'month'))
		self.assertEqual(parse_timeseries_params('1000', 'week'), (365, 'week'))
		self.assertEqual(parse_timeseries_params('0', 'day'), (1, 'day'))
		self.assertEqual(parse_timeseries_params('abc', 'week'), (6, 'week'))

	def test_params_reject_unknown_interval(self):
		with self.assertRaises(ValidationError):
			parse_timeseries_params('3', 'year')

	def test_month_buckets_cross_year(self):
		starts = bucket_starts(3, 'month', date(2026, 2, 20))
		self.assertEqual(starts, [date(2025, 12, 1), date(2026, 1, 1), date(2026, 2, 1)])

	def test_build_timeseries_buckets_rows(self):
		today = date(2026, 3, 10)
		rows = [
			(timezone.make_aware(datetime(2026, 3, 10, 12, 0)), Decimal('100')),
			(timezone.make_aware(datetime(2026, 3, 10, 13, 0)), Decimal('50')),
			(timezone.make_aware(datetime(2026, 3, 8, 12, 0)), Decimal('20')),
			(timezone.make_aware(datetime(2026, 1, 1, 12, 0)), Decimal('999')),
		]
		data = build_timeseries(rows, 3, 'day', today)
		self.assertEqual(data['labels'], ['2026-03-08', '2026-03-09', '2026-03-10'])
		self.assertEqual(data['orders'], [1, 0, 2])
		self.assertEqual(data['revenue'], [Decimal('20'), Decimal('0'), Decimal('150')])


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class OrderApiTests(TestCase):
	"""Order lifecycle through the HTTP API."""

	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.admin = User.objects.create_user(username='admin_user', password='12345678', role=ADMIN)
		cls.receptionist = User.objects.create_user(username='reception', password='12345678', role=RECEPTIONIST)
		cls.designer = User.objects.create_user(username='designer', password='12345678', role=DESIGNER)
		cls.worker = User.objects.create_user(username='worker', password='12345678', role=WORKER)
		cls.financial = User.objects.create_user(username='finance', password='12345678', role=FINANCIAL)

		cls.client_obj = Client.objects.create(
			name='Nile Prints',
			phone='01012345678',
			factory_name='Nile Factory',
			created_by=cls.admin,
		)
		cls.material = Material.objects.create(
			name='Vinyl',
			unit='sheet',
			selling_price=Decimal('10'),
			current_stock=Decimal('100'),
			min_stock_level=Decimal('5'),
			is_order_type=True,
		)
		cls.unpriced = Material.objects.create(name='Raw Ink', unit='liter', current_stock=Decimal('50'))
		cls.product = Product.objects.create(name='Roll-up Banner', selling_price=Decimal('250'))

	def setUp(self):
		cache.clear()

	def api(self, user):
		client = APIClient()
		client.force_authenticate(user=user)
		return client

	def create_order(self, user=None, **payload):
		data = {'client': self.client_obj.id, 'material': self.material.id, 'repeats': 5, 'sheet_height': '2'}
		data.update(payload)
		return self.api(user or self.admin).post('/api/orders/', data=data, format='json')

	def test_material_order_is_priced_by_size(self):
		res = self.create_order(deposit='30', sheet_width='99')
		self.assertEqual(res.status_code, 201)
		self.assertEqual(Decimal(res.data['order_size']), Decimal('10'))
		self.assertEqual(Decimal(res.data['total_price']), Decimal('100'))
		self.assertEqual(Decimal(res.data['remaining_amount']), Decimal('70'))
		self.assertEqual(res.data['type'], 'Vinyl')
		self.assertEqual(res.data['client_name'], 'Nile Prints')
		self.assertEqual(res.data['material_info']['name'], 'Vinyl')

	def test_product_order_is_flat_priced(self):
		res = self.create_order(material=None, product=self.product.id, repeats=7)
		self.assertEqual(res.status_code, 201)
		self.assertEqual(Decimal(res.data['total_price']), Decimal('250'))
		self.assertEqual(res.data['type'], 'Roll-up Banner')

	def test_missing_price_source_returns_400(self):
		res = self.create_order(material=self.unpriced.id)
		self.assertEqual(res.status_code, 400)
		res = self.create_order(material=None, type='Custom')
		self.assertEqual(res.status_code, 400)
		self.assertEqual(Order.objects.count(), 0)

	def test_manual_order_uses_supplied_total(self):
		res = self.create_order(material=None, type='Custom job', total_price='80', deposit='20')
		self.assertEqual(res.status_code, 201)
		self.assertEqual(res.data['type'], 'Custom job')
		self.assertEqual(Decimal(res.data['remaining_amount']), Decimal('60'))

	def test_client_required_without_invoice(self):
		res = self.create_order(client=None)
		self.assertEqual(res.status_code, 400)
		self.assertIn('client', res.data)

	def test_invoice_order_inherits_client(self):
		invoice = Invoice(created_by=self.admin)
		invoice.apply_client_snapshot(self.client_obj)
		invoice.save()

		res = self.create_order(client=None, invoice=invoice.id, deposit='40')
		self.assertEqual(res.status_code, 201)
		self.assertEqual(res.data['client'], self.client_obj.id)
		self.assertEqual(res.data['client_factory_name'], 'Nile Factory')

		invoice.refresh_from_db()
		self.assertEqual(invoice.subtotal, Decimal('100'))
		self.assertEqual(invoice.total_remaining, Decimal('60'))

	def test_client_snapshot_survives_client_edit(self):
		res = self.create_order()
		Client.objects.filter(pk=self.client_obj.pk).update(name='Renamed')
		order = Order.objects.get(pk=res.data['id'])
		self.assertEqual(order.client_name, 'Nile Prints')

	def test_worker_cannot_create(self):
		res = self.create_order(user=self.worker)
		self.assertEqual(res.status_code, 403)

	def test_designer_total_price_is_dropped(self):
		order_id = self.create_order(deposit='30').data['id']
		res = self.api(self.designer).patch(f'/api/orders/{order_id}/', data={'total_price': '5'}, format='json')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Decimal(res.data['total_price']), Decimal('100'))

	def test_designer_size_change_reprices(self):
		order_id = self.create_order(deposit='30').data['id']
		res = self.api(self.designer).patch(f'/api/orders/{order_id}/', data={'sheet_height': '4'}, format='json')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Decimal(res.data['order_size']), Decimal('20'))
		self.assertEqual(Decimal(res.data['total_price']), Decimal('200'))
		self.assertEqual(Decimal(res.data['remaining_amount']), Decimal('170'))

	def test_designer_switch_to_product_reprices(self):
		order_id = self.create_order().data['id']
		res = self.api(self.designer).patch(
			f'/api/orders/{order_id}/',
			data={'material': None, 'product': self.product.id},
			format='json',
		)
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['type'], 'Roll-up Banner')
		self.assertEqual(Decimal(res.data['total_price']), Decimal('250'))

	def test_worker_only_changes_state(self):
		order_id = self.create_order(deposit='30').data['id']
		res = self.api(self.worker).patch(
			f'/api/orders/{order_id}/',
			data={'order_state': 'active', 'deposit': '100', 'notes': 'hacked'},
			format='json',
		)
		self.assertEqual(res.status_code, 200)
		order = Order.objects.get(pk=order_id)
		self.assertEqual(order.order_state, Order.ACTIVE)
		self.assertEqual(order.deposit, Decimal('30'))
		self.assertEqual(order.notes, '')

	def test_financial_deposit_updates_remaining(self):
		order_id = self.create_order().data['id']
		res = self.api(self.financial).patch(f'/api/orders/{order_id}/', data={'deposit': '45'}, format='json')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Decimal(res.data['remaining_amount']), Decimal('55'))

	def test_admin_sets_total_on_manual_order(self):
		order_id = self.create_order(material=None, type='Custom', total_price='80', deposit='20').data['id']
		res = self.api(self.admin).patch(f'/api/orders/{order_id}/', data={'total_price': '120'}, format='json')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Decimal(res.data['total_price']), Decimal('120'))
		self.assertEqual(Decimal(res.data['remaining_amount']), Decimal('100'))

	def test_invalid_state_rejected(self):
		order_id = self.create_order().data['id']
		res = self.api(self.worker).patch(f'/api/orders/{order_id}/', data={'order_state': 'shipped'}, format='json')
		self.assertEqual(res.status_code, 400)

	def test_completion_consumes_stock_once(self):
		order_id = self.create_order().data['id']
		worker = self.api(self.worker)

		for state in ('done', 'done', 'delivered', 'done'):
			res = worker.patch(f'/api/orders/{order_id}/', data={'order_state': state}, format='json')
			self.assertEqual(res.status_code, 200)

		self.material.refresh_from_db()
		self.assertEqual(self.material.current_stock, Decimal('90'))
		records = InventoryRecord.objects.filter(order_id=order_id, type=InventoryRecord.USAGE)
		self.assertEqual(records.count(), 1)
		self.assertEqual(records.get().difference, Decimal('-10'))
		self.assertTrue(Order.objects.get(pk=order_id).stock_deducted)

	def test_completion_with_exact_stock_leaves_zero(self):
		Material.objects.filter(pk=self.material.pk).update(current_stock=Decimal('10'))
		order_id = self.create_order().data['id']
		res = self.api(self.worker).patch(f'/api/orders/{order_id}/', data={'order_state': 'done'}, format='json')
		self.assertEqual(res.status_code, 200)
		self.material.refresh_from_db()
		self.assertEqual(self.material.current_stock, Decimal('0'))

	def test_completion_with_insufficient_stock_changes_nothing(self):
		Material.objects.filter(pk=self.material.pk).update(current_stock=Decimal('6'))
		order_id = self.create_order().data['id']
		self.api(self.worker).patch(f'/api/orders/{order_id}/', data={'order_state': 'active'}, format='json')

		res = self.api(self.worker).patch(f'/api/orders/{order_id}/', data={'order_state': 'done'}, format='json')
		self.assertEqual(res.status_code, 400)
		info = res.data['material_info']
		self.assertEqual(info['material_id'], self.material.id)
		self.assertEqual(info['shortage'], Decimal('4'))

		order = Order.objects.get(pk=order_id)
		self.assertEqual(order.order_state, Order.ACTIVE)
		self.assertFalse(order.stock_deducted)
		self.material.refresh_from_db()
		self.assertEqual(self.material.current_stock, Decimal('6'))
		self.assertFalse(InventoryRecord.objects.filter(order_id=order_id).exists())

	def test_create_as_done_consumes_stock(self):
		res = self.create_order(order_state='done')
		self.assertEqual(res.status_code, 201)
		self.assertTrue(res.data['stock_deducted'])
		self.material.refresh_from_db()
		self.assertEqual(self.material.current_stock, Decimal('90'))

	def test_product_completion_does_not_touch_stock(self):
		order_id = self.create_order(material=None, product=self.product.id).data['id']
		res = self.api(self.worker).patch(f'/api/orders/{order_id}/', data={'order_state': 'done'}, format='json')
		self.assertEqual(res.status_code, 200)
		self.assertFalse(InventoryRecord.objects.exists())

	def test_non_admin_cannot_delete_active_order(self):
		order_id = self.create_order(user=self.receptionist).data['id']
		self.api(self.worker).patch(f'/api/orders/{order_id}/', data={'order_state': 'active'}, format='json')

		res = self.api(self.receptionist).delete(f'/api/orders/{order_id}/')
		self.assertEqual(res.status_code, 403)
		self.assertTrue(Order.objects.filter(pk=order_id).exists())

		res = self.api(self.admin).delete(f'/api/orders/{order_id}/')
		self.assertEqual(res.status_code, 200)
		self.assertFalse(Order.objects.filter(pk=order_id).exists())

	def test_non_admin_deletes_only_own_pending_order(self):
		order_id = self.create_order(user=self.receptionist).data['id']
		res = self.api(self.designer).delete(f'/api/orders/{order_id}/')
		self.assertEqual(res.status_code, 403)
		res = self.api(self.receptionist).delete(f'/api/orders/{order_id}/')
		self.assertEqual(res.status_code, 200)

	def test_delete_recalculates_invoice(self):
		invoice = Invoice(created_by=self.admin)
		invoice.apply_client_snapshot(self.client_obj)
		invoice.save()
		first = self.create_order(invoice=invoice.id).data['id']
		self.create_order(invoice=invoice.id, material=None, product=self.product.id)

		self.api(self.admin).delete(f'/api/orders/{first}/')
		invoice.refresh_from_db()
		self.assertEqual(invoice.subtotal, Decimal('250'))

	def test_create_notifies_production_roles(self):
		with self.captureOnCommitCallbacks(execute=True):
			res = self.create_order(user=self.receptionist)
		self.assertEqual(res.status_code, 201)
		recipients = set(Notification.objects.filter(related_id=res.data['id']).values_list('user__role', flat=True))
		self.assertEqual(recipients, {ADMIN, DESIGNER, WORKER})

	def test_list_filters_by_state(self):
		self.create_order()
		active_id = self.create_order().data['id']
		self.api(self.worker).patch(f'/api/orders/{active_id}/', data={'order_state': 'active'}, format='json')

		res = self.api(self.receptionist).get('/api/orders/', {'order_state': 'active'})
		self.assertEqual(res.status_code, 200)
		self.assertEqual([row['id'] for row in res.data['results']], [active_id])

	def test_financial_stats(self):
		self.create_order(deposit='30')
		self.create_order(material=None, product=self.product.id)
		res = self.api(self.financial).get('/api/orders/stats/financial/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['overall']['total_orders'], 2)
		self.assertEqual(res.data['overall']['total_revenue'], Decimal('350'))
		self.assertEqual(res.data['overall']['total_remaining'], Decimal('320'))

	def test_stats_forbidden_for_designer(self):
		res = self.api(self.designer).get('/api/orders/stats/financial/')
		self.assertEqual(res.status_code, 403)
		res = self.api(self.designer).get('/api/orders/stats/timeseries/')
		self.assertEqual(res.status_code, 403)

	def test_timeseries(self):
		self.create_order()
		res = self.api(self.admin).get('/api/orders/stats/timeseries/', {'period': '3', 'interval': 'day'})
		self.assertEqual(res.status_code, 200)
		self.assertEqual(len(res.data['labels']), 3)
		self.assertEqual(res.data['orders'][-1], 1)
		self.assertEqual(res.data['revenue'][-1], Decimal('100'))

	def test_timeseries_rejects_bad_interval(self):
		res = self.api(self.admin).get('/api/orders/stats/timeseries/', {'interval': 'hour'})
		self.assertEqual(res.status_code, 400)

	def test_timeseries_cache_invalidated_on_create(self):
		client = self.api(self.admin)
		self.assertEqual(client.get('/api/orders/stats/timeseries/').data['orders'][-1], 0)
		with self.captureOnCommitCallbacks(execute=True):
			self.create_order()
		self.assertEqual(client.get('/api/orders/stats/timeseries/').data['orders'][-1], 1)

	def test_designer_switch_to_unpriced_material_requires_total(self):
		order_id = self.create_order().data['id']
		res = self.api(self.designer).patch(f'/api/orders/{order_id}/', data={'material': self.unpriced.id}, format='json')
		self.assertEqual(res.status_code, 400)
		order = Order.objects.get(pk=order_id)
		self.assertEqual(order.material_id, self.material.id)
		self.assertEqual(order.type, 'Vinyl')
		self.assertEqual(order.total_price, Decimal('100'))

		res = self.api(self.admin).patch(
			f'/api/orders/{order_id}/',
			data={'material': self.unpriced.id, 'total_price': '75'},
			format='json',
		)
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['type'], 'Raw Ink')
		self.assertEqual(Decimal(res.data['total_price']), Decimal('75'))

	def test_unpriced_material_size_change_keeps_total(self):
		order_id = self.create_order(material=self.unpriced.id, total_price='60').data['id']
		res = self.api(self.designer).patch(f'/api/orders/{order_id}/', data={'repeats': 8}, format='json')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Decimal(res.data['order_size']), Decimal('16'))
		self.assertEqual(Decimal(res.data['total_price']), Decimal('60'))

	def test_notification_failure_does_not_block_create(self):
		with mock.patch.object(Notification.objects, 'bulk_create', side_effect=DatabaseError('notifications down')):
			with self.assertLogs('notifications.dispatcher', level='ERROR'):
				with self.captureOnCommitCallbacks(execute=True):
					res = self.create_order(user=self.receptionist)
		self.assertEqual(res.status_code, 201)
		self.assertTrue(Order.objects.filter(pk=res.data['id']).exists())
		self.assertFalse(Notification.objects.exists())

	def test_moving_order_recalculates_both_invoices(self):
		invoices = []
		for _ in range(2):
			invoice = Invoice(created_by=self.admin)
			invoice.apply_client_snapshot(self.client_obj)
			invoice.save()
			invoices.append(invoice)
		source, target = invoices
		order_id = self.create_order(invoice=source.id).data['id']

		res = self.api(self.admin).patch(f'/api/orders/{order_id}/', data={'invoice': target.id}, format='json')
		self.assertEqual(res.status_code, 200)
		source.refresh_from_db()
		target.refresh_from_db()
		self.assertEqual(source.subtotal, Decimal('0'))
		self.assertEqual(target.subtotal, Decimal('100'))
		self.assertEqual(target.total_remaining, Decimal('100'))

	def test_deleted_order_keeps_its_ledger_rows(self):
		order_id = self.create_order(order_state='done').data['id']
		res = self.api(self.admin).delete(f'/api/orders/{order_id}/')
		self.assertEqual(res.status_code, 200)

		record = InventoryRecord.objects.get(type=InventoryRecord.USAGE)
		self.assertEqual(record.order_id, order_id)
		res = self.api(self.worker).get('/api/inventory/withdrawals/')
		self.assertEqual(res.data['count'], 0)

	def test_create_and_update_log_quantized_totals(self):
		with self.assertLogs('orders.services', level='INFO') as logs:
			order_id = self.create_order().data['id']
			self.api(self.worker).patch(f'/api/orders/{order_id}/', data={'order_state': 'active'}, format='json')
		self.assertEqual(len(logs.output), 2)
		for line in logs.output:
			self.assertIn('total=100.00', line)
