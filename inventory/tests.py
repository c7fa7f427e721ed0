"""Inventory app tests."""

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import ADMIN, DESIGNER, RECEPTIONIST, WORKER
from inventory import services
from inventory.exceptions import InsufficientStockError
from inventory.models import InventoryRecord, Material
from notifications.models import Notification


class StockServiceTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.admin = User.objects.create_user(username='stock_admin', password='12345678', role=ADMIN)
		cls.material = Material.objects.create(
			name='PVC Film',
			unit='roll',
			current_stock=Decimal('20'),
			min_stock_level=Decimal('5'),
			cost_per_unit=Decimal('3'),
		)

	def test_adjust_writes_one_record(self):
		record = services.adjust_stock(self.material, Decimal('12'), actor=self.admin, reason='Recount')
		self.assertEqual(record.previous_stock, Decimal('20'))
		self.assertEqual(record.actual_stock, Decimal('12'))
		self.assertEqual(record.difference, Decimal('-8'))
		self.assertEqual(record.counted_by, self.admin)
		self.assertEqual(self.material.current_stock, Decimal('12'))
		self.assertEqual(InventoryRecord.objects.count(), 1)

	def test_stock_never_goes_negative(self):
		record = services.record_wastage(self.material, Decimal('50'), actor=self.admin, reason='Water damage')
		self.assertEqual(record.actual_stock, Decimal('0'))
		self.material.refresh_from_db()
		self.assertEqual(self.material.current_stock, Decimal('0'))
		self.assertEqual(self.material.stock_status, 'out_of_stock')

	def test_withdraw_more_than_available_fails(self):
		with self.assertRaises(InsufficientStockError) as ctx:
			services.withdraw(self.material, Decimal('25'), actor=self.admin)
		self.assertEqual(ctx.exception.extra['material_info']['shortage'], Decimal('5'))
		self.material.refresh_from_db()
		self.assertEqual(self.material.current_stock, Decimal('20'))
		self.assertFalse(InventoryRecord.objects.exists())

	def test_receive_adds_stock(self):
		services.receive(self.material, Decimal('7.5'), actor=self.admin)
		self.material.refresh_from_db()
		self.assertEqual(self.material.current_stock, Decimal('27.5'))

	def test_records_are_append_only(self):
		record = services.adjust_stock(self.material, Decimal('18'), actor=self.admin)
		record.notes = 'edited'
		with self.assertRaises(ValueError):
			record.save()

	def test_low_stock_notifies_admins(self):
		with self.captureOnCommitCallbacks(execute=True):
			services.withdraw(self.material, Decimal('16'), actor=self.admin)
		notification = Notification.objects.get(user=self.admin, related_type='material')
		self.assertEqual(notification.related_id, self.material.id)
		self.assertEqual(notification.type, 'inventory')

	def test_no_low_stock_notice_above_minimum(self):
		with self.captureOnCommitCallbacks(execute=True):
			services.withdraw(self.material, Decimal('1'), actor=self.admin)
		self.assertFalse(Notification.objects.exists())


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class InventoryApiTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.admin = User.objects.create_user(username='inv_api_admin', password='12345678', role=ADMIN)
		cls.worker = User.objects.create_user(username='inv_api_worker', password='12345678', role=WORKER)
		cls.designer = User.objects.create_user(username='inv_api_designer', password='12345678', role=DESIGNER)
		cls.receptionist = User.objects.create_user(username='inv_api_reception', password='12345678', role=RECEPTIONIST)
		cls.film = Material.objects.create(
			name='Film', unit='roll', current_stock=Decimal('40'), min_stock_level=Decimal('10'),
			cost_per_unit=Decimal('2'), is_order_type=True, selling_price=Decimal('6'),
		)
		cls.ink = Material.objects.create(
			name='Ink', unit='liter', current_stock=Decimal('3'), min_stock_level=Decimal('5'), category='ink',
		)

	def api(self, user):
		client = APIClient()
		client.force_authenticate(user=user)
		return client

	def test_materials_readable_by_staff_but_admin_writes(self):
		res = self.api(self.receptionist).get('/api/materials/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['count'], 2)

		res = self.api(self.designer).post('/api/materials/', data={'name': 'Glue'}, format='json')
		self.assertEqual(res.status_code, 403)

		res = self.api(self.admin).post(
			'/api/materials/', data={'name': 'Glue', 'unit': 'kg', 'category': 'chemicals'}, format='json',
		)
		self.assertEqual(res.status_code, 201)
		self.assertEqual(res.data['stock_status'], 'out_of_stock')

	def test_material_filters(self):
		res = self.api(self.worker).get('/api/materials/', {'is_order_type': 'true'})
		self.assertEqual([row['name'] for row in res.data['results']], ['Film'])

		res = self.api(self.worker).get('/api/materials/', {'stock_status': 'low_stock'})
		self.assertEqual([row['name'] for row in res.data['results']], ['Ink'])

	def test_update_ignores_current_stock(self):
		res = self.api(self.admin).patch(
			f'/api/materials/{self.film.id}/', data={'current_stock': '999', 'description': 'Glossy'}, format='json',
		)
		self.assertEqual(res.status_code, 200)
		self.film.refresh_from_db()
		self.assertEqual(self.film.current_stock, Decimal('40'))
		self.assertEqual(self.film.description, 'Glossy')

	def test_delete_deactivates(self):
		res = self.api(self.admin).delete(f'/api/materials/{self.ink.id}/')
		self.assertEqual(res.status_code, 200)
		self.ink.refresh_from_db()
		self.assertFalse(self.ink.is_active)
		res = self.api(self.admin).get('/api/materials/')
		self.assertEqual(res.data['count'], 1)

	def test_low_stock_endpoint(self):
		res = self.api(self.worker).get('/api/materials/low-stock/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual([row['name'] for row in res.data], ['Ink'])

	def test_stock_update(self):
		res = self.api(self.admin).post(
			'/api/materials/stock/update/',
			data={'material': self.film.id, 'quantity': '35', 'reason': 'Cycle count'},
			format='json',
		)
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Decimal(res.data['material']['current_stock']), Decimal('35'))
		self.assertEqual(Decimal(res.data['record']['difference']), Decimal('-5'))

	def test_daily_count(self):
		res = self.api(self.worker).post(
			'/api/inventory/daily/',
			data={'counts': [
				{'material': self.film.id, 'actual_stock': '38'},
				{'material': self.ink.id, 'actual_stock': '4', 'notes': 'Half drum'},
			]},
			format='json',
		)
		self.assertEqual(res.status_code, 201)
		self.assertEqual(len(res.data), 2)

		res = self.api(self.worker).get('/api/inventory/daily/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(len(res.data), 2)
		self.ink.refresh_from_db()
		self.assertEqual(self.ink.current_stock, Decimal('4'))

	def test_daily_count_forbidden_for_designer(self):
		res = self.api(self.designer).get('/api/inventory/daily/')
		self.assertEqual(res.status_code, 403)

	def test_wastage_record_and_report(self):
		client = self.api(self.admin)
		res = client.post(
			'/api/inventory/wastage/',
			data={'material': self.film.id, 'waste_amount': '4', 'reason': 'Misprint'},
			format='json',
		)
		self.assertEqual(res.status_code, 201)
		client.post('/api/inventory/wastage/', data={'material': self.film.id, 'waste_amount': '2'}, format='json')

		res = client.get('/api/inventory/wastage/')
		self.assertEqual(res.status_code, 200)
		row = res.data['wastage_data'][0]
		self.assertEqual(row['material_name'], 'Film')
		self.assertEqual(row['total_wastage'], Decimal('6'))
		self.assertEqual(row['waste_events'], 2)
		self.assertEqual(row['total_cost'], Decimal('12'))
		self.assertEqual(res.data['summary']['total_waste_events'], 2)

	def test_wastage_admin_only(self):
		res = self.api(self.worker).post(
			'/api/inventory/wastage/', data={'material': self.film.id, 'waste_amount': '1'}, format='json',
		)
		self.assertEqual(res.status_code, 403)

	def test_withdraw_and_list(self):
		client = self.api(self.worker)
		res = client.post('/api/inventory/withdraw/', data={'material': self.film.id, 'quantity': '15'}, format='json')
		self.assertEqual(res.status_code, 201)
		self.assertEqual(Decimal(res.data['material']['current_stock']), Decimal('25'))

		res = client.get('/api/inventory/withdrawals/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['count'], 1)
		self.assertEqual(res.data['results'][0]['reason'], 'Material withdrawal')

	def test_withdraw_insufficient_returns_shortage(self):
		res = self.api(self.worker).post(
			'/api/inventory/withdraw/', data={'material': self.ink.id, 'quantity': '5'}, format='json',
		)
		self.assertEqual(res.status_code, 400)
		self.assertEqual(res.data['material_info']['available'], Decimal('3'))
		self.ink.refresh_from_db()
		self.assertEqual(self.ink.current_stock, Decimal('3'))

	def test_history(self):
		services.adjust_stock(self.film, Decimal('30'), actor=self.admin)
		services.record_wastage(self.film, Decimal('1'), actor=self.admin)

		res = self.api(self.admin).get(f'/api/inventory/{self.film.id}/history/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['count'], 2)

		res = self.api(self.admin).get(f'/api/inventory/{self.film.id}/history/', {'type': 'wastage'})
		self.assertEqual(res.data['count'], 1)

		res = self.api(self.worker).get(f'/api/inventory/{self.film.id}/history/')
		self.assertEqual(res.status_code, 403)

	def test_impossible_dates_are_rejected(self):
		client = self.api(self.admin)
		res = client.get('/api/inventory/daily/', {'date': '2024-02-30'})
		self.assertEqual(res.status_code, 400)
		self.assertIn('date', res.data)

		res = client.get('/api/inventory/wastage/', {'start_date': '2024-02-30'})
		self.assertEqual(res.status_code, 400)
		self.assertIn('start_date', res.data)

		res = client.get(f'/api/inventory/{self.film.id}/history/', {'start_date': '2024-01-01', 'end_date': '2024-13-01'})
		self.assertEqual(res.status_code, 400)
		self.assertIn('end_date', res.data)

	def test_blank_dates_use_defaults(self):
		res = self.api(self.admin).get('/api/inventory/daily/', {'date': ''})
		self.assertEqual(res.status_code, 200)
		res = self.api(self.admin).get('/api/inventory/wastage/', {'start_date': '', 'end_date': ''})
		self.assertEqual(res.status_code, 200)
