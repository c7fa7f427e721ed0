"""Purchases app tests."""

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import ADMIN, WORKER
from inventory.models import InventoryRecord, Material
from purchases.models import Purchase, PurchaseItem, Supplier


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class PurchaseTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.admin = User.objects.create_user(username='po_admin', password='12345678', role=ADMIN)
		cls.worker = User.objects.create_user(username='po_worker', password='12345678', role=WORKER)
		cls.supplier = Supplier.objects.create(name='Alex Paper Co', phone='034567890')
		cls.paper = Material.objects.create(name='A3 Paper', unit='box', current_stock=Decimal('10'))
		cls.ink = Material.objects.create(name='Black Ink', unit='liter', current_stock=Decimal('2'))

	def api(self, user):
		client = APIClient()
		client.force_authenticate(user=user)
		return client

	def create_purchase(self, **payload):
		data = {
			'supplier': self.supplier.id,
			'items': [
				{'material': self.paper.id, 'quantity': '5', 'unit_cost': '20'},
				{'material': self.ink.id, 'quantity': '3', 'unit_cost': '15.5'},
			],
		}
		data.update(payload)
		return self.api(self.admin).post('/api/purchases/', data=data, format='json')

	def test_purchase_numbers_are_sequential_per_day(self):
		first = Purchase.objects.create(supplier=self.supplier)
		second = Purchase.objects.create(supplier=self.supplier)
		prefix = f"PO-{timezone.localdate():%Y%m%d}-"
		self.assertEqual(first.purchase_number, f'{prefix}0001')
		self.assertEqual(second.purchase_number, f'{prefix}0002')

	def test_item_total_cost(self):
		purchase = Purchase.objects.create(supplier=self.supplier)
		item = PurchaseItem.objects.create(purchase=purchase, material=self.paper, quantity=Decimal('4'), unit_cost=Decimal('2.5'))
		self.assertEqual(item.total_cost, Decimal('10'))

	def test_create_computes_total(self):
		res = self.create_purchase()
		self.assertEqual(res.status_code, 201)
		self.assertEqual(Decimal(res.data['total_amount']), Decimal('146.5'))
		self.assertEqual(len(res.data['items']), 2)
		self.assertTrue(res.data['purchase_number'].startswith('PO-'))

	def test_cannot_create_as_received(self):
		res = self.create_purchase(status='received')
		self.assertEqual(res.status_code, 400)

	def test_admin_only(self):
		res = self.api(self.worker).get('/api/purchases/')
		self.assertEqual(res.status_code, 403)
		res = self.api(self.worker).get('/api/suppliers/')
		self.assertEqual(res.status_code, 403)

	def test_receive_adds_stock_once(self):
		purchase_id = self.create_purchase().data['id']
		client = self.api(self.admin)

		res = client.post(f'/api/purchases/{purchase_id}/receive/', data={}, format='json')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['status'], 'received')
		self.assertIsNotNone(res.data['received_date'])

		self.paper.refresh_from_db()
		self.ink.refresh_from_db()
		self.assertEqual(self.paper.current_stock, Decimal('15'))
		self.assertEqual(self.ink.current_stock, Decimal('5'))
		self.assertEqual(InventoryRecord.objects.filter(reason='Purchase received').count(), 2)

		res = client.post(f'/api/purchases/{purchase_id}/receive/', data={}, format='json')
		self.assertEqual(res.status_code, 400)
		self.paper.refresh_from_db()
		self.assertEqual(self.paper.current_stock, Decimal('15'))

	def test_receive_partial_quantities(self):
		purchase_id = self.create_purchase().data['id']
		res = self.api(self.admin).post(
			f'/api/purchases/{purchase_id}/receive/',
			data={'received_items': [{'material': self.paper.id, 'quantity': '2'}]},
			format='json',
		)
		self.assertEqual(res.status_code, 200)
		self.paper.refresh_from_db()
		self.ink.refresh_from_db()
		self.assertEqual(self.paper.current_stock, Decimal('12'))
		self.assertEqual(self.ink.current_stock, Decimal('2'))

	def test_received_purchase_is_read_only(self):
		purchase_id = self.create_purchase().data['id']
		client = self.api(self.admin)
		client.post(f'/api/purchases/{purchase_id}/receive/', data={}, format='json')
		res = client.patch(f'/api/purchases/{purchase_id}/', data={'notes': 'late'}, format='json')
		self.assertEqual(res.status_code, 400)

	def test_delete_rules(self):
		client = self.api(self.admin)
		pending_id = self.create_purchase().data['id']
		ordered_id = self.create_purchase(status='ordered').data['id']

		res = client.delete(f'/api/purchases/{ordered_id}/')
		self.assertEqual(res.status_code, 400)
		self.assertTrue(Purchase.objects.filter(pk=ordered_id).exists())

		res = client.delete(f'/api/purchases/{pending_id}/')
		self.assertEqual(res.status_code, 200)
		self.assertFalse(Purchase.objects.filter(pk=pending_id).exists())

	def test_cancelled_purchase_cannot_be_received(self):
		purchase_id = self.create_purchase(status='cancelled').data['id']
		res = self.api(self.admin).post(f'/api/purchases/{purchase_id}/receive/', data={}, format='json')
		self.assertEqual(res.status_code, 400)

	def test_supplier_soft_delete(self):
		client = self.api(self.admin)
		res = client.post('/api/suppliers/', data={'name': 'Giza Inks', 'phone': '0223456789'}, format='json')
		self.assertEqual(res.status_code, 201)
		supplier_id = res.data['id']

		res = client.delete(f'/api/suppliers/{supplier_id}/')
		self.assertEqual(res.status_code, 200)
		self.assertFalse(Supplier.objects.get(pk=supplier_id).is_active)
		res = client.get('/api/suppliers/')
		self.assertEqual(res.data['count'], 1)
