"""Products app tests."""

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import ADMIN, DESIGNER, RECEPTIONIST, WORKER
from inventory.models import Material
from products.models import Product, ProductMaterial


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class ProductCatalogTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.admin = User.objects.create_user(username='cat_admin', password='12345678', role=ADMIN)
		cls.designer = User.objects.create_user(username='cat_designer', password='12345678', role=DESIGNER)
		cls.worker = User.objects.create_user(username='cat_worker', password='12345678', role=WORKER)
		cls.receptionist = User.objects.create_user(username='cat_reception', password='12345678', role=RECEPTIONIST)
		cls.vinyl = Material.objects.create(name='Vinyl', unit='sheet')
		cls.frame = Material.objects.create(name='Aluminium Frame', unit='piece')

	def api(self, user):
		client = APIClient()
		client.force_authenticate(user=user)
		return client

	def test_designer_creates_product_with_composition(self):
		res = self.api(self.designer).post(
			'/api/products/',
			data={
				'name': 'Roll-up Banner',
				'selling_price': '450',
				'materials': [
					{'material': self.vinyl.id, 'quantity': '2'},
					{'material': self.frame.id, 'quantity': '1'},
				],
			},
			format='json',
		)
		self.assertEqual(res.status_code, 201)
		self.assertEqual(res.data['category'], 'General')
		product = Product.objects.get(pk=res.data['id'])
		self.assertEqual(product.created_by, self.designer)
		self.assertEqual(product.materials.count(), 2)

	def test_duplicate_material_rejected(self):
		res = self.api(self.admin).post(
			'/api/products/',
			data={
				'name': 'Sticker Pack',
				'selling_price': '30',
				'materials': [
					{'material': self.vinyl.id, 'quantity': '1'},
					{'material': self.vinyl.id, 'quantity': '2'},
				],
			},
			format='json',
		)
		self.assertEqual(res.status_code, 400)

	def test_update_replaces_composition(self):
		product = Product.objects.create(name='Poster', selling_price=Decimal('50'))
		ProductMaterial.objects.create(product=product, material=self.vinyl, quantity=Decimal('1'))

		res = self.api(self.designer).patch(
			f'/api/products/{product.id}/',
			data={'materials': [{'material': self.frame.id, 'quantity': '3'}]},
			format='json',
		)
		self.assertEqual(res.status_code, 200)
		lines = list(product.materials.values_list('material_id', 'quantity'))
		self.assertEqual(lines, [(self.frame.id, Decimal('3'))])

	def test_update_without_materials_keeps_composition(self):
		product = Product.objects.create(name='Poster', selling_price=Decimal('50'))
		ProductMaterial.objects.create(product=product, material=self.vinyl, quantity=Decimal('1'))

		res = self.api(self.admin).patch(f'/api/products/{product.id}/', data={'selling_price': '60'}, format='json')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(product.materials.count(), 1)

	def test_permissions(self):
		product = Product.objects.create(name='Flyer', selling_price=Decimal('5'))

		self.assertEqual(self.api(self.receptionist).get('/api/products/').status_code, 200)
		res = self.api(self.worker).post('/api/products/', data={'name': 'X', 'selling_price': '1'}, format='json')
		self.assertEqual(res.status_code, 403)
		self.assertEqual(self.api(self.designer).delete(f'/api/products/{product.id}/').status_code, 403)

	def test_delete_deactivates(self):
		product = Product.objects.create(name='Flyer', selling_price=Decimal('5'))
		res = self.api(self.admin).delete(f'/api/products/{product.id}/')
		self.assertEqual(res.status_code, 200)
		product.refresh_from_db()
		self.assertFalse(product.is_active)
		self.assertEqual(self.api(self.admin).get('/api/products/').data['count'], 0)
